from setuptools import setup, find_packages
from pathlib import Path

# Runtime requirements live in requirements.txt
reqs_path = Path(__file__).parent / "requirements.txt"
requirements = [
    line.strip()
    for line in reqs_path.read_text().splitlines()
    if line.strip() and not line.startswith("#")
]

setup(
    name="xcpkg",
    version="0.1.0",
    description="Remote Swift package references and version requirements for Xcode project metadata",
    packages=find_packages(include=["xcpkg", "xcpkg.*"]),
    python_requires=">=3.10",
    install_requires=requirements,
    extras_require={"test": ["pytest"]},
)
