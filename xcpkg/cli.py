from typing import Any, List, Mapping
import argparse
import json
import logging
import plistlib
from pathlib import Path

from xcpkg.checks import ALL_CHECKS, check_objects
from xcpkg.messages import error, info, report, success, warning
from xcpkg.reference import DecodePolicy, decode_references


def load_objects(path: Path) -> Mapping[str, Any]:
    """
    Reads a project document and returns its ``objects`` table. JSON files are
    read with ``json``, anything else with ``plistlib`` (XML or binary, not the
    old-style ASCII format). A document without an ``objects`` key is taken to
    be the table itself.
    """
    if path.suffix == '.json':
        with path.open('rt', encoding='utf-8') as f:
            doc = json.load(f)
    else:
        with path.open('rb') as f:
            doc = plistlib.load(f)

    if not isinstance(doc, dict):
        raise ValueError(f"Expected a dictionary at the top of {path}, got {type(doc).__name__}")
    objects = doc.get('objects', doc)
    if not isinstance(objects, dict):
        raise ValueError(f"Expected 'objects' to be a dictionary in {path}")
    return objects


def show(path: Path, policy: DecodePolicy) -> int:
    try:
        references = decode_references(load_objects(path), policy=policy)
    except (ValueError, plistlib.InvalidFileException) as e:
        error(f"{path}: {e}")
        return 1

    if not references:
        warning(f"No remote package references in {path}")
        return 0

    for object_id, reference in references.items():
        info(f"{object_id} {reference}")
    return 0


def check(path: Path, checks: List[str] | None) -> int:
    try:
        objects = load_objects(path)
    except (ValueError, plistlib.InvalidFileException) as e:
        error(f"{path}: {e}")
        return 1

    issues = check_objects(objects, checks)
    report(issues)
    if issues.has_failures:
        return 1
    if not len(issues):
        success(f"No issues found in {path}")
    return 0


def main(argv: List[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format='%(message)s')

    parser = argparse.ArgumentParser(prog='xcpkg', description="Inspect remote Swift package references in JSON, XML or binary plist project files. Old-style ASCII project.pbxproj files are not supported; convert them first with 'plutil -convert json'.")
    parser.add_argument('--verbose', action='store_true', help="Enable debug logging.")
    subparsers = parser.add_subparsers(dest='command')

    show_parser = subparsers.add_parser('show', help="List package references and their requirements.")
    show_parser.add_argument('file', type=str)
    show_parser.add_argument('--lenient', action='store_true', help="Drop malformed requirements instead of failing.")

    check_parser = subparsers.add_parser('check', help="Report problems with package references.")
    check_parser.add_argument('file', type=str)
    check_parser.add_argument('--checks', nargs='+', default=[], choices=sorted(ALL_CHECKS), help="Checks to run. All checks run by default.")

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 0

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    path = Path(args.file)
    if not path.exists():
        error(f"File does not exist: {path}")
        return 1

    match args.command:
        case 'show':
            policy = DecodePolicy.LENIENT if args.lenient else DecodePolicy.STRICT
            return show(path, policy)
        case 'check':
            return check(path, args.checks or None)
        case _:
            raise ValueError(f"Unknown command: {args.command}")
