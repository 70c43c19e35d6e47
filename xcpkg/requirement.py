from typing import Any, ClassVar, Dict, Mapping, Tuple
import dataclasses
from dataclasses import dataclass

from xcpkg.errors import MissingDiscriminator, MissingField, UnrecognizedKind
from xcpkg.plist import PlistDict, PlistString, PlistValue, string_or_none

################################################################################
# Version requirements
################################################################################

# A remote package reference pins its dependency with exactly one of six rules.
# On the wire each rule is a flat mapping selected by `kind`; the single-version
# rules all store their version under `minimumVersion`, which is kept as-is so
# existing project files read and write unchanged.

KIND_KEY = 'kind'
REVISION_KEY = 'revision'
BRANCH_KEY = 'branch'
MINIMUM_VERSION_KEY = 'minimumVersion'
MAXIMUM_VERSION_KEY = 'maximumVersion'


class VersionRequirement:
    UpToNextMajor: type['UpToNextMajorVersion'] = None # type: ignore
    UpToNextMinor: type['UpToNextMinorVersion'] = None # type: ignore
    Range: type['VersionRange'] = None # type: ignore
    Exact: type['ExactVersion'] = None # type: ignore
    Branch: type['BranchRequirement'] = None # type: ignore
    Revision: type['RevisionRequirement'] = None # type: ignore

    kind: ClassVar[str]

    def __new__(cls, *args, **kwargs):
        # Only the six rules below can be instantiated.
        if cls not in REQUIREMENT_KINDS:
            raise TypeError(f"{cls.__name__} cannot be instantiated; use one of {', '.join(k.__name__ for k in REQUIREMENT_KINDS)}")
        return super().__new__(cls)

    def __post_init__(self):
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            if not isinstance(value, str):
                raise TypeError(f"{type(self).__name__}.{f.name} must be a string, got {type(value)}")

    @classmethod
    def decode(cls, container: Mapping[str, Any] | PlistDict) -> 'VersionRequirement':
        """
        Decodes a requirement from its key-value form.

        The `kind` field selects the rule; the rule's own fields are then read
        from the same mapping. Values may be plain strings or plist strings.
        Keys that the selected rule does not use are ignored.

        Raises MissingDiscriminator, UnrecognizedKind or MissingField; a rule is
        never returned with a defaulted field.
        """
        if isinstance(container, PlistDict):
            container = container.entries
        if not isinstance(container, Mapping):
            raise MissingDiscriminator(KIND_KEY)

        kind = string_or_none(container.get(KIND_KEY))
        if kind is None:
            raise MissingDiscriminator(KIND_KEY)

        def field(name: str) -> str:
            value = string_or_none(container.get(name))
            if value is None:
                raise MissingField(kind, name)
            return value

        match kind:
            case 'revision':
                return RevisionRequirement(field(REVISION_KEY))
            case 'branch':
                return BranchRequirement(field(BRANCH_KEY))
            case 'exactVersion':
                return ExactVersion(field(MINIMUM_VERSION_KEY))
            case 'versionRange':
                return VersionRange(field(MINIMUM_VERSION_KEY), field(MAXIMUM_VERSION_KEY))
            case 'upToNextMinorVersion':
                return UpToNextMinorVersion(field(MINIMUM_VERSION_KEY))
            case 'upToNextMajorVersion':
                return UpToNextMajorVersion(field(MINIMUM_VERSION_KEY))
            case _:
                raise UnrecognizedKind(kind)

    def plist_values(self) -> Dict[str, PlistValue]:
        """
        Returns the key-value form of this requirement, `kind` first and then
        the payload fields in declaration order.
        """
        match self:
            case VersionRequirement.Revision(revision):
                return {
                    KIND_KEY: PlistString(self.kind),
                    REVISION_KEY: PlistString(revision),
                }
            case VersionRequirement.Branch(name):
                return {
                    KIND_KEY: PlistString(self.kind),
                    BRANCH_KEY: PlistString(name),
                }
            case VersionRequirement.Range(from_version, to_version):
                return {
                    KIND_KEY: PlistString(self.kind),
                    MINIMUM_VERSION_KEY: PlistString(from_version),
                    MAXIMUM_VERSION_KEY: PlistString(to_version),
                }
            case VersionRequirement.Exact(version) | VersionRequirement.UpToNextMinor(version) | VersionRequirement.UpToNextMajor(version):
                return {
                    KIND_KEY: PlistString(self.kind),
                    MINIMUM_VERSION_KEY: PlistString(version),
                }
            case _:
                assert False, f"Unknown version requirement: {self!r}"

    def to_dict(self) -> Dict[str, str]:
        return {k: v.to_python() for k, v in self.plist_values().items()}

    def describe(self) -> str:
        match self:
            case VersionRequirement.UpToNextMajor(version):
                return f"up to next major from {version}"
            case VersionRequirement.UpToNextMinor(version):
                return f"up to next minor from {version}"
            case VersionRequirement.Range(from_version, to_version):
                return f"{from_version}..<{to_version}"
            case VersionRequirement.Exact(version):
                return f"exactly {version}"
            case VersionRequirement.Branch(name):
                return f"branch {name}"
            case VersionRequirement.Revision(revision):
                return f"revision {revision}"
            case _:
                assert False, f"Unknown version requirement: {self!r}"

    def __str__(self) -> str:
        return self.describe()


@dataclass(frozen=True)
class UpToNextMajorVersion(VersionRequirement):
    kind: ClassVar[str] = 'upToNextMajorVersion'
    version: str
VersionRequirement.UpToNextMajor = UpToNextMajorVersion

@dataclass(frozen=True)
class UpToNextMinorVersion(VersionRequirement):
    kind: ClassVar[str] = 'upToNextMinorVersion'
    version: str
VersionRequirement.UpToNextMinor = UpToNextMinorVersion

@dataclass(frozen=True)
class VersionRange(VersionRequirement):
    # Half-open: from_version is included, to_version is not.
    kind: ClassVar[str] = 'versionRange'
    from_version: str
    to_version: str
VersionRequirement.Range = VersionRange

@dataclass(frozen=True)
class ExactVersion(VersionRequirement):
    kind: ClassVar[str] = 'exactVersion'
    version: str
VersionRequirement.Exact = ExactVersion

@dataclass(frozen=True)
class BranchRequirement(VersionRequirement):
    kind: ClassVar[str] = 'branch'
    name: str
VersionRequirement.Branch = BranchRequirement

@dataclass(frozen=True)
class RevisionRequirement(VersionRequirement):
    kind: ClassVar[str] = 'revision'
    revision: str
VersionRequirement.Revision = RevisionRequirement


REQUIREMENT_KINDS: Tuple[type[VersionRequirement], ...] = (
    UpToNextMajorVersion,
    UpToNextMinorVersion,
    VersionRange,
    ExactVersion,
    BranchRequirement,
    RevisionRequirement,
)
