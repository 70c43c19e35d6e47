from xcpkg.errors import DecodeError, MissingDiscriminator, MissingField, UnrecognizedKind
from xcpkg.plist import PlistValue, PlistString, PlistDict, PlistArray
from xcpkg.requirement import (
    VersionRequirement,
    UpToNextMajorVersion,
    UpToNextMinorVersion,
    VersionRange,
    ExactVersion,
    BranchRequirement,
    RevisionRequirement,
)
from xcpkg.reference import RemoteSwiftPackageReference, DecodePolicy, decode_references
