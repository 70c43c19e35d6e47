from typing import Any, Dict, Mapping, Optional
from dataclasses import dataclass
from enum import Enum
import logging

from xcpkg.errors import DecodeError
from xcpkg.plist import PlistDict, PlistString, PlistValue, string_or_none
from xcpkg.requirement import VersionRequirement

################################################################################
# Remote Swift package references
################################################################################

ISA = 'XCRemoteSwiftPackageReference'

ISA_KEY = 'isa'
REPOSITORY_URL_KEY = 'repositoryURL'
REQUIREMENT_KEY = 'requirement'


class DecodePolicy(Enum):
    # Requirement decode errors propagate to the caller.
    STRICT = 'strict'
    # Requirement decode errors are logged and the requirement is dropped.
    LENIENT = 'lenient'


@dataclass(frozen=True)
class RemoteSwiftPackageReference:
    """
    A package dependency fetched from a source-control repository.

    Both fields are optional on the wire. Equality holds only when the
    repository URLs match and the requirements are equal.
    """
    repository_url: Optional[str] = None
    requirement: Optional[VersionRequirement] = None

    def __post_init__(self):
        assert self.repository_url is None or isinstance(self.repository_url, str), f"Expected string or None, got {type(self.repository_url)}"
        assert self.requirement is None or isinstance(self.requirement, VersionRequirement), f"Expected VersionRequirement or None, got {type(self.requirement)}"

    @property
    def name(self) -> str | None:
        """
        Package name derived from the repository URL, e.g.
        ``https://github.com/apple/swift-log.git`` -> ``swift-log``.
        """
        if not self.repository_url:
            return None
        last = self.repository_url.rstrip('/').rsplit('/', 1)[-1]
        if last.endswith('.git'):
            last = last[:-len('.git')]
        return last or None

    @classmethod
    def decode(
        cls,
        container: Mapping[str, Any] | PlistDict,
        policy: DecodePolicy = DecodePolicy.STRICT,
    ) -> 'RemoteSwiftPackageReference':
        if isinstance(container, PlistDict):
            container = container.entries
        assert isinstance(container, Mapping), f"Expected mapping, got {type(container)}"

        raw_url = container.get(REPOSITORY_URL_KEY)
        repository_url = string_or_none(raw_url)
        if raw_url is not None and repository_url is None:
            logging.warning(f"Ignoring non-string {REPOSITORY_URL_KEY} of type {type(raw_url).__name__}")

        requirement: VersionRequirement | None = None
        raw_requirement = container.get(REQUIREMENT_KEY)
        if raw_requirement is not None:
            try:
                requirement = VersionRequirement.decode(raw_requirement)
            except DecodeError as e:
                if policy is DecodePolicy.STRICT:
                    raise
                logging.warning(f"Ignoring requirement of package {repository_url}: {e}")

        return cls(repository_url=repository_url, requirement=requirement)

    def plist_values(self) -> Dict[str, PlistValue]:
        values: Dict[str, PlistValue] = {ISA_KEY: PlistString(ISA)}
        if self.repository_url is not None:
            values[REPOSITORY_URL_KEY] = PlistString(self.repository_url)
        if self.requirement is not None:
            values[REQUIREMENT_KEY] = PlistDict(self.requirement.plist_values())
        return values

    def to_dict(self) -> Dict[str, Any]:
        return {k: v.to_python() for k, v in self.plist_values().items()}

    def __str__(self) -> str:
        requirement = self.requirement.describe() if self.requirement else 'no requirement'
        return f"{self.name or '<unnamed>'} ({self.repository_url or 'no url'}, {requirement})"


def decode_references(
    objects: Mapping[str, Any] | PlistDict,
    policy: DecodePolicy = DecodePolicy.STRICT,
) -> Dict[str, RemoteSwiftPackageReference]:
    """
    Decodes every remote package reference in a project ``objects`` table,
    keyed by object id. Other objects are skipped.
    """
    if isinstance(objects, PlistDict):
        objects = objects.entries

    result: Dict[str, RemoteSwiftPackageReference] = {}
    for object_id, obj in objects.items():
        if isinstance(obj, PlistDict):
            obj = obj.entries
        if not isinstance(obj, Mapping) or string_or_none(obj.get(ISA_KEY)) != ISA:
            continue
        logging.debug(f"Decoding package reference {object_id}")
        result[object_id] = RemoteSwiftPackageReference.decode(obj, policy=policy)
    return result
