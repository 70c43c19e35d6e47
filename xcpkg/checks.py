import abc
from typing import Any, Dict, List, Mapping, Tuple
from dataclasses import dataclass, field
import enum
import uuid

from xcpkg.errors import MissingDiscriminator, MissingField, UnrecognizedKind
from xcpkg.plist import PlistDict, string_or_none
from xcpkg.reference import ISA, ISA_KEY, REPOSITORY_URL_KEY, REQUIREMENT_KEY
from xcpkg.requirement import VersionRequirement


@dataclass(frozen=True)
class ObjectLocation:
    object_ids: Tuple[str, ...]

    def __add__(self, other: 'ObjectLocation') -> 'ObjectLocation':
        """
        Combines two locations, keeping the first occurrence of each id.
        """
        extra = tuple(i for i in other.object_ids if i not in self.object_ids)
        return ObjectLocation(self.object_ids + extra)

    def __str__(self) -> str:
        return ', '.join(self.object_ids)


class Severity(enum.Enum):
    """
    Severity levels for checks.
    """
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    @property
    def is_failure(self) -> bool:
        return self in (Severity.ERROR, Severity.CRITICAL)


@dataclass(frozen=True)
class IssueType:
    """
    Represents a type of issue.
    """
    id: str
    message: str
    severity: Severity = Severity.ERROR

    def __post_init__(self):
        if not isinstance(self.id, str):
            raise ValueError(f"Invalid ID: {self.id}")
        try:
            uuid.UUID(self.id)
        except ValueError:
            raise ValueError(f"Invalid UUID: {self.id}")

    def make(self, **kwargs) -> 'Issue':
        return Issue(self, data=kwargs)

    def at(self, object_id: str) -> 'Issue':
        return Issue(self).at(object_id)


@dataclass
class Issue:
    """
    Represents an issue found during a check.
    """
    issue_type: IssueType
    data: Mapping[str, Any] | None = None
    location: ObjectLocation | None = None

    @property
    def severity(self) -> Severity:
        return self.issue_type.severity

    @property
    def message(self) -> str:
        return self.issue_type.message.format(**(self.data or {}))

    def at(self, object_id: str) -> 'Issue':
        if self.location is None:
            self.location = ObjectLocation((object_id,))
        else:
            self.location = self.location + ObjectLocation((object_id,))
        return self


@dataclass
class IssueList:
    """
    Issues in the order they were found. Consecutive issues of the same type
    and data are merged into one issue with a combined location.
    """
    issues: List[Issue] = field(default_factory=list)

    def append(self, issue: Issue) -> None:
        if self.issues:
            last = self.issues[-1]
            if last == issue: return
            if last.issue_type == issue.issue_type and last.data == issue.data:
                if last.location is None:
                    last.location = issue.location
                elif issue.location is not None:
                    last.location = last.location + issue.location
                return
        self.issues.append(issue)

    def extend(self, issues: List[Issue] | 'IssueList') -> None:
        for issue in issues:
            self.append(issue)

    def __iter__(self):
        return iter(self.issues)

    def __len__(self) -> int:
        return len(self.issues)

    @property
    def has_failures(self) -> bool:
        return any(issue.severity.is_failure for issue in self.issues)


################################################################################
# Issue types
################################################################################

E_MISSING_KIND = IssueType(
    "6f1c2b0e-3d7a-4e55-9a41-0b8e7c2d9f13",
    "Requirement has no 'kind' field.")

E_UNKNOWN_KIND = IssueType(
    "a3d90f57-8c2e-4b1a-bf6d-5e7a14c0d2b8",
    "Requirement kind '{kind}' is not supported.")

E_MISSING_FIELD = IssueType(
    "d2e47c91-05bb-4f3e-8a6c-97f1b3e2a504",
    "Requirement of kind '{kind}' is missing field '{field}'.")

W_MISSING_REQUIREMENT = IssueType(
    "4b8e1f0a-7c63-4d29-a5e2-1f9c6d3b8e70",
    "Package '{url}' has no version requirement.",
    Severity.WARNING)

E_MISSING_REPOSITORY_URL = IssueType(
    "91c5a7e2-4f08-4b6d-8e3a-2d7b0c9f1e46",
    "Package reference has no repository URL.")

W_DUPLICATE_REPOSITORY_URL = IssueType(
    "c7f2e9b4-1a5d-4c80-9b3e-6e0d8a2f5c17",
    "Repository '{url}' is referenced by more than one package reference.",
    Severity.WARNING)


################################################################################
# Checks
################################################################################

class ReferenceCheck(abc.ABC):
    """Checks a single package reference object."""
    @abc.abstractmethod
    def check(self, object_id: str, obj: Mapping[str, Any]) -> List[Issue]:
        raise NotImplementedError()


class ObjectsCheck(abc.ABC):
    """Checks all package reference objects together."""
    @abc.abstractmethod
    def check(self, references: Mapping[str, Mapping[str, Any]]) -> List[Issue]:
        raise NotImplementedError()


class RequirementCheck(ReferenceCheck):
    def check(self, object_id: str, obj: Mapping[str, Any]) -> List[Issue]:
        raw = obj.get(REQUIREMENT_KEY)
        if raw is None:
            url = string_or_none(obj.get(REPOSITORY_URL_KEY)) or object_id
            return [W_MISSING_REQUIREMENT.make(url=url).at(object_id)]

        try:
            VersionRequirement.decode(raw)
        except MissingDiscriminator:
            return [E_MISSING_KIND.at(object_id)]
        except UnrecognizedKind as e:
            return [E_UNKNOWN_KIND.make(kind=e.kind).at(object_id)]
        except MissingField as e:
            return [E_MISSING_FIELD.make(kind=e.kind, field=e.field).at(object_id)]
        return []


class RepositoryUrlCheck(ReferenceCheck):
    def check(self, object_id: str, obj: Mapping[str, Any]) -> List[Issue]:
        if not string_or_none(obj.get(REPOSITORY_URL_KEY)):
            return [E_MISSING_REPOSITORY_URL.at(object_id)]
        return []


class DuplicateRepositoryCheck(ObjectsCheck):
    def check(self, references: Mapping[str, Mapping[str, Any]]) -> List[Issue]:
        by_url: Dict[str, List[str]] = {}
        for object_id, obj in references.items():
            url = string_or_none(obj.get(REPOSITORY_URL_KEY))
            if url:
                by_url.setdefault(url, []).append(object_id)

        issues: List[Issue] = []
        for url, object_ids in by_url.items():
            if len(object_ids) < 2:
                continue
            issue = W_DUPLICATE_REPOSITORY_URL.make(url=url)
            for object_id in object_ids:
                issue.at(object_id)
            issues.append(issue)
        return issues


ALL_CHECKS: Dict[str, ReferenceCheck | ObjectsCheck] = {
    "requirement": RequirementCheck(),
    "repository_url": RepositoryUrlCheck(),
    "duplicate_repository": DuplicateRepositoryCheck(),
}


def check_objects(objects: Mapping[str, Any] | PlistDict, enabled_checks: List[str] | None = None) -> IssueList:
    """
    Runs checks over every remote package reference in a project ``objects``
    table. With no ``enabled_checks`` all checks run.
    """
    for check_name in enabled_checks or []:
        if check_name not in ALL_CHECKS:
            raise ValueError(f"Unknown check: {check_name}")
    check_set = set(enabled_checks) if enabled_checks else set(ALL_CHECKS.keys())

    checks = [v for k, v in ALL_CHECKS.items() if k in check_set]
    reference_checks = [c for c in checks if isinstance(c, ReferenceCheck)]
    objects_checks = [c for c in checks if isinstance(c, ObjectsCheck)]

    if isinstance(objects, PlistDict):
        objects = objects.to_python()

    references: Dict[str, Mapping[str, Any]] = {
        object_id: obj for object_id, obj in objects.items()
        if isinstance(obj, Mapping) and string_or_none(obj.get(ISA_KEY)) == ISA
    }

    issues = IssueList()
    for object_id, obj in references.items():
        for check in reference_checks:
            issues.extend(check.check(object_id, obj))
    for check in objects_checks:
        issues.extend(check.check(references))
    return issues
