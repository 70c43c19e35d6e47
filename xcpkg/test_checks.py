import pytest

from xcpkg.checks import (
    E_MISSING_FIELD,
    E_MISSING_KIND,
    E_MISSING_REPOSITORY_URL,
    E_UNKNOWN_KIND,
    W_DUPLICATE_REPOSITORY_URL,
    W_MISSING_REQUIREMENT,
    IssueList,
    IssueType,
    ObjectLocation,
    Severity,
    check_objects,
)
from xcpkg.plist import from_python


def ref(url, requirement=None):
    obj = {"isa": "XCRemoteSwiftPackageReference"}
    if url is not None:
        obj["repositoryURL"] = url
    if requirement is not None:
        obj["requirement"] = requirement
    return obj


def test_clean_project_has_no_issues():
    objects = {
        "A1": ref("https://github.com/apple/swift-log.git", {"kind": "upToNextMajorVersion", "minimumVersion": "1.5.0"}),
        "B1": {"isa": "PBXGroup", "children": []},
    }
    issues = check_objects(objects)
    assert len(issues) == 0
    assert not issues.has_failures


def test_requirement_issues():
    objects = {
        "A1": ref("https://x/a", {"kind": "totallyUnknown"}),
        "A2": ref("https://x/b", {"kind": "versionRange", "minimumVersion": "1.0.0"}),
        "A3": ref("https://x/c", {"branch": "main"}),
        "A4": ref("https://x/d"),
    }
    issues = list(check_objects(objects, ["requirement"]))
    assert [i.issue_type for i in issues] == [E_UNKNOWN_KIND, E_MISSING_FIELD, E_MISSING_KIND, W_MISSING_REQUIREMENT]
    assert issues[0].message == "Requirement kind 'totallyUnknown' is not supported."
    assert issues[1].data == {"kind": "versionRange", "field": "maximumVersion"}
    assert str(issues[2].location) == "A3"
    assert issues[3].severity is Severity.WARNING


def test_missing_repository_url_is_a_failure():
    issues = check_objects({"A1": ref(None, {"kind": "branch", "branch": "main"})})
    assert [i.issue_type for i in issues] == [E_MISSING_REPOSITORY_URL]
    assert issues.has_failures


def test_duplicate_repository_urls():
    objects = {
        "A1": ref("https://x/a", {"kind": "branch", "branch": "main"}),
        "A2": ref("https://x/a", {"kind": "exactVersion", "minimumVersion": "1.0.0"}),
        "A3": ref("https://x/b", {"kind": "branch", "branch": "main"}),
    }
    issues = list(check_objects(objects))
    assert len(issues) == 1
    assert issues[0].issue_type == W_DUPLICATE_REPOSITORY_URL
    assert issues[0].location == ObjectLocation(("A1", "A2"))


def test_consecutive_identical_issues_are_merged():
    objects = {
        "A1": ref("https://x/a", {"kind": "nope"}),
        "A2": ref("https://x/b", {"kind": "nope"}),
        "A3": ref("https://x/c", {"kind": "other"}),
    }
    issues = list(check_objects(objects, ["requirement"]))
    assert len(issues) == 2
    assert str(issues[0].location) == "A1, A2"
    assert issues[1].data == {"kind": "other"}


def test_accepts_plist_values():
    objects = from_python({"A1": ref("https://x/a", {"kind": "nope"})})
    assert [i.issue_type for i in check_objects(objects)] == [E_UNKNOWN_KIND]


def test_unknown_check():
    with pytest.raises(ValueError):
        check_objects({}, ["nope"])


def test_issue_type_requires_uuid():
    with pytest.raises(ValueError):
        IssueType("not-a-uuid", "message")


def test_issue_list_skips_exact_duplicates():
    issues = IssueList()
    issues.append(E_MISSING_KIND.at("A1"))
    issues.append(E_MISSING_KIND.at("A1"))
    assert len(issues) == 1


def test_missing_requirement_without_url_names_the_object():
    issues = list(check_objects({"A9": ref(None)}, ["requirement"]))
    assert [i.issue_type for i in issues] == [W_MISSING_REQUIREMENT]
    assert issues[0].message == "Package 'A9' has no version requirement."
