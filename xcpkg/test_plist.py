import pytest

from xcpkg.plist import PlistArray, PlistDict, PlistString, PlistValue, from_python, string_or_none


def test_from_python_and_back():
    data = {"isa": "XCRemoteSwiftPackageReference", "targets": ["A", "B"], "requirement": {"kind": "branch"}}
    value = from_python(data)
    assert isinstance(value, PlistDict)
    assert value["targets"] == PlistArray([PlistString("A"), PlistString("B")])
    assert value.to_python() == data


def test_dict_preserves_insertion_order():
    value = from_python({"b": "1", "a": "2", "c": "3"})
    assert list(value.keys()) == ["b", "a", "c"]


def test_unsupported_values():
    with pytest.raises(TypeError):
        from_python(1)
    with pytest.raises(TypeError):
        from_python({"a": None})
    with pytest.raises(TypeError):
        PlistString(3)
    with pytest.raises(TypeError):
        PlistDict({"a": "not wrapped"})


def test_string_or_none():
    assert string_or_none("x") == "x"
    assert string_or_none(PlistString("x")) == "x"
    assert string_or_none(None) is None
    assert string_or_none(PlistArray([])) is None
    assert string_or_none(7) is None


def test_aliases():
    assert PlistValue.String is PlistString
    assert PlistValue.Dict is PlistDict
    assert PlistValue.Array is PlistArray
