from typing import Any, Dict, Mapping, Tuple
from dataclasses import dataclass, field

################################################################################
# Plist values
################################################################################

# A value in a property-list style document. Only the three shapes used by
# project metadata are modelled: strings, dictionaries and arrays.

class PlistValue:
    String: type['PlistString'] = None # type: ignore
    Dict: type['PlistDict'] = None # type: ignore
    Array: type['PlistArray'] = None # type: ignore

    def to_python(self) -> Any:
        match self:
            case PlistValue.String(value):
                return value
            case PlistValue.Dict(entries):
                return {k: v.to_python() for k, v in entries.items()}
            case PlistValue.Array(items):
                return [v.to_python() for v in items]
            case _:
                assert False, f"Unknown plist value: {self!r}"

@dataclass(frozen=True)
class PlistString(PlistValue):
    value: str

    def __post_init__(self):
        if not isinstance(self.value, str):
            raise TypeError(f"Expected string, got {type(self.value)}")
PlistValue.String = PlistString

@dataclass(frozen=True)
class PlistDict(PlistValue):
    entries: Dict[str, PlistValue] = field(default_factory=dict)

    def __post_init__(self):
        for k, v in self.entries.items():
            if not isinstance(k, str):
                raise TypeError(f"Expected string key, got {type(k)}")
            if not isinstance(v, PlistValue):
                raise TypeError(f"Expected PlistValue for key '{k}', got {type(v)}")

    def __getitem__(self, key: str) -> PlistValue:
        return self.entries[key]

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def get(self, key: str, default: Any = None) -> Any:
        return self.entries.get(key, default)

    def keys(self):
        return self.entries.keys()

    def __hash__(self) -> int:
        return hash(tuple(self.entries.items()))
PlistValue.Dict = PlistDict

@dataclass(frozen=True)
class PlistArray(PlistValue):
    items: Tuple[PlistValue, ...] = ()

    def __post_init__(self):
        # Lists are accepted for convenience but stored as tuples.
        object.__setattr__(self, 'items', tuple(self.items))
        for v in self.items:
            if not isinstance(v, PlistValue):
                raise TypeError(f"Expected PlistValue, got {type(v)}")
PlistValue.Array = PlistArray


def from_python(value: Any) -> PlistValue:
    """
    Converts plain Python data (as produced by ``json`` or ``plistlib``) into a
    ``PlistValue``. Only strings, mappings and sequences are representable.
    """
    if isinstance(value, PlistValue):
        return value
    if isinstance(value, str):
        return PlistString(value)
    if isinstance(value, Mapping):
        return PlistDict({k: from_python(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return PlistArray(tuple(from_python(v) for v in value))
    raise TypeError(f"Cannot represent {type(value).__name__} as a plist value")


def string_or_none(value: Any) -> str | None:
    """
    Unwraps a string stored either as ``str`` or as ``PlistValue.String``.
    Anything else yields None.
    """
    match value:
        case str():
            return value
        case PlistValue.String(s):
            return s
        case _:
            return None
