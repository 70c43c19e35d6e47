#
# Exceptions raised while decoding package references.
#

class DecodeError(ValueError):
    """Base exception for malformed package reference documents."""
    pass


class MissingDiscriminator(DecodeError):
    """Raised if the ``kind`` field is absent or is not a string."""

    def __init__(self, key: str = 'kind') -> None:
        self.key = key
        super().__init__(f"Missing or non-string '{key}' field in version requirement")


class UnrecognizedKind(DecodeError):
    """Raised if ``kind`` holds a value outside the known requirement kinds."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(f"Version requirement kind '{kind}' is not supported")


class MissingField(DecodeError):
    """Raised if a field required by the selected kind is absent or not a string."""

    def __init__(self, kind: str, field: str) -> None:
        self.kind = kind
        self.field = field
        super().__init__(f"Version requirement of kind '{kind}' is missing string field '{field}'")
