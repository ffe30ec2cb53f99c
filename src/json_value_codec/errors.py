"""Error taxonomy shared by the codec, value model, parser and serializer."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Classification attached to every codec failure."""

    MEMORY_ALLOCATION_FAILED = "MemoryAllocationFailed"
    INVALID_UTF8 = "InvalidUTF8"
    SYNTAX_ERROR = "SyntaxError"
    INVALID_TYPE = "InvalidType"
    KEY_NOT_FOUND = "KeyNotFound"
    INDEX_OUT_OF_BOUNDS = "IndexOutOfBounds"
    INVALID_ARGUMENT = "InvalidArgument"
    PARSE_ERROR = "ParseError"
    SERIALIZATION_ERROR = "SerializationError"
    NOT_IMPLEMENTED = "NotImplemented"
    UNKNOWN_ERROR = "UnknownError"


_ERROR_TEXT: dict[ErrorKind, str] = {
    ErrorKind.MEMORY_ALLOCATION_FAILED: "Memory allocation failed",
    ErrorKind.INVALID_UTF8: "Invalid UTF-8 sequence",
    ErrorKind.SYNTAX_ERROR: "JSON syntax error",
    ErrorKind.INVALID_TYPE: "Invalid type",
    ErrorKind.KEY_NOT_FOUND: "Key not found",
    ErrorKind.INDEX_OUT_OF_BOUNDS: "Index out of bounds",
    ErrorKind.INVALID_ARGUMENT: "Invalid argument",
    ErrorKind.PARSE_ERROR: "Parse error",
    ErrorKind.SERIALIZATION_ERROR: "Serialization error",
    ErrorKind.NOT_IMPLEMENTED: "Not implemented",
    ErrorKind.UNKNOWN_ERROR: "Unknown error",
}


def error_text(kind: ErrorKind) -> str:
    """Return the fixed human-readable message for an error kind."""
    return _ERROR_TEXT[kind]


class JSONError(RuntimeError):
    """Base class for every failure raised by this package."""

    kind: ErrorKind = ErrorKind.UNKNOWN_ERROR

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or error_text(self.kind))


class InvalidUTF8Error(JSONError):
    """Raised when text is not well-formed UTF-8."""

    kind = ErrorKind.INVALID_UTF8


class JSONSyntaxError(JSONError):
    """Raised for a grammar violation, optionally at a byte position."""

    kind = ErrorKind.SYNTAX_ERROR

    def __init__(self, message: Optional[str] = None, *, position: Optional[int] = None) -> None:
        super().__init__(message)
        self.position = position


class InvalidEscapeError(JSONSyntaxError):
    """Raised for an unknown, truncated or malformed string escape."""


class InvalidTypeError(JSONError):
    """Raised when a typed accessor is used on a value of another kind."""

    kind = ErrorKind.INVALID_TYPE

    def __init__(self, *, expected: str, actual: str) -> None:
        super().__init__(f"Invalid type: expected {expected}, got {actual}")
        self.expected = expected
        self.actual = actual


class KeyNotFoundError(JSONError):
    """Raised by strict object lookups for a missing key."""

    kind = ErrorKind.KEY_NOT_FOUND

    def __init__(self, key: str) -> None:
        super().__init__(f"Key not found: {key!r}")
        self.key = key


class IndexOutOfBoundsError(JSONError):
    """Raised when an array index is outside the array."""

    kind = ErrorKind.INDEX_OUT_OF_BOUNDS

    def __init__(self, *, index: int, size: int) -> None:
        super().__init__(f"Array index {index} out of bounds for size {size}")
        self.index = index
        self.size = size


class InvalidArgumentError(JSONError):
    """Raised when an operation receives an unusable argument."""

    kind = ErrorKind.INVALID_ARGUMENT


class CyclicValueError(InvalidArgumentError):
    """Raised when a container is reached again while it is still being visited."""


class SerializationError(JSONError):
    """Raised when a value tree cannot be rendered."""

    kind = ErrorKind.SERIALIZATION_ERROR


class ParseFailedError(JSONError):
    """Raised when a failed parse result is unwrapped."""

    def __init__(self, *, kind: ErrorKind, message: str, position: int) -> None:
        super().__init__(f"{error_text(kind)} at byte {position}: {message}")
        self.kind = kind
        self.position = position
        self.detail = message
