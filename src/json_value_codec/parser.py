"""Recursive-descent parser producing value trees from UTF-8 JSON text."""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Optional

from .errors import (
    ErrorKind,
    InvalidArgumentError,
    InvalidEscapeError,
    InvalidUTF8Error,
    JSONError,
    JSONSyntaxError,
    ParseFailedError,
)
from .options import ParseOptions
from .utf8 import SIMPLE_ESCAPES, TextLike, decode_hex4, encode_code_point, ensure_text
from .value import JsonArray, JsonBoolean, JsonNull, JsonNumber, JsonObject, JsonString, JsonValue

logger = logging.getLogger(__name__)

_WHITESPACE = frozenset(b" \t\n\r")
_DIGITS = frozenset(b"0123456789")
_QUOTE = ord('"')
_BACKSLASH = ord("\\")
_PLAIN_STRING_RUN = re.compile(rb'[^"\\\x00-\x1f]+')


@dataclass(frozen=True)
class ParseFailure:
    """Why a document was rejected and the byte offset where it happened."""

    kind: ErrorKind
    message: str
    position: int


@dataclass(frozen=True)
class ParseResult:
    """Outcome of ``parse``: a value tree or a failure, never both."""

    value: Optional[JsonValue] = None
    failure: Optional[ParseFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    def __bool__(self) -> bool:
        return self.ok

    def unwrap(self) -> JsonValue:
        """Return the parsed value or raise ``ParseFailedError``."""
        if self.failure is not None:
            raise ParseFailedError(
                kind=self.failure.kind,
                message=self.failure.message,
                position=self.failure.position,
            )
        if self.value is None:
            raise ParseFailedError(
                kind=ErrorKind.UNKNOWN_ERROR,
                message="Parse result holds no value",
                position=0,
            )
        return self.value


class _ValueConstructionError(JSONError):
    """A well-formed token whose payload could not become a value."""

    kind = ErrorKind.PARSE_ERROR

    def __init__(self, message: str, *, position: int) -> None:
        super().__init__(message)
        self.position = position


class Parser:
    """Single-use scanner over an immutable UTF-8 buffer.

    The cursor only moves forward and looks at most one byte ahead. Nesting
    deeper than ``ParseOptions.max_depth`` is rejected as a syntax error.
    """

    def __init__(self, data: bytes, *, options: ParseOptions) -> None:
        self._data = data
        self._length = len(data)
        self._position = 0
        self._max_depth = options.max_depth

    @property
    def position(self) -> int:
        return self._position

    def parse_document(self) -> JsonValue:
        """Parse exactly one value surrounded by optional whitespace."""
        value = self._parse_value(depth=0)
        self._skip_whitespace()
        if self._position < self._length:
            raise self._syntax_error(f"Unexpected trailing character {self._describe_current()}")
        return value

    def _parse_value(self, *, depth: int) -> JsonValue:
        byte = self._peek()
        if byte is None:
            raise self._syntax_error("Unexpected end of input")
        if byte == _QUOTE:
            return self._parse_string()
        if byte == ord("{"):
            return self._parse_object(depth=depth + 1)
        if byte == ord("["):
            return self._parse_array(depth=depth + 1)
        if byte == ord("t"):
            self._parse_literal(b"true")
            return JsonBoolean(True)
        if byte == ord("f"):
            self._parse_literal(b"false")
            return JsonBoolean(False)
        if byte == ord("n"):
            self._parse_literal(b"null")
            return JsonNull()
        if byte == ord("-") or byte in _DIGITS:
            return self._parse_number()
        raise self._syntax_error(f"Unexpected character {self._describe_current()}")

    def _parse_array(self, *, depth: int) -> JsonArray:
        self._check_depth(depth)
        self._expect(ord("["))
        array = JsonArray()
        if self._peek() == ord("]"):
            self._position += 1
            return array

        while True:
            array.push_back(self._parse_value(depth=depth))
            byte = self._peek()
            if byte == ord("]"):
                self._position += 1
                return array
            if byte != ord(","):
                raise self._syntax_error(
                    f"Expected ',' or ']' in array but found {self._describe_current()}"
                )
            self._position += 1

    def _parse_object(self, *, depth: int) -> JsonObject:
        self._check_depth(depth)
        self._expect(ord("{"))
        obj = JsonObject()
        if self._peek() == ord("}"):
            self._position += 1
            return obj

        while True:
            if self._peek() != _QUOTE:
                raise self._syntax_error(
                    f"Expected string key in object but found {self._describe_current()}"
                )
            key_start = self._position
            key = self._to_text(self._read_string_bytes(), position=key_start)
            self._expect(ord(":"))
            obj.set(key, self._parse_value(depth=depth))

            byte = self._peek()
            if byte == ord("}"):
                self._position += 1
                return obj
            if byte != ord(","):
                raise self._syntax_error(
                    f"Expected ',' or '}}' in object but found {self._describe_current()}"
                )
            self._position += 1

    def _parse_string(self) -> JsonString:
        start = self._position
        return JsonString(self._to_text(self._read_string_bytes(), position=start))

    def _read_string_bytes(self) -> bytes:
        # Cursor sits on the opening quote.
        data = self._data
        self._position += 1
        result = bytearray()
        while True:
            run = _PLAIN_STRING_RUN.match(data, self._position)
            if run is not None:
                result += run.group()
                self._position = run.end()
            if self._position >= self._length:
                raise self._syntax_error("Unterminated string")

            byte = data[self._position]
            if byte == _QUOTE:
                self._position += 1
                return bytes(result)
            if byte == _BACKSLASH:
                self._read_escape(result)
                continue
            raise self._syntax_error(f"Unescaped control character 0x{byte:02x} in string")

    def _read_escape(self, result: bytearray) -> None:
        escape_start = self._position
        marker_position = escape_start + 1
        if marker_position >= self._length:
            raise InvalidEscapeError("Unterminated escape sequence", position=escape_start)

        marker = self._data[marker_position]
        if marker == ord("u"):
            code_point = decode_hex4(self._data, marker_position + 1)
            result += encode_code_point(code_point)
            self._position = marker_position + 5
            return

        decoded = SIMPLE_ESCAPES.get(marker)
        if decoded is None:
            raise InvalidEscapeError("Invalid escape sequence", position=escape_start)
        result.append(decoded)
        self._position = marker_position + 1

    def _parse_number(self) -> JsonNumber:
        data = self._data
        start = self._position
        position = start
        if data[position] == ord("-"):
            position += 1

        if position < self._length and data[position] == ord("0"):
            position += 1
            if position < self._length and data[position] in _DIGITS:
                raise self._syntax_error("Leading zeros are not allowed", position=position)
        elif position < self._length and data[position] in _DIGITS:
            position = self._skip_digits(position)
        else:
            raise self._syntax_error("Invalid number format", position=position)

        if position < self._length and data[position] == ord("."):
            position += 1
            if position >= self._length or data[position] not in _DIGITS:
                raise self._syntax_error(
                    "Invalid number format - expected digit after decimal point",
                    position=position,
                )
            position = self._skip_digits(position)

        if position < self._length and data[position] in b"eE":
            position += 1
            if position < self._length and data[position] in b"+-":
                position += 1
            if position >= self._length or data[position] not in _DIGITS:
                raise self._syntax_error(
                    "Invalid number format - expected digit in exponent",
                    position=position,
                )
            position = self._skip_digits(position)

        self._position = position
        number = float(data[start:position].decode("ascii"))
        if not math.isfinite(number):
            raise self._syntax_error("Number out of range", position=start)
        return JsonNumber(number)

    def _skip_digits(self, position: int) -> int:
        while position < self._length and self._data[position] in _DIGITS:
            position += 1
        return position

    def _parse_literal(self, word: bytes) -> None:
        for expected in word:
            if self._position >= self._length or self._data[self._position] != expected:
                raise self._syntax_error(
                    f"Invalid literal, expected '{word.decode('ascii')}' "
                    f"but found {self._describe_current()}"
                )
            self._position += 1

    def _check_depth(self, depth: int) -> None:
        if depth > self._max_depth:
            raise self._syntax_error(f"Maximum nesting depth of {self._max_depth} exceeded")

    def _to_text(self, raw: bytes, *, position: int) -> str:
        try:
            return ensure_text(raw)
        except InvalidUTF8Error as exc:
            raise _ValueConstructionError(str(exc), position=position) from exc

    def _skip_whitespace(self) -> None:
        while self._position < self._length and self._data[self._position] in _WHITESPACE:
            self._position += 1

    def _peek(self) -> Optional[int]:
        self._skip_whitespace()
        if self._position >= self._length:
            return None
        return self._data[self._position]

    def _expect(self, expected: int) -> None:
        if self._peek() != expected:
            raise self._syntax_error(
                f"Expected '{chr(expected)}' but found {self._describe_current()}"
            )
        self._position += 1

    def _describe_current(self) -> str:
        if self._position >= self._length:
            return "end of input"
        byte = self._data[self._position]
        if 0x20 < byte < 0x7F:
            return f"'{chr(byte)}'"
        return f"byte 0x{byte:02x}"

    def _syntax_error(self, message: str, *, position: Optional[int] = None) -> JSONSyntaxError:
        return JSONSyntaxError(
            message,
            position=self._position if position is None else position,
        )


def parse(text: TextLike, *, options: Optional[ParseOptions] = None) -> ParseResult:
    """Parse a JSON document.

    Failures are returned, not raised: grammar violations as ``SyntaxError``,
    payloads that cannot become values (such as invalid UTF-8 inside a
    string) as ``ParseError``, anything unexpected as ``UnknownError``.

    Args:
        text (TextLike): Document as ``str`` or UTF-8 bytes.
        options (Optional[ParseOptions]): Parser settings; defaults apply when omitted.

    Returns:
        ParseResult: The value tree, or the failure with its byte position.
    """
    settings = options if options is not None else ParseOptions()
    parser: Optional[Parser] = None
    try:
        parser = Parser(_input_bytes(text), options=settings)
        value = parser.parse_document()
    except JSONSyntaxError as exc:
        return _failed(ErrorKind.SYNTAX_ERROR, str(exc), exc.position or 0)
    except _ValueConstructionError as exc:
        return _failed(ErrorKind.PARSE_ERROR, str(exc), exc.position)
    except JSONError as exc:
        return _failed(exc.kind, str(exc), _position_of(parser))
    except RecursionError:
        return _failed(
            ErrorKind.PARSE_ERROR,
            "Nesting exceeds the interpreter recursion limit",
            _position_of(parser),
        )
    except MemoryError:
        return _failed(
            ErrorKind.MEMORY_ALLOCATION_FAILED,
            "Out of memory while parsing",
            _position_of(parser),
        )
    except Exception as exc:  # pylint: disable=broad-exception-caught
        logger.exception("Unexpected failure while parsing")
        return _failed(
            ErrorKind.UNKNOWN_ERROR,
            f"{type(exc).__name__}: {exc}",
            _position_of(parser),
        )
    return ParseResult(value=value)


def _input_bytes(text: Any) -> bytes:
    if isinstance(text, str):
        try:
            return text.encode("utf-8")
        except UnicodeEncodeError as exc:
            position = len(text[: exc.start].encode("utf-8", errors="surrogatepass"))
            raise _ValueConstructionError(
                "Invalid UTF-8 sequence in input text", position=position
            ) from exc
    if isinstance(text, (bytes, bytearray, memoryview)):
        return bytes(text)
    raise InvalidArgumentError(f"JSON input must be text or bytes, got {type(text).__name__}")


def _position_of(parser: Optional[Parser]) -> int:
    return parser.position if parser is not None else 0


def _failed(kind: ErrorKind, message: str, position: int) -> ParseResult:
    logger.debug("JSON parse failed: %s at byte %d: %s", kind.value, position, message)
    return ParseResult(failure=ParseFailure(kind=kind, message=message, position=position))
