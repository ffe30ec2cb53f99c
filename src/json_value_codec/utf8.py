"""UTF-8 validation and JSON string escaping."""

from __future__ import annotations

from typing import Optional, TypeAlias, Union

from .errors import InvalidArgumentError, InvalidEscapeError, InvalidUTF8Error

BytesLike: TypeAlias = Union[bytes, bytearray, memoryview]
TextLike: TypeAlias = Union[str, BytesLike]

_QUOTE = 0x22
_BACKSLASH = 0x5C

# Escape character (the byte after a backslash) -> decoded byte.
SIMPLE_ESCAPES: dict[int, int] = {
    ord('"'): ord('"'),
    ord("\\"): ord("\\"),
    ord("/"): ord("/"),
    ord("b"): 0x08,
    ord("f"): 0x0C,
    ord("n"): 0x0A,
    ord("r"): 0x0D,
    ord("t"): 0x09,
}

_ESCAPED_CHARS: dict[str, str] = {
    '"': '\\"',
    "\\": "\\\\",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}

_HEX_DIGITS = frozenset(b"0123456789abcdefABCDEF")

# (leading byte mask, leading byte pattern, sequence length, payload mask, minimum code point)
_MULTI_BYTE_FORMS: tuple[tuple[int, int, int, int, int], ...] = (
    (0xE0, 0xC0, 2, 0x1F, 0x80),
    (0xF0, 0xE0, 3, 0x0F, 0x800),
    (0xF8, 0xF0, 4, 0x07, 0x10000),
)


def validate(data: TextLike) -> bool:
    """Return whether ``data`` is well-formed UTF-8.

    Overlong forms, surrogate code points and code points above U+10FFFF are
    rejected. ``str`` input is checked through its UTF-8 encoding, so lone
    surrogates make it invalid.
    """
    if isinstance(data, str):
        data = data.encode("utf-8", errors="surrogatepass")
    view = bytes(data)
    length = len(view)
    index = 0
    while index < length:
        lead = view[index]
        if lead & 0x80 == 0:
            index += 1
            continue

        form = _classify_lead_byte(lead)
        if form is None:
            return False
        size, payload_mask, minimum = form
        if index + size > length:
            return False

        code_point = lead & payload_mask
        for offset in range(1, size):
            continuation = view[index + offset]
            if continuation & 0xC0 != 0x80:
                return False
            code_point = (code_point << 6) | (continuation & 0x3F)

        if code_point < minimum:
            return False
        if 0xD800 <= code_point <= 0xDFFF:
            return False
        if code_point > 0x10FFFF:
            return False
        index += size
    return True


def _classify_lead_byte(lead: int) -> Optional[tuple[int, int, int]]:
    for mask, pattern, size, payload_mask, minimum in _MULTI_BYTE_FORMS:
        if lead & mask == pattern:
            return size, payload_mask, minimum
    return None


def ensure_text(data: TextLike) -> str:
    """Return ``data`` as ``str`` after checking it is valid UTF-8.

    Raises:
        InvalidUTF8Error: If the bytes (or the encoding of the string) are malformed.
    """
    if isinstance(data, str):
        if not validate(data):
            raise InvalidUTF8Error("Invalid UTF-8 sequence in string")
        return data
    raw = bytes(data)
    if not validate(raw):
        raise InvalidUTF8Error("Invalid UTF-8 sequence in string")
    return raw.decode("utf-8")


def encode_code_point(code_point: int) -> bytes:
    """Encode a code point up to U+10FFFF with the generic UTF-8 bit layout.

    Surrogate code points are encoded as three bytes without complaint; such
    output fails ``validate`` later, which is where they are rejected.
    """
    if code_point <= 0x7F:
        return bytes((code_point,))
    if code_point <= 0x7FF:
        return bytes((0xC0 | (code_point >> 6), 0x80 | (code_point & 0x3F)))
    if code_point <= 0xFFFF:
        return bytes(
            (
                0xE0 | (code_point >> 12),
                0x80 | ((code_point >> 6) & 0x3F),
                0x80 | (code_point & 0x3F),
            )
        )
    if code_point <= 0x10FFFF:
        return bytes(
            (
                0xF0 | (code_point >> 18),
                0x80 | ((code_point >> 12) & 0x3F),
                0x80 | ((code_point >> 6) & 0x3F),
                0x80 | (code_point & 0x3F),
            )
        )
    raise InvalidArgumentError(f"Code point out of range: {code_point:#x}")


def decode_hex4(data: bytes, start: int) -> int:
    """Decode the four hex digits of a ``\\uXXXX`` escape starting at ``start``."""
    digits = data[start : start + 4]
    if len(digits) != 4 or any(byte not in _HEX_DIGITS for byte in digits):
        raise InvalidEscapeError("Invalid Unicode escape sequence", position=start)
    return int(digits, 16)


def escape(text: TextLike) -> str:
    """Render text as a quoted JSON string literal.

    Quote, backslash and the ``\\b \\f \\n \\r \\t`` controls use their short
    escapes, other control characters become ``\\u00XX``; everything else,
    including non-ASCII characters, is copied through.
    """
    value = ensure_text(text)
    parts = ['"']
    for char in value:
        replacement = _ESCAPED_CHARS.get(char)
        if replacement is not None:
            parts.append(replacement)
        elif ord(char) < 0x20:
            parts.append(f"\\u{ord(char):04x}")
        else:
            parts.append(char)
    parts.append('"')
    return "".join(parts)


def unescape(quoted: TextLike) -> str:
    """Decode a quoted JSON string literal back to text.

    ``\\uXXXX`` escapes are decoded one at a time; surrogate pairs are not
    combined, so escapes in the surrogate range produce invalid UTF-8.

    Raises:
        InvalidArgumentError: If the input does not start and end with a quote.
        InvalidEscapeError: For an unknown, truncated or malformed escape.
        InvalidUTF8Error: If the decoded bytes are not valid UTF-8.
    """
    if isinstance(quoted, str):
        try:
            raw = quoted.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise InvalidUTF8Error(f"Invalid UTF-8 sequence in string: {exc}") from exc
    else:
        raw = bytes(quoted)
    if len(raw) < 2 or raw[0] != _QUOTE or raw[-1] != _QUOTE:
        raise InvalidArgumentError("Invalid JSON string format")

    end = len(raw) - 1
    result = bytearray()
    index = 1
    while index < end:
        byte = raw[index]
        index += 1
        if byte != _BACKSLASH:
            result.append(byte)
            continue

        if index >= end:
            raise InvalidEscapeError("Invalid escape sequence", position=index - 1)
        marker = raw[index]
        index += 1
        if marker == ord("u"):
            if index + 4 > end:
                raise InvalidEscapeError("Invalid Unicode escape sequence", position=index - 2)
            result += encode_code_point(decode_hex4(raw, index))
            index += 4
            continue
        decoded = SIMPLE_ESCAPES.get(marker)
        if decoded is None:
            raise InvalidEscapeError("Invalid escape sequence", position=index - 1)
        result.append(decoded)

    return ensure_text(result)
