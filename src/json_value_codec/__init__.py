"""JSON value trees with a strict UTF-8 parser and serializer."""

from __future__ import annotations

from .cli import main
from .convert import from_python, to_python
from .errors import ErrorKind, JSONError, error_text
from .options import CodecOptions, ParseOptions, SerializeOptions, load_options
from .parser import ParseFailure, ParseResult, parse
from .serializer import Serializer, serialize
from .value import (
    JsonArray,
    JsonBoolean,
    JsonNull,
    JsonNumber,
    JsonObject,
    JsonString,
    JsonType,
    JsonValue,
)

__all__ = [
    "CodecOptions",
    "ErrorKind",
    "JSONError",
    "JsonArray",
    "JsonBoolean",
    "JsonNull",
    "JsonNumber",
    "JsonObject",
    "JsonString",
    "JsonType",
    "JsonValue",
    "ParseFailure",
    "ParseOptions",
    "ParseResult",
    "SerializeOptions",
    "Serializer",
    "error_text",
    "from_python",
    "load_options",
    "main",
    "parse",
    "serialize",
    "to_python",
]
