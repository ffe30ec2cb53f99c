"""Render value trees as JSON text, compact or pretty-printed."""

from __future__ import annotations

from typing import Optional

from pydantic import ValidationError

from .errors import InvalidArgumentError, SerializationError
from .options import DEFAULT_INDENT, SerializeOptions
from .utf8 import escape
from .value import (
    ActivePath,
    JsonArray,
    JsonBoolean,
    JsonNull,
    JsonNumber,
    JsonObject,
    JsonString,
    JsonValue,
    format_number,
)


class Serializer:
    """Renders value trees with a fixed set of options.

    Compact output separates elements with ``", "`` and members with
    ``": "``. Pretty output puts every element on its own line, indented by
    ``indent`` spaces per level, and separates members with ``" : "``. Empty
    containers are always ``[]`` and ``{}``.
    """

    def __init__(self, options: SerializeOptions) -> None:
        self._pretty = options.pretty
        self._indent = options.indent

    def serialize(self, value: JsonValue) -> str:
        """Render ``value`` as JSON text.

        Raises:
            CyclicValueError: If the tree contains a cycle.
            SerializationError: If the tree is too deep to render.
        """
        parts: list[str] = []
        try:
            self._write_value(parts, value, current_indent=0, path=ActivePath())
        except RecursionError as exc:
            raise SerializationError("Value tree is nested too deeply to serialize") from exc
        return "".join(parts)

    def _write_value(
        self,
        parts: list[str],
        value: JsonValue,
        *,
        current_indent: int,
        path: ActivePath,
    ) -> None:
        if isinstance(value, JsonNull):
            parts.append("null")
        elif isinstance(value, JsonBoolean):
            parts.append("true" if value.boolean_value() else "false")
        elif isinstance(value, JsonNumber):
            parts.append(format_number(value.number_value()))
        elif isinstance(value, JsonString):
            parts.append(escape(value.string_value()))
        elif isinstance(value, JsonArray):
            self._write_array(parts, value, current_indent=current_indent, path=path)
        elif isinstance(value, JsonObject):
            self._write_object(parts, value, current_indent=current_indent, path=path)
        else:
            raise SerializationError(f"Cannot serialize {type(value).__name__}")

    def _write_array(
        self,
        parts: list[str],
        array: JsonArray,
        *,
        current_indent: int,
        path: ActivePath,
    ) -> None:
        if array.empty():
            parts.append("[]")
            return
        child_indent = current_indent + self._indent
        with path.visit(array):
            parts.append("[")
            for index, item in enumerate(array):
                if index:
                    parts.append(self._element_separator())
                self._write_element_prefix(parts, child_indent)
                self._write_value(parts, item, current_indent=child_indent, path=path)
            self._write_closing(parts, "]", current_indent)

    def _write_object(
        self,
        parts: list[str],
        obj: JsonObject,
        *,
        current_indent: int,
        path: ActivePath,
    ) -> None:
        if obj.empty():
            parts.append("{}")
            return
        child_indent = current_indent + self._indent
        key_separator = " : " if self._pretty else ": "
        with path.visit(obj):
            parts.append("{")
            for index, (key, member) in enumerate(obj.items()):
                if index:
                    parts.append(self._element_separator())
                self._write_element_prefix(parts, child_indent)
                parts.append(escape(key))
                parts.append(key_separator)
                self._write_value(parts, member, current_indent=child_indent, path=path)
            self._write_closing(parts, "}", current_indent)

    def _element_separator(self) -> str:
        return "," if self._pretty else ", "

    def _write_element_prefix(self, parts: list[str], child_indent: int) -> None:
        if self._pretty:
            parts.append("\n" + " " * child_indent)

    def _write_closing(self, parts: list[str], bracket: str, current_indent: int) -> None:
        if self._pretty:
            parts.append("\n" + " " * current_indent)
        parts.append(bracket)


def serialize(value: JsonValue, pretty: bool = False, indent: int = DEFAULT_INDENT) -> str:
    """Render a value tree as JSON text.

    Args:
        value (JsonValue): Root of the tree to render.
        pretty (bool): Emit one element per line with indentation.
        indent (int): Spaces per nesting level in pretty mode.

    Returns:
        str: The JSON document.
    """
    return Serializer(_serialize_options(pretty=pretty, indent=indent)).serialize(value)


def _serialize_options(*, pretty: bool, indent: int) -> SerializeOptions:
    try:
        return SerializeOptions(pretty=pretty, indent=indent)
    except ValidationError as exc:
        raise InvalidArgumentError(f"Invalid serialization options: {exc}") from exc


def serializer_for(options: Optional[SerializeOptions] = None) -> Serializer:
    """Return a serializer bound to ``options`` (defaults when omitted)."""
    return Serializer(options if options is not None else SerializeOptions())
