"""Conversion between value trees and plain Python data."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from .errors import CyclicValueError, InvalidArgumentError
from .json_types import JSONValue, PlainJSONValue
from .value import (
    ActivePath,
    JsonArray,
    JsonBoolean,
    JsonNull,
    JsonNumber,
    JsonObject,
    JsonString,
    JsonValue,
)


def from_python(data: JSONValue) -> JsonValue:
    """Build a value tree from ``None``, booleans, numbers, strings, lists, tuples and dicts.

    Raises:
        InvalidArgumentError: For unsupported types or non-string mapping keys.
        CyclicValueError: If a container contains itself.
    """
    return _from_python(data, active=set())


def _from_python(data: Any, *, active: set[int]) -> JsonValue:
    if data is None:
        return JsonNull()
    if isinstance(data, bool):
        return JsonBoolean(data)
    if isinstance(data, (int, float)):
        return JsonNumber(data)
    if isinstance(data, str):
        return JsonString(data)
    if isinstance(data, (list, tuple)):
        with _visiting(data, active):
            return JsonArray([_from_python(item, active=active) for item in data])
    if isinstance(data, Mapping):
        with _visiting(data, active):
            obj = JsonObject()
            for key, value in data.items():
                if not isinstance(key, str):
                    raise InvalidArgumentError(
                        f"Object keys must be strings, got {type(key).__name__}"
                    )
                obj.set(key, _from_python(value, active=active))
            return obj
    raise InvalidArgumentError(f"Cannot convert {type(data).__name__} to a JSON value")


@contextmanager
def _visiting(container: Any, active: set[int]) -> Iterator[None]:
    key = id(container)
    if key in active:
        raise CyclicValueError("Cyclic Python data cannot be converted")
    active.add(key)
    try:
        yield
    finally:
        active.discard(key)


def to_python(value: JsonValue) -> PlainJSONValue:
    """Convert a value tree to plain Python data; numbers come back as ``float``.

    Raises:
        CyclicValueError: If the tree contains a cycle.
    """
    return _to_python(value, ActivePath())


def _to_python(value: JsonValue, path: ActivePath) -> PlainJSONValue:
    if isinstance(value, JsonNull):
        return None
    if isinstance(value, JsonBoolean):
        return value.boolean_value()
    if isinstance(value, JsonNumber):
        return value.number_value()
    if isinstance(value, JsonString):
        return value.string_value()
    if isinstance(value, JsonArray):
        with path.visit(value):
            return [_to_python(item, path) for item in value]
    if isinstance(value, JsonObject):
        with path.visit(value):
            return {key: _to_python(member, path) for key, member in value.items()}
    raise InvalidArgumentError(f"Cannot convert {type(value).__name__}")
