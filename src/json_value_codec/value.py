"""Value tree model: the six JSON kinds, typed accessors, equality and cloning."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from enum import Enum
from types import MappingProxyType
from typing import Any, Optional, Union, final

from .errors import (
    CyclicValueError,
    IndexOutOfBoundsError,
    InvalidArgumentError,
    InvalidTypeError,
    KeyNotFoundError,
)
from .utf8 import TextLike, ensure_text, escape

NUMBER_TOLERANCE = 1e-12


class JsonType(Enum):
    """The closed set of JSON value kinds."""

    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


class ActivePath:
    """Containers currently being visited by a recursive walk over a value tree."""

    def __init__(self) -> None:
        self._active: set[int] = set()

    def __contains__(self, node: JsonValue) -> bool:
        return id(node) in self._active

    @contextmanager
    def visit(self, node: JsonValue) -> Iterator[None]:
        """Mark ``node`` as being visited, failing if it is already on the path."""
        key = id(node)
        if key in self._active:
            raise CyclicValueError(f"Cyclic value tree: {node.type().value} contains itself")
        self._active.add(key)
        try:
            yield
        finally:
            self._active.discard(key)


class JsonValue(ABC):
    """Base class of every node in a value tree."""

    __slots__ = ()

    @abstractmethod
    def type(self) -> JsonType:
        """Return the kind of this value."""

    def is_null(self) -> bool:
        return False

    def is_boolean(self) -> bool:
        return False

    def is_number(self) -> bool:
        return False

    def is_string(self) -> bool:
        return False

    def is_array(self) -> bool:
        return False

    def is_object(self) -> bool:
        return False

    def boolean_value(self) -> bool:
        """Return the payload of a boolean value."""
        raise self._type_error(JsonType.BOOLEAN)

    def number_value(self) -> float:
        """Return the payload of a number value."""
        raise self._type_error(JsonType.NUMBER)

    def string_value(self) -> str:
        """Return the payload of a string value."""
        raise self._type_error(JsonType.STRING)

    def array_value(self) -> tuple[JsonValue, ...]:
        """Return the elements of an array value."""
        raise self._type_error(JsonType.ARRAY)

    def object_value(self) -> Mapping[str, JsonValue]:
        """Return a read-only view of the members of an object value."""
        raise self._type_error(JsonType.OBJECT)

    def _type_error(self, expected: JsonType) -> InvalidTypeError:
        return InvalidTypeError(expected=expected.value, actual=self.type().value)

    def to_string(self) -> str:
        """Render a compact debugging representation.

        The output matches compact serialization for acyclic trees, but
        containers reached again while being rendered show up as ``[...]`` or
        ``{...}`` instead of failing.
        """
        return self._to_string(ActivePath())

    def equals(self, other: JsonValue) -> bool:
        """Compare two value trees structurally.

        Numbers are equal within an absolute tolerance of ``1e-12``; object
        members are compared by key, independent of order.

        Raises:
            CyclicValueError: If either tree contains a cycle.
        """
        return self._equals(other, ActivePath(), ActivePath())

    def clone(self) -> JsonValue:
        """Return an independent deep copy; shared subtrees are copied separately.

        Raises:
            CyclicValueError: If the tree contains a cycle.
        """
        return self._clone(ActivePath())

    @abstractmethod
    def _to_string(self, path: ActivePath) -> str: ...

    @abstractmethod
    def _equals(self, other: JsonValue, path: ActivePath, other_path: ActivePath) -> bool: ...

    @abstractmethod
    def _clone(self, path: ActivePath) -> JsonValue: ...

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_string()})"


@final
class JsonNull(JsonValue):
    """The ``null`` value."""

    __slots__ = ()

    def type(self) -> JsonType:
        return JsonType.NULL

    def is_null(self) -> bool:
        return True

    def _to_string(self, path: ActivePath) -> str:
        return "null"

    def _equals(self, other: JsonValue, path: ActivePath, other_path: ActivePath) -> bool:
        return other.is_null()

    def _clone(self, path: ActivePath) -> JsonValue:
        return JsonNull()


@final
class JsonBoolean(JsonValue):
    """A ``true`` or ``false`` value."""

    __slots__ = ("_value",)

    def __init__(self, value: bool) -> None:
        if not isinstance(value, bool):
            raise InvalidArgumentError(f"Boolean value required, got {type(value).__name__}")
        self._value = value

    def type(self) -> JsonType:
        return JsonType.BOOLEAN

    def is_boolean(self) -> bool:
        return True

    def boolean_value(self) -> bool:
        return self._value

    def _to_string(self, path: ActivePath) -> str:
        return "true" if self._value else "false"

    def _equals(self, other: JsonValue, path: ActivePath, other_path: ActivePath) -> bool:
        return other.is_boolean() and other.boolean_value() == self._value

    def _clone(self, path: ActivePath) -> JsonValue:
        return JsonBoolean(self._value)


@final
class JsonNumber(JsonValue):
    """A number; integers and reals share one ``float`` representation."""

    __slots__ = ("_value",)

    def __init__(self, value: Union[int, float]) -> None:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidArgumentError(f"Numeric value required, got {type(value).__name__}")
        try:
            number = float(value)
        except OverflowError as exc:
            raise InvalidArgumentError(f"Number out of range: {value}") from exc
        if not math.isfinite(number):
            raise InvalidArgumentError(f"Number must be finite, got {number}")
        self._value = number

    def type(self) -> JsonType:
        return JsonType.NUMBER

    def is_number(self) -> bool:
        return True

    def number_value(self) -> float:
        return self._value

    def _to_string(self, path: ActivePath) -> str:
        return format_number(self._value)

    def _equals(self, other: JsonValue, path: ActivePath, other_path: ActivePath) -> bool:
        return other.is_number() and abs(other.number_value() - self._value) < NUMBER_TOLERANCE

    def _clone(self, path: ActivePath) -> JsonValue:
        return JsonNumber(self._value)


@final
class JsonString(JsonValue):
    """A string whose payload is always valid UTF-8."""

    __slots__ = ("_value",)

    def __init__(self, value: TextLike) -> None:
        if not isinstance(value, (str, bytes, bytearray, memoryview)):
            raise InvalidArgumentError(f"Text value required, got {type(value).__name__}")
        self._value = ensure_text(value)

    def type(self) -> JsonType:
        return JsonType.STRING

    def is_string(self) -> bool:
        return True

    def string_value(self) -> str:
        return self._value

    def _to_string(self, path: ActivePath) -> str:
        return escape(self._value)

    def _equals(self, other: JsonValue, path: ActivePath, other_path: ActivePath) -> bool:
        return other.is_string() and other.string_value() == self._value

    def _clone(self, path: ActivePath) -> JsonValue:
        return JsonString(self._value)


@final
class JsonArray(JsonValue):
    """An ordered sequence of values; elements may be shared with other containers."""

    __slots__ = ("_items",)

    def __init__(self, items: Optional[Iterable[JsonValue]] = None) -> None:
        self._items: list[JsonValue] = []
        for item in items or ():
            self.push_back(item)

    def type(self) -> JsonType:
        return JsonType.ARRAY

    def is_array(self) -> bool:
        return True

    def array_value(self) -> tuple[JsonValue, ...]:
        return tuple(self._items)

    def push_back(self, value: JsonValue) -> None:
        """Append ``value`` to the end of the array."""
        self._items.append(_require_value(value))

    def insert(self, index: int, value: JsonValue) -> None:
        """Insert ``value`` before ``index``; ``index == size()`` appends."""
        if index < 0 or index > len(self._items):
            raise IndexOutOfBoundsError(index=index, size=len(self._items))
        self._items.insert(index, _require_value(value))

    def at(self, index: int) -> JsonValue:
        """Return the element at ``index``."""
        self._check_index(index)
        return self._items[index]

    def remove(self, index: int) -> None:
        """Remove the element at ``index``."""
        self._check_index(index)
        del self._items[index]

    def clear(self) -> None:
        self._items.clear()

    def size(self) -> int:
        return len(self._items)

    def empty(self) -> bool:
        return not self._items

    def _check_index(self, index: int) -> None:
        if index < 0 or index >= len(self._items):
            raise IndexOutOfBoundsError(index=index, size=len(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[JsonValue]:
        return iter(tuple(self._items))

    def _to_string(self, path: ActivePath) -> str:
        if self in path:
            return "[...]"
        with path.visit(self):
            return "[" + ", ".join(item._to_string(path) for item in self._items) + "]"

    def _equals(self, other: JsonValue, path: ActivePath, other_path: ActivePath) -> bool:
        if not isinstance(other, JsonArray) or len(other) != len(self):
            return False
        with path.visit(self), other_path.visit(other):
            return all(
                mine._equals(theirs, path, other_path)
                for mine, theirs in zip(self._items, other._items)
            )

    def _clone(self, path: ActivePath) -> JsonValue:
        with path.visit(self):
            return JsonArray([item._clone(path) for item in self._items])


@final
class JsonObject(JsonValue):
    """A mapping from unique UTF-8 keys to values, iterated in insertion order."""

    __slots__ = ("_members",)

    def __init__(self, members: Optional[Mapping[str, JsonValue]] = None) -> None:
        self._members: dict[str, JsonValue] = {}
        for key, value in (members or {}).items():
            self.set(key, value)

    def type(self) -> JsonType:
        return JsonType.OBJECT

    def is_object(self) -> bool:
        return True

    def object_value(self) -> Mapping[str, JsonValue]:
        return MappingProxyType(self._members)

    def set(self, key: TextLike, value: JsonValue) -> None:
        """Insert or replace the member ``key``."""
        self._members[_require_key(key)] = _require_value(value)

    def get(self, key: TextLike) -> Optional[JsonValue]:
        """Return the member ``key``, or ``None`` when it is absent."""
        return self._members.get(_require_key(key))

    def at(self, key: TextLike) -> JsonValue:
        """Return the member ``key``, failing when it is absent."""
        text = _require_key(key)
        try:
            return self._members[text]
        except KeyError:
            raise KeyNotFoundError(text) from None

    def has(self, key: TextLike) -> bool:
        return _require_key(key) in self._members

    def erase(self, key: TextLike) -> None:
        """Remove the member ``key``; absent keys are ignored."""
        self._members.pop(_require_key(key), None)

    def clear(self) -> None:
        self._members.clear()

    def size(self) -> int:
        return len(self._members)

    def empty(self) -> bool:
        return not self._members

    def keys(self) -> list[str]:
        return list(self._members)

    def items(self) -> list[tuple[str, JsonValue]]:
        return list(self._members.items())

    def __len__(self) -> int:
        return len(self._members)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._members))

    def __contains__(self, key: Any) -> bool:
        return isinstance(key, str) and key in self._members

    def _to_string(self, path: ActivePath) -> str:
        if self in path:
            return "{...}"
        with path.visit(self):
            members = (
                f"{escape(key)}: {value._to_string(path)}" for key, value in self._members.items()
            )
            return "{" + ", ".join(members) + "}"

    def _equals(self, other: JsonValue, path: ActivePath, other_path: ActivePath) -> bool:
        if not isinstance(other, JsonObject) or len(other) != len(self):
            return False
        with path.visit(self), other_path.visit(other):
            for key, value in self._members.items():
                counterpart = other._members.get(key)
                if counterpart is None or not value._equals(counterpart, path, other_path):
                    return False
            return True

    def _clone(self, path: ActivePath) -> JsonValue:
        with path.visit(self):
            return JsonObject({key: value._clone(path) for key, value in self._members.items()})


def format_number(number: float) -> str:
    """Render a number: integral values as decimal integers, others via ``repr``."""
    if number.is_integer():
        return str(int(number))
    return repr(number)


def _require_value(value: Any) -> JsonValue:
    if not isinstance(value, JsonValue):
        raise InvalidArgumentError(f"JSON value required, got {type(value).__name__}")
    return value


def _require_key(key: Any) -> str:
    if not isinstance(key, (str, bytes, bytearray, memoryview)):
        raise InvalidArgumentError(f"Object key must be text, got {type(key).__name__}")
    return ensure_text(key)
