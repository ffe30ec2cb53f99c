"""Unit tests for compact and pretty serialization."""

from __future__ import annotations

import pytest

from json_value_codec.errors import CyclicValueError, InvalidArgumentError, SerializationError
from json_value_codec.options import SerializeOptions
from json_value_codec.serializer import Serializer, serialize, serializer_for
from json_value_codec.value import (
    JsonArray,
    JsonBoolean,
    JsonNull,
    JsonNumber,
    JsonObject,
    JsonString,
)


def _person() -> JsonObject:
    return JsonObject(
        {
            "name": JsonString("John"),
            "tags": JsonArray([JsonString("a"), JsonNumber(1)]),
            "empty": JsonObject(),
        }
    )


def test_compact_output_uses_spaced_separators() -> None:
    """Compact output separates elements with ``, `` and members with ``: ``."""
    assert serialize(_person()) == '{"name": "John", "tags": ["a", 1], "empty": {}}'


def test_pretty_output_puts_each_element_on_its_own_line() -> None:
    """Pretty output indents each level and uses `` : `` between key and value."""
    expected = '{\n  "name" : "John",\n  "tags" : [\n    "a",\n    1\n  ],\n  "empty" : {}\n}'
    assert serialize(_person(), pretty=True) == expected


def test_pretty_output_honours_indent_width() -> None:
    """Indentation width is configurable, including zero."""
    array = JsonArray([JsonNumber(1), JsonNumber(2)])
    assert serialize(array, pretty=True, indent=4) == "[\n    1,\n    2\n]"
    assert serialize(array, pretty=True, indent=0) == "[\n1,\n2\n]"


def test_indent_is_ignored_in_compact_mode() -> None:
    """Only pretty mode uses the indent width."""
    array = JsonArray([JsonNumber(1), JsonNumber(2)])
    assert serialize(array, indent=8) == "[1, 2]"


def test_scalars_serialize_as_literals() -> None:
    """Scalars render as their JSON literals."""
    assert serialize(JsonNull()) == "null"
    assert serialize(JsonBoolean(True)) == "true"
    assert serialize(JsonBoolean(False), pretty=True) == "false"
    assert serialize(JsonString('tab\there "q"')) == '"tab\\there \\"q\\""'


@pytest.mark.parametrize(
    ("number", "expected"),
    [
        (0, "0"),
        (-0.0, "0"),
        (42, "42"),
        (-7.0, "-7"),
        (1e20, "100000000000000000000"),
        (3.14, "3.14"),
        (0.1, "0.1"),
        (1e-7, "1e-07"),
        (-2.5, "-2.5"),
    ],
)
def test_number_formatting(number: float, expected: str) -> None:
    """Integral numbers print without a fraction, others in shortest round-trip form."""
    assert serialize(JsonNumber(number)) == expected


def test_negative_indent_is_rejected() -> None:
    """A negative indent width is an invalid argument."""
    with pytest.raises(InvalidArgumentError):
        serialize(JsonNull(), pretty=True, indent=-1)


def test_shared_subtrees_are_serialized_each_time() -> None:
    """A subtree referenced twice is not mistaken for a cycle."""
    shared = JsonArray([JsonNumber(1)])
    root = JsonObject({"a": shared, "b": shared})
    assert serialize(root) == '{"a": [1], "b": [1]}'


def test_cycles_are_rejected() -> None:
    """A container that contains itself cannot be serialized."""
    array = JsonArray()
    array.push_back(JsonObject({"back": array}))
    with pytest.raises(CyclicValueError):
        serialize(array)


def test_excessively_deep_tree_raises_serialization_error() -> None:
    """Trees deeper than the interpreter stack fail with ``SerializationError``."""
    root = JsonArray()
    current = root
    for _ in range(50_000):
        child = JsonArray()
        current.push_back(child)
        current = child
    with pytest.raises(SerializationError):
        serialize(root)


def test_serializer_instances_are_reusable() -> None:
    """One serializer renders many values with the same options."""
    serializer = Serializer(SerializeOptions(pretty=True, indent=1))
    assert serializer.serialize(JsonArray([JsonNull()])) == "[\n null\n]"
    assert serializer.serialize(JsonObject({"k": JsonNull()})) == '{\n "k" : null\n}'
    assert serializer_for().serialize(JsonArray([JsonNull()])) == "[null]"
