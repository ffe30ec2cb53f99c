"""Round-trip properties of parse and serialize."""

from __future__ import annotations

import pytest

from json_value_codec.parser import parse
from json_value_codec.serializer import serialize

_DOCUMENTS = [
    "null",
    "[]",
    "{}",
    '"plain"',
    '"esc \\" \\\\ \\n \\u0001 é 😀"',
    "[1, -2.5, 1e-07, 100000000000000000000, true, false, null]",
    '{"name": "John", "age": 30, "tags": ["x", "y"], "nested": {"deep": [[], {}, [1]]}}',
    '[{"a": {"b": {"c": [0.1, 0.2, 0.30000000000000004]}}}]',
]


@pytest.mark.parametrize("document", _DOCUMENTS)
@pytest.mark.parametrize("pretty", [False, True], ids=["compact", "pretty"])
def test_serialized_output_parses_back_to_an_equal_tree(document: str, pretty: bool) -> None:
    """``parse(serialize(v))`` is structurally equal to ``v``."""
    value = parse(document).unwrap()
    text = serialize(value, pretty=pretty)
    reparsed = parse(text).unwrap()
    assert reparsed.equals(value), text


@pytest.mark.parametrize("document", _DOCUMENTS)
@pytest.mark.parametrize("pretty", [False, True], ids=["compact", "pretty"])
def test_serialization_is_idempotent(document: str, pretty: bool) -> None:
    """Serializing a reparsed document reproduces the same text."""
    first = serialize(parse(document).unwrap(), pretty=pretty)
    second = serialize(parse(first).unwrap(), pretty=pretty)
    assert first == second


def test_compact_output_of_canonical_documents_is_unchanged() -> None:
    """Documents already in compact form serialize to themselves."""
    for document in _DOCUMENTS:
        if "\\u0001" in document:
            continue
        assert serialize(parse(document).unwrap()) == document
