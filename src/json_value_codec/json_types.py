"""Native Python shapes of JSON data, as accepted and produced by ``convert``."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TypeAlias, Union

JSONPrimitive: TypeAlias = Union[str, int, float, bool, None]
JSONValue: TypeAlias = Union[JSONPrimitive, Sequence["JSONValue"], Mapping[str, "JSONValue"]]
PlainJSONValue: TypeAlias = Union[str, float, bool, None, list["PlainJSONValue"], dict[str, "PlainJSONValue"]]
