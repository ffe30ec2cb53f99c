"""Parser and serializer settings, optionally loaded from a YAML file."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

DEFAULT_MAX_DEPTH = 256
DEFAULT_INDENT = 2


class OptionsLoadError(RuntimeError):
    """Raised when an options file cannot be loaded."""


class ParseOptions(BaseModel):
    """Settings for the parser."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=1)


class SerializeOptions(BaseModel):
    """Settings for the serializer; ``indent`` only matters when ``pretty`` is set."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    pretty: bool = False
    indent: int = Field(default=DEFAULT_INDENT, ge=0)


class CodecOptions(BaseModel):
    """Combined parser and serializer settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    parse: ParseOptions = Field(default_factory=ParseOptions)
    serialize: SerializeOptions = Field(default_factory=SerializeOptions)


def load_options(path: Path) -> CodecOptions:
    """Load and validate codec options from YAML.

    An empty file yields the defaults.

    Args:
        path (Path): Path to the YAML options file.

    Returns:
        CodecOptions: Validated options.
    """
    try:
        with path.open("r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle)
    except OSError as exc:
        raise OptionsLoadError(f"Failed to read options file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise OptionsLoadError(f"Failed to parse YAML in {path}: {exc}") from exc

    if payload is None:
        return CodecOptions()
    if not isinstance(payload, dict):
        raise OptionsLoadError(
            f"Options file must deserialize to a mapping, got {type(payload)!r}"
        )

    try:
        return CodecOptions.model_validate(payload)
    except ValidationError as exc:
        raise OptionsLoadError(f"Invalid options in {path}: {exc}") from exc
