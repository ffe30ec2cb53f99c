"""Command line interface for parsing and re-serializing JSON documents."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from .errors import error_text
from .options import CodecOptions, OptionsLoadError, SerializeOptions, load_options
from .parser import parse
from .serializer import serializer_for


class CLIError(RuntimeError):
    """Raised when CLI execution fails."""


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI parser."""
    parser = argparse.ArgumentParser(
        prog="json-value-codec",
        description="Validate a JSON document and print it compact or pretty-printed",
    )
    parser.add_argument("--input", help="Path to a JSON file (default: standard input)")
    parser.add_argument("--output", help="Path to write the result (default: standard output)")
    parser.add_argument("--config", help="Path to a YAML options file")
    parser.add_argument(
        "--pretty",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Pretty-print the output (overrides the options file)",
    )
    parser.add_argument("--indent", type=int, help="Spaces per level when pretty-printing")
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only validate the document, print nothing on success",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Run CLI and return process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        options = _resolve_options(
            config=args.config,
            pretty=args.pretty,
            indent=args.indent,
        )
        source = _read_input(args.input)
    except (OptionsLoadError, CLIError) as exc:
        parser.error(str(exc))
        return 2

    result = parse(source, options=options.parse)
    if result.failure is not None:
        failure = result.failure
        print(
            f"{error_text(failure.kind)} at byte {failure.position}: {failure.message}",
            file=sys.stderr,
        )
        return 1
    if args.check:
        return 0

    text = serializer_for(options.serialize).serialize(result.unwrap())
    try:
        _write_output(args.output, text + "\n")
    except CLIError as exc:
        parser.error(str(exc))
        return 2
    return 0


def _resolve_options(
    *,
    config: Optional[str],
    pretty: Optional[bool],
    indent: Optional[int],
) -> CodecOptions:
    options = load_options(Path(config)) if config else CodecOptions()
    overrides: dict[str, Union[bool, int]] = {}
    if pretty is not None:
        overrides["pretty"] = pretty
    if indent is not None:
        overrides["indent"] = indent
    if not overrides:
        return options
    merged = options.serialize.model_dump() | overrides
    try:
        serialize_options = SerializeOptions.model_validate(merged)
    except ValidationError as exc:
        raise CLIError(f"Invalid serialization options: {exc}") from exc
    return options.model_copy(update={"serialize": serialize_options})


def _read_input(path: Optional[str]) -> bytes:
    if path is None:
        return sys.stdin.buffer.read()
    try:
        return Path(path).read_bytes()
    except OSError as exc:
        raise CLIError(f"Failed to read input file {path}: {exc}") from exc


def _write_output(path: Optional[str], text: str) -> None:
    if path is None:
        sys.stdout.write(text)
        return
    try:
        Path(path).write_text(text, encoding="utf-8")
    except OSError as exc:
        raise CLIError(f"Failed to write output file {path}: {exc}") from exc


if __name__ == "__main__":
    raise SystemExit(main())
