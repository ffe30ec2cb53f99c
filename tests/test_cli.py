"""Tests for the command line interface."""

from __future__ import annotations

import io
import sys
from pathlib import Path

import pytest

from json_value_codec.cli import main


def _write(tmp_path: Path, name: str, content: str) -> Path:
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    return path


def test_reformats_input_file_compactly(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Default output is the compact rendering followed by a newline."""
    source = _write(tmp_path, "doc.json", '{ "a" : [1,2] ,"b":null }')
    assert main(["--input", str(source)]) == 0
    assert capsys.readouterr().out == '{"a": [1, 2], "b": null}\n'


def test_pretty_output_with_custom_indent(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """``--pretty`` and ``--indent`` control the layout."""
    source = _write(tmp_path, "doc.json", "[1]")
    assert main(["--input", str(source), "--pretty", "--indent", "3"]) == 0
    assert capsys.readouterr().out == "[\n   1\n]\n"


def test_reads_standard_input(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """Without ``--input`` the document comes from standard input."""
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO('["é"]'.encode())))
    assert main([]) == 0
    assert capsys.readouterr().out == '["é"]\n'


def test_writes_output_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """``--output`` writes the result to a file instead of standard output."""
    source = _write(tmp_path, "doc.json", "true")
    target = tmp_path / "out.json"
    assert main(["--input", str(source), "--output", str(target)]) == 0
    assert target.read_text(encoding="utf-8") == "true\n"
    assert capsys.readouterr().out == ""


def test_invalid_document_reports_kind_and_position(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Parse failures exit with status 1 and describe the failure on stderr."""
    source = _write(tmp_path, "bad.json", "[1, 2,]")
    assert main(["--input", str(source)]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("JSON syntax error at byte 6: ")


def test_check_mode_prints_nothing(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """``--check`` validates without producing output."""
    good = _write(tmp_path, "good.json", "{}")
    bad = _write(tmp_path, "bad.json", "{")
    assert main(["--input", str(good), "--check"]) == 0
    assert capsys.readouterr().out == ""
    assert main(["--input", str(bad), "--check"]) == 1


def test_config_file_supplies_defaults_and_flags_override(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Options come from the YAML file; command line flags take precedence."""
    config = _write(tmp_path, "codec.yaml", "serialize:\n  pretty: true\n  indent: 1\n")
    source = _write(tmp_path, "doc.json", "[null]")

    assert main(["--input", str(source), "--config", str(config)]) == 0
    assert capsys.readouterr().out == "[\n null\n]\n"

    assert main(["--input", str(source), "--config", str(config), "--no-pretty"]) == 0
    assert capsys.readouterr().out == "[null]\n"


def test_config_depth_limit_applies(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """The parse section of the options file reaches the parser."""
    config = _write(tmp_path, "codec.yaml", "parse:\n  max_depth: 1\n")
    source = _write(tmp_path, "doc.json", "[[1]]")
    assert main(["--input", str(source), "--config", str(config)]) == 1
    assert "at byte 1" in capsys.readouterr().err


@pytest.mark.parametrize(
    "argv_tail",
    [
        ["--indent", "-2"],
        ["--config", "missing.yaml"],
        ["--input", "missing.json"],
    ],
    ids=["negative-indent", "missing-config", "missing-input"],
)
def test_usage_errors_exit_with_status_2(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, argv_tail: list[str]
) -> None:
    """Bad options and unreadable files are usage errors."""
    monkeypatch.chdir(tmp_path)
    _write(tmp_path, "doc.json", "[]")
    argv = ["--input", "doc.json", *argv_tail]
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    assert exc_info.value.code == 2
