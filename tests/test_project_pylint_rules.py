"""Tests for custom project pylint rules."""

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path


def _run_pylint_for_source(
    *,
    tmp_path: Path,
    source: str,
    enable: str,
) -> subprocess.CompletedProcess[str]:
    file_path = tmp_path / "lint_target.py"
    file_path.write_text(source, encoding="utf-8")
    env = dict(os.environ)
    env["PYTHONPATH"] = str(Path(__file__).resolve().parents[1] / "src")
    return subprocess.run(
        [
            sys.executable,
            "-m",
            "pylint",
            str(file_path),
            "-rn",
            "-sn",
            "--disable=all",
            f"--enable={enable}",
            "--load-plugins=project_pylint_rules",
        ],
        check=False,
        capture_output=True,
        text=True,
        env=env,
    )


def test_prefer_optional_rule_triggers_for_pipe_none(tmp_path: Path) -> None:
    """The custom rule should reject ``T | None`` syntax."""
    result = _run_pylint_for_source(
        tmp_path=tmp_path,
        source=("from __future__ import annotations\nvalue: str | None = None\n"),
        enable="prefer-optional",
    )
    combined_output = f"{result.stdout}\n{result.stderr}"
    assert result.returncode != 0, combined_output
    assert "prefer-optional" in combined_output, combined_output


def test_no_object_annotation_rule_triggers_for_parameters(tmp_path: Path) -> None:
    """The custom rule should reject ``object`` in parameter annotations."""
    result = _run_pylint_for_source(
        tmp_path=tmp_path,
        source=(
            "from __future__ import annotations\n"
            "def handle(payload: object) -> None:\n"
            "    del payload\n"
        ),
        enable="no-object-annotation",
    )
    combined_output = f"{result.stdout}\n{result.stderr}"
    assert result.returncode != 0, combined_output
    assert "no-object-annotation" in combined_output, combined_output


def test_no_stdlib_json_rule_triggers_for_import(tmp_path: Path) -> None:
    """``import json`` should be reported."""
    result = _run_pylint_for_source(
        tmp_path=tmp_path,
        source="import json\n\nprint(json.dumps([]))\n",
        enable="no-stdlib-json",
    )
    combined_output = f"{result.stdout}\n{result.stderr}"
    assert result.returncode != 0, combined_output
    assert "no-stdlib-json" in combined_output, combined_output


def test_no_stdlib_json_rule_triggers_for_from_import(tmp_path: Path) -> None:
    """``from json import ...`` should be reported."""
    result = _run_pylint_for_source(
        tmp_path=tmp_path,
        source="from json import loads\n\nprint(loads('[]'))\n",
        enable="no-stdlib-json",
    )
    combined_output = f"{result.stdout}\n{result.stderr}"
    assert result.returncode != 0, combined_output
    assert "no-stdlib-json" in combined_output, combined_output


def test_project_rules_accept_compliant_source(tmp_path: Path) -> None:
    """Optional annotations and codec imports should pass every custom rule."""
    result = _run_pylint_for_source(
        tmp_path=tmp_path,
        source=(
            "from __future__ import annotations\n"
            "from typing import Optional\n"
            "import json_value_codec\n"
            "value: Optional[str] = None\n"
            "print(json_value_codec.__name__, value)\n"
        ),
        enable="prefer-optional,no-object-annotation,no-stdlib-json",
    )
    combined_output = f"{result.stdout}\n{result.stderr}"
    assert result.returncode == 0, combined_output
