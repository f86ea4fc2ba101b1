"""Tests for the build/status/clean commands and the CLI wiring."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from assetpipe.cli import cli
from assetpipe.commands.build_cmd import run_build, run_clean, run_status

MANIFEST = """
[[group]]
name = "app"
sources = ["src/*.css"]

[[group]]
name = "lib"
sources = ["src/*.js"]
compress = false
"""


@pytest.fixture
def project(tmp_path: Path) -> Path:
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "a.css").write_text("a { color: red; }", encoding="utf-8")
    (tmp_path / "src" / "b.js").write_text("b();", encoding="utf-8")
    (tmp_path / "assets.toml").write_text(MANIFEST, encoding="utf-8")
    return tmp_path


def test_run_build_json(project: Path, toolchain, capsys) -> None:
    exit_code = run_build(project / "assets.toml", output_json=True, toolchain=toolchain)

    assert exit_code == 0
    rows = json.loads(capsys.readouterr().out)
    assert [r["group"] for r in rows] == ["app", "lib"]
    assert [r["status"] for r in rows] == ["written", "written"]
    assert (project / "static" / rows[0]["file"]).read_bytes() == b"a{color:red}"
    assert (project / "static" / rows[1]["file"]).read_bytes() == b"b();"

    run_build(project / "assets.toml", output_json=True, toolchain=toolchain)
    again = json.loads(capsys.readouterr().out)
    assert [r["status"] for r in again] == ["unchanged", "unchanged"]
    assert [r["file"] for r in again] == [r["file"] for r in rows]


def test_run_build_selected_group_table(project: Path, toolchain, capsys) -> None:
    assert run_build(project / "assets.toml", ("lib",), toolchain=toolchain) == 0
    out = capsys.readouterr().out
    assert "lib" in out
    assert not list((project / "static").glob("app-*"))


def test_run_build_reports_failures(project: Path, toolchain, capsys) -> None:
    (project / "src" / "c.js").write_text("c();", encoding="utf-8")
    (project / "assets.toml").write_text(
        MANIFEST + '\n[[group]]\nname = "mixed"\nsources = ["src/a.css", "src/c.js"]\n', encoding="utf-8"
    )

    exit_code = run_build(project / "assets.toml", output_json=True, toolchain=toolchain)

    assert exit_code == 1
    captured = capsys.readouterr()
    rows = json.loads(captured.out)
    assert rows[2]["status"] == "error"
    assert "mix" in rows[2]["error"]
    assert "mixed" in captured.err
    # other groups still built
    assert rows[0]["status"] == "written"


def test_run_build_unknown_group(project: Path, toolchain, capsys) -> None:
    assert run_build(project / "assets.toml", ("nope",), toolchain=toolchain) == 1
    assert "unknown group" in capsys.readouterr().err


def test_run_status(project: Path, toolchain, capsys) -> None:
    manifest = project / "assets.toml"
    assert run_status(manifest, output_json=True) == 1
    assert [r["status"] for r in json.loads(capsys.readouterr().out)] == ["new", "new"]

    run_build(manifest, output_json=True, toolchain=toolchain)
    capsys.readouterr()
    assert run_status(manifest, output_json=True) == 0
    rows = json.loads(capsys.readouterr().out)
    assert [r["status"] for r in rows] == ["up-to-date", "up-to-date"]
    assert [r["kind"] for r in rows] == ["css", "js"]

    (project / "src" / "b.js").write_text("b(1);", encoding="utf-8")
    assert run_status(manifest, ("lib",), output_json=True) == 1
    assert json.loads(capsys.readouterr().out)[0]["status"] == "stale"


def test_run_clean(project: Path, toolchain, capsys) -> None:
    manifest = project / "assets.toml"
    run_build(manifest, output_json=True, toolchain=toolchain)
    capsys.readouterr()

    assert run_clean(manifest) == 0
    assert list((project / "static").iterdir()) == []
    assert "removed" in capsys.readouterr().out


def test_cli_status_and_missing_manifest(project: Path, tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["--manifest", str(project / "assets.toml"), "status", "--json"])
    assert result.exit_code == 1
    assert json.loads(result.output)[0]["status"] == "new"

    result = runner.invoke(cli, ["--manifest", str(tmp_path / "missing.toml"), "status"])
    assert result.exit_code != 0
    assert "does not exist" in result.output


def test_cli_version() -> None:
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "assetpipe" in result.output
