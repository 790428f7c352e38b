from __future__ import annotations

import importlib
from pathlib import Path

import pytest


def test_console_entrypoint_exposes_app() -> None:
    pytest.importorskip("typer")

    module = importlib.import_module("image_orchestrator.main")

    assert hasattr(module, "app")
    assert module.app is not None


def test_load_command_reports_failures_with_exit_code(tmp_path: Path) -> None:
    typer_testing = pytest.importorskip("typer.testing")
    from image_orchestrator.main import app

    (tmp_path / "ok.raw").write_bytes(b"abcd")

    result = typer_testing.CliRunner().invoke(
        app,
        ["load", "file:ok.raw", "nope:x", "--root", str(tmp_path)],
        catch_exceptions=False,
    )

    assert result.exit_code == 1
    assert "succeeded" in result.stdout
    assert "no_loader" in result.stdout
    assert "IMAGE_LOADED" in result.stdout


def test_load_command_succeeds_when_all_ids_load(tmp_path: Path) -> None:
    typer_testing = pytest.importorskip("typer.testing")
    from image_orchestrator.main import app

    (tmp_path / "ok.raw").write_bytes(b"abcd")

    result = typer_testing.CliRunner().invoke(app, ["load", f"file:{tmp_path / 'ok.raw'}", "--no-cache"])

    assert result.exit_code == 0
