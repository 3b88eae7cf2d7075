"""Tests for faqdesk remove command."""

from __future__ import annotations

from typer.testing import CliRunner

from faqdesk.cli.main import app

runner = CliRunner()


def test_remove_with_yes(kb_path, load_kb) -> None:
    result = runner.invoke(app, ["remove", "1", "--yes"])

    assert result.exit_code == 0, result.output
    assert "Removed 1 record(s)" in result.output
    assert len(load_kb().store) == 0


def test_remove_is_idempotent(kb_path, load_kb) -> None:
    runner.invoke(app, ["remove", "1", "-y"])

    result = runner.invoke(app, ["remove", "1", "-y"])

    assert result.exit_code == 0
    assert "not found, nothing to remove" in result.output
    assert len(load_kb().store) == 0


def test_remove_cancelled(kb_path, load_kb) -> None:
    result = runner.invoke(app, ["remove", "1"], input="n\n")

    assert result.exit_code == 0
    assert "Cancelled" in result.output
    assert "1" in load_kb().store


def test_remove_confirmed(kb_path, load_kb) -> None:
    result = runner.invoke(app, ["remove", "1", "ghost"], input="y\n")

    assert result.exit_code == 0, result.output
    assert "ghost: not found" in result.output
    assert len(load_kb().store) == 0


def test_remove_without_db(tmp_path) -> None:
    result = runner.invoke(app, ["remove", "1", "--yes"])
    assert result.exit_code == 1
    assert "faqdesk init" in result.output
