"""Tests for faqdesk init command."""

from __future__ import annotations

from pathlib import Path

import yaml
from typer.testing import CliRunner

from faqdesk.cli.main import app
from faqdesk.core.session import KEY_ITEMS, TAXONOMY_KEYS
from faqdesk.db.connection import Database
from faqdesk.db.repository import KeyValueRepository

runner = CliRunner()


def _run_init(project: Path, global_cfg: Path, input_str: str | None = None):
    return runner.invoke(
        app, ["init", str(project), "--global-config", str(global_cfg)], input=input_str
    )


def test_init_creates_db_config_and_global(tmp_path: Path) -> None:
    project = tmp_path / "kb"
    global_cfg = tmp_path / "home" / ".faqdesk" / "config.yaml"

    result = _run_init(project, global_cfg)

    assert result.exit_code == 0, result.output
    assert "Knowledge base initialized" in result.output
    assert (project / ".faqdesk.db").exists()
    assert global_cfg.exists()
    data = yaml.safe_load((project / "faqdesk.yaml").read_text(encoding="utf-8"))
    assert data["view"]["page_size"] == 12


def test_init_persists_seed_data(tmp_path: Path) -> None:
    project = tmp_path / "kb"
    _run_init(project, tmp_path / "g.yaml")

    with Database(project / ".faqdesk.db") as conn:
        keys = KeyValueRepository(conn).keys()
    assert KEY_ITEMS in keys
    assert set(TAXONOMY_KEYS.values()) <= set(keys)


def test_reinit_asks_and_can_cancel(tmp_path: Path) -> None:
    project = tmp_path / "kb"
    _run_init(project, tmp_path / "g.yaml")

    result = _run_init(project, tmp_path / "g.yaml", input_str="n\n")

    assert result.exit_code == 0
    assert "Cancelled" in result.output


def test_reinit_keeps_existing_records(tmp_path: Path) -> None:
    project = tmp_path / "kb"
    _run_init(project, tmp_path / "g.yaml")
    db = project / ".faqdesk.db"
    runner.invoke(app, ["remove", "1", "--yes", "--db", str(db)])

    result = _run_init(project, tmp_path / "g.yaml", input_str="y\n")

    assert result.exit_code == 0
    assert "(0 records)" in result.output
