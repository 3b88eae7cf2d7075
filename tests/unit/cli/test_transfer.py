"""Tests for faqdesk export / import commands."""

from __future__ import annotations

import json

from typer.testing import CliRunner

from faqdesk.cli.main import app
from faqdesk.core.models import FaqRecord
from faqdesk.export.interchange import dumps_records, loads_records

runner = CliRunner()


# ---------------------------------------------------------------------------
# export
# ---------------------------------------------------------------------------


def test_export_json_to_file(kb_path, load_kb, tmp_path) -> None:
    out = tmp_path / "backup.json"

    result = runner.invoke(app, ["export", "--format", "json", "--output", str(out)])

    assert result.exit_code == 0, result.output
    assert "Exported 1 record(s)" in result.output
    assert loads_records(out.read_text(encoding="utf-8")) == load_kb().store.list()


def test_export_json_to_stdout(kb_path) -> None:
    result = runner.invoke(app, ["export"])

    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data[0]["referenceNumber"] == "685"


def test_export_csv_to_stdout(kb_path) -> None:
    result = runner.invoke(app, ["export", "-f", "csv"])

    assert result.exit_code == 0, result.output
    assert "ID Interno" in result.output
    assert "Erro ao comunicar com equipamento Henry" in result.output


def test_export_csv_to_file_with_filter(kb_path, tmp_path) -> None:
    out = tmp_path / "report.csv"

    result = runner.invoke(
        app, ["export", "-f", "csv", "-o", str(out), "--system", "Diversos"]
    )

    assert result.exit_code == 0, result.output
    assert "Exported 0 record(s)" in result.output
    lines = out.read_text(encoding="utf-8-sig").splitlines()
    assert len(lines) == 1


def test_export_filtered_json_is_empty_list(kb_path) -> None:
    result = runner.invoke(app, ["export", "--search", "nada disso"])
    assert json.loads(result.output) == []


# ---------------------------------------------------------------------------
# import
# ---------------------------------------------------------------------------


def _backup(tmp_path, records) -> str:
    path = tmp_path / "in.json"
    path.write_text(dumps_records(records), encoding="utf-8")
    return str(path)


def test_import_replaces_everything(kb_path, load_kb, tmp_path) -> None:
    incoming = [
        FaqRecord(id="a", reference_number="1", title="A", created_at=5),
        FaqRecord(id="b", reference_number="2", title="B", created_at=6),
    ]
    path = _backup(tmp_path, incoming)

    result = runner.invoke(app, ["import", path, "--yes"])

    assert result.exit_code == 0, result.output
    assert "Imported 2 record(s)" in result.output
    assert load_kb().store.list() == incoming


def test_export_then_import_round_trip(kb_path, load_kb, tmp_path) -> None:
    runner.invoke(app, ["edit", "1", "--needs-review"])
    out = tmp_path / "backup.json"
    runner.invoke(app, ["export", "-o", str(out)])
    before = load_kb().store.list()
    runner.invoke(app, ["remove", "1", "--yes"])

    result = runner.invoke(app, ["import", str(out), "--yes"])

    assert result.exit_code == 0, result.output
    assert load_kb().store.list() == before


def test_import_cancelled(kb_path, load_kb, tmp_path) -> None:
    path = _backup(tmp_path, [])

    result = runner.invoke(app, ["import", path], input="n\n")

    assert result.exit_code == 0
    assert "Cancelled" in result.output
    assert len(load_kb().store) == 1


def test_import_invalid_json_leaves_store(kb_path, load_kb, tmp_path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{oops", encoding="utf-8")

    result = runner.invoke(app, ["import", str(path), "--yes"])

    assert result.exit_code == 1
    assert "left unchanged" in result.output
    assert [r.id for r in load_kb().store.list()] == ["1"]


def test_import_duplicate_ids_rejected(kb_path, load_kb, tmp_path) -> None:
    path = tmp_path / "dupes.json"
    path.write_text(
        json.dumps(
            [
                {"id": "x", "referenceNumber": "1", "title": "A"},
                {"id": "x", "referenceNumber": "2", "title": "B"},
            ]
        ),
        encoding="utf-8",
    )

    result = runner.invoke(app, ["import", str(path), "--yes"])

    assert result.exit_code == 1
    assert [r.id for r in load_kb().store.list()] == ["1"]


def test_import_missing_file(kb_path, tmp_path) -> None:
    result = runner.invoke(app, ["import", str(tmp_path / "nope.json")])
    assert result.exit_code == 2
