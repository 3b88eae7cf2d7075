"""Tests for faqdesk add command."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

from typer.testing import CliRunner

from faqdesk.cli.main import app
from faqdesk.core.models import UrlMetadata

runner = CliRunner()


def _flat(text: str) -> str:
    """Collapse rich line wrapping so messages can be matched whole."""
    return " ".join(text.split())


def _completion(*texts: str):
    responses = []
    for text in texts:
        mock = MagicMock()
        mock.choices[0].message.content = text
        responses.append(mock)
    return patch("faqdesk.services.llm_client.litellm.completion", side_effect=responses)


def _newest(load_kb):
    return load_kb().store.list()[0]


def test_quick_add_uses_local_id(kb_path, load_kb) -> None:
    result = runner.invoke(
        app, ["add", "--ref", "700", "--title", "Cabo rompido", "--system", "Diversos", "--quick"]
    )

    assert result.exit_code == 0, result.output
    record = _newest(load_kb)
    assert record.id.startswith("pf-700-")
    assert record.system == "Diversos"
    assert record.history[0].action == "record created"
    assert record.id in result.output


def test_add_without_api_key_falls_back_to_local_id(kb_path, load_kb) -> None:
    result = runner.invoke(app, ["add", "-r", "701", "-t", "Sem chave"])

    assert result.exit_code == 0, result.output
    assert "local id" in result.output
    assert _newest(load_kb).id.startswith("pf-701-")


def test_add_with_smart_id(kb_path, load_kb, monkeypatch) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    with _completion("cabo-rompido-henry"):
        result = runner.invoke(app, ["add", "-r", "702", "-t", "Cabo rompido", "--favorite"])

    assert result.exit_code == 0, result.output
    record = _newest(load_kb)
    assert record.id == "cabo-rompido-henry"
    assert record.is_favorite is True


def test_add_requires_title(kb_path, load_kb) -> None:
    result = runner.invoke(app, ["add", "--ref", "703", "--quick"])

    assert result.exit_code == 1
    assert "Title is required" in result.output
    assert "Nothing was changed" in result.output
    assert len(load_kb().store) == 1


def test_add_rejects_unknown_taxonomy_value(kb_path, load_kb) -> None:
    result = runner.invoke(
        app, ["add", "-r", "704", "-t", "x", "--type", "Inexistente", "--quick"]
    )

    assert result.exit_code == 1
    assert "taxonomy add types" in _flat(result.output)
    assert len(load_kb().store) == 1


def test_add_from_url_fills_missing_fields(kb_path, load_kb) -> None:
    meta = UrlMetadata(title="Erro ao instalar", reference_number="705", text="Passo a passo")
    with patch("faqdesk.cli.add.fetch_metadata", return_value=meta) as fetch:
        result = runner.invoke(
            app, ["add", "--url", "https://example.com/pf?id=705", "--from-url", "--quick"]
        )

    assert result.exit_code == 0, result.output
    fetch.assert_called_once_with("https://example.com/pf?id=705")
    record = _newest(load_kb)
    assert (record.reference_number, record.title, record.raw_content) == (
        "705",
        "Erro ao instalar",
        "Passo a passo",
    )
    assert record.url == "https://example.com/pf?id=705"


def test_from_url_requires_url(kb_path) -> None:
    result = runner.invoke(app, ["add", "--from-url"])
    assert result.exit_code == 1
    assert "--url" in result.output


def test_add_content_file(kb_path, load_kb, tmp_path) -> None:
    source = tmp_path / "pf.txt"
    source.write_text("Conteúdo do arquivo", encoding="utf-8")

    result = runner.invoke(
        app, ["add", "-r", "706", "-t", "Arquivo", "--content-file", str(source), "--quick"]
    )

    assert result.exit_code == 0, result.output
    assert _newest(load_kb).raw_content == "Conteúdo do arquivo"


def test_add_content_file_not_utf8(kb_path, load_kb, tmp_path) -> None:
    source = tmp_path / "pf.bin"
    source.write_bytes(b"\xff\xfe\x00bad")

    result = runner.invoke(
        app, ["add", "-r", "706", "-t", "Arquivo", "--content-file", str(source), "--quick"]
    )

    assert result.exit_code == 1
    assert "as UTF-8 text" in _flat(result.output)
    assert "Nothing was changed" in result.output
    assert len(load_kb().store) == 1


def test_add_and_summarize(kb_path, load_kb, monkeypatch) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    with _completion("Resumo gerado"):
        result = runner.invoke(
            app,
            ["add", "-r", "707", "-t", "Resumir", "--content", "texto", "--quick", "--summarize"],
        )

    assert result.exit_code == 0, result.output
    record = _newest(load_kb)
    assert record.summary == "Resumo gerado"
    assert record.history[0].action == "summary edited"


def test_failed_summary_keeps_created_record(kb_path, load_kb) -> None:
    with patch(
        "faqdesk.services.llm_client.litellm.completion", side_effect=RuntimeError("quota")
    ):
        result = runner.invoke(
            app,
            ["add", "-r", "708", "-t", "Falha", "--content", "texto", "--quick", "--summarize"],
        )

    assert result.exit_code == 0, result.output
    assert "left unchanged" in result.output
    record = _newest(load_kb)
    assert record.reference_number == "708"
    assert record.summary == ""


def test_add_without_db(tmp_path) -> None:
    result = runner.invoke(app, ["add", "-r", "1", "-t", "x", "--quick"])
    assert result.exit_code == 1
    assert "faqdesk init" in result.output
