"""Tests for the LiteLLM client wrapper."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from faqdesk.services.llm_client import api_key_env, ask, provider_of, validate_api_key


def _response(content: str | None) -> MagicMock:
    mock = MagicMock()
    mock.choices[0].message.content = content
    return mock


# ------------------------------------------------------------------
# Provider / key lookup
# ------------------------------------------------------------------


def test_provider_of():
    assert provider_of("gemini/gemini-2.0-flash") == "gemini"
    assert provider_of("Anthropic/claude") == "anthropic"
    assert provider_of("gpt-4o") == "openai"


@pytest.mark.parametrize(
    "model,env_var",
    [
        ("gemini/gemini-2.0-flash", "GEMINI_API_KEY"),
        ("gpt-4o", "OPENAI_API_KEY"),
        ("together/some-model", "TOGETHER_API_KEY"),
        ("ollama/llama3", None),
    ],
)
def test_api_key_env(model, env_var):
    assert api_key_env(model) == env_var


def test_validate_api_key_raises_if_missing():
    with pytest.raises(EnvironmentError, match="GEMINI_API_KEY"):
        validate_api_key("gemini/gemini-2.0-flash")


def test_validate_api_key_rejects_empty_value(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "")
    with pytest.raises(EnvironmentError, match="OPENAI_API_KEY"):
        validate_api_key("openai/gpt-4o-mini")


def test_validate_api_key_passes_if_set(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "AIza-test-key")
    validate_api_key("gemini/gemini-2.0-flash")  # should not raise


def test_validate_api_key_ollama_no_key_required():
    validate_api_key("ollama/llama3")


# ------------------------------------------------------------------
# ask()
# ------------------------------------------------------------------


def test_ask_returns_stripped_content():
    with patch(
        "faqdesk.services.llm_client.litellm.completion", return_value=_response("  Resumo\n")
    ):
        assert ask("gemini/gemini-2.0-flash", "Hi") == "Resumo"


def test_ask_returns_empty_string_on_none_content():
    with patch("faqdesk.services.llm_client.litellm.completion", return_value=_response(None)):
        assert ask("gemini/gemini-2.0-flash", "Hi") == ""


def test_ask_sends_single_user_message():
    with patch(
        "faqdesk.services.llm_client.litellm.completion", return_value=_response("ok")
    ) as mock_call:
        ask("openai/gpt-4o", "Pergunta", max_tokens=50)

    kwargs = mock_call.call_args.kwargs
    assert kwargs["model"] == "openai/gpt-4o"
    assert kwargs["messages"] == [{"role": "user", "content": "Pergunta"}]
    assert kwargs["max_tokens"] == 50
    assert kwargs["temperature"] == 0.0
    assert kwargs["num_retries"] == 2


def test_ask_propagates_errors():
    with patch(
        "faqdesk.services.llm_client.litellm.completion", side_effect=RuntimeError("boom")
    ):
        with pytest.raises(RuntimeError):
            ask("gemini/gemini-2.0-flash", "Hi")
