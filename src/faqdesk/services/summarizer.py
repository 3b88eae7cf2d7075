"""Record summarizer — technical summaries of a PF's raw content via LiteLLM.

Unlike a silent best-effort call, every failure (missing key, API error,
empty answer) surfaces as ExternalServiceError so the caller can leave the
record's summary untouched and report a readable message.
"""

from __future__ import annotations

from typing import Callable

import structlog

from faqdesk.core.errors import ExternalServiceError, ValidationError
from faqdesk.services import llm_client

logger = structlog.get_logger(__name__)

_SUMMARY_PROMPT = """\
Você é um assistente técnico especialista em sistemas da Secullum.
Analise o seguinte conteúdo de uma Pergunta Frequente (PF).

Informações:
- Sistema: {system}
- Número da PF: {reference_number}
- Pergunta/Título: {title}

Conteúdo Bruto:
{raw_content}

Tarefa:
Crie um resumo conciso e técnico (máximo 3 parágrafos).
Foque na causa do problema e na solução apresentada.
SEMPRE liste "Pré-requisitos" ou "Condições" se o texto mencionar.
Se o conteúdo estiver vazio ou irrelevante, avise."""

_DEFAULT_MAX_TOKENS = 600
_MAX_CONTENT_CHARS = 12_000


class FaqSummarizer:
    """Generate a summary for one record's raw content.

    Args:
        model:      LiteLLM model string for summary generation.
        max_tokens: Maximum tokens in the generated summary.
        ask:        Override for llm_client.ask (tests).
    """

    def __init__(
        self,
        model: str = llm_client.DEFAULT_MODEL,
        max_tokens: int = _DEFAULT_MAX_TOKENS,
        ask: Callable[..., str] | None = None,
    ) -> None:
        self._model = model
        self._max_tokens = max_tokens
        self._ask = ask or llm_client.ask

    @property
    def model(self) -> str:
        return self._model

    def summarize(
        self, reference_number: str, title: str, raw_content: str, system: str
    ) -> str:
        """Return the generated summary.

        Raises:
            ValidationError: *raw_content* is empty (nothing to summarize).
            ExternalServiceError: the model call failed or returned nothing.
        """
        if not raw_content.strip():
            raise ValidationError(
                "Raw content is empty. Add the PF content before summarizing.",
                field="raw_content",
            )
        prompt = _SUMMARY_PROMPT.format(
            system=system,
            reference_number=reference_number,
            title=title,
            raw_content=raw_content[:_MAX_CONTENT_CHARS],
        )
        try:
            summary = self._ask(self._model, prompt, max_tokens=self._max_tokens)
        except Exception as exc:
            logger.warning("summarize_failed", model=self._model, error=str(exc))
            raise ExternalServiceError(
                f"Summarization failed ({self._model}): {exc}"
            ) from exc
        if not summary:
            raise ExternalServiceError(f"Summarization returned no text ({self._model}).")
        return summary
