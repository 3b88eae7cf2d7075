"""Network-backed smart ids: a short kebab-case slug suggested by the model.

Best-effort only. Any failure or empty answer falls back to the local
strategy, so create() never fails because of the id service.
"""

from __future__ import annotations

import re
from typing import Callable

import structlog

from faqdesk.core.ids import SLUG_RE, IdStrategy, LocalIdStrategy
from faqdesk.services import llm_client

logger = structlog.get_logger(__name__)

_SMART_ID_PROMPT = (
    'Create a short kebab-case ID for "PF {reference_number} {title}". '
    "Max 4 words. Output ONLY the ID."
)


class LlmIdStrategy:
    """Ask *model* for an id; fall back to *fallback* on any failure.

    Args:
        model:     LiteLLM model string.
        fallback:  Strategy used when the model call fails or returns nothing.
        ask:       Override for llm_client.ask (tests).
    """

    def __init__(
        self,
        model: str,
        fallback: IdStrategy | None = None,
        ask: Callable[..., str] | None = None,
    ) -> None:
        self._model = model
        self._fallback = fallback or LocalIdStrategy()
        self._ask = ask or llm_client.ask

    def generate(self, reference_number: str, title: str) -> str:
        clean_title = re.sub(r"[^a-zA-Z0-9 ]", "", title).lower()
        prompt = _SMART_ID_PROMPT.format(
            reference_number=reference_number, title=clean_title
        )
        try:
            answer = self._ask(self._model, prompt, max_tokens=32)
        except Exception as exc:
            logger.warning("smart_id_failed", model=self._model, error=str(exc))
            return self._fallback.generate(reference_number, title)

        slug = SLUG_RE.sub("", answer.lower()).strip("-")
        if not slug:
            logger.warning("smart_id_empty", model=self._model)
            return self._fallback.generate(reference_number, title)
        return slug
