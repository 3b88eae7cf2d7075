"""Id-generation strategies for new records.

LocalIdStrategy is deterministic given the clock and never fails; it is the
fallback for network-backed strategies (faqdesk.services.smart_ids) and the
only one used by quick-add.
"""

from __future__ import annotations

import re
import time
from typing import Callable, Protocol

Clock = Callable[[], int]

SLUG_RE = re.compile(r"[^a-z0-9-]")


def now_ms() -> int:
    """Current wall-clock time in milliseconds since epoch."""
    return int(time.time() * 1000)


def slugify(text: str) -> str:
    return SLUG_RE.sub("", text.strip().lower().replace(" ", "-"))


class IdStrategy(Protocol):
    def generate(self, reference_number: str, title: str) -> str: ...


class LocalIdStrategy:
    """``pf-<reference>-<last 4 digits of the ms timestamp>``."""

    def __init__(self, clock: Clock = now_ms) -> None:
        self._clock = clock

    def generate(self, reference_number: str, title: str) -> str:
        ref = slugify(reference_number) or "x"
        return f"pf-{ref}-{str(self._clock())[-4:]}"
