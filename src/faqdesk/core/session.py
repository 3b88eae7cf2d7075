"""KnowledgeBase: the per-session service object wiring store, taxonomy and persistence.

Construct once per process with a key-value backend. Records and taxonomy are
loaded from fixed keys; a missing or unreadable blob falls back to the built-in
seed data. After every successful in-memory mutation the affected blob is
written back. A failed write is logged and kept in ``last_error``; in-memory
state stays authoritative for the rest of the session and nothing is retried.
"""

from __future__ import annotations

import json
from typing import Protocol

import structlog

from faqdesk.core.errors import ExternalServiceError, PersistenceError, ValidationError
from faqdesk.core.ids import Clock, IdStrategy, now_ms
from faqdesk.core.models import FaqRecord
from faqdesk.core.seed import DEFAULT_CATEGORIES, DEFAULT_SYSTEMS, DEFAULT_TYPES, seed_records
from faqdesk.core.store import REPLACED, RecordStore, check_ids
from faqdesk.core.taxonomy import CATEGORIES, LIST_NAMES, SYSTEMS, TYPES, TaxonomyRegistry
from faqdesk.export.interchange import dumps_records, loads_records

logger = structlog.get_logger(__name__)

KEY_ITEMS = "faq-items"
KEY_THEME = "theme"
TAXONOMY_KEYS: dict[str, str] = {
    SYSTEMS: "taxonomy-systems",
    CATEGORIES: "taxonomy-categories",
    TYPES: "taxonomy-types",
}
_TAXONOMY_DEFAULTS: dict[str, tuple[str, ...]] = {
    SYSTEMS: DEFAULT_SYSTEMS,
    CATEGORIES: DEFAULT_CATEGORIES,
    TYPES: DEFAULT_TYPES,
}
THEMES = ("light", "dark")


class KeyValueBackend(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, blob: str) -> bool: ...


class KnowledgeBase:
    """Store + taxonomy + theme, persisted through *backend*.

    Args:
        backend:     Key-value persistence (e.g. faqdesk.db.KeyValueRepository).
        id_strategy: Strategy for new record ids (local strategy when None).
        clock:       Millisecond clock.
    """

    def __init__(
        self,
        backend: KeyValueBackend,
        *,
        id_strategy: IdStrategy | None = None,
        clock: Clock = now_ms,
    ) -> None:
        self._backend = backend
        self._clock = clock
        self.last_error: PersistenceError | None = None
        self.seeded: set[str] = set()

        theme = backend.get(KEY_THEME)
        self._theme = theme if theme in THEMES else "light"

        self.taxonomy = TaxonomyRegistry(
            *(self._load_taxonomy_list(name) for name in LIST_NAMES)
        )
        self.store = RecordStore(
            self._load_records(),
            id_strategy=id_strategy,
            clock=clock,
            taxonomy=self.taxonomy,
        )
        self.store.subscribe(self._on_records_changed)
        self.taxonomy.subscribe(self._on_taxonomy_changed)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _load_records(self) -> list[FaqRecord]:
        blob = self._backend.get(KEY_ITEMS)
        if blob is None:
            self.seeded.add(KEY_ITEMS)
            return seed_records(self._clock())
        try:
            records = loads_records(blob)
            check_ids(records)
        except ValidationError as exc:
            logger.warning("stored_records_unreadable", key=KEY_ITEMS, error=str(exc))
            self.seeded.add(KEY_ITEMS)
            return seed_records(self._clock())
        return records

    def _load_taxonomy_list(self, list_name: str) -> tuple[str, ...]:
        key = TAXONOMY_KEYS[list_name]
        blob = self._backend.get(key)
        if blob is not None:
            try:
                values = json.loads(blob)
            except json.JSONDecodeError:
                values = None
            if isinstance(values, list) and all(isinstance(v, str) for v in values):
                return tuple(values)
            logger.warning("stored_taxonomy_unreadable", key=key)
        self.seeded.add(key)
        return _TAXONOMY_DEFAULTS[list_name]

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _write(self, key: str, blob: str) -> bool:
        try:
            ok = self._backend.set(key, blob)
        except Exception as exc:
            ok = False
            logger.error("persist_raised", key=key, error=str(exc))
        if not ok:
            self.last_error = PersistenceError(
                f"Could not save '{key}'; changes are kept in memory for this session only."
            )
            logger.error("persist_failed", key=key, error=str(self.last_error))
            return False
        self.seeded.discard(key)
        return True

    def _on_records_changed(self, event: str) -> None:
        if event == REPLACED:
            logger.info("records_replaced", count=len(self.store))
        self._write(KEY_ITEMS, dumps_records(self.store.list()))

    def _on_taxonomy_changed(self, list_name: str) -> None:
        self._write(
            TAXONOMY_KEYS[list_name],
            json.dumps(self.taxonomy.values(list_name), ensure_ascii=False),
        )

    def save_all(self) -> bool:
        """Write every blob (used by ``faqdesk init`` to persist seed data)."""
        ok = self._write(KEY_ITEMS, dumps_records(self.store.list()))
        for list_name in LIST_NAMES:
            ok = (
                self._write(
                    TAXONOMY_KEYS[list_name],
                    json.dumps(self.taxonomy.values(list_name), ensure_ascii=False),
                )
                and ok
            )
        return ok

    # ------------------------------------------------------------------
    # Theme preference
    # ------------------------------------------------------------------

    @property
    def theme(self) -> str:
        return self._theme

    def set_theme(self, theme: str) -> None:
        theme = theme.strip().lower()
        if theme not in THEMES:
            raise ValidationError(
                f"Unknown theme '{theme}'. Use one of: {', '.join(THEMES)}.", field="theme"
            )
        self._theme = theme
        self._write(KEY_THEME, theme)

    # ------------------------------------------------------------------
    # Summarization flow
    # ------------------------------------------------------------------

    def summarize(self, record_id: str, summarizer) -> FaqRecord:
        """Generate and store a summary for *record_id*.

        On failure the record is left unchanged and the error propagates.

        Raises:
            NotFoundError: *record_id* is not in the store.
            ValidationError: the record has no raw content.
            ExternalServiceError: the summarizer failed.
        """
        record = self.store.get(record_id)
        try:
            summary = summarizer.summarize(
                record.reference_number, record.title, record.raw_content, record.system
            )
        except ExternalServiceError:
            logger.warning("summary_not_stored", record_id=record_id)
            raise
        return self.store.update(record_id, {"summary": summary})
