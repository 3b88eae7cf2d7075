"""Shared pytest fixtures."""

from __future__ import annotations

import itertools
import logging
from pathlib import Path

import pytest
import structlog

import faqdesk.config as config_module
from faqdesk.core.models import FaqRecord
from faqdesk.core.session import KnowledgeBase
from faqdesk.core.store import RecordStore
from faqdesk.core.taxonomy import TaxonomyRegistry
from faqdesk.db.connection import Database
from faqdesk.db.repository import KeyValueRepository
from faqdesk.db.schema import initialize

_ENV_VARS = (
    "FAQDESK_DB",
    "FAQDESK_MODEL",
    "FAQDESK_PAGE_SIZE",
    "FAQDESK_LOG_LEVEL",
    "GEMINI_API_KEY",
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Run in tmp_path, away from the real global config, env overrides and API keys."""
    monkeypatch.setattr(config_module, "_GLOBAL_CONFIG_PATH", tmp_path / "home" / "config.yaml")
    monkeypatch.chdir(tmp_path)
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def restore_root_logger():
    """setup_logging() replaces root handlers; put them back after each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


@pytest.fixture
def tmp_db(tmp_path):
    """File-based DB in tmp_path with schema initialized, closed after test."""
    db = Database(tmp_path / ".faqdesk.db")
    conn = db.connect()
    initialize(conn)
    yield conn
    conn.close()


class FakeClock:
    """Millisecond clock that advances by *step* on every call."""

    def __init__(self, start: int = 1_700_000_000_000, step: int = 1000) -> None:
        self._ticks = itertools.count(start, step)
        self.last = start

    def __call__(self) -> int:
        self.last = next(self._ticks)
        return self.last


class MemoryBackend:
    """dict-backed key-value backend; set() can be made to fail."""

    def __init__(self, data: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(data or {})
        self.fail_writes = False
        self.writes: list[str] = []

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, blob: str) -> bool:
        if self.fail_writes:
            return False
        self.data[key] = blob
        self.writes.append(key)
        return True


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def backend() -> MemoryBackend:
    return MemoryBackend()


@pytest.fixture
def taxonomy() -> TaxonomyRegistry:
    return TaxonomyRegistry.defaults()


@pytest.fixture
def store(clock, taxonomy) -> RecordStore:
    """Empty store with the default taxonomy and a deterministic clock."""
    return RecordStore(clock=clock, taxonomy=taxonomy)


@pytest.fixture
def make_record():
    """Factory for FaqRecord with sensible defaults (filter / aggregate tests)."""

    def _make(record_id: str, **overrides) -> FaqRecord:
        values = {
            "reference_number": record_id,
            "title": f"Question {record_id}",
            "created_at": 0,
        }
        values.update(overrides)
        return FaqRecord(id=record_id, **values)

    return _make


# ---------------------------------------------------------------------------
# CLI fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def kb_path(tmp_path) -> Path:
    """A .faqdesk.db in tmp_path (the working directory) holding the seed data."""
    path = tmp_path / ".faqdesk.db"
    conn = Database(path).connect()
    initialize(conn)
    KnowledgeBase(KeyValueRepository(conn)).save_all()
    conn.close()
    return path


@pytest.fixture
def load_kb(kb_path):
    """Re-read the knowledge base from disk, as a fresh process would."""

    def _load() -> KnowledgeBase:
        conn = Database(kb_path).connect()
        try:
            return KnowledgeBase(KeyValueRepository(conn))
        finally:
            conn.close()

    return _load
