"""Database schema initialization."""

from __future__ import annotations

import sqlite3

import structlog

from faqdesk.db.migrations import MIGRATIONS, run_migrations

logger = structlog.get_logger(__name__)

CURRENT_VERSION = MIGRATIONS[-1][0]


def initialize(conn: sqlite3.Connection) -> None:
    """Bring the schema up to CURRENT_VERSION (idempotent)."""
    applied = run_migrations(conn)
    if applied:
        logger.info("schema_migrated", versions=applied)
