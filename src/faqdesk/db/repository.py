"""Key-value repository: the persistence backend behind the knowledge base.

Values are opaque serialized blobs (JSON text); the repository never parses
them. set() reports failure through its return value instead of raising so the
caller decides how to surface it (see faqdesk.core.session).
"""

from __future__ import annotations

import sqlite3

import structlog

logger = structlog.get_logger(__name__)


class KeyValueRepository:
    """get/set access to the kv_store table.

    The connection is owned by the caller and must be closed after use.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Initialise with an open database connection.

        Args:
            conn: An open sqlite3.Connection with the schema initialised
                (see faqdesk.db.schema.initialize).
        """
        self._conn = conn

    def get(self, key: str) -> str | None:
        """Return the blob stored under *key*, or None if absent."""
        row = self._conn.execute(
            "SELECT value FROM kv_store WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else None

    def set(self, key: str, blob: str) -> bool:
        """Upsert *blob* under *key*. Returns False if the write failed."""
        try:
            self._conn.execute(
                """
                INSERT INTO kv_store (key, value)
                VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = datetime('now')
                """,
                (key, blob),
            )
            self._conn.commit()
        except sqlite3.Error as exc:
            logger.error("kv_write_failed", key=key, error=str(exc))
            return False
        return True

    def delete(self, key: str) -> None:
        self._conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
        self._conn.commit()

    def keys(self) -> list[str]:
        """Return all stored keys, sorted."""
        rows = self._conn.execute("SELECT key FROM kv_store ORDER BY key").fetchall()
        return [r["key"] for r in rows]

    def updated_at(self, key: str) -> str | None:
        row = self._conn.execute(
            "SELECT updated_at FROM kv_store WHERE key = ?", (key,)
        ).fetchone()
        return row["updated_at"] if row else None
