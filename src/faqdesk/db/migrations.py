"""Forward-only schema migrations, tracked in SQLite's user_version pragma."""

from __future__ import annotations

import sqlite3

# Append-only. Each entry: (version, DDL script).
MIGRATIONS: list[tuple[int, str]] = [
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS kv_store (
            key         TEXT PRIMARY KEY,
            value       TEXT NOT NULL,
            updated_at  DATETIME NOT NULL DEFAULT (datetime('now'))
        );
        """,
    ),
]


def current_version(conn: sqlite3.Connection) -> int:
    return conn.execute("PRAGMA user_version").fetchone()[0]


def run_migrations(conn: sqlite3.Connection) -> list[int]:
    """Apply pending migrations in version order; return the versions applied.

    A migration and its version bump commit together, so a failing script
    leaves the database at the last version that was fully applied.
    """
    applied: list[int] = []
    current = current_version(conn)
    for version, sql in MIGRATIONS:
        if version <= current:
            continue
        try:
            conn.executescript(f"BEGIN;\n{sql}\nPRAGMA user_version = {version};\nCOMMIT;")
        except sqlite3.Error:
            if conn.in_transaction:
                conn.rollback()
            raise
        applied.append(version)
    return applied
