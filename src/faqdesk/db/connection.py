"""SQLite connection for the key-value store.

One database file per knowledge base. Connections run in WAL mode with a
busy timeout, so a second faqdesk process waits for a writer instead of
failing with "database is locked".
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

from faqdesk.db.schema import initialize

BUSY_TIMEOUT_S = 5.0


class Database:
    """A faqdesk database file.

    ``with Database(path) as conn:`` yields a connection whose schema is
    migrated to the latest version, and closes it on exit.
    """

    def __init__(self, db_path: Path | str, timeout: float = BUSY_TIMEOUT_S) -> None:
        self.db_path = Path(db_path)
        self.timeout = timeout
        self._conn: sqlite3.Connection | None = None

    @property
    def exists(self) -> bool:
        return self.db_path.is_file()

    def connect(self) -> sqlite3.Connection:
        """Open a raw connection; the file is created if missing, the schema is not."""
        conn = sqlite3.connect(self.db_path, timeout=self.timeout)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode = WAL")
        return conn

    def open(self) -> sqlite3.Connection:
        """connect() and apply pending migrations."""
        conn = self.connect()
        try:
            initialize(conn)
        except sqlite3.Error:
            conn.close()
            raise
        return conn

    def __enter__(self) -> sqlite3.Connection:
        self._conn = self.open()
        return self._conn

    def __exit__(self, *args: object) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
