"""faqdesk database layer."""

from faqdesk.db.connection import Database
from faqdesk.db.migrations import MIGRATIONS, run_migrations
from faqdesk.db.repository import KeyValueRepository
from faqdesk.db.schema import initialize

__all__ = [
    "Database",
    "KeyValueRepository",
    "initialize",
    "run_migrations",
    "MIGRATIONS",
]
