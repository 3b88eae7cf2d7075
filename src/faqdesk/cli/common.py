"""Shared CLI plumbing: config loading, opening the knowledge base, filter options."""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Annotated, Iterator

import typer
from rich.console import Console

from faqdesk.cli.errors import err_config, err_no_db, err_validation, warn_persistence
from faqdesk.config import ConfigError, FaqDeskConfig, load_config
from faqdesk.core.errors import ValidationError
from faqdesk.core.ids import IdStrategy
from faqdesk.core.models import FilterSpec, TriState
from faqdesk.core.session import KnowledgeBase
from faqdesk.db.connection import Database
from faqdesk.db.repository import KeyValueRepository

console = Console()

# ---------------------------------------------------------------------------
# Shared option types
# ---------------------------------------------------------------------------

DbOpt = Annotated[
    Path | None,
    typer.Option("--db", help="Path to the faqdesk database (default from config)."),
]
SearchOpt = Annotated[
    str,
    typer.Option("--search", "-q", help="Text search over id, reference, title, summary, notes, content."),
]
SystemOpt = Annotated[str, typer.Option("--system", help="Exact system name.")]
CategoryOpt = Annotated[str, typer.Option("--category", help="Exact category name.")]
TypeOpt = Annotated[str, typer.Option("--type", help="Exact type name.")]
NeedsReviewOpt = Annotated[
    str, typer.Option("--needs-review", help="Review status filter: all | true | false.")
]
FavoriteOpt = Annotated[str, typer.Option("--favorite", help="Favorite filter: all | true | false.")]
ReusableOpt = Annotated[str, typer.Option("--reusable", help="Reusable filter: all | true | false.")]
VideoOpt = Annotated[str, typer.Option("--video", help="Has-video filter: all | true | false.")]


def build_filter(
    search: str = "",
    system: str = "",
    category: str = "",
    type_: str = "",
    needs_review: str = "all",
    favorite: str = "all",
    reusable: str = "all",
    video: str = "all",
) -> FilterSpec:
    """Translate CLI option values into a FilterSpec.

    Raises:
        ValidationError: a tri-state option is not all/true/false.
    """
    return FilterSpec(
        search=search,
        system=system,
        category=category,
        type=type_,
        needs_review=TriState.parse(needs_review),
        is_favorite=TriState.parse(favorite),
        is_reusable=TriState.parse(reusable),
        has_video=TriState.parse(video),
    )


# ---------------------------------------------------------------------------
# Config + database
# ---------------------------------------------------------------------------


def load_cfg() -> FaqDeskConfig:
    """load_config() with ConfigError turned into a friendly exit."""
    try:
        return load_config()
    except ConfigError as exc:
        console.print(err_config(str(exc)))
        raise typer.Exit(1) from exc


def resolve_db(db: Path | None, cfg: FaqDeskConfig) -> Path:
    return db if db is not None else Path(cfg.store.db_path)


@contextmanager
def open_kb(
    db: Path | None,
    cfg: FaqDeskConfig | None = None,
    *,
    id_strategy: IdStrategy | None = None,
) -> Iterator[KnowledgeBase]:
    """Open the knowledge base at *db* (or the configured path) for one command.

    Exits 1 with an actionable message if the database does not exist, and
    reports (without failing) any write that could not be persisted.
    """
    cfg = cfg or load_cfg()
    database = Database(resolve_db(db, cfg))
    if not database.exists:
        console.print(err_no_db(str(database.db_path)))
        raise typer.Exit(1)

    with database as conn:
        kb = KnowledgeBase(KeyValueRepository(conn), id_strategy=id_strategy)
        yield kb
        if kb.last_error is not None:
            console.print(warn_persistence(str(kb.last_error)))


def fail_validation(exc: ValidationError) -> typer.Exit:
    """Print *exc* and return the Exit to raise."""
    console.print(err_validation(str(exc)))
    return typer.Exit(1)


def read_content_file(path: Path) -> str:
    """Read --content-file as UTF-8 text; exits 1 if it cannot be decoded."""
    try:
        return path.read_text(encoding="utf-8")
    except (UnicodeDecodeError, OSError) as exc:
        raise fail_validation(
            ValidationError(f"Cannot read '{path}' as UTF-8 text.", field="raw_content")
        ) from exc
