"""faqdesk dashboard — statistics over the knowledge base.

The dashboard has its own filter, independent of `faqdesk list`: exact
system / category / type, and "only" toggles for review, reusable and video.
An unset toggle means any value.
"""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from faqdesk.cli.common import CategoryOpt, DbOpt, SystemOpt, TypeOpt, open_kb
from faqdesk.core.aggregate import Stats, aggregate
from faqdesk.core.filters import filter_records
from faqdesk.core.models import FilterSpec, TriState
from faqdesk.export.tabular import format_date

console = Console()


def _only(flag: bool) -> TriState:
    return TriState.REQUIRE_TRUE if flag else TriState.ANY


def _bar(count: int, total: int, width: int = 20) -> str:
    filled = round(width * count / total) if total else 0
    return "█" * filled + "·" * (width - filled)


def _ranking(title: str, rows: list[tuple[str, int]], total: int) -> Table:
    table = Table(title=title, show_header=False, box=None, title_justify="left")
    table.add_column("Value")
    table.add_column("Count", justify="right")
    table.add_column("Share")
    for value, count in rows:
        table.add_row(escape(value) or "[dim](none)[/]", str(count), _bar(count, total))
    return table


def _render(stats: Stats) -> None:
    console.print(
        Panel(
            f"Total: [bold]{stats.total}[/]   "
            f"Needs review: [yellow]{stats.needs_review_count}[/]   "
            f"Up to date: [green]{stats.up_to_date_count}[/]\n"
            f"Reusable: {stats.reusable_count}   "
            f"With video: {stats.has_video_count}   "
            f"Favorites: {stats.favorite_count}\n"
            f"Health: [bold]{stats.health_percent}%[/] up to date",
            title="Knowledge base",
            expand=False,
        )
    )
    if stats.top_systems:
        console.print(_ranking("Top systems", stats.top_systems, stats.total))
    if stats.by_category:
        console.print(_ranking("By category", stats.by_category, stats.total))
    if stats.recent:
        console.print("\n[bold]Recently added[/]")
        for r in stats.recent:
            console.print(
                f"  {format_date(r.created_at)}  PF {escape(r.reference_number)}  {escape(r.title)}"
            )


def dashboard_cmd(
    system: SystemOpt = "",
    category: CategoryOpt = "",
    type_: TypeOpt = "",
    needs_review: Annotated[
        bool, typer.Option("--needs-review", help="Only records that need review.")
    ] = False,
    reusable: Annotated[bool, typer.Option("--reusable", help="Only reusable records.")] = False,
    video: Annotated[bool, typer.Option("--video", help="Only records with a video.")] = False,
    db: DbOpt = None,
) -> None:
    """Show statistics for the (optionally filtered) knowledge base."""
    spec = FilterSpec(
        system=system,
        category=category,
        type=type_,
        needs_review=_only(needs_review),
        is_reusable=_only(reusable),
        has_video=_only(video),
    )
    with open_kb(db) as kb:
        subset = filter_records(kb.store.list(), spec)

    _render(aggregate(subset))
