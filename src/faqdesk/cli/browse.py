"""faqdesk list / show — browse the knowledge base.

Commands:
  faqdesk list [filters] [--page N | --all] [--table | --cards]
  faqdesk show <id>

Filters combine with AND. Text search is a case-insensitive substring match
over id, reference number, title, summary, private notes and raw content.
"""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from faqdesk.cli.common import (
    CategoryOpt,
    DbOpt,
    FavoriteOpt,
    NeedsReviewOpt,
    ReusableOpt,
    SearchOpt,
    SystemOpt,
    TypeOpt,
    VideoOpt,
    build_filter,
    fail_validation,
    load_cfg,
    open_kb,
)
from faqdesk.cli.errors import err_record_not_found
from faqdesk.core.errors import NotFoundError, ValidationError
from faqdesk.core.filters import filter_records
from faqdesk.core.models import FaqRecord
from faqdesk.core.pagination import ViewState
from faqdesk.export.tabular import format_date

console = Console()


def _flags(record: FaqRecord) -> str:
    marks = []
    if record.is_favorite:
        marks.append("★")
    if record.is_reusable:
        marks.append("♻")
    if record.has_video:
        marks.append("▶")
    return " ".join(marks)


def _status(record: FaqRecord) -> str:
    return "[yellow]needs review[/]" if record.needs_review else "[green]up to date[/]"


def _render_table(records: list[FaqRecord]) -> None:
    table = Table(show_header=True, header_style="bold")
    table.add_column("Id", style="bold")
    table.add_column("PF")
    table.add_column("Title")
    table.add_column("System")
    table.add_column("Type")
    table.add_column("Status")
    table.add_column("Flags")
    for r in records:
        table.add_row(
            escape(r.id),
            escape(r.reference_number),
            escape(r.title),
            escape(r.system),
            escape(r.type),
            _status(r),
            _flags(r),
        )
    console.print(table)


def _render_cards(records: list[FaqRecord]) -> None:
    for r in records:
        body = escape(r.summary) if r.summary else "[dim]No summary yet.[/]"
        meta = " · ".join(escape(v) for v in (r.system, r.category, r.type) if v)
        console.print(
            Panel(
                f"{body}\n\n[dim]{meta}[/]  {_status(r)}  {_flags(r)}",
                title=f"[bold]PF {escape(r.reference_number)}[/] {escape(r.title)}",
                subtitle=escape(r.id),
                expand=False,
            )
        )


def list_cmd(
    search: SearchOpt = "",
    system: SystemOpt = "",
    category: CategoryOpt = "",
    type_: TypeOpt = "",
    needs_review: NeedsReviewOpt = "all",
    favorite: FavoriteOpt = "all",
    reusable: ReusableOpt = "all",
    video: VideoOpt = "all",
    page: Annotated[int, typer.Option("--page", "-p", help="Page number (1-based).")] = 1,
    show_all: Annotated[bool, typer.Option("--all", help="Show every match on one page.")] = False,
    as_table: Annotated[
        bool, typer.Option("--table/--cards", help="Compact table or one card per record.")
    ] = True,
    db: DbOpt = None,
) -> None:
    """List records matching the filters, one page at a time."""
    cfg = load_cfg()
    try:
        spec = build_filter(search, system, category, type_, needs_review, favorite, reusable, video)
    except ValidationError as exc:
        raise fail_validation(exc) from exc

    with open_kb(db, cfg) as kb:
        matches = filter_records(kb.store.list(), spec)

    if not matches:
        console.print("[yellow]No records match.[/]")
        raise typer.Exit(0)

    state = ViewState(page_size=cfg.view.page_size, show_all=show_all)
    state.go_to(page, len(matches))
    window = state.window(matches)

    if as_table:
        _render_table(window.items)
    else:
        _render_cards(window.items)

    if window.show_all:
        console.print(f"\n  {window.total_items} record(s)")
    else:
        console.print(
            f"\n  Page {window.page} of {window.total_pages}  ·  {window.total_items} record(s)"
        )


def show_cmd(
    record_id: Annotated[str, typer.Argument(help="Record id.")],
    db: DbOpt = None,
) -> None:
    """Show one record in full, including its history."""
    with open_kb(db) as kb:
        try:
            r = kb.store.get(record_id)
        except NotFoundError as exc:
            console.print(err_record_not_found(record_id))
            raise typer.Exit(1) from exc

    lines = [
        f"[bold]Id:[/] {escape(r.id)}",
        f"[bold]System:[/] {escape(r.system) or '-'}",
        f"[bold]Category:[/] {escape(r.category) or '-'}",
        f"[bold]Type:[/] {escape(r.type) or '-'}",
        f"[bold]Status:[/] {_status(r)}   {_flags(r)}",
        f"[bold]Created:[/] {format_date(r.created_at)}",
    ]
    if r.url:
        lines.append(f"[bold]Link:[/] {escape(r.url)}")
    lines.append("")
    lines.append("[bold]Summary[/]")
    lines.append(escape(r.summary) if r.summary else "[dim]No summary yet.[/]")
    if r.private_notes:
        lines.append("")
        lines.append("[bold]Private notes[/]")
        lines.append(escape(r.private_notes))

    console.print(
        Panel("\n".join(lines), title=f"PF {escape(r.reference_number)} · {escape(r.title)}")
    )

    if r.history:
        console.print("\n[bold]History[/]")
        for entry in r.history:
            console.print(f"  {format_date(entry.timestamp)}  {escape(entry.action)}")
