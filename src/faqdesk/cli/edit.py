"""faqdesk edit / resolve / toggle — change existing records.

Every change goes through the store's update path, which prepends audit
entries for review-flag and summary/content changes. Toggling favorite,
reusable or video leaves no audit trace.

Usage:
  faqdesk edit pf-685-ponto --summary "..." --no-needs-review
  faqdesk resolve pf-685-ponto pf-702-rep
  faqdesk toggle pf-685-ponto --flag favorite
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console

from faqdesk.cli.common import DbOpt, fail_validation, open_kb, read_content_file
from faqdesk.cli.errors import err_record_not_found
from faqdesk.core.errors import NotFoundError, ValidationError

console = Console()


class Flag(str, Enum):
    favorite = "favorite"
    reusable = "reusable"
    video = "video"
    review = "review"


_FLAG_FIELDS = {
    Flag.favorite: "is_favorite",
    Flag.reusable: "is_reusable",
    Flag.video: "has_video",
    Flag.review: "needs_review",
}


def edit_cmd(
    record_id: Annotated[str, typer.Argument(help="Record id (see: faqdesk list).")],
    ref: Annotated[str | None, typer.Option("--ref", "-r", help="New PF number.")] = None,
    title: Annotated[str | None, typer.Option("--title", "-t", help="New title.")] = None,
    url: Annotated[str | None, typer.Option("--url", help="New external link.")] = None,
    content: Annotated[str | None, typer.Option("--content", help="New raw content.")] = None,
    content_file: Annotated[
        Path | None,
        typer.Option("--content-file", exists=True, dir_okay=False, help="Read raw content from a file."),
    ] = None,
    summary: Annotated[str | None, typer.Option("--summary", help="New summary.")] = None,
    notes: Annotated[str | None, typer.Option("--notes", help="New private notes.")] = None,
    system: Annotated[str | None, typer.Option("--system", help="New system.")] = None,
    category: Annotated[str | None, typer.Option("--category", help="New category.")] = None,
    type_: Annotated[str | None, typer.Option("--type", help="New type.")] = None,
    needs_review: Annotated[
        bool | None, typer.Option("--needs-review/--no-needs-review", help="Review flag.")
    ] = None,
    favorite: Annotated[bool | None, typer.Option("--favorite/--no-favorite")] = None,
    reusable: Annotated[bool | None, typer.Option("--reusable/--no-reusable")] = None,
    video: Annotated[bool | None, typer.Option("--video/--no-video")] = None,
    db: DbOpt = None,
) -> None:
    """Edit fields of an existing record."""
    if content_file is not None:
        content = read_content_file(content_file)

    given: dict[str, Any] = {
        "reference_number": ref,
        "title": title,
        "url": url,
        "raw_content": content,
        "summary": summary,
        "private_notes": notes,
        "system": system,
        "category": category,
        "type": type_,
        "needs_review": needs_review,
        "is_favorite": favorite,
        "is_reusable": reusable,
        "has_video": video,
    }
    patch = {k: v for k, v in given.items() if v is not None}
    if not patch:
        console.print("[yellow]Nothing to change.[/] Pass at least one field option.")
        raise typer.Exit(0)

    with open_kb(db) as kb:
        try:
            before = len(kb.store.get(record_id).history)
            record = kb.store.update(record_id, patch)
        except NotFoundError as exc:
            console.print(err_record_not_found(record_id))
            raise typer.Exit(1) from exc
        except ValidationError as exc:
            raise fail_validation(exc) from exc

        console.print(f"[green]✓[/] Updated [bold]{record.id}[/]")
        for entry in record.history[: len(record.history) - before]:
            console.print(f"  [dim]+ {entry.action}[/]")


def resolve_cmd(
    record_ids: Annotated[list[str], typer.Argument(help="One or more record ids.")],
    db: DbOpt = None,
) -> None:
    """Mark records as up to date (clears the review flag)."""
    with open_kb(db) as kb:
        missing = [rid for rid in record_ids if rid not in kb.store]
        resolved = kb.store.mark_resolved_many(record_ids)

    for record in resolved:
        console.print(f"[green]✓[/] {record.id} marked as updated")
    for rid in missing:
        console.print(err_record_not_found(rid))
    if missing:
        raise typer.Exit(1)


def toggle_cmd(
    record_id: Annotated[str, typer.Argument(help="Record id.")],
    flag: Annotated[Flag, typer.Option("--flag", "-f", help="Flag to flip.")],
    db: DbOpt = None,
) -> None:
    """Flip one boolean flag on a record."""
    field_name = _FLAG_FIELDS[flag]
    with open_kb(db) as kb:
        try:
            record = kb.store.toggle_flag(record_id, field_name)
        except NotFoundError as exc:
            console.print(err_record_not_found(record_id))
            raise typer.Exit(1) from exc

    state = "on" if getattr(record, field_name) else "off"
    console.print(f"[green]✓[/] {record.id}: {flag.value} {state}")
