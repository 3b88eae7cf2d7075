"""faqdesk export / import — backups and reports.

  faqdesk export --format json -o backup.json     full records, re-importable
  faqdesk export --format csv -o report.csv       spreadsheet report (; separated)
  faqdesk import backup.json                      replace every record

Export honours the same filters as `faqdesk list`. Without --output the
payload is written to stdout. Import is all-or-nothing: a malformed file
leaves the current records untouched.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

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
    open_kb,
)
from faqdesk.cli.errors import err_import_invalid
from faqdesk.core.errors import ValidationError
from faqdesk.core.filters import filter_records
from faqdesk.export.interchange import dumps_records, export_json, import_json
from faqdesk.export.tabular import export_csv, to_csv_text

console = Console()


class ExportFormat(str, Enum):
    json = "json"
    csv = "csv"


def export_cmd(
    fmt: Annotated[
        ExportFormat, typer.Option("--format", "-f", help="json (backup) or csv (report).")
    ] = ExportFormat.json,
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="File to write (default: stdout).")
    ] = None,
    search: SearchOpt = "",
    system: SystemOpt = "",
    category: CategoryOpt = "",
    type_: TypeOpt = "",
    needs_review: NeedsReviewOpt = "all",
    favorite: FavoriteOpt = "all",
    reusable: ReusableOpt = "all",
    video: VideoOpt = "all",
    db: DbOpt = None,
) -> None:
    """Export records (optionally filtered) as JSON or CSV."""
    try:
        spec = build_filter(search, system, category, type_, needs_review, favorite, reusable, video)
    except ValidationError as exc:
        raise fail_validation(exc) from exc

    with open_kb(db) as kb:
        records = filter_records(kb.store.list(), spec)

    if output is None:
        if fmt is ExportFormat.csv:
            typer.echo(to_csv_text(records), nl=False)
        else:
            typer.echo(dumps_records(records))
        return

    if fmt is ExportFormat.csv:
        count = export_csv(output, records)
    else:
        count = export_json(output, records)
    console.print(f"[green]✓[/] Exported {count} record(s) to {output}")


def import_cmd(
    path: Annotated[
        Path, typer.Argument(exists=True, dir_okay=False, help="JSON file from faqdesk export.")
    ],
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
    db: DbOpt = None,
) -> None:
    """Replace every record with the contents of a JSON backup."""
    try:
        records = import_json(path)
    except ValidationError as exc:
        console.print(err_import_invalid(str(path), str(exc)))
        raise typer.Exit(1) from exc

    with open_kb(db) as kb:
        console.print(
            f"\nImport [bold]{len(records)}[/] record(s) from {path}, "
            f"replacing the current {len(kb.store)}."
        )
        if not yes:
            if not typer.confirm("Confirm import?", default=False):
                console.print("[dim]Cancelled.[/]")
                raise typer.Exit(0)
        try:
            kb.store.replace_all(records)
        except ValidationError as exc:
            console.print(err_import_invalid(str(path), str(exc)))
            raise typer.Exit(1) from exc

    console.print(f"[green]✓[/] Imported {len(records)} record(s).")
