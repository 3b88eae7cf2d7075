"""faqdesk remove — delete records from the knowledge base.

Removing an id that does not exist is not an error: the command reports it
and exits 0, so repeated runs are safe.

Usage:
  faqdesk remove pf-685-ponto
  faqdesk remove pf-685-ponto pf-702-rep --yes
"""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from faqdesk.cli.common import DbOpt, open_kb

console = Console()


def remove_cmd(
    record_ids: Annotated[list[str], typer.Argument(help="One or more record ids.")],
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
    db: DbOpt = None,
) -> None:
    """Delete records. Ids that do not exist are skipped."""
    with open_kb(db) as kb:
        present = [rid for rid in dict.fromkeys(record_ids) if rid in kb.store]
        absent = [rid for rid in dict.fromkeys(record_ids) if rid not in kb.store]

        for rid in absent:
            console.print(f"[dim]{rid}: not found, nothing to remove.[/]")
        if not present:
            raise typer.Exit(0)

        console.print(f"\nRemove {len(present)} record(s):")
        for rid in present:
            record = kb.store.get(rid)
            console.print(f"  [bold]{rid}[/]  PF {record.reference_number}  {record.title}")

        if not yes:
            if not typer.confirm("Confirm removal?", default=False):
                console.print("[dim]Cancelled.[/]")
                raise typer.Exit(0)

        removed = kb.store.delete_many(present)

    console.print(f"\n[green]✓[/] Removed {removed} record(s).")
