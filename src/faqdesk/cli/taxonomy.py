"""faqdesk taxonomy CLI commands.

Commands:
  faqdesk taxonomy list [systems|categories|types]
  faqdesk taxonomy add <list> <value>
  faqdesk taxonomy remove <list> <value>

Removing a value never touches records that use it; they keep the old value.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from faqdesk.cli.common import DbOpt, fail_validation, open_kb
from faqdesk.core.errors import ValidationError
from faqdesk.core.taxonomy import FIELD_LISTS, LIST_NAMES

console = Console()

taxonomy_app = typer.Typer(
    name="taxonomy",
    help="Manage the system / category / type vocabularies.",
    add_completion=False,
)

# registry list -> record field
_LIST_FIELDS = {list_name: field for field, list_name in FIELD_LISTS.items()}


class ListName(str, Enum):
    systems = "systems"
    categories = "categories"
    types = "types"


@taxonomy_app.command("list")
def taxonomy_list_cmd(
    list_name: Annotated[
        ListName | None, typer.Argument(help="Show only this list.")
    ] = None,
    db: DbOpt = None,
) -> None:
    """Show taxonomy values and how many records use each."""
    names = [list_name.value] if list_name is not None else list(LIST_NAMES)
    with open_kb(db) as kb:
        records = kb.store.list()
        lists = {name: kb.taxonomy.values(name) for name in names}

    for name in names:
        field = _LIST_FIELDS[name]
        table = Table(title=name.capitalize(), show_header=True, header_style="bold")
        table.add_column("Value")
        table.add_column("Records", justify="right")
        for value in lists[name]:
            used = sum(1 for r in records if getattr(r, field) == value)
            table.add_row(escape(value), str(used))
        console.print(table)


@taxonomy_app.command("add")
def taxonomy_add_cmd(
    list_name: Annotated[ListName, typer.Argument(help="systems, categories or types.")],
    value: Annotated[str, typer.Argument(help="Value to add.")],
    db: DbOpt = None,
) -> None:
    """Add a value to a taxonomy list."""
    with open_kb(db) as kb:
        try:
            added = kb.taxonomy.add_value(list_name.value, value)
        except ValidationError as exc:
            raise fail_validation(exc) from exc

    if added:
        console.print(f"[green]✓[/] Added '{escape(value.strip())}' to {list_name.value}.")
    else:
        console.print(f"[dim]'{escape(value.strip())}' is already in {list_name.value}.[/]")


@taxonomy_app.command("remove")
def taxonomy_remove_cmd(
    list_name: Annotated[ListName, typer.Argument(help="systems, categories or types.")],
    value: Annotated[str, typer.Argument(help="Value to remove.")],
    db: DbOpt = None,
) -> None:
    """Remove a value from a taxonomy list. Records that use it are kept as-is."""
    field = _LIST_FIELDS[list_name.value]
    with open_kb(db) as kb:
        removed = kb.taxonomy.remove_value(list_name.value, value)
        still_used = sum(1 for r in kb.store.list() if getattr(r, field) == value)

    if not removed:
        console.print(f"[dim]'{escape(value)}' is not in {list_name.value}; nothing to remove.[/]")
        raise typer.Exit(0)

    console.print(f"[green]✓[/] Removed '{escape(value)}' from {list_name.value}.")
    if still_used:
        console.print(
            f"  [yellow]{still_used} record(s) still use it.[/] "
            "They keep the value until edited."
        )
