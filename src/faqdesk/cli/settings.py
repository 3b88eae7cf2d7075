"""faqdesk theme — show or set the stored display theme preference."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from faqdesk.cli.common import DbOpt, fail_validation, open_kb
from faqdesk.core.errors import ValidationError

console = Console()


def theme_cmd(
    value: Annotated[
        str | None, typer.Argument(help="light or dark. Omit to show the current theme.")
    ] = None,
    db: DbOpt = None,
) -> None:
    """Show or set the theme preference."""
    with open_kb(db) as kb:
        if value is None:
            typer.echo(kb.theme)
            return
        try:
            kb.set_theme(value)
        except ValidationError as exc:
            raise fail_validation(exc) from exc
        console.print(f"[green]✓[/] Theme set to {kb.theme}.")
