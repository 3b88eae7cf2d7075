"""faqdesk CLI entry point."""

from __future__ import annotations

import importlib.metadata
from typing import Annotated

import typer

from faqdesk.cli.add import add_cmd
from faqdesk.cli.browse import list_cmd, show_cmd
from faqdesk.cli.dashboard import dashboard_cmd
from faqdesk.cli.edit import edit_cmd, resolve_cmd, toggle_cmd
from faqdesk.cli.init import init_cmd
from faqdesk.cli.remove import remove_cmd
from faqdesk.cli.settings import theme_cmd
from faqdesk.cli.summarize import summarize_cmd
from faqdesk.cli.taxonomy import taxonomy_app
from faqdesk.cli.transfer import export_cmd, import_cmd
from faqdesk.config import ConfigError, LoggingCfg, load_config
from faqdesk.logging_config import setup_logging


def _installed_version() -> str:
    try:
        return importlib.metadata.version("faqdesk")
    except importlib.metadata.PackageNotFoundError:
        return "dev"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"faqdesk {_installed_version()}")
        raise typer.Exit()


app = typer.Typer(
    name="faqdesk",
    help=(
        "faqdesk — knowledge base for support FAQ records (PFs).\n\n"
        "  faqdesk add        Catalog a PF (smart id, optional summary).\n"
        "  faqdesk list       Search, filter and page through records.\n"
        "  faqdesk dashboard  Statistics and knowledge-base health."
    ),
    add_completion=False,
)


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
) -> None:
    """faqdesk — knowledge base for support FAQ records."""
    try:
        log_cfg = load_config().logging
    except ConfigError:
        # Reported by the command itself when it loads the config.
        log_cfg = LoggingCfg()
    setup_logging(json_mode=log_cfg.json, level=log_cfg.level)


app.command("init")(init_cmd)
app.command("add")(add_cmd)
app.command("edit")(edit_cmd)
app.command("resolve")(resolve_cmd)
app.command("toggle")(toggle_cmd)
app.command("remove")(remove_cmd)
app.command("show")(show_cmd)
app.command("list")(list_cmd)
app.command("dashboard")(dashboard_cmd)
app.command("summarize")(summarize_cmd)
app.command("export")(export_cmd)
app.command("import")(import_cmd)
app.command("theme")(theme_cmd)
app.add_typer(taxonomy_app, name="taxonomy")


@app.command("version")
def version_cmd() -> None:
    """Show the installed faqdesk version."""
    typer.echo(f"faqdesk {_installed_version()}")


if __name__ == "__main__":
    app()
