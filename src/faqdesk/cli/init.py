"""faqdesk init — create the knowledge base in a project directory.

Creates:
  .faqdesk.db              — key-value store seeded with default taxonomy + demo record
  faqdesk.yaml             — project config (store / view / ai sections)
  ~/.faqdesk/config.yaml   — global defaults (created once, mode 0o600)
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from faqdesk.config import StoreCfg, ensure_global_config, write_project_config
from faqdesk.core.session import KnowledgeBase
from faqdesk.db.connection import Database
from faqdesk.db.repository import KeyValueRepository

console = Console()

_DEFAULT_PROJECT_DIR = Path(".")


def init_cmd(
    project_dir: Annotated[
        Path,
        typer.Argument(help="Directory to initialize. Defaults to current directory."),
    ] = _DEFAULT_PROJECT_DIR,
    global_config: Annotated[
        Path | None,
        typer.Option("--global-config", hidden=True, help="Override global config path (for testing)."),
    ] = None,
) -> None:
    """Initialize a faqdesk knowledge base with default taxonomy and seed data."""
    project_dir = project_dir.resolve()
    project_dir.mkdir(parents=True, exist_ok=True)
    db_path = project_dir / StoreCfg().db_path

    if db_path.exists():
        console.print(f"[yellow]⚠[/]  {db_path} already exists.")
        if not typer.confirm("Re-initialize? Existing data is preserved.", default=False):
            console.print("[dim]Cancelled.[/]")
            raise typer.Exit(0)

    console.print(f"\n[bold]Creating knowledge base in {project_dir} …[/]\n")

    with Database(db_path) as conn:
        kb = KnowledgeBase(KeyValueRepository(conn))
        # Nothing is written when every blob loaded cleanly.
        if kb.seeded:
            kb.save_all()
        record_count = len(kb.store)
    console.print(f"  [green]✓[/] {db_path.name} ({record_count} records)")

    written = write_project_config(project_dir)
    if written is not None:
        console.print(f"  [green]✓[/] {written.name}")

    cfg_path = ensure_global_config(global_config)
    console.print(f"  [green]✓[/] {cfg_path} (global config)")

    console.print("\n[bold green]✓ Knowledge base initialized.[/]")
    console.print("\nNext steps:")
    console.print("  1. faqdesk add --ref 123 --title \"...\"      (catalog a PF)")
    console.print("  2. faqdesk list --search <text>              (find records)")
    console.print("  3. faqdesk dashboard                         (statistics)")
    console.print("  4. faqdesk export --format csv               (report)")
