"""faqdesk rich error messages — actionable feedback.

Every error shown to the user must contain:
  1. What went wrong (clear cause)
  2. The exact action the user should take to fix it

Usage:
    from faqdesk.cli.errors import err_no_db
    console.print(err_no_db(".faqdesk.db"))
    raise typer.Exit(1)
"""

from __future__ import annotations

from rich.markup import escape

from faqdesk.services.llm_client import api_key_env, provider_of


def err_no_api_key(model: str) -> str:
    """No API key in the environment for *model*'s provider."""
    env_var = api_key_env(model) or f"{provider_of(model).upper()}_API_KEY"
    return (
        f"[red]Error:[/] No API key for '{provider_of(model)}' (model {escape(model)}).\n"
        f"  Set:  export {env_var}=..."
    )


def err_no_db(db_path: str = ".faqdesk.db") -> str:
    """No database found at the configured path."""
    return (
        f"[red]Error:[/] No database found at '{escape(db_path)}'.\n"
        "  Run:  faqdesk init"
    )


def err_validation(message: str) -> str:
    """A mutation was rejected; nothing was changed."""
    return f"[red]Error:[/] {escape(message)}\n  Nothing was changed."


def err_record_not_found(record_id: str) -> str:
    return (
        f"[red]Error:[/] Record '{escape(record_id)}' not found.\n"
        "  Run:  faqdesk list  to see all records and their ids."
    )


def err_config(message: str) -> str:
    return (
        f"[red]Error:[/] Invalid configuration.\n  {escape(message)}\n"
        "  Fix faqdesk.yaml or ~/.faqdesk/config.yaml and retry."
    )


def err_import_invalid(path: str, message: str) -> str:
    """Import payload rejected; store untouched."""
    return (
        f"[red]Error:[/] Cannot import '{escape(path)}': {escape(message)}\n"
        "  The current records were left unchanged.\n"
        "  Use a file created by:  faqdesk export --format json"
    )


def warn_summary_failed(message: str) -> str:
    """Summarization failed; summary left as it was."""
    return (
        f"[yellow]Warning:[/] {escape(message)}\n"
        "  The record's summary was left unchanged. Retry later with:  faqdesk summarize <id>"
    )


def warn_persistence(message: str) -> str:
    """Database write failed; changes live only in this process."""
    return (
        f"[yellow]Warning:[/] {escape(message)}\n"
        "  Check that the database file is writable and not locked."
    )


def warn_local_id(reason: str) -> str:
    return f"[dim]Smart id unavailable ({escape(reason)}); using a local id.[/]"
