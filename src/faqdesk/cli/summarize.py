"""faqdesk summarize — generate a record summary from its raw content.

Uses the model from the `ai` config section. On any failure the record's
summary is left unchanged.
"""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from faqdesk.cli.common import DbOpt, fail_validation, load_cfg, open_kb
from faqdesk.cli.errors import err_no_api_key, err_record_not_found, warn_summary_failed
from faqdesk.core.errors import ExternalServiceError, NotFoundError, ValidationError
from faqdesk.services.llm_client import validate_api_key
from faqdesk.services.summarizer import FaqSummarizer

console = Console()


def summarize_cmd(
    record_id: Annotated[str, typer.Argument(help="Record id.")],
    model: Annotated[
        str | None, typer.Option("--model", help="Override the configured model.")
    ] = None,
    db: DbOpt = None,
) -> None:
    """Generate (or regenerate) the summary of one record."""
    cfg = load_cfg()
    model_name = model or cfg.ai.model
    try:
        validate_api_key(model_name)
    except EnvironmentError as exc:
        console.print(err_no_api_key(model_name))
        raise typer.Exit(1) from exc

    summarizer = FaqSummarizer(model_name, cfg.ai.summary_max_tokens)
    with open_kb(db, cfg) as kb:
        try:
            with console.status(f"Summarizing {record_id} with {model_name} …"):
                record = kb.summarize(record_id, summarizer)
        except NotFoundError as exc:
            console.print(err_record_not_found(record_id))
            raise typer.Exit(1) from exc
        except ValidationError as exc:
            raise fail_validation(exc) from exc
        except ExternalServiceError as exc:
            console.print(warn_summary_failed(str(exc)))
            raise typer.Exit(1) from exc

    console.print(Panel(escape(record.summary), title=f"Summary · {escape(record.id)}"))
    console.print("[green]✓[/] Summary saved.")
