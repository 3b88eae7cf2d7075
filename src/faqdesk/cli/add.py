"""faqdesk add — catalog a new PF record.

Id assignment:
  default   smart id from the configured model (falls back to a local id)
  --quick   always a local id (pf-<ref>-<timestamp digits>), no network

--from-url fills reference number, title and raw content from the ticket page
when those options are not given. --summarize generates a summary right after
saving; a failed summary never undoes the save.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from faqdesk.cli.common import DbOpt, fail_validation, load_cfg, open_kb, read_content_file
from faqdesk.cli.errors import warn_local_id, warn_summary_failed
from faqdesk.config import FaqDeskConfig
from faqdesk.core.errors import ExternalServiceError, ValidationError
from faqdesk.core.ids import IdStrategy
from faqdesk.core.models import RecordDraft
from faqdesk.services.llm_client import provider_of, validate_api_key
from faqdesk.services.metadata import fetch_metadata
from faqdesk.services.smart_ids import LlmIdStrategy
from faqdesk.services.summarizer import FaqSummarizer

console = Console()


def add_cmd(
    ref: Annotated[str, typer.Option("--ref", "-r", help="External ticket (PF) number.")] = "",
    title: Annotated[str, typer.Option("--title", "-t", help="Question / title.")] = "",
    url: Annotated[str, typer.Option("--url", help="External link.")] = "",
    content: Annotated[str, typer.Option("--content", help="Raw source text.")] = "",
    content_file: Annotated[
        Path | None,
        typer.Option("--content-file", exists=True, dir_okay=False, help="Read raw content from a file."),
    ] = None,
    summary: Annotated[str, typer.Option("--summary", help="Summary text.")] = "",
    notes: Annotated[str, typer.Option("--notes", help="Private notes.")] = "",
    system: Annotated[str, typer.Option("--system", help="System (from the taxonomy).")] = "",
    category: Annotated[str, typer.Option("--category", help="Category (from the taxonomy).")] = "",
    type_: Annotated[str, typer.Option("--type", help="Type (from the taxonomy).")] = "",
    needs_review: Annotated[bool, typer.Option("--needs-review", help="Flag for review.")] = False,
    favorite: Annotated[bool, typer.Option("--favorite", help="Mark as favorite.")] = False,
    reusable: Annotated[bool, typer.Option("--reusable", help="Mark as reusable.")] = False,
    video: Annotated[bool, typer.Option("--video", help="Has a video.")] = False,
    quick: Annotated[bool, typer.Option("--quick", help="Local id only, no network.")] = False,
    from_url: Annotated[
        bool, typer.Option("--from-url", help="Fill ref/title/content from --url.")
    ] = False,
    summarize: Annotated[
        bool, typer.Option("--summarize", help="Generate a summary after saving.")
    ] = False,
    db: DbOpt = None,
) -> None:
    """Add a new record to the knowledge base."""
    cfg = load_cfg()

    if content_file is not None:
        content = read_content_file(content_file)

    if from_url:
        if not url:
            console.print("[red]Error:[/] --from-url needs --url.")
            raise typer.Exit(1)
        meta = fetch_metadata(url)
        ref = ref or meta.reference_number
        title = title or meta.title
        content = content or meta.text
        if not meta.title:
            console.print("[yellow]Could not read a title from the URL.[/]")

    draft = RecordDraft(
        reference_number=ref,
        title=title,
        url=url,
        raw_content=content,
        summary=summary,
        private_notes=notes,
        system=system,
        category=category,
        type=type_,
        needs_review=needs_review,
        is_favorite=favorite,
        is_reusable=reusable,
        has_video=video,
    )

    strategy = None if quick else _smart_id_strategy(cfg)
    with open_kb(db, cfg, id_strategy=strategy) as kb:
        try:
            record = kb.store.create(draft, quick=quick)
        except ValidationError as exc:
            raise fail_validation(exc) from exc
        console.print(f"[green]✓[/] Created [bold]{record.id}[/]  (PF {record.reference_number})")

        if summarize:
            summarizer = FaqSummarizer(cfg.ai.model, cfg.ai.summary_max_tokens)
            try:
                kb.summarize(record.id, summarizer)
            except (ExternalServiceError, ValidationError) as exc:
                console.print(warn_summary_failed(str(exc)))
            else:
                console.print("[green]✓[/] Summary generated.")


def _smart_id_strategy(cfg: FaqDeskConfig) -> IdStrategy | None:
    """LlmIdStrategy when smart ids are enabled and a key is available."""
    if not cfg.ai.smart_ids:
        return None
    try:
        validate_api_key(cfg.ai.model)
    except EnvironmentError:
        console.print(warn_local_id(f"no API key for '{provider_of(cfg.ai.model)}'"))
        return None
    return LlmIdStrategy(cfg.ai.model)
