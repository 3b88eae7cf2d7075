"""Flattened report export: one CSV row per record, fixed columns.

Semicolon-separated with a UTF-8 BOM so spreadsheet tools pick up accents.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

from faqdesk.core.models import FaqRecord

HEADERS: tuple[str, ...] = (
    "ID Interno",
    "Número PF",
    "Pergunta",
    "Sistema",
    "Categoria",
    "Tipo",
    "Status",
    "Reutilizável",
    "Vídeo",
    "Link",
    "Data Criação",
)

_BOM = "\ufeff"


def format_date(timestamp_ms: int) -> str:
    """dd/mm/YYYY in local time."""
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime("%d/%m/%Y")


def _yes_no(flag: bool) -> str:
    return "Sim" if flag else "Não"


def record_row(record: FaqRecord) -> list[str]:
    return [
        record.id,
        record.reference_number,
        record.title,
        record.system,
        record.category,
        record.type,
        record.status_label,
        _yes_no(record.is_reusable),
        _yes_no(record.has_video),
        record.url,
        format_date(record.created_at),
    ]


def to_csv_text(records: Iterable[FaqRecord]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, delimiter=";", lineterminator="\n")
    writer.writerow(HEADERS)
    for record in records:
        writer.writerow(record_row(record))
    return _BOM + buf.getvalue()


def export_csv(path: Path, records: Iterable[FaqRecord]) -> int:
    """Write the report to *path*; returns the number of data rows."""
    items = list(records)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(to_csv_text(items), encoding="utf-8")
    return len(items)
