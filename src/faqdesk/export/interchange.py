"""Structured interchange format: a JSON array of full records.

Field names are camelCase (referenceNumber, rawContent, privateNotes, ...).
Loading also accepts the field names used by older backups
(pfNumber, question, content, notes, needsUpdate, history[].date).
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from faqdesk.core.errors import ValidationError
from faqdesk.core.models import AuditEntry, FaqRecord

# snake_case attribute -> camelCase key
_FIELD_KEYS: dict[str, str] = {
    "id": "id",
    "reference_number": "referenceNumber",
    "url": "url",
    "title": "title",
    "raw_content": "rawContent",
    "summary": "summary",
    "private_notes": "privateNotes",
    "system": "system",
    "category": "category",
    "type": "type",
    "needs_review": "needsReview",
    "is_favorite": "isFavorite",
    "is_reusable": "isReusable",
    "has_video": "hasVideo",
    "created_at": "createdAt",
}

_LEGACY_KEYS: dict[str, str] = {
    "referenceNumber": "pfNumber",
    "title": "question",
    "rawContent": "content",
    "privateNotes": "notes",
    "needsReview": "needsUpdate",
}

_BOOL_KEYS = frozenset(["needsReview", "isFavorite", "isReusable", "hasVideo"])


def record_to_dict(record: FaqRecord) -> dict[str, Any]:
    data: dict[str, Any] = {key: getattr(record, attr) for attr, key in _FIELD_KEYS.items()}
    data["history"] = [_entry_to_dict(e) for e in record.history]
    return data


def record_from_dict(data: Any, position: int = 0) -> FaqRecord:
    """Build a FaqRecord from one interchange item.

    Raises:
        ValidationError: *data* is not an object, or has no usable id.
    """
    if not isinstance(data, dict):
        raise ValidationError(f"Item {position} is not an object.")

    values: dict[str, Any] = {}
    for attr, key in _FIELD_KEYS.items():
        raw = data.get(key)
        if raw is None and key in _LEGACY_KEYS:
            raw = data.get(_LEGACY_KEYS[key])
        if key in _BOOL_KEYS:
            values[attr] = _as_bool(raw, position, key)
        elif key == "createdAt":
            values[attr] = _as_int(raw, position, key)
        else:
            values[attr] = "" if raw is None else str(raw)

    if not values["id"].strip():
        raise ValidationError(f"Item {position} has no id.", field="id")

    history = data.get("history") or []
    if not isinstance(history, list):
        raise ValidationError(f"Item {position}: history must be a list.", field="history")
    values["history"] = tuple(_entry_from_dict(e, position) for e in history)
    return FaqRecord(**values)


def dumps_records(records: Iterable[FaqRecord]) -> str:
    return json.dumps([record_to_dict(r) for r in records], indent=2, ensure_ascii=False)


def loads_records(text: str) -> list[FaqRecord]:
    """Parse an interchange payload.

    Raises:
        ValidationError: not valid JSON, not a list, or an item is malformed.
    """
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Invalid JSON: {exc}") from exc
    if not isinstance(parsed, list):
        raise ValidationError("Import payload must be a JSON array of records.")
    return [record_from_dict(item, i) for i, item in enumerate(parsed)]


def export_json(path: Path, records: Iterable[FaqRecord]) -> int:
    """Write *records* to *path*; returns the number written."""
    items = list(records)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dumps_records(items) + "\n", encoding="utf-8")
    return len(items)


def import_json(path: Path) -> list[FaqRecord]:
    """Read and validate an interchange file (does not touch any store)."""
    try:
        text = path.read_text(encoding="utf-8-sig")
    except OSError as exc:
        raise ValidationError(f"Cannot read '{path}': {exc}") from exc
    return loads_records(text)


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------


def _entry_to_dict(entry: AuditEntry) -> dict[str, Any]:
    data: dict[str, Any] = {"timestamp": entry.timestamp, "action": entry.action}
    if entry.actor is not None:
        data["actor"] = entry.actor
    return data


def _entry_from_dict(data: Any, position: int) -> AuditEntry:
    if not isinstance(data, dict):
        raise ValidationError(f"Item {position}: history entry is not an object.", field="history")
    timestamp = data.get("timestamp", data.get("date"))
    actor = data.get("actor", data.get("user"))
    return AuditEntry(
        timestamp=_as_int(timestamp, position, "history.timestamp"),
        action=str(data.get("action", "")),
        actor=None if actor is None else str(actor),
    )


def _as_int(raw: Any, position: int, key: str) -> int:
    if raw is None:
        return 0
    if isinstance(raw, bool):
        raise ValidationError(f"Item {position}: '{key}' must be a number.", field=key)
    try:
        return int(raw)
    except (TypeError, ValueError, OverflowError) as exc:
        raise ValidationError(f"Item {position}: '{key}' must be a number.", field=key) from exc


def _as_bool(raw: Any, position: int, key: str) -> bool:
    if raw is None:
        return False
    if not isinstance(raw, bool):
        raise ValidationError(f"Item {position}: '{key}' must be true or false.", field=key)
    return raw
