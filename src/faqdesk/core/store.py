"""Record store: the authoritative in-memory collection of FAQ records.

Store order is insertion order, not a sort: create() prepends, replace_all()
keeps the imported order. Every successful mutation notifies subscribers with
an event name; the store does not know who listens (see core.session).
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Callable

from faqdesk.core import history
from faqdesk.core.errors import NotFoundError, ValidationError
from faqdesk.core.ids import Clock, IdStrategy, LocalIdStrategy, now_ms
from faqdesk.core.models import EDITABLE_FIELDS, FLAG_FIELDS, FaqRecord, RecordDraft
from faqdesk.core.taxonomy import TaxonomyRegistry

Listener = Callable[[str], None]

CREATED = "created"
UPDATED = "updated"
DELETED = "deleted"
REPLACED = "replaced"

_REQUIRED = ("reference_number", "title")
_IGNORED_PATCH_KEYS = frozenset(["id", "created_at", "history"])


class RecordStore:
    """In-memory FAQ record collection with create/update/delete and notifications.

    Args:
        records:     Initial collection, in store order.
        id_strategy: Strategy used by create(); defaults to the local strategy.
        clock:       Millisecond clock used for createdAt and audit entries.
        taxonomy:    Registry used to validate system/category/type at entry time.
                     When None, taxonomy values are not checked.
    """

    def __init__(
        self,
        records: Iterable[FaqRecord] = (),
        *,
        id_strategy: IdStrategy | None = None,
        clock: Clock = now_ms,
        taxonomy: TaxonomyRegistry | None = None,
    ) -> None:
        self._clock = clock
        self._local_ids = LocalIdStrategy(clock)
        self._id_strategy = id_strategy or self._local_ids
        self._taxonomy = taxonomy
        self._records: list[FaqRecord] = []
        self._listeners: list[Listener] = []
        self._load(list(records))

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener*; returns a callable that unsubscribes it."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _notify(self, event: str) -> None:
        for listener in list(self._listeners):
            listener(event)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list(self) -> list[FaqRecord]:
        """Return the full collection in store order (a copy)."""
        return list(self._records)

    def find(self, record_id: str) -> FaqRecord | None:
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    def get(self, record_id: str) -> FaqRecord:
        record = self.find(record_id)
        if record is None:
            raise NotFoundError(record_id)
        return record

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, record_id: object) -> bool:
        return any(r.id == record_id for r in self._records)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create(self, draft: RecordDraft | Mapping[str, Any], *, quick: bool = False) -> FaqRecord:
        """Validate *draft*, assign id + createdAt, seed history, and prepend.

        Args:
            draft: RecordDraft or mapping of editable field names.
            quick: Use the local id strategy regardless of the configured one.

        Raises:
            ValidationError: referenceNumber or title empty, unknown field, or
                a taxonomy value that is not registered.
        """
        values = _draft_values(draft)
        _check_required(values)
        if self._taxonomy is not None:
            self._taxonomy.check_entry(values)

        strategy = self._local_ids if quick else self._id_strategy
        candidate = strategy.generate(values["reference_number"], values["title"])
        now = self._clock()
        record = FaqRecord(
            id=self._unique_id(candidate),
            created_at=now,
            history=(history.created_entry(now),),
            **values,
        )
        self._records.insert(0, record)
        self._notify(CREATED)
        return record

    def update(self, record_id: str, patch: Mapping[str, Any]) -> FaqRecord:
        """Merge *patch* onto the record and prepend audit entries.

        id, createdAt and history keys in *patch* are ignored.

        Raises:
            NotFoundError: *record_id* is not in the store.
            ValidationError: unknown field, required field emptied, or an
                unregistered taxonomy value entered.
        """
        index, old = self._locate(record_id)
        changes = _patch_values(patch)
        _check_required({k: v for k, v in changes.items() if k in _REQUIRED})
        if self._taxonomy is not None:
            # Only newly entered values are checked; unchanged ones may be stale.
            self._taxonomy.check_entry(
                {k: v for k, v in changes.items() if getattr(old, k) != v}
            )

        new = dataclasses.replace(old, **changes)
        actions = history.update_actions(old, new)
        if actions:
            new = dataclasses.replace(
                new, history=history.prepend(old.history, actions, self._clock())
            )
        self._records[index] = new
        self._notify(UPDATED)
        return new

    def mark_resolved(self, record_id: str) -> FaqRecord:
        """Force needs_review False and prepend exactly one "marked as updated"."""
        index, old = self._locate(record_id)
        new = dataclasses.replace(
            old,
            needs_review=False,
            history=history.prepend(old.history, [history.MARKED_AS_UPDATED], self._clock()),
        )
        self._records[index] = new
        self._notify(UPDATED)
        return new

    def toggle_flag(self, record_id: str, flag: str) -> FaqRecord:
        """Flip one boolean flag through the generic update path."""
        if flag not in FLAG_FIELDS:
            raise ValidationError(f"Unknown flag '{flag}'.", field=flag)
        current = self.get(record_id)
        return self.update(record_id, {flag: not getattr(current, flag)})

    def toggle_favorite(self, record_id: str) -> FaqRecord:
        return self.toggle_flag(record_id, "is_favorite")

    def toggle_reusable(self, record_id: str) -> FaqRecord:
        return self.toggle_flag(record_id, "is_reusable")

    def toggle_video(self, record_id: str) -> FaqRecord:
        return self.toggle_flag(record_id, "has_video")

    def delete(self, record_id: str) -> bool:
        """Remove the record. Idempotent: returns False if it was already absent."""
        for index, record in enumerate(self._records):
            if record.id == record_id:
                del self._records[index]
                self._notify(DELETED)
                return True
        return False

    def delete_many(self, record_ids: Iterable[str]) -> int:
        """Remove every listed record that exists; returns how many were removed."""
        doomed = set(record_ids)
        kept = [r for r in self._records if r.id not in doomed]
        removed = len(self._records) - len(kept)
        if removed:
            self._records = kept
            self._notify(DELETED)
        return removed

    def mark_resolved_many(self, record_ids: Iterable[str]) -> list[FaqRecord]:
        """mark_resolved() every listed record that exists; missing ids are skipped."""
        return [self.mark_resolved(rid) for rid in record_ids if rid in self]

    def replace_all(self, records: Sequence[FaqRecord]) -> None:
        """Atomically replace the whole collection (bulk import).

        Imported histories are trusted as-is; no entries are synthesized.

        Raises:
            ValidationError: *records* is not a sequence of FaqRecord with
                unique, non-empty ids. Existing state is left untouched.
        """
        if isinstance(records, (str, bytes, Mapping)) or not isinstance(records, Sequence):
            raise ValidationError("Import payload must be a list of records.")
        items = list(records)
        check_ids(items)
        self._records = items
        self._notify(REPLACED)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _load(self, records: list[FaqRecord]) -> None:
        check_ids(records)
        self._records = records

    def _locate(self, record_id: str) -> tuple[int, FaqRecord]:
        for index, record in enumerate(self._records):
            if record.id == record_id:
                return index, record
        raise NotFoundError(record_id)

    def _unique_id(self, candidate: str) -> str:
        taken = {r.id for r in self._records}
        if candidate not in taken:
            return candidate
        suffix = 2
        while f"{candidate}-{suffix}" in taken:
            suffix += 1
        return f"{candidate}-{suffix}"


# ------------------------------------------------------------------
# Validation helpers
# ------------------------------------------------------------------


def _draft_values(draft: RecordDraft | Mapping[str, Any]) -> dict[str, Any]:
    if isinstance(draft, RecordDraft):
        values = dataclasses.asdict(draft)
    else:
        values = _patch_values(draft)
    for name in _REQUIRED:
        values.setdefault(name, "")
    return values


def _patch_values(patch: Mapping[str, Any]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for key, value in patch.items():
        if key in _IGNORED_PATCH_KEYS:
            continue
        if key not in EDITABLE_FIELDS:
            raise ValidationError(f"Unknown record field '{key}'.", field=key)
        if key in FLAG_FIELDS:
            values[key] = bool(value)
        else:
            values[key] = "" if value is None else str(value)
    return values


def _check_required(values: Mapping[str, Any]) -> None:
    for name in _REQUIRED:
        if name in values and not str(values[name]).strip():
            label = "Reference number" if name == "reference_number" else "Title"
            raise ValidationError(f"{label} is required.", field=name)


def check_ids(records: list[Any]) -> None:
    """Raise ValidationError unless every item is a FaqRecord with a unique, non-empty id."""
    seen: set[str] = set()
    for position, record in enumerate(records):
        if not isinstance(record, FaqRecord):
            raise ValidationError(f"Item {position} is not a record.")
        if not record.id or not record.id.strip():
            raise ValidationError(f"Item {position} has an empty id.", field="id")
        if record.id in seen:
            raise ValidationError(f"Duplicate id '{record.id}' at item {position}.", field="id")
        seen.add(record.id)
