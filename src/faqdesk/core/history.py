"""Audit trail rules: which mutations write which history entries.

History is newest-first. Entries are only ever prepended; the only operation
that discards history is a bulk replace via import.

Update rules, evaluated in order against the prior record (each applicable
entry is prepended in turn, so the last applicable rule ends up at index 0):
  1. needs_review False -> True         "review requested"
  2. otherwise, needs_review changed    "review status changed"
  3. summary text changed               "summary edited"
  4. raw_content text changed           "content edited"

mark_resolved() bypasses rule 2 and always writes "marked as updated".
"""

from __future__ import annotations

from faqdesk.core.models import AuditEntry, FaqRecord

RECORD_CREATED = "record created"
REVIEW_REQUESTED = "review requested"
REVIEW_STATUS_CHANGED = "review status changed"
SUMMARY_EDITED = "summary edited"
CONTENT_EDITED = "content edited"
MARKED_AS_UPDATED = "marked as updated"

ACTIONS: frozenset[str] = frozenset(
    [
        RECORD_CREATED,
        REVIEW_REQUESTED,
        REVIEW_STATUS_CHANGED,
        SUMMARY_EDITED,
        CONTENT_EDITED,
        MARKED_AS_UPDATED,
    ]
)


def created_entry(now: int) -> AuditEntry:
    return AuditEntry(timestamp=now, action=RECORD_CREATED)


def update_actions(old: FaqRecord, new: FaqRecord) -> list[str]:
    """Return the actions an update from *old* to *new* must log, in rule order."""
    actions: list[str] = []
    if new.needs_review and not old.needs_review:
        actions.append(REVIEW_REQUESTED)
    elif new.needs_review != old.needs_review:
        actions.append(REVIEW_STATUS_CHANGED)
    if new.summary != old.summary:
        actions.append(SUMMARY_EDITED)
    if new.raw_content != old.raw_content:
        actions.append(CONTENT_EDITED)
    return actions


def prepend(
    history: tuple[AuditEntry, ...], actions: list[str], now: int
) -> tuple[AuditEntry, ...]:
    """Prepend one entry per action, in order, onto *history*."""
    for action in actions:
        history = (AuditEntry(timestamp=now, action=action),) + history
    return history
