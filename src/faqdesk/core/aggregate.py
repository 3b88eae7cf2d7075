"""Dashboard statistics over an already-filtered record subset.

All rankings use stable sorts: ties keep the order in which values (or
records) first appear in the input.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from faqdesk.core.models import FaqRecord

TOP_SYSTEMS = 5
RECENT_COUNT = 5


@dataclass(frozen=True)
class Stats:
    """Summary statistics for one record subset.

    Attributes:
        by_system: Full (value, count) ranking for the system field.
        top_systems: by_system truncated to TOP_SYSTEMS entries.
        by_category: Full (value, count) ranking for the category field.
        recent: Up to RECENT_COUNT records, newest createdAt first.
        health_ratio: up_to_date_count / total, 0.0 for an empty subset.
    """

    total: int = 0
    needs_review_count: int = 0
    reusable_count: int = 0
    has_video_count: int = 0
    favorite_count: int = 0
    up_to_date_count: int = 0
    by_system: list[tuple[str, int]] = field(default_factory=list)
    top_systems: list[tuple[str, int]] = field(default_factory=list)
    by_category: list[tuple[str, int]] = field(default_factory=list)
    recent: list[FaqRecord] = field(default_factory=list)
    health_ratio: float = 0.0

    @property
    def health_percent(self) -> int:
        return round(self.health_ratio * 100)


def group_by(records: Sequence[FaqRecord], field_name: str) -> list[tuple[str, int]]:
    """Count records per *field_name* value, ranked by count descending."""
    counts: dict[str, int] = {}
    for record in records:
        key = getattr(record, field_name)
        counts[key] = counts.get(key, 0) + 1
    return sorted(counts.items(), key=lambda item: item[1], reverse=True)


def most_recent(records: Sequence[FaqRecord], n: int = RECENT_COUNT) -> list[FaqRecord]:
    """Return the *n* newest records by createdAt; ties keep input order."""
    if n <= 0:
        return []
    return sorted(records, key=lambda r: r.created_at, reverse=True)[:n]


def health_ratio(up_to_date: int, total: int) -> float:
    if total == 0:
        return 0.0
    return up_to_date / total


def aggregate(records: Sequence[FaqRecord]) -> Stats:
    total = len(records)
    needs_review = sum(1 for r in records if r.needs_review)
    up_to_date = total - needs_review
    by_system = group_by(records, "system")
    return Stats(
        total=total,
        needs_review_count=needs_review,
        reusable_count=sum(1 for r in records if r.is_reusable),
        has_video_count=sum(1 for r in records if r.has_video),
        favorite_count=sum(1 for r in records if r.is_favorite),
        up_to_date_count=up_to_date,
        by_system=by_system,
        top_systems=by_system[:TOP_SYSTEMS],
        by_category=group_by(records, "category"),
        recent=most_recent(records),
        health_ratio=health_ratio(up_to_date, total),
    )
