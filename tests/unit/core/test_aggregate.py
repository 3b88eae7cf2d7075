"""Tests for faqdesk.core.aggregate."""

from __future__ import annotations

from faqdesk.core.aggregate import TOP_SYSTEMS, aggregate, group_by, health_ratio, most_recent


def test_empty_subset() -> None:
    stats = aggregate([])
    assert stats.total == 0
    assert stats.health_ratio == 0.0
    assert stats.health_percent == 0
    assert stats.by_system == []
    assert stats.recent == []


def test_counts(make_record) -> None:
    records = [
        make_record("a", needs_review=True, is_reusable=True),
        make_record("b", has_video=True, is_favorite=True),
        make_record("c", needs_review=True, has_video=True),
        make_record("d"),
    ]
    stats = aggregate(records)

    assert stats.total == 4
    assert stats.needs_review_count == 2
    assert stats.up_to_date_count == 2
    assert stats.reusable_count == 1
    assert stats.has_video_count == 2
    assert stats.favorite_count == 1
    assert stats.health_ratio == 0.5
    assert stats.health_percent == 50


def test_group_by_ties_keep_first_appearance(make_record) -> None:
    records = [
        make_record("1", system="B"),
        make_record("2", system="A"),
        make_record("3", system="C"),
        make_record("4", system="A"),
        make_record("5", system="C"),
        make_record("6", system="B"),
        make_record("7", system="D"),
    ]
    assert group_by(records, "system") == [("B", 2), ("A", 2), ("C", 2), ("D", 1)]


def test_top_systems_truncated_categories_not(make_record) -> None:
    records = [make_record(str(i), system=f"S{i}", category=f"C{i}") for i in range(8)]
    stats = aggregate(records)

    assert len(stats.by_system) == 8
    assert len(stats.top_systems) == TOP_SYSTEMS
    assert stats.top_systems == stats.by_system[:TOP_SYSTEMS]
    assert len(stats.by_category) == 8


def test_most_recent_newest_first_ties_in_input_order(make_record) -> None:
    records = [
        make_record("old", created_at=1),
        make_record("tie-a", created_at=5),
        make_record("new", created_at=9),
        make_record("tie-b", created_at=5),
    ]
    assert [r.id for r in most_recent(records, 3)] == ["new", "tie-a", "tie-b"]
    assert most_recent(records, 0) == []
    assert len(most_recent(records, 10)) == 4


def test_recent_is_capped_at_five(make_record) -> None:
    records = [make_record(str(i), created_at=i) for i in range(9)]
    assert [r.id for r in aggregate(records).recent] == ["8", "7", "6", "5", "4"]


def test_health_ratio_zero_total() -> None:
    assert health_ratio(0, 0) == 0.0
    assert health_ratio(3, 4) == 0.75
