"""Filter engine: pure predicate composition over records and a FilterSpec.

A record matches iff every dimension matches (AND). Search is a case-insensitive
substring test OR'd across id, reference number, title, summary, private notes
and raw content. Output order always equals input order.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable

from faqdesk.core.errors import ValidationError
from faqdesk.core.models import FLAG_FIELDS, FaqRecord, FilterSpec, TriState

_SEARCH_FIELDS: tuple[str, ...] = (
    "id",
    "reference_number",
    "title",
    "summary",
    "private_notes",
    "raw_content",
)
_EXACT_FIELDS: tuple[str, ...] = ("system", "category", "type")


def filter_records(records: Iterable[FaqRecord], spec: FilterSpec) -> list[FaqRecord]:
    """Return the records of *records* matching *spec*, in input order."""
    needle = spec.search.strip().lower()
    return [r for r in records if _matches(r, spec, needle)]


def matches(record: FaqRecord, spec: FilterSpec) -> bool:
    return _matches(record, spec, spec.search.strip().lower())


def _matches(record: FaqRecord, spec: FilterSpec, needle: str) -> bool:
    if needle and not any(
        needle in (getattr(record, name) or "").lower() for name in _SEARCH_FIELDS
    ):
        return False
    for name in _EXACT_FIELDS:
        wanted = getattr(spec, name)
        if wanted and getattr(record, name) != wanted:
            return False
    for name in FLAG_FIELDS:
        if not getattr(spec, name).matches(getattr(record, name, False)):
            return False
    return True


def intersect(first: FilterSpec, second: FilterSpec) -> FilterSpec:
    """Combine two specs so that one pass equals filtering by *first* then *second*.

    Dimensions left as wildcards in *second* keep *first*'s constraint.

    Raises:
        ValidationError: both specs constrain the same dimension with different
            values (a single spec cannot express that conjunction).
    """
    merged: dict[str, object] = {}
    for f in dataclasses.fields(FilterSpec):
        a = getattr(first, f.name)
        b = getattr(second, f.name)
        if f.name == "search":
            a, b = a.strip(), b.strip()
        if _is_wildcard(b):
            merged[f.name] = a
        elif _is_wildcard(a) or _same(f.name, a, b):
            merged[f.name] = b
        else:
            raise ValidationError(
                f"Conflicting '{f.name}' constraints: {a!r} and {b!r}.", field=f.name
            )
    return FilterSpec(**merged)  # type: ignore[arg-type]


def _is_wildcard(value: object) -> bool:
    return value is TriState.ANY or value == ""


def _same(name: str, a: object, b: object) -> bool:
    if name == "search":
        return str(a).lower() == str(b).lower()
    return a == b
