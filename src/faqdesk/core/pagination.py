"""View-window controller: which slice of the filtered set is visible.

compute_window() only derives bounds; the page / show-all / selection state is
owned by the caller (ViewState). Selection is not pruned automatically when the
visible set changes: callers run prune_selection() after every filter or store
change.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from faqdesk.core.errors import ValidationError

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 12


@dataclass(frozen=True)
class Window(Generic[T]):
    """The visible slice plus the numbers needed to render a pager."""

    items: list[T]
    page: int
    page_size: int
    total_pages: int
    total_items: int
    show_all: bool = False

    @property
    def first_index(self) -> int:
        """0-based index of items[0] within the filtered set (0 when empty)."""
        if self.show_all or not self.items:
            return 0
        return (self.page - 1) * self.page_size


def total_pages(count: int, page_size: int) -> int:
    """ceil(count / page_size), never less than 1."""
    _check_page_size(page_size)
    return max(1, math.ceil(count / page_size))


def compute_window(
    records: Sequence[T], page: int, page_size: int = DEFAULT_PAGE_SIZE, show_all: bool = False
) -> Window[T]:
    """Slice *records* to page *page* (1-based).

    Pages outside 1..total_pages give an empty slice; the caller clamps *page*.
    """
    pages = total_pages(len(records), page_size)
    if show_all:
        items = list(records)
    elif page < 1:
        items = []
    else:
        start = (page - 1) * page_size
        items = list(records[start:start + page_size])
    return Window(
        items=items,
        page=page,
        page_size=page_size,
        total_pages=pages,
        total_items=len(records),
        show_all=show_all,
    )


def prune_selection(selected: Iterable[str], visible_ids: Iterable[str]) -> set[str]:
    """Return the subset of *selected* still present in *visible_ids*."""
    visible = set(visible_ids)
    return {rid for rid in selected if rid in visible}


@dataclass
class ViewState:
    """Mutable list-view state: current page, page size, show-all, selection."""

    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    show_all: bool = False
    selected: set[str] = field(default_factory=set)

    def __post_init__(self) -> None:
        _check_page_size(self.page_size)

    def apply_filter_change(self) -> None:
        """A new FilterSpec resets to page 1 and clears the selection."""
        self.page = 1
        self.selected.clear()

    def go_to(self, page: int, item_count: int) -> int:
        """Move to *page*, clamped to 1..total_pages for *item_count* items."""
        self.page = min(max(1, page), total_pages(item_count, self.page_size))
        return self.page

    def toggle(self, record_id: str) -> None:
        if record_id in self.selected:
            self.selected.discard(record_id)
        else:
            self.selected.add(record_id)

    def sync_selection(self, visible_ids: Iterable[str]) -> None:
        self.selected = prune_selection(self.selected, visible_ids)

    def window(self, records: Sequence[T]) -> Window[T]:
        return compute_window(records, self.page, self.page_size, self.show_all)


def _check_page_size(page_size: int) -> None:
    if page_size < 1:
        raise ValidationError(f"Page size must be >= 1, got {page_size}.", field="page_size")
