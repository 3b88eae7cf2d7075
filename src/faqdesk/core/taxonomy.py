"""Taxonomy registry: the user-editable systems / categories / types vocabularies.

Each list is an ordered set of unique strings, insertion order preserved.
Removing a value does not touch records that still reference it.
"""

from __future__ import annotations

from typing import Callable, Iterable

from faqdesk.core.errors import ValidationError
from faqdesk.core.seed import DEFAULT_CATEGORIES, DEFAULT_SYSTEMS, DEFAULT_TYPES

SYSTEMS = "systems"
CATEGORIES = "categories"
TYPES = "types"
LIST_NAMES: tuple[str, ...] = (SYSTEMS, CATEGORIES, TYPES)

# record field -> registry list it is entered from
FIELD_LISTS: dict[str, str] = {"system": SYSTEMS, "category": CATEGORIES, "type": TYPES}

Listener = Callable[[str], None]


def _unique(values: Iterable[str]) -> list[str]:
    seen: dict[str, None] = {}
    for v in values:
        seen.setdefault(v, None)
    return list(seen)


class TaxonomyRegistry:
    """Three independently addressable ordered sets of strings."""

    def __init__(
        self,
        systems: Iterable[str] = (),
        categories: Iterable[str] = (),
        types: Iterable[str] = (),
    ) -> None:
        self._lists: dict[str, list[str]] = {
            SYSTEMS: _unique(systems),
            CATEGORIES: _unique(categories),
            TYPES: _unique(types),
        }
        self._listeners: list[Listener] = []

    @classmethod
    def defaults(cls) -> TaxonomyRegistry:
        return cls(DEFAULT_SYSTEMS, DEFAULT_CATEGORIES, DEFAULT_TYPES)

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener*; it is called with the list name after each change."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _notify(self, list_name: str) -> None:
        for listener in list(self._listeners):
            listener(list_name)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def values(self, list_name: str) -> list[str]:
        return list(self._list(list_name))

    def contains(self, list_name: str, value: str) -> bool:
        return value in self._list(list_name)

    def snapshot(self) -> dict[str, list[str]]:
        return {name: list(values) for name, values in self._lists.items()}

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_value(self, list_name: str, value: str) -> bool:
        """Append *value* to *list_name*. Returns False if it was already present."""
        values = self._list(list_name)
        value = value.strip()
        if not value:
            raise ValidationError(f"Cannot add an empty value to {list_name}.", field=list_name)
        if value in values:
            return False
        values.append(value)
        self._notify(list_name)
        return True

    def remove_value(self, list_name: str, value: str) -> bool:
        """Remove *value* from *list_name*. Returns False if it was absent."""
        values = self._list(list_name)
        if value not in values:
            return False
        values.remove(value)
        self._notify(list_name)
        return True

    # ------------------------------------------------------------------
    # Entry-time validation
    # ------------------------------------------------------------------

    def check_entry(self, field_values: dict[str, str]) -> None:
        """Raise ValidationError if a non-empty taxonomy field is not registered.

        Only called for values being entered; stored values are never re-checked.
        """
        for field_name, value in field_values.items():
            list_name = FIELD_LISTS.get(field_name)
            if list_name is None or not value:
                continue
            if value not in self._lists[list_name]:
                raise ValidationError(
                    f"Unknown {field_name} '{value}'. "
                    f"Add it first:  faqdesk taxonomy add {list_name} \"{value}\"",
                    field=field_name,
                )

    def _list(self, list_name: str) -> list[str]:
        try:
            return self._lists[list_name]
        except KeyError:
            raise ValidationError(
                f"Unknown taxonomy list '{list_name}'. Use one of: {', '.join(LIST_NAMES)}.",
                field="list",
            ) from None
