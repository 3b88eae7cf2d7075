"""Domain models for the knowledge base.

FaqRecord and AuditEntry are frozen: every mutation in RecordStore builds a
new record with dataclasses.replace() and swaps it in, so a half-applied
update is never observable. FilterSpec is a transient view-layer value.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum

from faqdesk.core.errors import ValidationError


@dataclass(frozen=True)
class AuditEntry:
    """One immutable, timestamped line in a record's history.

    Attributes:
        timestamp: Milliseconds since epoch.
        action: Event label (see faqdesk.core.history).
        actor: Reserved; not used by any core logic.
    """

    timestamp: int
    action: str
    actor: str | None = None


@dataclass(frozen=True)
class FaqRecord:
    """One cataloged support question (a "PF").

    system / category / type are free text: they are checked against the
    taxonomy when entered, never when read, so a record may keep a value that
    has since been removed from the registry.
    """

    id: str
    reference_number: str
    title: str
    url: str = ""
    raw_content: str = ""
    summary: str = ""
    private_notes: str = ""
    system: str = ""
    category: str = ""
    type: str = ""
    needs_review: bool = False
    is_favorite: bool = False
    is_reusable: bool = False
    has_video: bool = False
    created_at: int = 0
    history: tuple[AuditEntry, ...] = ()

    @property
    def status_label(self) -> str:
        return "Requer Atualização" if self.needs_review else "Atualizado"


# Fields a caller may set through create() / update(). id, created_at and
# history are owned by the store.
EDITABLE_FIELDS: frozenset[str] = frozenset(
    f.name for f in fields(FaqRecord) if f.name not in {"id", "created_at", "history"}
)
FLAG_FIELDS: tuple[str, ...] = ("needs_review", "is_favorite", "is_reusable", "has_video")
TEXT_FIELDS: frozenset[str] = EDITABLE_FIELDS - frozenset(FLAG_FIELDS)


@dataclass
class RecordDraft:
    """User input for a new record, before the store assigns id and timestamps."""

    reference_number: str
    title: str
    url: str = ""
    raw_content: str = ""
    summary: str = ""
    private_notes: str = ""
    system: str = ""
    category: str = ""
    type: str = ""
    needs_review: bool = False
    is_favorite: bool = False
    is_reusable: bool = False
    has_video: bool = False


class TriState(Enum):
    """Three-way boolean filter: no constraint, require True, require False."""

    ANY = "all"
    REQUIRE_TRUE = "true"
    REQUIRE_FALSE = "false"

    def matches(self, value: bool | None) -> bool:
        # An absent flag counts as False.
        if self is TriState.ANY:
            return True
        return bool(value) is (self is TriState.REQUIRE_TRUE)

    @classmethod
    def parse(cls, raw: str | bool | None) -> TriState:
        """Build a TriState from a CLI / config value.

        Accepts None / "all" / "any" / "" for ANY, and booleans or
        "true"/"yes"/"1" and "false"/"no"/"0" for the other variants.
        """
        if raw is None:
            return cls.ANY
        if isinstance(raw, bool):
            return cls.REQUIRE_TRUE if raw else cls.REQUIRE_FALSE
        text = str(raw).strip().lower()
        if text in ("", "all", "any"):
            return cls.ANY
        if text in ("true", "yes", "1"):
            return cls.REQUIRE_TRUE
        if text in ("false", "no", "0"):
            return cls.REQUIRE_FALSE
        raise ValidationError(
            f"Invalid filter value '{raw}'. Use all, true or false.", field="tristate"
        )


@dataclass(frozen=True)
class FilterSpec:
    """Filter configuration passed to filter_records() on every recomputation.

    Empty strings and TriState.ANY are wildcards.
    """

    search: str = ""
    system: str = ""
    category: str = ""
    type: str = ""
    needs_review: TriState = TriState.ANY
    is_favorite: TriState = TriState.ANY
    is_reusable: TriState = TriState.ANY
    has_video: TriState = TriState.ANY

    @property
    def is_empty(self) -> bool:
        return (
            not self.search.strip()
            and not self.system
            and not self.category
            and not self.type
            and all(getattr(self, f) is TriState.ANY for f in FLAG_FIELDS)
        )


@dataclass
class UrlMetadata:
    """Best-effort metadata for an external ticket URL. Empty values on failure."""

    title: str = ""
    reference_number: str = ""
    text: str = field(default="", repr=False)
