"""Domain layer: records, taxonomy, filtering, aggregation, pagination."""

from faqdesk.core.aggregate import Stats, aggregate
from faqdesk.core.errors import (
    ExternalServiceError,
    FaqDeskError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from faqdesk.core.filters import filter_records
from faqdesk.core.models import AuditEntry, FaqRecord, FilterSpec, RecordDraft, TriState
from faqdesk.core.pagination import ViewState, Window, compute_window
from faqdesk.core.store import RecordStore
from faqdesk.core.taxonomy import TaxonomyRegistry

__all__ = [
    "AuditEntry",
    "ExternalServiceError",
    "FaqDeskError",
    "FaqRecord",
    "FilterSpec",
    "NotFoundError",
    "PersistenceError",
    "RecordDraft",
    "RecordStore",
    "Stats",
    "TaxonomyRegistry",
    "TriState",
    "ValidationError",
    "ViewState",
    "Window",
    "aggregate",
    "compute_window",
    "filter_records",
]
