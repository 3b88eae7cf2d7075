"""Failure taxonomy for the knowledge base.

ValidationError and NotFoundError are raised synchronously at the point of a
rejected mutation; no partial state change is observable when they are raised.
ExternalServiceError wraps summarizer / id-generation / metadata failures and
is caught at the service boundary. PersistenceError is logged, never retried.
"""

from __future__ import annotations


class FaqDeskError(Exception):
    """Base class for all faqdesk errors."""


class ValidationError(FaqDeskError, ValueError):
    """Raised when a required field is missing or an import payload is malformed.

    Attributes:
        field: Name of the offending field, if the failure is tied to one.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class NotFoundError(FaqDeskError, KeyError):
    """Raised when mutating a record whose id is not in the store."""

    def __init__(self, record_id: str) -> None:
        super().__init__(record_id)
        self.record_id = record_id

    def __str__(self) -> str:
        return f"Record not found: '{self.record_id}'"


class ExternalServiceError(FaqDeskError):
    """Raised when the summarizer, id generator, or metadata fetch fails."""


class PersistenceError(FaqDeskError):
    """Raised (and logged) when the backing key-value store rejects a write."""
