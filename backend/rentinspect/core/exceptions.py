"""Typed outcomes raised by the inspection core.

The core never assumes an HTTP context. Each error carries a
``status_code`` hint that the presentation layer may use when it
renders the failure.
"""

from typing import Any, Dict, Optional


class InspectionCoreError(Exception):
    """Base exception for all core outcomes.

    Attributes:
        message: Human-readable error message.
        status_code: Suggested HTTP status code for presentation layers.
        details: Additional error context.
    """

    status_code: int = 500
    default_message: str = "An unexpected error occurred"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    @property
    def code(self) -> str:
        return type(self).__name__


class NotVisible(InspectionCoreError):
    """Read-path authorization failure.

    Deliberately indistinguishable from the record not existing.
    """

    status_code = 404
    default_message = "Not found"


class Forbidden(InspectionCoreError):
    """Write-path authorization failure."""

    status_code = 403
    default_message = "Permission denied"


class InvalidAssignment(InspectionCoreError):
    """A landlord or tenant reference did not resolve to a user of the required role."""

    status_code = 422
    default_message = "Invalid landlord or tenant assignment"


class InspectionClosed(InspectionCoreError):
    """A write was attempted on a finalized inspection."""

    status_code = 409
    default_message = "Inspection is finalized"


class SourceDataUnavailable(InspectionCoreError):
    """Inspection or photo data could not be read while compiling a report."""

    status_code = 503
    default_message = "Inspection data is unavailable"


class StorageWriteFailed(InspectionCoreError):
    """The report artifact could not be durably written (including timeouts)."""

    status_code = 503
    default_message = "Report could not be stored"
