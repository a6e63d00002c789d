"""
Error Taxonomy

Every failure the reservation engine reports carries a stable ``kind``
and a human-readable message. The API layer maps ``kind`` to an HTTP
status; callers decide about retries by class:

- InvalidRequest, NotFound, Forbidden, Conflict, InUse: client errors, not retried
- Transient: store timeout or connection failure, safe to retry the whole operation
- Fatal: schema or consistency violation, surfaced and not retried
"""

from typing import Any, Dict, Optional


class ReservationSystemError(Exception):
    """Base exception for all reservation engine errors."""

    kind = "error"
    http_status = 500
    retryable = False

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.kind, "detail": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class InvalidRequest(ReservationSystemError):
    """Malformed interval, unknown recurrence kind or other invalid input."""

    kind = "invalid_request"
    http_status = 400


class NotFound(ReservationSystemError):
    """Room or reservation does not exist."""

    kind = "not_found"
    http_status = 404


class Forbidden(ReservationSystemError):
    """Principal is neither the owner nor an administrator."""

    kind = "forbidden"
    http_status = 403


class Conflict(ReservationSystemError):
    """Room unavailable for the interval, or a duplicate unique value."""

    kind = "conflict"
    http_status = 409


class InUse(ReservationSystemError):
    """Deletion blocked by dependent records."""

    kind = "in_use"
    http_status = 409


class Transient(ReservationSystemError):
    """Store timeout or connection failure."""

    kind = "transient"
    http_status = 503
    retryable = True


class Fatal(ReservationSystemError):
    """Schema or consistency violation."""

    kind = "fatal"
    http_status = 500
