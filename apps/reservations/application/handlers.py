"""
Event handlers for reservation outcomes

The engine has no background work; handlers run in-process after the
transaction commits (or right away for rejections). The audit handler
writes each outcome as one structured log line.
"""

import structlog

from shared.application.message_bus import message_bus

from ..domain.events import (
    ReservationCommitted,
    ReservationDeleted,
    ReservationRejected,
    ReservationUpdated,
)

audit_logger = structlog.get_logger("reservations.audit")


def log_reservation_event(event) -> None:  # type: ignore
    payload = event.to_dict()
    event_type = payload.pop("event_type")
    audit_logger.info(event_type, **payload)


def register_handlers() -> None:
    """Subscribe the audit handler to every reservation event. Safe to call twice."""
    for event_type in (
        ReservationCommitted,
        ReservationUpdated,
        ReservationDeleted,
        ReservationRejected,
    ):
        message_bus.register_event_handler(event_type, log_reservation_event)
