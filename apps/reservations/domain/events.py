"""
Reservation Domain Events

Outcomes of booking attempts. Accepted changes are published after the
transaction commits; rejections are published as soon as they happen.
"""

from dataclasses import dataclass, field
from typing import Tuple

from shared.domain.base import DomainEvent
from shared.domain.value_objects import TimeRange


@dataclass(kw_only=True)
class ReservationCommitted(DomainEvent):
    """
    Event: A new reservation was appended to the ledger
    """
    reservation_id: int
    room_id: int
    user_id: int
    interval: TimeRange
    recurring_type: str = "none"

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload.update(
            reservation_id=self.reservation_id,
            room_id=self.room_id,
            user_id=self.user_id,
            interval=str(self.interval),
            recurring_type=self.recurring_type,
        )
        return payload


@dataclass(kw_only=True)
class ReservationUpdated(DomainEvent):
    """
    Event: A reservation was replaced

    ``rechecked`` is False when room and interval were unchanged and the
    availability check was skipped.
    """
    reservation_id: int
    room_id: int
    previous_room_id: int
    interval: TimeRange
    updated_by: int
    rechecked: bool = True

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload.update(
            reservation_id=self.reservation_id,
            room_id=self.room_id,
            previous_room_id=self.previous_room_id,
            interval=str(self.interval),
            updated_by=self.updated_by,
            rechecked=self.rechecked,
        )
        return payload


@dataclass(kw_only=True)
class ReservationDeleted(DomainEvent):
    """Event: A reservation was removed from the ledger"""
    reservation_id: int
    room_id: int
    deleted_by: int

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload.update(
            reservation_id=self.reservation_id,
            room_id=self.room_id,
            deleted_by=self.deleted_by,
        )
        return payload


@dataclass(kw_only=True)
class ReservationRejected(DomainEvent):
    """
    Event: A booking attempt was turned down

    ``reason`` is the error kind or, for unavailable rooms, the
    availability reason (disabled, outside_operating_hours, conflict).
    """
    room_id: int
    user_id: int
    interval: TimeRange
    reason: str
    conflicting_ids: Tuple[int, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload.update(
            room_id=self.room_id,
            user_id=self.user_id,
            interval=str(self.interval),
            reason=self.reason,
            conflicting_ids=list(self.conflicting_ids),
        )
        return payload
