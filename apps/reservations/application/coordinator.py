"""
Booking Coordinator

The use cases that change the ledger. Each attempt walks through
Validated -> Checked -> Committed and may be rejected at any gate:

1. Validate: interval, recurrence and payload are checked before the
   store is touched (apart from the room lookup).
2. Check: inside one transaction the room row is locked and the
   availability oracle runs against the ledger as seen by that
   transaction.
3. Commit: the reservation is appended or replaced in the same
   transaction, so no other commit on the same room can interleave
   between the check and the write.

Commits on different rooms lock different rows and proceed in parallel.
A failure at any step rolls the whole transaction back.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

import structlog
from django.utils import timezone  # type: ignore

from apps.rooms.models import Room
from apps.rooms.services import get_room
from apps.users.authorization import Principal, require_owner_or_admin
from shared.application.message_bus import message_bus
from shared.application.uow import DjangoUnitOfWork, store_errors
from shared.domain.errors import Conflict, InvalidRequest, NotFound, ReservationSystemError, Transient
from shared.domain.value_objects import TimeRange

from .. import ledger
from ..domain.availability import AvailabilityResult, check_availability
from ..domain.events import (
    ReservationCommitted,
    ReservationDeleted,
    ReservationRejected,
    ReservationUpdated,
)
from ..domain.recurrence import Recurrence
from ..models import Reservation

logger = structlog.get_logger(__name__)


# ===== Commands =====

@dataclass(frozen=True)
class CreateReservationCommand:
    """Book ``room_id`` over ``[start_time, end_time)`` for the principal."""
    principal: Principal
    room_id: int
    start_time: datetime
    end_time: datetime
    title: str
    description: str = ""
    contact_id: Optional[int] = None
    recurring_type: str = "none"
    recurring_end_date: Optional[date] = None


@dataclass(frozen=True)
class UpdateReservationCommand:
    """Replace every field of a reservation except its id and owner."""
    principal: Principal
    reservation_id: int
    room_id: int
    start_time: datetime
    end_time: datetime
    title: str
    description: str = ""
    contact_id: Optional[int] = None
    recurring_type: str = "none"
    recurring_end_date: Optional[date] = None


@dataclass(frozen=True)
class DeleteReservationCommand:
    principal: Principal
    reservation_id: int


@dataclass(frozen=True)
class _ValidatedFields:
    interval: TimeRange
    recurrence: Recurrence
    title: str
    description: str
    contact_id: Optional[int]


def _validate(command) -> _ValidatedFields:  # type: ignore
    """Gate 1: everything that can be judged without the ledger."""
    interval = TimeRange(command.start_time, command.end_time)
    recurrence = Recurrence.parse(
        command.recurring_type,
        command.recurring_end_date,
        interval,
        timezone.get_current_timezone(),
    )

    title = (command.title or "").strip()
    if not title:
        raise InvalidRequest("Title is required")
    if len(title) > 255:
        raise InvalidRequest("Title must be at most 255 characters")

    contact_id = command.contact_id
    if contact_id is not None and (
        isinstance(contact_id, bool) or not isinstance(contact_id, int) or contact_id < 1
    ):
        raise InvalidRequest("contact_id must be a positive integer")

    return _ValidatedFields(
        interval=interval,
        recurrence=recurrence,
        title=title,
        description=command.description or "",
        contact_id=contact_id,
    )


def _unavailable(result: AvailabilityResult) -> Conflict:
    messages = {
        "disabled": "Room is not available for booking",
        "outside_operating_hours": "Requested time is outside the room's operating hours",
        "conflict": "Room is not available for the requested time",
    }
    details: dict = {"reason": result.reason.value}
    if result.conflicting_ids:
        details["conflicting_ids"] = list(result.conflicting_ids)
    return Conflict(messages.get(result.reason.value, "Room is not available"), details=details)


def _lock_rooms(uow: DjangoUnitOfWork, room_ids) -> dict[int, Room]:
    """Lock the given room rows in ascending id order."""
    wanted = sorted(set(room_ids))
    rooms = {room.pk: room for room in uow.lock(Room.objects.filter(pk__in=wanted))}
    for room_id in wanted:
        if room_id not in rooms:
            raise NotFound(f"Room {room_id} not found")
    return rooms


def _publish_rejection(principal: Principal, room_id: int, interval: TimeRange, exc: ReservationSystemError):
    reason = exc.details.get("reason", exc.kind) if exc.details else exc.kind
    logger.info(
        "reservation.rejected",
        room_id=room_id,
        user_id=principal.user_id,
        interval=str(interval),
        reason=reason,
    )
    message_bus.publish(
        ReservationRejected(
            room_id=room_id,
            user_id=principal.user_id,
            interval=interval,
            reason=reason,
            conflicting_ids=tuple(exc.details.get("conflicting_ids", ())) if exc.details else (),
        )
    )


# ===== Command Handlers =====

class CreateReservationHandler:
    """
    Handler for CreateReservation command

    Locks the room row, asks the oracle and appends, all in one
    transaction. On PostgreSQL the ledger's exclusion constraint backs
    this up; an integrity error it raises surfaces as ``Conflict``.
    """

    def handle(self, command: CreateReservationCommand) -> Reservation:
        fields = _validate(command)
        get_room(command.room_id)

        try:
            with store_errors("create reservation"), DjangoUnitOfWork() as uow:
                room = _lock_rooms(uow, [command.room_id])[command.room_id]

                result = check_availability(
                    room.pk, fields.interval, recurrence=fields.recurrence, room=room
                )
                if not result.available:
                    raise _unavailable(result)

                reservation = ledger.append_reservation(
                    room=room,
                    user_id=command.principal.user_id,
                    interval=fields.interval,
                    title=fields.title,
                    description=fields.description,
                    contact_id=fields.contact_id,
                    recurrence=fields.recurrence,
                )
                uow.record(
                    ReservationCommitted(
                        aggregate_id=reservation.pk,
                        reservation_id=reservation.pk,
                        room_id=room.pk,
                        user_id=command.principal.user_id,
                        interval=fields.interval,
                        recurring_type=fields.recurrence.kind.value,
                    )
                )
        except Conflict as exc:
            _publish_rejection(command.principal, command.room_id, fields.interval, exc)
            raise

        logger.info(
            "reservation.committed",
            reservation_id=reservation.pk,
            room_id=reservation.room_id,
            user_id=reservation.user_id,
            interval=str(fields.interval),
            recurring_type=reservation.recurring_type,
        )
        return reservation


class UpdateReservationHandler:
    """
    Handler for UpdateReservation command

    The availability check is re-run only when the room or the interval
    changed; the reservation itself never counts as a conflict.
    """

    def handle(self, command: UpdateReservationCommand) -> Reservation:
        fields = _validate(command)
        current = ledger.get_reservation(command.reservation_id)
        require_owner_or_admin(command.principal, current.user_id, "update")

        try:
            with store_errors("update reservation"), DjangoUnitOfWork() as uow:
                room_ids = {current.room_id, command.room_id}
                rooms = _lock_rooms(uow, room_ids)

                current = ledger.get_reservation(command.reservation_id)
                if current.room_id not in room_ids:
                    raise Transient("Reservation was moved concurrently; retry the request")
                previous_room_id = current.room_id

                unchanged = (
                    current.room_id == command.room_id
                    and current.start_time == fields.interval.start
                    and current.end_time == fields.interval.end
                )
                if not unchanged:
                    result = check_availability(
                        command.room_id,
                        fields.interval,
                        recurrence=fields.recurrence,
                        exclude_id=current.pk,
                        room=rooms[command.room_id],
                    )
                    if not result.available:
                        raise _unavailable(result)

                reservation = ledger.replace_reservation(
                    current,
                    room=rooms[command.room_id],
                    interval=fields.interval,
                    title=fields.title,
                    description=fields.description,
                    contact_id=fields.contact_id,
                    recurrence=fields.recurrence,
                )
                uow.record(
                    ReservationUpdated(
                        aggregate_id=reservation.pk,
                        reservation_id=reservation.pk,
                        room_id=reservation.room_id,
                        previous_room_id=previous_room_id,
                        interval=fields.interval,
                        updated_by=command.principal.user_id,
                        rechecked=not unchanged,
                    )
                )
        except Conflict as exc:
            _publish_rejection(command.principal, command.room_id, fields.interval, exc)
            raise

        logger.info(
            "reservation.updated",
            reservation_id=reservation.pk,
            room_id=reservation.room_id,
            previous_room_id=previous_room_id,
            rechecked=not unchanged,
        )
        return reservation


class DeleteReservationHandler:
    """Handler for DeleteReservation command; unconditional once ownership is confirmed."""

    def handle(self, command: DeleteReservationCommand) -> None:
        with store_errors("delete reservation"), DjangoUnitOfWork() as uow:
            current = ledger.get_reservation(command.reservation_id)
            require_owner_or_admin(command.principal, current.user_id, "delete")
            ledger.remove_reservation(current.pk)
            uow.record(
                ReservationDeleted(
                    aggregate_id=current.pk,
                    reservation_id=current.pk,
                    room_id=current.room_id,
                    deleted_by=command.principal.user_id,
                )
            )

        logger.info(
            "reservation.deleted",
            reservation_id=command.reservation_id,
            room_id=current.room_id,
            by=command.principal.user_id,
        )


def create_reservation(command: CreateReservationCommand) -> Reservation:
    return CreateReservationHandler().handle(command)


def update_reservation(command: UpdateReservationCommand) -> Reservation:
    return UpdateReservationHandler().handle(command)


def delete_reservation(command: DeleteReservationCommand) -> None:
    DeleteReservationHandler().handle(command)
