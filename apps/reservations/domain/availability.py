"""
Availability Oracle

Decides whether a room may be booked over a half-open interval. The
decision itself (``evaluate``) is a pure function of the room, the
candidate and the reservations already on the ledger; the loaders
around it only fetch those inputs.

Checks run in a fixed order and the first failing one wins:

1. the room is disabled: unavailable regardless of the ledger
2. the room has operating hours and an occurrence falls outside them
3. an occurrence overlaps an existing reservation's occurrence
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import time, timedelta, tzinfo
from enum import Enum
from typing import Iterable, Optional, Tuple

from django.utils import timezone  # type: ignore

from shared.domain.base import ValueObject
from shared.domain.value_objects import TimeRange

from ..conf import reservation_setting
from .recurrence import Recurrence


class AvailabilityStatus(str, Enum):
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


class UnavailableReason(str, Enum):
    NONE = "none"
    DISABLED = "disabled"
    OUTSIDE_OPERATING_HOURS = "outside_operating_hours"
    CONFLICT = "conflict"


@dataclass(frozen=True)
class AvailabilityResult(ValueObject):
    """
    Tagged outcome of an availability check

    ``conflicting_ids`` lists the ids of the reservations the candidate
    collides with, sorted ascending, and is empty for every other reason.
    """
    room_id: int
    interval: TimeRange
    status: AvailabilityStatus
    reason: UnavailableReason = UnavailableReason.NONE
    conflicting_ids: Tuple[int, ...] = field(default_factory=tuple)

    @classmethod
    def free(cls, room_id: int, interval: TimeRange) -> "AvailabilityResult":
        return cls(room_id, interval, AvailabilityStatus.AVAILABLE)

    @classmethod
    def unavailable(
        cls,
        room_id: int,
        interval: TimeRange,
        reason: UnavailableReason,
        conflicting_ids: Iterable[int] = (),
    ) -> "AvailabilityResult":
        return cls(
            room_id,
            interval,
            AvailabilityStatus.UNAVAILABLE,
            reason,
            tuple(sorted(set(conflicting_ids))),
        )

    @property
    def available(self) -> bool:
        return self.status == AvailabilityStatus.AVAILABLE

    def to_dict(self) -> dict:
        return {
            "room_id": self.room_id,
            "start": self.interval.start,
            "end": self.interval.end,
            "available": self.available,
            "status": self.status.value,
            "reason": self.reason.value,
            "conflicting_ids": list(self.conflicting_ids),
        }


# Closing time from which a room counts as open until midnight
END_OF_DAY = time(23, 59)


def within_operating_hours(opens: time, closes: time, interval: TimeRange, tz: tzinfo) -> bool:
    """
    True when ``interval`` lies inside one local day's opening window

    An interval ending exactly at local midnight counts as ending on the
    day it started, and fits rooms that close at ``END_OF_DAY`` or later.
    """
    local_start = interval.start.astimezone(tz)
    local_end = interval.end.astimezone(tz)

    end_day = local_end.date()
    end_time = local_end.time().replace(tzinfo=None)
    if end_time == time.min and end_day == local_start.date() + timedelta(days=1):
        end_day, end_time = local_start.date(), END_OF_DAY

    if end_day != local_start.date():
        return False
    return opens <= local_start.time().replace(tzinfo=None) and end_time <= closes


def evaluate(
    room,
    interval: TimeRange,
    existing: Iterable,
    *,
    recurrence: Optional[Recurrence] = None,
    expand: bool = True,
    tz: Optional[tzinfo] = None,
    horizon_days: int = 365,
) -> AvailabilityResult:
    """
    Decide availability of ``room`` for ``interval``

    ``existing`` holds the reservations on the room that may touch the
    candidate. With ``expand`` both the candidate and the existing
    reservations are expanded into their occurrences and every pair is
    compared; without it only first occurrences take part.
    """
    tz = tz or timezone.get_current_timezone()
    recurrence = recurrence or Recurrence.none()

    if not room.is_available:
        return AvailabilityResult.unavailable(room.pk, interval, UnavailableReason.DISABLED)

    if expand:
        candidates = list(recurrence.occurrences(interval, tz=tz, horizon_days=horizon_days)) or [interval]
    else:
        candidates = [interval]

    if room.has_operating_hours:
        for occurrence in candidates:
            if not within_operating_hours(
                room.availability_start, room.availability_end, occurrence, tz
            ):
                return AvailabilityResult.unavailable(
                    room.pk, interval, UnavailableReason.OUTSIDE_OPERATING_HOURS
                )

    span = TimeRange(candidates[0].start, max(c.end for c in candidates))
    conflicting: list[int] = []
    for reservation in existing:
        if expand:
            theirs = Recurrence.of(reservation).occurrences(
                reservation.interval, tz=tz, horizon_days=horizon_days, window=span
            )
        else:
            theirs = [reservation.interval]
        if any(mine.overlaps_with(other) for other in theirs for mine in candidates):
            conflicting.append(reservation.pk)

    if conflicting:
        return AvailabilityResult.unavailable(
            room.pk, interval, UnavailableReason.CONFLICT, conflicting
        )
    return AvailabilityResult.free(room.pk, interval)


def _engine_options(tz: Optional[tzinfo]) -> dict:
    return {
        "expand": bool(reservation_setting("EXPAND_RECURRENCE")),
        "horizon_days": int(reservation_setting("RECURRENCE_HORIZON_DAYS")),
        "tz": tz or timezone.get_current_timezone(),
    }


def _search_window(interval: TimeRange, recurrence: Recurrence, options: dict) -> TimeRange:
    if options["expand"] and recurrence.repeats:
        return recurrence.span(interval, tz=options["tz"], horizon_days=options["horizon_days"])
    return interval


def check_availability(
    room_id: int,
    interval: TimeRange,
    *,
    recurrence: Optional[Recurrence] = None,
    exclude_id: Optional[int] = None,
    room=None,
    tz: Optional[tzinfo] = None,
) -> AvailabilityResult:
    """
    Availability of room ``room_id`` over ``interval``

    Raises ``NotFound`` for an unknown room. Pass ``room`` when the
    caller already holds the (locked) row; ``exclude_id`` leaves one
    reservation out of the comparison, for updates.
    """
    from apps.rooms.services import get_room

    from .. import ledger

    if room is None:
        room = get_room(room_id)
    recurrence = recurrence or Recurrence.none()
    options = _engine_options(tz)

    if not room.is_available:
        return AvailabilityResult.unavailable(room.pk, interval, UnavailableReason.DISABLED)

    window = _search_window(interval, recurrence, options)
    existing = ledger.query_by_room(
        room.pk, window, exclude_id=exclude_id, include_recurring=options["expand"]
    )
    return evaluate(room, interval, existing, recurrence=recurrence, **options)


def list_available(interval: TimeRange, min_capacity: int = 1, *, tz: Optional[tzinfo] = None) -> list:
    """
    Enabled rooms with at least ``min_capacity`` seats that are free over ``interval``

    A read-only scan: nothing is locked or written, and an empty catalog
    yields an empty list.
    """
    from apps.rooms.services import list_enabled_rooms

    from .. import ledger

    rooms = list_enabled_rooms(min_capacity)
    if not rooms:
        return []

    options = _engine_options(tz)
    existing = ledger.query_by_rooms(
        [room.pk for room in rooms], interval, include_recurring=options["expand"]
    )
    return [
        room
        for room in rooms
        if evaluate(room, interval, existing[room.pk], **options).available
    ]
