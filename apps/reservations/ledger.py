"""
Reservation Ledger

The authoritative store of committed reservations. Every query that
asks "what touches this interval" uses the single overlap predicate
``start_time < end AND end_time > start``; it covers partial overlap on
either edge and containment in both directions.

Writes here do no availability checking of their own. They are meant
to be called by the booking coordinator inside its unit of work, after
the room row has been locked and the oracle has approved the interval.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional

from django.db.models import Q, QuerySet  # type: ignore

from apps.rooms.models import Room
from shared.domain.errors import InvalidRequest, NotFound
from shared.domain.value_objects import TimeRange

from .conf import reservation_setting
from .domain.recurrence import LONGEST_OCCURRENCE, Recurrence
from .models import Reservation


def overlap_q(interval: TimeRange) -> Q:
    """Reservations whose stored interval overlaps ``interval``."""
    return Q(start_time__lt=interval.end, end_time__gt=interval.start)


def _recurring_reaching_q(interval: TimeRange) -> Q:
    """Recurring reservations that may have an occurrence overlapping ``interval``."""
    # The last occurrence starts on the end date at the latest and may run
    # for LONGEST_OCCURRENCE; one more day covers local dates west of UTC.
    earliest_end_date = interval.start.date() - LONGEST_OCCURRENCE - timedelta(days=1)
    reaches = Q(recurring_end_date__isnull=True) | Q(recurring_end_date__gte=earliest_end_date)
    return Q(start_time__lt=interval.end) & ~Q(recurring_type=Reservation.RecurringType.NONE) & reaches


def _base_queryset() -> QuerySet:
    return Reservation.objects.select_related("room")


@dataclass(frozen=True)
class ReservationPage:
    items: list
    total: int
    limit: int
    offset: int


def get_reservation(reservation_id: int) -> Reservation:
    try:
        return _base_queryset().get(pk=reservation_id)
    except Reservation.DoesNotExist:
        raise NotFound(f"Reservation {reservation_id} not found") from None


def append_reservation(
    *,
    room: Room,
    user_id: int,
    interval: TimeRange,
    title: str,
    description: str = "",
    contact_id: Optional[int] = None,
    recurrence: Recurrence = Recurrence.none(),
) -> Reservation:
    return Reservation.objects.create(
        room=room,
        user_id=user_id,
        contact_id=contact_id,
        title=title,
        description=description,
        start_time=interval.start,
        end_time=interval.end,
        recurring_type=recurrence.kind.value,
        recurring_end_date=recurrence.until,
    )


def replace_reservation(
    reservation: Reservation,
    *,
    room: Room,
    interval: TimeRange,
    title: str,
    description: str = "",
    contact_id: Optional[int] = None,
    recurrence: Recurrence = Recurrence.none(),
) -> Reservation:
    """Overwrite every field except the id and the owner."""
    reservation.room = room
    reservation.contact_id = contact_id
    reservation.title = title
    reservation.description = description
    reservation.start_time = interval.start
    reservation.end_time = interval.end
    reservation.recurring_type = recurrence.kind.value
    reservation.recurring_end_date = recurrence.until
    reservation.save()
    return reservation


def remove_reservation(reservation_id: int) -> None:
    deleted, _ = Reservation.objects.filter(pk=reservation_id).delete()
    if not deleted:
        raise NotFound(f"Reservation {reservation_id} not found")


def query_by_room(
    room_id: int,
    interval: TimeRange,
    *,
    exclude_id: Optional[int] = None,
    include_recurring: bool = False,
) -> list[Reservation]:
    """
    Reservations on ``room_id`` that may occupy part of ``interval``

    With ``include_recurring`` the result also holds recurring
    reservations whose series reaches into the interval, even when their
    first occurrence does not; the caller expands and filters them.
    Ordered by start time ascending.
    """
    predicate = overlap_q(interval)
    if include_recurring:
        predicate |= _recurring_reaching_q(interval)
    qs = Reservation.objects.filter(room_id=room_id).filter(predicate)
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)
    return list(qs.order_by("start_time", "pk"))


def query_by_rooms(
    room_ids: list[int],
    interval: TimeRange,
    *,
    include_recurring: bool = False,
) -> dict[int, list[Reservation]]:
    """``query_by_room`` for several rooms in one round trip, keyed by room id."""
    grouped: dict[int, list[Reservation]] = {room_id: [] for room_id in room_ids}
    if not room_ids:
        return grouped
    predicate = overlap_q(interval)
    if include_recurring:
        predicate |= _recurring_reaching_q(interval)
    qs = Reservation.objects.filter(room_id__in=room_ids).filter(predicate)
    for reservation in qs.order_by("start_time", "pk"):
        grouped[reservation.room_id].append(reservation)
    return grouped


def query_by_range(interval: TimeRange, *, room_id: Optional[int] = None) -> QuerySet:
    """Reservations across all rooms overlapping ``interval``, earliest first."""
    qs = _base_queryset().filter(overlap_q(interval))
    if room_id is not None:
        qs = qs.filter(room_id=room_id)
    return qs.order_by("start_time", "pk")


def list_reservations(limit: Optional[int] = None, offset: int = 0) -> ReservationPage:
    """A page of all reservations, most recent start time first."""
    if limit is None:
        limit = reservation_setting("DEFAULT_PAGE_SIZE")
    max_limit = reservation_setting("MAX_PAGE_SIZE")
    if limit < 1:
        raise InvalidRequest("limit must be a positive integer")
    if offset < 0:
        raise InvalidRequest("offset must not be negative")
    limit = min(limit, max_limit)

    qs = _base_queryset().order_by("-start_time", "-pk")
    return ReservationPage(
        items=list(qs[offset:offset + limit]),
        total=qs.count(),
        limit=limit,
        offset=offset,
    )


def has_reservations_for_room(room_id: int) -> bool:
    return Reservation.objects.filter(room_id=room_id).exists()


def day_range(first: date, last: date, tz) -> TimeRange:  # type: ignore
    """Local midnight of ``first`` up to local midnight after ``last``."""
    if last < first:
        raise InvalidRequest("End date must not be before start date")
    start = datetime.combine(first, time.min).replace(tzinfo=tz)
    end = datetime.combine(last + timedelta(days=1), time.min).replace(tzinfo=tz)
    return TimeRange(start, end)
