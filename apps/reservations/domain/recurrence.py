"""
Recurrence

A recurring reservation is stored once, with its kind and optional end
date. This module expands the stored interval into the occurrences it
stands for. Steps are taken in local wall-clock time, so a series that
starts at 10:00 stays at 10:00 across daylight saving changes, and
monthly steps are counted from the first occurrence (Jan 31 -> Feb 29
-> Mar 31).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone as dt_timezone, tzinfo
from enum import Enum
from typing import Iterator, Optional

from dateutil.relativedelta import relativedelta

from shared.domain.base import ValueObject
from shared.domain.errors import InvalidRequest
from shared.domain.value_objects import TimeRange


class RecurrenceKind(str, Enum):
    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @classmethod
    def parse(cls, value) -> "RecurrenceKind":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or "none").strip().lower())
        except ValueError:
            allowed = ", ".join(kind.value for kind in cls)
            raise InvalidRequest(
                f"Unknown recurrence kind '{value}'; expected one of: {allowed}"
            ) from None


# Shortest gap between two consecutive occurrences of each kind
_MIN_GAP = {
    RecurrenceKind.DAILY: timedelta(days=1),
    RecurrenceKind.WEEKLY: timedelta(days=7),
    RecurrenceKind.MONTHLY: timedelta(days=28),
}

# Longest a single occurrence of any recurring series may last
LONGEST_OCCURRENCE = max(_MIN_GAP.values())


def _step(kind: RecurrenceKind, index: int) -> relativedelta:
    if kind == RecurrenceKind.DAILY:
        return relativedelta(days=index)
    if kind == RecurrenceKind.WEEKLY:
        return relativedelta(weeks=index)
    return relativedelta(months=index)


def _wall_clock(moment: datetime, tz: tzinfo) -> datetime:
    return moment.astimezone(tz)


@dataclass(frozen=True)
class Recurrence(ValueObject):
    """How a stored interval repeats."""

    kind: RecurrenceKind = RecurrenceKind.NONE
    until: Optional[date] = None

    @classmethod
    def none(cls) -> "Recurrence":
        return cls(RecurrenceKind.NONE, None)

    @classmethod
    def parse(cls, kind, until: Optional[date], first: TimeRange, tz: tzinfo) -> "Recurrence":
        """
        Validate a recurrence for a series whose first occurrence is ``first``

        The end date is dropped for non-recurring reservations. For
        recurring ones it may not fall before the first occurrence's
        local start date, and occurrences may not overlap each other.
        """
        parsed = RecurrenceKind.parse(kind)
        if parsed == RecurrenceKind.NONE:
            return cls.none()

        if until is not None:
            if isinstance(until, datetime) or not isinstance(until, date):
                raise InvalidRequest("Recurrence end date must be a calendar date (YYYY-MM-DD)")
            start_day = _wall_clock(first.start, tz).date()
            if until < start_day:
                raise InvalidRequest(
                    f"Recurrence end date ({until.isoformat()}) must be on or after "
                    f"the start date ({start_day.isoformat()})"
                )

        if first.duration > _MIN_GAP[parsed]:
            raise InvalidRequest(
                f"A {parsed.value} reservation cannot last longer than "
                f"the gap between its occurrences"
            )
        return cls(parsed, until)

    @classmethod
    def of(cls, reservation) -> "Recurrence":  # type: ignore
        """Recurrence of a stored reservation."""
        kind = RecurrenceKind.parse(reservation.recurring_type)
        if kind == RecurrenceKind.NONE:
            return cls.none()
        return cls(kind, reservation.recurring_end_date)

    @property
    def repeats(self) -> bool:
        return self.kind != RecurrenceKind.NONE

    def last_day(self, first: TimeRange, tz: tzinfo, horizon_days: int) -> date:
        """Last local date an occurrence may start on."""
        if self.until is not None:
            return self.until
        return (_wall_clock(first.start, tz) + timedelta(days=horizon_days)).date()

    def occurrences(
        self,
        first: TimeRange,
        *,
        tz: tzinfo,
        horizon_days: int,
        window: Optional[TimeRange] = None,
    ) -> Iterator[TimeRange]:
        """
        Yield the occurrences of the series, earliest first

        Occurrences are generated while their local start date is on or
        before the end date. With ``window`` only occurrences overlapping
        it are yielded, and generation stops once occurrences start at or
        after the window's end; a series without an end date is then
        bounded by the window alone. Without ``window`` such a series is
        cut off ``horizon_days`` after the first occurrence.
        """
        if not self.repeats:
            if window is None or first.overlaps_with(window):
                yield first
            return

        local_start = _wall_clock(first.start, tz)
        local_end = _wall_clock(first.end, tz)
        wall_duration = local_end.replace(tzinfo=None) - local_start.replace(tzinfo=None)
        naive_start = local_start.replace(tzinfo=None)
        if self.until is None and window is not None:
            last_day = None
        else:
            last_day = self.last_day(first, tz, horizon_days)

        index = 0
        while True:
            wall_start = naive_start + _step(self.kind, index)
            if last_day is not None and wall_start.date() > last_day:
                return
            start = wall_start.replace(tzinfo=tz).astimezone(dt_timezone.utc)
            end = (wall_start + wall_duration).replace(tzinfo=tz).astimezone(dt_timezone.utc)
            index += 1

            if end <= start:
                # Wall-clock interval collapsed by a daylight saving jump
                continue
            occurrence = TimeRange(start, end)
            if window is not None:
                if occurrence.start >= window.end:
                    return
                if not occurrence.overlaps_with(window):
                    continue
            yield occurrence

    def span(self, first: TimeRange, *, tz: tzinfo, horizon_days: int) -> TimeRange:
        """Interval from the first occurrence's start to the last one's end."""
        last = first
        for occurrence in self.occurrences(first, tz=tz, horizon_days=horizon_days):
            last = occurrence
        return TimeRange(first.start, max(first.end, last.end))
