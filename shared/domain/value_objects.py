"""
Common Value Objects

- TimeRange: a half-open interval of timezone-aware instants [start, end)
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from shared.domain.base import ValueObject
from shared.domain.errors import InvalidRequest


def _is_aware(value: datetime) -> bool:
    return value.tzinfo is not None and value.tzinfo.utcoffset(value) is not None


@dataclass(frozen=True)
class TimeRange(ValueObject):
    """
    Time range value object

    Represents a range from start (inclusive) to end (exclusive).
    Both bounds must carry an explicit timezone; comparisons are made
    on absolute instants, so ranges expressed in different zones
    compare correctly.
    """
    start: datetime
    end: datetime

    def __post_init__(self):
        if not isinstance(self.start, datetime) or not isinstance(self.end, datetime):
            raise InvalidRequest("Interval bounds must be datetimes")
        if not _is_aware(self.start) or not _is_aware(self.end):
            raise InvalidRequest("Interval bounds must include an explicit timezone")
        if self.start >= self.end:
            raise InvalidRequest(
                f"End time ({self.end.isoformat()}) must be after start time ({self.start.isoformat()})"
            )

    def overlaps_with(self, other: 'TimeRange') -> bool:
        """
        Check if this range overlaps with another

        Note: end is exclusive, so touching ranges don't overlap.

        Examples:
            - [10:00, 11:00) overlaps with [10:59, 11:01) -> True
            - [10:00, 11:00) overlaps with [11:00, 12:00) -> False (adjacent)
        """
        if not isinstance(other, TimeRange):
            raise TypeError("Can only check overlap with another TimeRange")

        # Overlap formula: start1 < end2 AND end1 > start2
        return self.start < other.end and self.end > other.start

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def __str__(self):
        return f"{self.start.isoformat()}/{self.end.isoformat()}"

    def __repr__(self):
        return f"TimeRange({self.start.isoformat()}, {self.end.isoformat()})"
