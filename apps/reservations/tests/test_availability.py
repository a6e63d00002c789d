"""Tests for the availability oracle."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone

import pytest

from apps.reservations.domain.availability import (
    AvailabilityResult,
    AvailabilityStatus,
    UnavailableReason,
    check_availability,
    list_available,
    within_operating_hours,
)
from apps.reservations.domain.recurrence import Recurrence, RecurrenceKind
from apps.reservations.models import Reservation
from apps.rooms.models import Room
from shared.domain.errors import InvalidRequest, NotFound
from shared.domain.value_objects import TimeRange

UTC = timezone.utc


def at(hour: int, minute: int = 0, day: int = 1) -> datetime:
    return datetime(2024, 1, day, hour, minute, tzinfo=UTC)


def book(room, user, start, end, **extra) -> Reservation:  # type: ignore
    return Reservation.objects.create(
        room=room, user=user, title="Existing", start_time=start, end_time=end, **extra
    )


@pytest.mark.django_db
class TestCheckAvailability:
    def test_free_room(self, room) -> None:  # type: ignore
        result = check_availability(room.pk, TimeRange(at(10), at(11)))

        assert result.available
        assert result.status == AvailabilityStatus.AVAILABLE
        assert result.reason == UnavailableReason.NONE
        assert result.conflicting_ids == ()

    @pytest.mark.parametrize(
        "start, end, expected",
        [
            (at(10, 30), at(11, 30), False),  # partial overlap at the end
            (at(9, 30), at(10, 30), False),  # partial overlap at the start
            (at(10, 15), at(10, 45), False),  # candidate inside existing
            (at(9), at(12), False),  # candidate contains existing
            (at(10, 59), at(11, 1), False),
            (at(11), at(12), True),  # touching at the end
            (at(9), at(10), True),  # touching at the start
        ],
    )
    def test_overlap_boundaries(self, room, member, start, end, expected) -> None:  # type: ignore
        book(room, member, at(10), at(11))

        assert check_availability(room.pk, TimeRange(start, end)).available is expected

    def test_conflict_lists_sorted_ids(self, room, member) -> None:  # type: ignore
        second = book(room, member, at(11), at(12))
        first = book(room, member, at(10), at(11))

        result = check_availability(room.pk, TimeRange(at(10, 30), at(11, 30)))

        assert result.reason == UnavailableReason.CONFLICT
        assert result.conflicting_ids == tuple(sorted([first.pk, second.pk]))

    def test_other_rooms_do_not_conflict(self, room, hours_room, member) -> None:  # type: ignore
        book(hours_room, member, at(10), at(11))
        assert check_availability(room.pk, TimeRange(at(10), at(11))).available

    def test_disabled_room_is_unavailable_regardless_of_ledger(self, room) -> None:  # type: ignore
        room.is_available = False
        room.save()

        result = check_availability(room.pk, TimeRange(at(10), at(11)))

        assert not result.available
        assert result.reason == UnavailableReason.DISABLED

    def test_disabled_wins_over_conflict(self, room, member) -> None:  # type: ignore
        book(room, member, at(10), at(11))
        Room.objects.filter(pk=room.pk).update(is_available=False)

        result = check_availability(room.pk, TimeRange(at(10), at(11)))

        assert result.reason == UnavailableReason.DISABLED
        assert result.conflicting_ids == ()

    def test_unknown_room(self) -> None:
        with pytest.raises(NotFound):
            check_availability(424242, TimeRange(at(10), at(11)))

    def test_exclude_id_ignores_reservation(self, room, member) -> None:  # type: ignore
        existing = book(room, member, at(10), at(11))
        result = check_availability(room.pk, TimeRange(at(10), at(11)), exclude_id=existing.pk)
        assert result.available

    def test_outside_operating_hours(self, hours_room) -> None:  # type: ignore
        inside = check_availability(hours_room.pk, TimeRange(at(8), at(13)))
        early = check_availability(hours_room.pk, TimeRange(at(7, 30), at(9)))
        late = check_availability(hours_room.pk, TimeRange(at(12), at(14)))

        assert inside.available
        assert early.reason == UnavailableReason.OUTSIDE_OPERATING_HOURS
        assert late.reason == UnavailableReason.OUTSIDE_OPERATING_HOURS

    def test_result_to_dict(self, room) -> None:  # type: ignore
        payload = check_availability(room.pk, TimeRange(at(10), at(11))).to_dict()
        assert payload["available"] is True
        assert payload["status"] == "available"
        assert payload["reason"] == "none"
        assert payload["conflicting_ids"] == []


@pytest.mark.django_db
class TestRecurringConflicts:
    def test_weekly_series_blocks_future_single_booking(self, room, member) -> None:  # type: ignore
        book(room, member, at(10), at(11), recurring_type=RecurrenceKind.WEEKLY.value)

        result = check_availability(room.pk, TimeRange(at(10, 30, day=15), at(11, 30, day=15)))

        assert result.reason == UnavailableReason.CONFLICT

    def test_series_end_date_is_respected(self, room, member) -> None:  # type: ignore
        book(
            room,
            member,
            at(10),
            at(11),
            recurring_type=RecurrenceKind.WEEKLY.value,
            recurring_end_date=date(2024, 1, 8),
        )

        assert not check_availability(room.pk, TimeRange(at(10, day=8), at(11, day=8))).available
        assert check_availability(room.pk, TimeRange(at(10, day=15), at(11, day=15))).available

    def test_multi_day_occurrence_on_end_date_still_blocks(self, room, member) -> None:  # type: ignore
        series = book(
            room,
            member,
            at(0),
            at(0, day=5),
            recurring_type=RecurrenceKind.WEEKLY.value,
            recurring_end_date=date(2024, 1, 8),
        )
        # the second occurrence runs Jan 8 to Jan 12
        inside_last = TimeRange(at(10, day=10), at(11, day=10))

        result = check_availability(room.pk, inside_last)

        assert result.conflicting_ids == (series.pk,)
        assert room not in list_available(inside_last)

    def test_open_ended_series_blocks_beyond_horizon(self, room, member) -> None:  # type: ignore
        series = book(room, member, at(10), at(11), recurring_type=RecurrenceKind.WEEKLY.value)
        more_than_a_year_later = TimeRange(
            datetime(2025, 2, 3, 10, tzinfo=UTC), datetime(2025, 2, 3, 11, tzinfo=UTC)
        )

        result = check_availability(room.pk, more_than_a_year_later)

        assert result.conflicting_ids == (series.pk,)
        assert room not in list_available(more_than_a_year_later)

    def test_recurring_candidate_hits_future_single_booking(self, room, member) -> None:  # type: ignore
        existing = book(room, member, at(10, day=22), at(11, day=22))
        recurrence = Recurrence(RecurrenceKind.WEEKLY, date(2024, 2, 1))

        result = check_availability(room.pk, TimeRange(at(10), at(11)), recurrence=recurrence)

        assert result.conflicting_ids == (existing.pk,)

    def test_between_occurrences_is_free(self, room, member) -> None:  # type: ignore
        book(room, member, at(10), at(11), recurring_type=RecurrenceKind.DAILY.value)
        assert check_availability(room.pk, TimeRange(at(11, day=3), at(12, day=3))).available

    def test_expansion_can_be_switched_off(self, room, member, settings) -> None:  # type: ignore
        settings.RESERVATIONS = {"EXPAND_RECURRENCE": False}
        book(room, member, at(10), at(11), recurring_type=RecurrenceKind.WEEKLY.value)

        result = check_availability(room.pk, TimeRange(at(10, day=15), at(11, day=15)))

        assert result.available


@pytest.mark.django_db
class TestListAvailable:
    def test_filters_capacity_disabled_and_busy(self, room, member) -> None:  # type: ignore
        Room.objects.create(name="Closed Hall", capacity=500, is_available=False)
        big = Room.objects.create(name="Main Sanctuary", capacity=200)
        busy = Room.objects.create(name="Fellowship Hall", capacity=100)
        book(busy, member, at(10), at(11))

        rooms = list_available(TimeRange(at(10, 30), at(11, 30)), min_capacity=50)

        assert rooms == [big]

    def test_empty_catalog_returns_empty_list(self, db) -> None:  # type: ignore
        assert list_available(TimeRange(at(10), at(11))) == []

    def test_repeated_calls_are_identical(self, room, hours_room, member) -> None:  # type: ignore
        book(room, member, at(10), at(11))
        interval = TimeRange(at(9), at(12))

        first = [r.pk for r in list_available(interval)]
        second = [r.pk for r in list_available(interval)]

        assert first == second == [hours_room.pk]

    def test_rejects_non_positive_capacity(self, db) -> None:  # type: ignore
        with pytest.raises(InvalidRequest):
            list_available(TimeRange(at(10), at(11)), min_capacity=0)


def test_within_operating_hours_in_local_time() -> None:
    utc_plus_5 = timezone(timedelta(hours=5))
    opens, closes = time(8), time(13)
    # 03:00 UTC is 08:00 at UTC+5
    morning = TimeRange(datetime(2024, 6, 3, 3, tzinfo=UTC), datetime(2024, 6, 3, 4, tzinfo=UTC))

    assert within_operating_hours(opens, closes, morning, utc_plus_5)
    assert not within_operating_hours(opens, closes, morning, UTC)


def test_within_operating_hours_single_day_only() -> None:
    overnight = TimeRange(at(20), at(9, day=2))
    assert not within_operating_hours(time(0), time(23, 59), overnight, UTC)

    until_midnight = TimeRange(at(20), datetime(2024, 1, 2, 0, 0, tzinfo=UTC))
    assert within_operating_hours(time(0), time.max, until_midnight, UTC)


def test_booking_until_midnight_fits_room_open_until_end_of_day() -> None:
    until_midnight = TimeRange(at(22), datetime(2024, 1, 2, 0, 0, tzinfo=UTC))

    assert within_operating_hours(time(8), time(23, 59), until_midnight, UTC)
    assert not within_operating_hours(time(8), time(23, 0), until_midnight, UTC)


def test_result_constructors() -> None:
    interval = TimeRange(at(10), at(11))
    result = AvailabilityResult.unavailable(1, interval, UnavailableReason.CONFLICT, [5, 3, 5])
    assert result.conflicting_ids == (3, 5)
    assert not result.available
    assert AvailabilityResult.free(1, interval).available
    assert timedelta(hours=1) == result.interval.duration
