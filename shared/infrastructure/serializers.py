"""Serializer building blocks shared by the rooms and reservations APIs."""

from __future__ import annotations

from django.utils import timezone  # type: ignore
from django.utils.dateparse import parse_datetime  # type: ignore
from rest_framework import serializers  # type: ignore

from shared.domain.errors import InvalidRequest
from shared.domain.value_objects import TimeRange


class AwareDateTimeField(serializers.DateTimeField):
    """ISO-8601 datetime that must carry an explicit UTC offset.

    Naive timestamps are rejected instead of being silently read in the
    server's time zone.
    """

    default_error_messages = {
        "naive": "Timestamp must include an explicit UTC offset, e.g. 2024-01-01T10:00:00Z.",
    }

    def to_internal_value(self, value):  # type: ignore
        if isinstance(value, str):
            parsed = parse_datetime(value.strip())
            if parsed is not None and timezone.is_naive(parsed):
                self.fail("naive")
        elif hasattr(value, "tzinfo") and timezone.is_naive(value):
            self.fail("naive")
        return super().to_internal_value(value)


class IntervalSerializer(serializers.Serializer):
    """``start``/``end`` query parameters describing a half-open interval."""

    start = AwareDateTimeField()
    end = AwareDateTimeField()

    def validate(self, attrs):  # type: ignore
        try:
            attrs["interval"] = TimeRange(attrs["start"], attrs["end"])
        except InvalidRequest as exc:
            raise serializers.ValidationError({"end": [exc.message]})
        return attrs
