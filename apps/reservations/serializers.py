"""Serializers for the reservation API."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from shared.infrastructure.serializers import AwareDateTimeField

from .models import Reservation


class ReservationSerializer(serializers.ModelSerializer):
    """Read representation of a reservation."""

    room_id = serializers.ReadOnlyField()
    room_name = serializers.ReadOnlyField(source="room.name")
    user_id = serializers.ReadOnlyField()

    class Meta:
        model = Reservation
        fields = [
            "id",
            "room_id",
            "room_name",
            "user_id",
            "contact_id",
            "title",
            "description",
            "start_time",
            "end_time",
            "recurring_type",
            "recurring_end_date",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ReservationWriteSerializer(serializers.Serializer):
    """
    Input for create and full update

    Shapes only. Interval, recurrence and availability rules are the
    booking coordinator's job, so a payload that passes here can still
    be rejected with ``invalid_request`` or ``conflict``.
    """

    room_id = serializers.IntegerField(min_value=1)
    contact_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    title = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    start_time = AwareDateTimeField()
    end_time = AwareDateTimeField()
    recurring_type = serializers.CharField(required=False, default=Reservation.RecurringType.NONE)
    recurring_end_date = serializers.DateField(
        required=False, allow_null=True, input_formats=["%Y-%m-%d"]
    )

    def validate_recurring_type(self, value: str) -> str:
        value = (value or "").strip().lower() or Reservation.RecurringType.NONE
        if value not in Reservation.RecurringType.values:
            allowed = ", ".join(Reservation.RecurringType.values)
            raise serializers.ValidationError(f"Must be one of: {allowed}.")
        return value


class ReservationPageQuerySerializer(serializers.Serializer):
    limit = serializers.IntegerField(min_value=1, required=False)
    offset = serializers.IntegerField(min_value=0, required=False, default=0)


class ReservationsByDateQuerySerializer(serializers.Serializer):
    start = serializers.DateField(required=False, input_formats=["%Y-%m-%d"])
    end = serializers.DateField(required=False, input_formats=["%Y-%m-%d"])
    room_id = serializers.IntegerField(min_value=1, required=False)

    def validate(self, attrs):  # type: ignore
        start, end = attrs.get("start"), attrs.get("end")
        if start and end and end < start:
            raise serializers.ValidationError({"end": ["End date must not be before start date."]})
        return attrs
