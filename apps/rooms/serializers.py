"""Serializers for the room catalog."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from shared.infrastructure.serializers import IntervalSerializer

from .models import Room


class RoomSerializer(serializers.ModelSerializer):
    """Read representation of a room."""

    class Meta:
        model = Room
        fields = [
            "id",
            "name",
            "capacity",
            "location",
            "description",
            "availability_start",
            "availability_end",
            "is_available",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class RoomWriteSerializer(serializers.Serializer):
    """Input for catalog create and update.

    Only shapes and types are checked here; capacity, operating hours
    and name uniqueness are enforced by the catalog service.
    """

    name = serializers.CharField(max_length=255)
    capacity = serializers.IntegerField()
    location = serializers.CharField(max_length=255, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)
    availability_start = serializers.TimeField(required=False, allow_null=True)
    availability_end = serializers.TimeField(required=False, allow_null=True)
    is_available = serializers.BooleanField(required=False)


class AvailableRoomsQuerySerializer(IntervalSerializer):
    capacity = serializers.IntegerField(required=False, default=1)


class AvailabilityResultSerializer(serializers.Serializer):
    room_id = serializers.IntegerField()
    start = serializers.DateTimeField()
    end = serializers.DateTimeField()
    available = serializers.BooleanField()
    status = serializers.CharField()
    reason = serializers.CharField()
    conflicting_ids = serializers.ListField(child=serializers.IntegerField())
