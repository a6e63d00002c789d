"""Admin registration for the room catalog."""

from __future__ import annotations

from django.contrib import admin

from .models import Room


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "capacity",
        "location",
        "availability_start",
        "availability_end",
        "is_available",
        "updated_at",
    )
    list_filter = ("is_available",)
    search_fields = ("name", "location")
    readonly_fields = ("created_at", "updated_at")
    ordering = ("name",)
