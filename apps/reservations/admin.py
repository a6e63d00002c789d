"""Admin registration for reservations."""

from __future__ import annotations

from django.contrib import admin

from .models import Reservation


@admin.register(Reservation)
class ReservationAdmin(admin.ModelAdmin):
    list_display = (
        "title",
        "room",
        "user",
        "start_time",
        "end_time",
        "recurring_type",
        "recurring_end_date",
        "created_at",
    )
    list_filter = ("room", "recurring_type", "start_time")
    search_fields = ("title", "room__name", "user__email")
    readonly_fields = ("created_at", "updated_at")
    raw_id_fields = ("user",)
    date_hierarchy = "start_time"

    def has_add_permission(self, request):  # type: ignore
        # Writes bypassing the booking coordinator would skip the availability check
        return False

    def has_change_permission(self, request, obj=None):  # type: ignore
        return False
