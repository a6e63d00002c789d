"""Room catalog models."""

from __future__ import annotations

from django.db import models  # type: ignore
from django.db.models import F, Q  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Room(models.Model):
    """A bookable room."""

    name = models.CharField(_("Name"), max_length=255, unique=True)
    capacity = models.PositiveIntegerField(_("Capacity"))
    location = models.CharField(_("Location"), max_length=255, blank=True)
    description = models.TextField(_("Description"), blank=True)
    availability_start = models.TimeField(_("Opens at"), null=True, blank=True)
    availability_end = models.TimeField(_("Closes at"), null=True, blank=True)
    is_available = models.BooleanField(
        _("Bookable"),
        default=True,
        help_text=_("Disabled rooms reject every reservation."),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Room")
        verbose_name_plural = _("Rooms")
        ordering = ["name"]
        indexes = [
            models.Index(fields=["is_available", "capacity"], name="idx_room_enabled_capacity"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(capacity__gt=0),
                name="room_capacity_positive",
            ),
            models.CheckConstraint(
                condition=(
                    Q(availability_start__isnull=True, availability_end__isnull=True)
                    | Q(
                        availability_start__isnull=False,
                        availability_end__isnull=False,
                        availability_end__gt=F("availability_start"),
                    )
                ),
                name="room_operating_hours_pair",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.capacity})"

    @property
    def has_operating_hours(self) -> bool:
        return self.availability_start is not None and self.availability_end is not None
