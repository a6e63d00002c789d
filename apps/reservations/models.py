"""Reservation ledger models."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.db.models import F, Q  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from apps.rooms.models import Room
from shared.domain.value_objects import TimeRange


class Reservation(models.Model):
    """A committed booking of a room over ``[start_time, end_time)``."""

    class RecurringType(models.TextChoices):
        NONE = "none", _("Does not repeat")
        DAILY = "daily", _("Daily")
        WEEKLY = "weekly", _("Weekly")
        MONTHLY = "monthly", _("Monthly")

    room = models.ForeignKey(
        Room,
        on_delete=models.PROTECT,
        related_name="reservations",
        verbose_name=_("Room"),
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="reservations",
        verbose_name=_("Owner"),
    )
    contact_id = models.PositiveBigIntegerField(
        _("Contact"),
        null=True,
        blank=True,
        help_text=_("Optional reference to the contact this reservation is for."),
    )
    title = models.CharField(_("Title"), max_length=255)
    description = models.TextField(_("Description"), blank=True)
    start_time = models.DateTimeField(_("Starts at"))
    end_time = models.DateTimeField(_("Ends at"))
    recurring_type = models.CharField(
        _("Repeats"),
        max_length=10,
        choices=RecurringType.choices,
        default=RecurringType.NONE,
    )
    recurring_end_date = models.DateField(_("Repeats until"), null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Reservation")
        verbose_name_plural = _("Reservations")
        ordering = ["-start_time"]
        indexes = [
            models.Index(fields=["room", "start_time", "end_time"], name="idx_res_room_interval"),
            models.Index(fields=["start_time"], name="idx_res_start"),
            models.Index(fields=["user", "start_time"], name="idx_res_user_start"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(end_time__gt=F("start_time")),
                name="reservation_end_after_start",
            ),
            models.CheckConstraint(
                condition=~Q(recurring_type="none") | Q(recurring_end_date__isnull=True),
                name="reservation_recurring_end_only_when_recurring",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.title} @ {self.room_id} [{self.start_time:%Y-%m-%d %H:%M}]"

    @property
    def interval(self) -> TimeRange:
        return TimeRange(self.start_time, self.end_time)
