"""Reservation engine settings with defaults."""

from __future__ import annotations

from typing import Any

from django.conf import settings  # type: ignore

DEFAULTS: dict[str, Any] = {
    "EXPAND_RECURRENCE": True,
    "RECURRENCE_HORIZON_DAYS": 365,
    "DEFAULT_PAGE_SIZE": 20,
    "MAX_PAGE_SIZE": 100,
}


def reservation_setting(name: str) -> Any:
    """Read ``settings.RESERVATIONS[name]``, falling back to the default."""
    overrides = getattr(settings, "RESERVATIONS", {}) or {}
    if name in overrides:
        return overrides[name]
    return DEFAULTS[name]
