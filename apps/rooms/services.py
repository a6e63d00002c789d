"""Catalog services for rooms.

Reads are open to everyone. Every mutation requires the admin role and
runs inside a transaction so the uniqueness and in-use checks see the
same state as the write that follows them.
"""

from __future__ import annotations

from datetime import time
from typing import Any

import structlog
from django.db import transaction  # type: ignore

from apps.users.authorization import Principal, Role, require_role
from shared.application.uow import lock_queryset_if_possible, store_errors
from shared.domain.errors import Conflict, InUse, InvalidRequest, NotFound

from .models import Room

logger = structlog.get_logger(__name__)

ROOM_FIELDS = (
    "name",
    "capacity",
    "location",
    "description",
    "availability_start",
    "availability_end",
    "is_available",
)


def get_room(room_id: int) -> Room:
    try:
        return Room.objects.get(pk=room_id)
    except Room.DoesNotExist:
        raise NotFound(f"Room {room_id} not found") from None


def list_rooms():
    """All rooms ordered by name, enabled or not."""
    return Room.objects.order_by("name")


def list_enabled_rooms(min_capacity: int = 1) -> list[Room]:
    """Enabled rooms holding at least ``min_capacity`` people, ordered by name."""
    if isinstance(min_capacity, bool) or not isinstance(min_capacity, int) or min_capacity < 1:
        raise InvalidRequest("Capacity must be a positive integer")
    return list(
        Room.objects.filter(is_available=True, capacity__gte=min_capacity).order_by("name")
    )


def _validate_room(values: dict[str, Any]) -> None:
    name = (values.get("name") or "").strip()
    if not name:
        raise InvalidRequest("Room name is required")
    values["name"] = name

    capacity = values.get("capacity")
    if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 1:
        raise InvalidRequest("Capacity must be greater than zero")

    opens, closes = values.get("availability_start"), values.get("availability_end")
    if (opens is None) != (closes is None):
        raise InvalidRequest("Operating hours need both a start and an end time")
    if opens is not None:
        if not isinstance(opens, time) or not isinstance(closes, time):
            raise InvalidRequest("Operating hours must be times of day")
        if closes <= opens:
            raise InvalidRequest("Operating hours must end after they start")


def _ensure_unique_name(name: str, *, exclude_id: int | None = None) -> None:
    qs = Room.objects.filter(name=name)
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)
    if qs.exists():
        raise Conflict(f"A room named '{name}' already exists")


def _unknown_fields(fields: dict[str, Any]) -> None:
    unknown = sorted(set(fields) - set(ROOM_FIELDS))
    if unknown:
        raise InvalidRequest(f"Unknown room fields: {', '.join(unknown)}")


def create_room(principal: Principal, **fields: Any) -> Room:
    require_role(principal, Role.ADMIN, "create rooms")
    _unknown_fields(fields)

    values: dict[str, Any] = {
        "location": "",
        "description": "",
        "availability_start": None,
        "availability_end": None,
        "is_available": True,
    }
    values.update(fields)
    _validate_room(values)

    with store_errors("create room"), transaction.atomic():
        _ensure_unique_name(values["name"])
        room = Room.objects.create(**values)

    logger.info("room.created", room_id=room.pk, name=room.name, by=principal.user_id)
    return room


def update_room(principal: Principal, room_id: int, **fields: Any) -> Room:
    """Apply ``fields`` to the room; fields not given keep their values."""
    require_role(principal, Role.ADMIN, "update rooms")
    _unknown_fields(fields)

    with store_errors("update room"), transaction.atomic():
        rooms = list(lock_queryset_if_possible(Room.objects.filter(pk=room_id)))
        if not rooms:
            raise NotFound(f"Room {room_id} not found")
        room = rooms[0]

        values = {name: getattr(room, name) for name in ROOM_FIELDS}
        values.update(fields)
        _validate_room(values)
        _ensure_unique_name(values["name"], exclude_id=room.pk)

        for name, value in values.items():
            setattr(room, name, value)
        room.save()

    logger.info("room.updated", room_id=room.pk, fields=sorted(fields), by=principal.user_id)
    return room


def delete_room(principal: Principal, room_id: int) -> None:
    """Delete a room that no reservation references."""
    from apps.reservations.ledger import has_reservations_for_room

    require_role(principal, Role.ADMIN, "delete rooms")

    with store_errors("delete room"), transaction.atomic():
        rooms = list(lock_queryset_if_possible(Room.objects.filter(pk=room_id)))
        if not rooms:
            raise NotFound(f"Room {room_id} not found")
        if has_reservations_for_room(room_id):
            raise InUse(
                "Cannot delete room with existing reservations",
                details={"room_id": room_id},
            )
        rooms[0].delete()

    logger.info("room.deleted", room_id=room_id, by=principal.user_id)
