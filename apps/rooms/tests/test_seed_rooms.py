from __future__ import annotations

from io import StringIO

import pytest
from django.core.management import call_command

from apps.rooms.models import Room


@pytest.mark.django_db
def test_seed_rooms_creates_defaults_once() -> None:
    call_command("seed_rooms", stdout=StringIO())
    assert Room.objects.count() == 10
    nursery = Room.objects.get(name="Nursery")
    assert (nursery.availability_start.hour, nursery.availability_end.hour) == (8, 13)

    out = StringIO()
    call_command("seed_rooms", stdout=out)
    assert Room.objects.count() == 10
    assert "nothing to do" in out.getvalue()


@pytest.mark.django_db
def test_seed_rooms_force_fills_gaps() -> None:
    Room.objects.create(name="Kitchen", capacity=4)

    call_command("seed_rooms", "--force", stdout=StringIO())

    assert Room.objects.count() == 10
    assert Room.objects.get(name="Kitchen").capacity == 4
