"""Project-wide pytest fixtures."""

from __future__ import annotations

from datetime import time

import pytest

from apps.rooms.models import Room
from apps.users.authorization import Principal, Role
from apps.users.models import User


@pytest.fixture
def member(db):  # type: ignore
    return User.objects.create_user(email="member@example.com", password="StrongPass123")


@pytest.fixture
def other_member(db):  # type: ignore
    return User.objects.create_user(email="other@example.com", password="StrongPass123")


@pytest.fixture
def admin_user(db):  # type: ignore
    return User.objects.create_user(
        email="admin@example.com",
        password="StrongPass123",
        role=User.RoleChoices.ADMIN,
    )


@pytest.fixture
def member_principal(member) -> Principal:  # type: ignore
    return Principal(user_id=member.pk, role=Role.MEMBER)


@pytest.fixture
def other_principal(other_member) -> Principal:  # type: ignore
    return Principal(user_id=other_member.pk, role=Role.MEMBER)


@pytest.fixture
def admin_principal(admin_user) -> Principal:  # type: ignore
    return Principal(user_id=admin_user.pk, role=Role.ADMIN)


@pytest.fixture
def room(db):  # type: ignore
    return Room.objects.create(name="Conference Room", capacity=10, location="Office Area")


@pytest.fixture
def hours_room(db):  # type: ignore
    return Room.objects.create(
        name="Nursery",
        capacity=15,
        availability_start=time(8, 0),
        availability_end=time(13, 0),
    )
