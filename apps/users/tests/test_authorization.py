"""Tests for the central authorization helpers."""

from __future__ import annotations

import pytest

from apps.users.authorization import (
    Principal,
    Role,
    has_role,
    require_owner_or_admin,
    require_role,
)
from apps.users.models import User
from shared.domain.errors import Forbidden


def test_member_cannot_act_as_admin() -> None:
    principal = Principal(user_id=1, role=Role.MEMBER)

    assert has_role(principal, Role.MEMBER)
    assert not has_role(principal, Role.ADMIN)
    with pytest.raises(Forbidden):
        require_role(principal, Role.ADMIN, "create rooms")


def test_admin_passes_role_check() -> None:
    require_role(Principal(user_id=1, role=Role.ADMIN), Role.ADMIN)


def test_owner_or_admin() -> None:
    owner = Principal(user_id=7)
    stranger = Principal(user_id=8)
    admin = Principal(user_id=9, role=Role.ADMIN)

    require_owner_or_admin(owner, 7, "update")
    require_owner_or_admin(admin, 7, "update")
    with pytest.raises(Forbidden) as excinfo:
        require_owner_or_admin(stranger, 7, "update")
    assert excinfo.value.kind == "forbidden"
    assert "update" in excinfo.value.message


@pytest.mark.django_db
def test_principal_from_user() -> None:
    member = User.objects.create_user(email="m@example.com", password="StrongPass123")
    admin = User.objects.create_user(
        email="a@example.com", password="StrongPass123", role=User.RoleChoices.ADMIN
    )
    superuser = User.objects.create_superuser(email="s@example.com", password="StrongPass123")

    assert Principal.from_user(member) == Principal(user_id=member.pk, role=Role.MEMBER)
    assert Principal.from_user(admin).is_admin
    assert Principal.from_user(superuser).is_admin
    assert superuser.role == User.RoleChoices.ADMIN


@pytest.mark.django_db
def test_create_user_requires_email() -> None:
    with pytest.raises(ValueError):
        User.objects.create_user(email="", password="StrongPass123")
