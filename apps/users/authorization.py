"""Central authorization for the reservation engine.

The engine never looks at tokens or request objects. Callers hand it a
``Principal`` (who is acting, in which role) and every role or
ownership decision goes through the helpers below instead of comparing
role strings inline.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from shared.domain.errors import Forbidden


class Role(str, Enum):
    MEMBER = "member"
    ADMIN = "admin"


@dataclass(frozen=True)
class Principal:
    """An authenticated actor: the verified ``(user_id, role)`` pair."""

    user_id: int
    role: Role = Role.MEMBER

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @classmethod
    def from_user(cls, user) -> "Principal":  # type: ignore
        """Build a principal from an authenticated Django user."""
        if getattr(user, "is_superuser", False):
            return cls(user_id=user.pk, role=Role.ADMIN)
        try:
            role = Role(getattr(user, "role", Role.MEMBER))
        except ValueError:
            role = Role.MEMBER
        return cls(user_id=user.pk, role=role)


def has_role(principal: Principal, role: Role) -> bool:
    if role == Role.MEMBER:
        return True
    return principal.role == role


def require_role(principal: Principal, role: Role, action: str = "perform this action") -> None:
    """Raise ``Forbidden`` unless the principal holds ``role``."""
    if not has_role(principal, role):
        raise Forbidden(f"{role.value.capitalize()} access required to {action}")


def require_owner_or_admin(principal: Principal, owner_id: int, action: str) -> None:
    """Raise ``Forbidden`` unless the principal owns the record or is an admin."""
    if principal.is_admin or principal.user_id == owner_id:
        return
    raise Forbidden(f"You can only {action} your own reservations")
