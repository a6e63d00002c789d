"""Permission classes built on the central authorization helpers."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore

from .authorization import Principal, Role, has_role


class IsAdminRole(permissions.BasePermission):
    """Only administrators."""

    message = "Admin access required."

    def has_permission(self, request, view) -> bool:  # type: ignore
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return has_role(Principal.from_user(user), Role.ADMIN)


class IsAdminOrReadOnly(permissions.BasePermission):
    """Anyone may read, administrators may write."""

    message = "Admin access required."

    def has_permission(self, request, view) -> bool:  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return has_role(Principal.from_user(user), Role.ADMIN)
