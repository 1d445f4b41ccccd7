"""Permission classes shared by the API apps."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore


class IsAdminRole(permissions.BasePermission):
    """
    Allows access only to principals with the Admin role.

    Platform superusers are treated as admins as well.
    """

    message = "Access denied. Admin only."

    def has_permission(self, request, view) -> bool:  # type: ignore
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return hasattr(user, "is_admin") and user.is_admin()
