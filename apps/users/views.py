"""User API views."""

from __future__ import annotations

from django.contrib.auth import get_user_model  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from shared.domain.exceptions import NotFoundError

from .permissions import IsAdminRole
from .serializers import UserSerializer
from .services import delete_user

User = get_user_model()


class UserViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """User management.

    - `me` returns the current user's profile
    - listing and deletion are restricted to admins
    """

    serializer_class = UserSerializer
    queryset = User.objects.all().order_by("username")

    def get_permissions(self):  # type: ignore
        if self.action == "me":
            return [permissions.IsAuthenticated()]
        return [permissions.IsAuthenticated(), IsAdminRole()]

    def destroy(self, request, pk=None):  # type: ignore
        try:
            user = User.objects.get(pk=pk)
        except (User.DoesNotExist, ValueError):
            raise NotFoundError("User not found", code="user_not_found", details={"userId": pk})

        removed = delete_user(user, acting_user=request.user)
        return Response(
            {
                "message": "User and associated bookings deleted successfully",
                "deletedBookings": removed,
            },
            status=status.HTTP_200_OK,
        )

    @action(detail=False, methods=["get"])
    def me(self, request):
        """Profile of the authenticated user."""
        return Response(UserSerializer(request.user).data)
