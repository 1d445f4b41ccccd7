"""Room API views."""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.filters import OrderingFilter  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users.permissions import IsAdminRole

from .filters import RoomFilterSet
from .models import Room
from .serializers import RoomSerializer
from .services import delete_room


class RoomViewSet(viewsets.ModelViewSet):
    """Room inventory: public reads, Admin-only writes."""

    queryset = Room.objects.all()
    serializer_class = RoomSerializer
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = RoomFilterSet
    ordering_fields = ["name", "capacity", "created_at"]

    def get_permissions(self):  # type: ignore
        if self.action in {"list", "retrieve", "bookings"}:
            return [permissions.AllowAny()]
        return [permissions.IsAuthenticated(), IsAdminRole()]

    def perform_destroy(self, instance: Room) -> None:  # type: ignore
        delete_room(instance)

    def list(self, request, *args, **kwargs):  # type: ignore
        response = super().list(request, *args, **kwargs)
        response.data = {"message": "Rooms retrieved successfully", "rooms": response.data}
        return response

    def retrieve(self, request, *args, **kwargs):  # type: ignore
        response = super().retrieve(request, *args, **kwargs)
        response.data = {"message": "Room retrieved successfully", "room": response.data}
        return response

    def create(self, request, *args, **kwargs):  # type: ignore
        response = super().create(request, *args, **kwargs)
        response.data = {"message": "Room created successfully", "room": response.data}
        return response

    def update(self, request, *args, **kwargs):  # type: ignore
        response = super().update(request, *args, **kwargs)
        response.data = {"message": "Room updated successfully", "room": response.data}
        return response

    def destroy(self, request, *args, **kwargs):  # type: ignore
        room = self.get_object()
        data = RoomSerializer(room).data
        self.perform_destroy(room)
        return Response({"message": "Room deleted successfully", "room": data}, status=status.HTTP_200_OK)

    @action(detail=True, methods=["get"])
    def bookings(self, request, pk=None):  # type: ignore
        """Booked intervals on the room, so clients can pick a free slot."""
        from apps.bookings.serializers import BookingSlotSerializer
        from apps.bookings.services import room_schedule

        room = self.get_object()
        slots = room_schedule(room.pk)
        return Response(BookingSlotSerializer(slots, many=True).data)
