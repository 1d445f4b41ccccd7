"""Serializers for booking API endpoints."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.rooms.serializers import RoomShortSerializer
from apps.users.serializers import OwnerShortSerializer

from .models import Booking


class BookingCreateSerializer(serializers.Serializer):
    """Input for POST /bookings/. The interval itself is validated by the scheduler."""

    roomId = serializers.IntegerField()
    startTime = serializers.DateTimeField()
    endTime = serializers.DateTimeField()


class BookingUpdateSerializer(serializers.Serializer):
    """Input for PUT/PATCH /bookings/{id}/. Omitted fields keep their current value."""

    roomId = serializers.IntegerField(required=False)
    startTime = serializers.DateTimeField(required=False)
    endTime = serializers.DateTimeField(required=False)


class BookingSerializer(serializers.ModelSerializer):
    """Booking with the denormalized room and owner projections."""

    roomId = serializers.IntegerField(source="room_id", read_only=True)
    userId = serializers.IntegerField(source="user_id", read_only=True)
    startTime = serializers.DateTimeField(source="start_time", read_only=True)
    endTime = serializers.DateTimeField(source="end_time", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)
    room = RoomShortSerializer(read_only=True)
    owner = OwnerShortSerializer(source="user", read_only=True)

    class Meta:
        model = Booking
        fields = [
            "id",
            "roomId",
            "userId",
            "startTime",
            "endTime",
            "createdAt",
            "updatedAt",
            "room",
            "owner",
        ]


class BookingSlotSerializer(serializers.ModelSerializer):
    """Occupied interval on a room, without owner details."""

    startTime = serializers.DateTimeField(source="start_time", read_only=True)
    endTime = serializers.DateTimeField(source="end_time", read_only=True)

    class Meta:
        model = Booking
        fields = ["id", "startTime", "endTime"]
