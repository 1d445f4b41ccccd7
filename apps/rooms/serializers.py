"""Serializers for the rooms domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Room


class RoomSerializer(serializers.ModelSerializer):
    """Room representation used for reads and admin writes."""

    name = serializers.CharField(max_length=255, trim_whitespace=True)
    capacity = serializers.IntegerField(min_value=1)
    type = serializers.ChoiceField(
        choices=Room.RoomType.choices,
        error_messages={"invalid_choice": "Type must be workspace or conference"},
    )
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Room
        fields = ["id", "name", "capacity", "type", "createdAt", "updatedAt"]
        read_only_fields = ["id", "createdAt", "updatedAt"]


class RoomShortSerializer(serializers.ModelSerializer):
    """Denormalized room projection embedded in booking responses."""

    class Meta:
        model = Room
        fields = ["id", "name", "capacity", "type"]
