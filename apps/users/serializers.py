"""Serializers for user-related API endpoints."""

from __future__ import annotations

from django.contrib.auth import get_user_model  # type: ignore
from rest_framework import serializers  # type: ignore

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    """Public user representation (never includes the password)."""

    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = User
        fields = ["id", "username", "role", "createdAt"]
        read_only_fields = ["id", "username", "role", "createdAt"]


class OwnerShortSerializer(serializers.ModelSerializer):
    """Denormalized owner projection embedded in booking responses."""

    class Meta:
        model = User
        fields = ["id", "username", "role"]
