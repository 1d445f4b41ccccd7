"""Serializers for authentication flows (register, login)."""

from __future__ import annotations

import logging
from typing import Any

from django.contrib.auth import get_user_model  # type: ignore
from django.db import transaction  # type: ignore
from rest_framework import serializers  # type: ignore
from rest_framework_simplejwt.tokens import RefreshToken  # type: ignore

logger = logging.getLogger(__name__)

User = get_user_model()


def tokens_for_user(user) -> dict[str, str]:
    """Issue a JWT pair carrying the role and username claims."""
    refresh = RefreshToken.for_user(user)
    refresh["role"] = user.role
    refresh["username"] = user.username
    return {"refresh": str(refresh), "access": str(refresh.access_token)}


class RegisterSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150)
    password = serializers.CharField(min_length=8, write_only=True)

    def validate_username(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Username is required.")
        if User.objects.filter(username__iexact=value).exists():
            raise serializers.ValidationError("A user with that username already exists.")
        return value

    @transaction.atomic
    def create(self, validated_data: dict[str, Any]):  # type: ignore
        # Self-registration always yields a regular user; admins are promoted out of band.
        user = User.objects.create_user(
            username=validated_data["username"],
            password=validated_data["password"],
        )
        logger.info(f"User {user.pk} registered")
        return user


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField(write_only=True)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        try:
            user = User.objects.get(username=attrs.get("username", ""))
        except User.DoesNotExist:
            raise serializers.ValidationError({"username": "Invalid username or password."})

        if not user.is_active or not user.check_password(attrs.get("password", "")):
            raise serializers.ValidationError({"username": "Invalid username or password."})

        attrs["user"] = user
        return attrs
