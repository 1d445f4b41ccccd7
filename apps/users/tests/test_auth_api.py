"""API tests for authentication endpoints."""

from __future__ import annotations

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase
from rest_framework_simplejwt.tokens import AccessToken

from apps.users.models import User


class AuthAPITests(APITestCase):
    def test_register_returns_tokens(self) -> None:
        payload = {"username": "alice", "password": "StrongPass123"}

        response = self.client.post(reverse("auth:register"), payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertIn("tokens", response.data)
        self.assertEqual(response.data["user"]["username"], "alice")
        self.assertEqual(response.data["user"]["role"], "User")
        self.assertNotIn("password", response.data["user"])
        self.assertTrue(User.objects.get(username="alice").check_password("StrongPass123"))

    def test_register_ignores_requested_role(self) -> None:
        payload = {"username": "mallory", "password": "StrongPass123", "role": "Admin"}

        response = self.client.post(reverse("auth:register"), payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(User.objects.get(username="mallory").role, User.RoleChoices.USER)

    def test_register_rejects_duplicate_username(self) -> None:
        User.objects.create_user(username="alice", password="StrongPass123")

        response = self.client.post(
            reverse("auth:register"),
            {"username": "Alice", "password": "StrongPass123"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["code"], "validation_error")
        self.assertIn("username", response.data["details"])

    def test_login_issues_tokens_with_role_claim(self) -> None:
        User.objects.create_user(username="root", password="AdminPass123", role=User.RoleChoices.ADMIN)

        response = self.client.post(
            reverse("auth:login"),
            {"username": "root", "password": "AdminPass123"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        token = AccessToken(response.data["tokens"]["access"])
        self.assertEqual(token["role"], "Admin")
        self.assertEqual(token["username"], "root")

    def test_login_with_wrong_password(self) -> None:
        User.objects.create_user(username="alice", password="StrongPass123")

        response = self.client.post(
            reverse("auth:login"),
            {"username": "alice", "password": "wrong"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_bearer_token_authenticates_requests(self) -> None:
        register = self.client.post(
            reverse("auth:register"),
            {"username": "alice", "password": "StrongPass123"},
            format="json",
        )
        access = register.data["tokens"]["access"]

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {access}")
        response = self.client.get(reverse("user-me"))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["username"], "alice")

    def test_invalid_token_is_rejected(self) -> None:
        self.client.credentials(HTTP_AUTHORIZATION="Bearer not-a-token")

        response = self.client.get(reverse("user-me"))

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data["code"], "authentication_failed")
