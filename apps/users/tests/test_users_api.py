"""API tests for user management."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest import mock

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.bootstrap import get_services
from apps.bookings.models import Booking
from apps.rooms.models import Room
from apps.users.models import User


class UserAPITests(APITestCase):
    def setUp(self) -> None:
        self.admin = User.objects.create_user(
            username="admin",
            password="AdminPass123",
            role=User.RoleChoices.ADMIN,
        )
        self.alice = User.objects.create_user(username="alice", password="AlicePass123")
        self.bob = User.objects.create_user(username="bob", password="BobPass12345")
        self.room = Room.objects.create(name="Focus Room", capacity=2, type=Room.RoomType.WORKSPACE)

    def _book(self, user: User, hour: int) -> Booking:
        return Booking.objects.create(
            room=self.room,
            user=user,
            start_time=datetime(2030, 1, 1, hour, tzinfo=timezone.utc),
            end_time=datetime(2030, 1, 1, hour + 1, tzinfo=timezone.utc),
        )

    def test_admin_lists_users(self) -> None:
        self.client.force_authenticate(self.admin)

        response = self.client.get(reverse("user-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([u["username"] for u in response.data], ["admin", "alice", "bob"])
        self.assertTrue(all("password" not in u for u in response.data))

    def test_regular_user_cannot_list_users(self) -> None:
        self.client.force_authenticate(self.alice)

        response = self.client.get(reverse("user-list"))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["message"], "Access denied. Admin only.")

    def test_me_returns_profile(self) -> None:
        self.client.force_authenticate(self.alice)

        response = self.client.get(reverse("user-me"))

        self.assertEqual(response.data["id"], self.alice.pk)
        self.assertEqual(response.data["role"], "User")

    def test_deleting_user_removes_their_bookings(self) -> None:
        self._book(self.alice, 9)
        self._book(self.alice, 11)
        kept = self._book(self.bob, 10)
        self.client.force_authenticate(self.admin)

        with get_services().hub.subscribe() as subscription:
            with self.captureOnCommitCallbacks(execute=True):
                response = self.client.delete(reverse("user-detail", args=[self.alice.pk]))

            events = [subscription.get(timeout=2) for _ in range(2)]

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["deletedBookings"], 2)
        self.assertFalse(User.objects.filter(pk=self.alice.pk).exists())
        self.assertEqual(list(Booking.objects.values_list("pk", flat=True)), [kept.pk])
        self.assertEqual([e["event"] for e in events], ["bookingCancelled", "bookingCancelled"])
        self.assertEqual({e["data"]["userId"] for e in events}, {self.alice.pk})

    def test_booking_created_during_deletion_is_a_conflict(self) -> None:
        booking = self._book(self.alice, 9)
        self.client.force_authenticate(self.admin)

        # The purge runs before the booking is visible to it.
        with mock.patch.object(get_services().bus, "handle_command", return_value=[]):
            response = self.client.delete(reverse("user-detail", args=[self.alice.pk]))

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["code"], "user_has_bookings")
        self.assertTrue(User.objects.filter(pk=self.alice.pk).exists())
        self.assertTrue(Booking.objects.filter(pk=booking.pk).exists())

    def test_admin_cannot_delete_themselves(self) -> None:
        self.client.force_authenticate(self.admin)

        response = self.client.delete(reverse("user-detail", args=[self.admin.pk]))

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(User.objects.filter(pk=self.admin.pk).exists())

    def test_regular_user_cannot_delete(self) -> None:
        self._book(self.bob, 9)
        self.client.force_authenticate(self.alice)

        response = self.client.delete(reverse("user-detail", args=[self.bob.pk]))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(Booking.objects.filter(user=self.bob).count(), 1)

    def test_delete_unknown_user(self) -> None:
        self.client.force_authenticate(self.admin)

        response = self.client.delete(reverse("user-detail", args=[99999]))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["code"], "user_not_found")
