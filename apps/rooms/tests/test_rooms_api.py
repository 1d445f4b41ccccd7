"""API tests for the room inventory."""

from __future__ import annotations

from datetime import datetime, timezone

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.rooms.models import Room
from apps.rooms.services import RoomDirectory
from apps.users.models import User
from shared.domain.exceptions import NotFoundError


class RoomAPITests(APITestCase):
    def setUp(self) -> None:
        self.admin = User.objects.create_user(
            username="admin",
            password="AdminPass123",
            role=User.RoleChoices.ADMIN,
        )
        self.member = User.objects.create_user(username="member", password="MemberPass123")
        self.desk = Room.objects.create(name="Hot Desk", capacity=1, type=Room.RoomType.WORKSPACE)
        self.hall = Room.objects.create(name="Main Hall", capacity=30, type=Room.RoomType.CONFERENCE)
        self.list_url = reverse("room-list")

    def test_rooms_are_public(self) -> None:
        response = self.client.get(self.list_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["message"], "Rooms retrieved successfully")
        self.assertEqual([r["name"] for r in response.data["rooms"]], ["Hot Desk", "Main Hall"])

    def test_single_room_is_public(self) -> None:
        response = self.client.get(reverse("room-detail", args=[self.hall.pk]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["message"], "Room retrieved successfully")
        self.assertEqual(response.data["room"]["name"], "Main Hall")

    def test_filter_by_type_and_capacity(self) -> None:
        response = self.client.get(self.list_url, {"type": "conference", "capacity_min": 10})

        self.assertEqual([r["id"] for r in response.data["rooms"]], [self.hall.pk])

        response = self.client.get(self.list_url, {"capacity_max": 5})

        self.assertEqual([r["id"] for r in response.data["rooms"]], [self.desk.pk])

    def test_admin_creates_room(self) -> None:
        self.client.force_authenticate(self.admin)

        response = self.client.post(
            self.list_url,
            {"name": "  Phone Booth ", "capacity": 1, "type": "workspace"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["message"], "Room created successfully")
        self.assertEqual(response.data["room"]["name"], "Phone Booth")

    def test_invalid_room_payloads(self) -> None:
        self.client.force_authenticate(self.admin)
        invalid = [
            {"name": "", "capacity": 2, "type": "workspace"},
            {"name": "Closet", "capacity": 0, "type": "workspace"},
            {"name": "Closet", "capacity": 2, "type": "lounge"},
            {"name": "Closet", "type": "workspace"},
        ]

        for payload in invalid:
            response = self.client.post(self.list_url, payload, format="json")
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, payload)
            self.assertEqual(response.data["code"], "validation_error")

    def test_members_cannot_manage_rooms(self) -> None:
        self.client.force_authenticate(self.member)

        response = self.client.post(
            self.list_url,
            {"name": "Closet", "capacity": 2, "type": "workspace"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_anonymous_cannot_manage_rooms(self) -> None:
        response = self.client.delete(reverse("room-detail", args=[self.desk.pk]))

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_admin_updates_room(self) -> None:
        self.client.force_authenticate(self.admin)

        response = self.client.patch(
            reverse("room-detail", args=[self.desk.pk]),
            {"capacity": 2},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["message"], "Room updated successfully")
        self.assertEqual(response.data["room"]["capacity"], 2)
        self.desk.refresh_from_db()
        self.assertEqual(self.desk.capacity, 2)

    def test_delete_room_without_bookings(self) -> None:
        self.client.force_authenticate(self.admin)

        response = self.client.delete(reverse("room-detail", args=[self.desk.pk]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["message"], "Room deleted successfully")
        self.assertEqual(response.data["room"]["name"], "Hot Desk")
        self.assertFalse(Room.objects.filter(pk=self.desk.pk).exists())

    def test_delete_room_with_bookings_conflicts(self) -> None:
        Booking.objects.create(
            room=self.hall,
            user=self.member,
            start_time=datetime(2030, 1, 1, 9, tzinfo=timezone.utc),
            end_time=datetime(2030, 1, 1, 10, tzinfo=timezone.utc),
        )
        self.client.force_authenticate(self.admin)

        response = self.client.delete(reverse("room-detail", args=[self.hall.pk]))

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["code"], "room_has_bookings")
        self.assertTrue(Room.objects.filter(pk=self.hall.pk).exists())

    def test_room_schedule_is_public_and_hides_owners(self) -> None:
        later = Booking.objects.create(
            room=self.hall,
            user=self.member,
            start_time=datetime(2030, 1, 1, 14, tzinfo=timezone.utc),
            end_time=datetime(2030, 1, 1, 15, tzinfo=timezone.utc),
        )
        earlier = Booking.objects.create(
            room=self.hall,
            user=self.admin,
            start_time=datetime(2030, 1, 1, 9, tzinfo=timezone.utc),
            end_time=datetime(2030, 1, 1, 10, tzinfo=timezone.utc),
        )

        response = self.client.get(reverse("room-bookings", args=[self.hall.pk]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([slot["id"] for slot in response.data], [str(earlier.pk), str(later.pk)])
        self.assertEqual(set(response.data[0]), {"id", "startTime", "endTime"})

        response = self.client.get(reverse("room-bookings", args=[self.desk.pk]))

        self.assertEqual(response.data, [])


class RoomDirectoryTests(APITestCase):
    def test_exists_and_get(self) -> None:
        room = Room.objects.create(name="Nook", capacity=1, type=Room.RoomType.WORKSPACE)
        directory = RoomDirectory()

        self.assertTrue(directory.exists(room.pk))
        self.assertFalse(directory.exists(room.pk + 1))
        self.assertFalse(directory.exists("not-a-number"))
        self.assertEqual(directory.get(room.pk, lock=True), room)
        with self.assertRaises(NotFoundError):
            directory.get(room.pk + 1)
