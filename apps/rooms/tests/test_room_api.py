"""Tests for the room catalog API."""

from __future__ import annotations

from datetime import datetime, time, timezone

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.reservations.models import Reservation
from apps.rooms.models import Room
from apps.users.models import User


class RoomAPITests(APITestCase):
    def setUp(self) -> None:
        self.admin = User.objects.create_user(
            email="admin@example.com",
            password="StrongPass123",
            role=User.RoleChoices.ADMIN,
        )
        self.member = User.objects.create_user(email="member@example.com", password="StrongPass123")
        self.room = Room.objects.create(name="Classroom A", capacity=30, location="Education Wing")
        self.hall = Room.objects.create(
            name="Fellowship Hall",
            capacity=100,
            availability_start=time(8),
            availability_end=time(22),
        )

    def test_list_rooms_is_public(self) -> None:
        response = self.client.get(reverse("room-list"))
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual([r["name"] for r in response.data], ["Classroom A", "Fellowship Hall"])

    def test_room_detail(self) -> None:
        response = self.client.get(reverse("room-detail", args=[self.hall.id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["availability_start"], "08:00:00")

    def test_list_rooms_filters(self) -> None:
        response = self.client.get(reverse("room-list"), {"capacity_min": 50})
        self.assertEqual([r["name"] for r in response.data], ["Fellowship Hall"])

        response = self.client.get(reverse("room-list"), {"location": "education"})
        self.assertEqual([r["name"] for r in response.data], ["Classroom A"])

    def test_missing_room_is_404(self) -> None:
        response = self.client.get(reverse("room-detail", args=[9999]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["error"], "not_found")

    def test_admin_creates_room(self) -> None:
        self.client.force_authenticate(self.admin)
        response = self.client.post(
            reverse("room-list"),
            {"name": "Kitchen", "capacity": 10, "availability_start": "08:00", "availability_end": "21:00"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertTrue(Room.objects.filter(name="Kitchen").exists())

    def test_member_cannot_create_room(self) -> None:
        self.client.force_authenticate(self.member)
        response = self.client.post(
            reverse("room-list"), {"name": "Kitchen", "capacity": 10}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_duplicate_name_is_conflict(self) -> None:
        self.client.force_authenticate(self.admin)
        response = self.client.post(
            reverse("room-list"), {"name": "Classroom A", "capacity": 10}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, response.data)
        self.assertEqual(response.data["error"], "conflict")

    def test_zero_capacity_is_invalid(self) -> None:
        self.client.force_authenticate(self.admin)
        response = self.client.post(
            reverse("room-list"), {"name": "Closet", "capacity": 0}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["error"], "invalid_request")

    def test_admin_patches_room(self) -> None:
        self.client.force_authenticate(self.admin)
        response = self.client.patch(
            reverse("room-detail", args=[self.room.id]), {"is_available": False}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.room.refresh_from_db()
        self.assertFalse(self.room.is_available)

    def test_delete_room(self) -> None:
        self.client.force_authenticate(self.admin)
        response = self.client.delete(reverse("room-detail", args=[self.room.id]))
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Room.objects.filter(pk=self.room.id).exists())

    def test_delete_room_with_reservations_is_in_use(self) -> None:
        Reservation.objects.create(
            room=self.room,
            user=self.member,
            title="Bible study",
            start_time=datetime(2024, 1, 1, 10, tzinfo=timezone.utc),
            end_time=datetime(2024, 1, 1, 11, tzinfo=timezone.utc),
        )
        self.client.force_authenticate(self.admin)
        response = self.client.delete(reverse("room-detail", args=[self.room.id]))
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, response.data)
        self.assertEqual(response.data["error"], "in_use")
        self.assertTrue(Room.objects.filter(pk=self.room.id).exists())


class RoomAvailabilityAPITests(APITestCase):
    def setUp(self) -> None:
        self.member = User.objects.create_user(email="member@example.com", password="StrongPass123")
        self.small = Room.objects.create(name="Conference Room", capacity=15)
        self.big = Room.objects.create(name="Main Sanctuary", capacity=200)
        self.closed = Room.objects.create(name="Kitchen", capacity=300, is_available=False)
        self.existing = Reservation.objects.create(
            room=self.small,
            user=self.member,
            title="Board meeting",
            start_time=datetime(2024, 1, 1, 10, tzinfo=timezone.utc),
            end_time=datetime(2024, 1, 1, 11, tzinfo=timezone.utc),
        )

    def test_available_rooms_excludes_busy_and_disabled(self) -> None:
        response = self.client.get(
            reverse("room-available"),
            {"start": "2024-01-01T10:30:00Z", "end": "2024-01-01T11:30:00Z"},
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual([r["name"] for r in response.data], ["Main Sanctuary"])

    def test_available_rooms_adjacent_interval(self) -> None:
        response = self.client.get(
            reverse("room-available"),
            {"start": "2024-01-01T11:00:00Z", "end": "2024-01-01T12:00:00Z", "capacity": 10},
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual([r["name"] for r in response.data], ["Conference Room", "Main Sanctuary"])

    def test_available_rooms_capacity_filter(self) -> None:
        response = self.client.get(
            reverse("room-available"),
            {"start": "2024-01-01T11:00:00Z", "end": "2024-01-01T12:00:00Z", "capacity": 500},
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data, [])

    def test_available_rooms_rejects_naive_timestamps(self) -> None:
        response = self.client.get(
            reverse("room-available"),
            {"start": "2024-01-01T11:00:00", "end": "2024-01-01T12:00:00"},
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_available_rooms_rejects_reversed_interval(self) -> None:
        response = self.client.get(
            reverse("room-available"),
            {"start": "2024-01-01T12:00:00Z", "end": "2024-01-01T11:00:00Z"},
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_available_rooms_rejects_zero_capacity(self) -> None:
        response = self.client.get(
            reverse("room-available"),
            {"start": "2024-01-01T11:00:00Z", "end": "2024-01-01T12:00:00Z", "capacity": 0},
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_room_availability_reports_conflicts(self) -> None:
        self.client.force_authenticate(self.member)
        response = self.client.get(
            reverse("room-availability", args=[self.small.id]),
            {"start": "2024-01-01T10:59:00Z", "end": "2024-01-01T11:01:00Z"},
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertFalse(response.data["available"])
        self.assertEqual(response.data["reason"], "conflict")
        self.assertEqual(response.data["conflicting_ids"], [self.existing.id])

    def test_room_availability_disabled(self) -> None:
        self.client.force_authenticate(self.member)
        response = self.client.get(
            reverse("room-availability", args=[self.closed.id]),
            {"start": "2024-01-01T10:00:00Z", "end": "2024-01-01T11:00:00Z"},
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], "unavailable")
        self.assertEqual(response.data["reason"], "disabled")

    def test_room_availability_requires_authentication(self) -> None:
        response = self.client.get(
            reverse("room-availability", args=[self.small.id]),
            {"start": "2024-01-01T10:00:00Z", "end": "2024-01-01T11:00:00Z"},
        )
        self.assertIn(
            response.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN)
        )
