"""API views for the reservation domain.

Handlers stay thin: serializers check the payload shape, the ledger and
the booking coordinator do the work, and domain errors are rendered by
the project's exception handler.
"""

from __future__ import annotations

from django.utils import timezone  # type: ignore
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users.authorization import Principal

from . import ledger
from .application.coordinator import (
    CreateReservationCommand,
    DeleteReservationCommand,
    UpdateReservationCommand,
    create_reservation,
    delete_reservation,
    update_reservation,
)
from .models import Reservation
from .serializers import (
    ReservationPageQuerySerializer,
    ReservationSerializer,
    ReservationsByDateQuerySerializer,
    ReservationWriteSerializer,
)


class ReservationViewSet(viewsets.GenericViewSet):
    """Room reservations: list, create, full replacement and delete."""

    queryset = Reservation.objects.select_related("room").all()
    serializer_class = ReservationSerializer
    permission_classes = [permissions.IsAuthenticated]
    lookup_value_regex = r"\d+"

    def get_serializer_class(self):  # type: ignore
        if self.action in {"create", "update"}:
            return ReservationWriteSerializer
        return ReservationSerializer

    def _principal(self) -> Principal:
        return Principal.from_user(self.request.user)

    def _render(self, reservation: Reservation, status_code: int = status.HTTP_200_OK) -> Response:
        return Response(ReservationSerializer(reservation).data, status=status_code)

    def list(self, request):  # type: ignore
        query = ReservationPageQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        page = ledger.list_reservations(
            limit=query.validated_data.get("limit"),
            offset=query.validated_data["offset"],
        )
        return Response(
            {
                "count": page.total,
                "limit": page.limit,
                "offset": page.offset,
                "results": ReservationSerializer(page.items, many=True).data,
            }
        )

    def retrieve(self, request, pk=None):  # type: ignore
        return self._render(ledger.get_reservation(int(pk)))

    def create(self, request):  # type: ignore
        serializer = ReservationWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        reservation = create_reservation(
            CreateReservationCommand(principal=self._principal(), **serializer.validated_data)
        )
        return self._render(reservation, status.HTTP_201_CREATED)

    def update(self, request, pk=None):  # type: ignore
        serializer = ReservationWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        reservation = update_reservation(
            UpdateReservationCommand(
                principal=self._principal(),
                reservation_id=int(pk),
                **serializer.validated_data,
            )
        )
        return self._render(reservation)

    def destroy(self, request, pk=None):  # type: ignore
        delete_reservation(
            DeleteReservationCommand(principal=self._principal(), reservation_id=int(pk))
        )
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["get"], url_path="by-date")
    def by_date(self, request):  # type: ignore
        """Reservations overlapping whole local days, earliest first. Defaults to today."""
        query = ReservationsByDateQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        tz = timezone.get_current_timezone()
        today = timezone.localdate()
        first = query.validated_data.get("start") or today
        last = query.validated_data.get("end") or first

        interval = ledger.day_range(first, last, tz)
        reservations = ledger.query_by_range(interval, room_id=query.validated_data.get("room_id"))
        return Response(ReservationSerializer(reservations, many=True).data)
