"""Room catalog API views."""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.reservations.domain.availability import check_availability, list_available
from apps.users.authorization import Principal
from apps.users.permissions import IsAdminOrReadOnly
from shared.infrastructure.serializers import IntervalSerializer

from . import services
from .filters import RoomFilterSet
from .models import Room
from .serializers import (
    AvailabilityResultSerializer,
    AvailableRoomsQuerySerializer,
    RoomSerializer,
    RoomWriteSerializer,
)


class RoomViewSet(viewsets.ModelViewSet):
    """Catalog of bookable rooms. Anyone may read; administrators manage."""

    queryset = Room.objects.order_by("name")
    permission_classes = [IsAdminOrReadOnly]
    filter_backends = [DjangoFilterBackend]
    filterset_class = RoomFilterSet
    lookup_value_regex = r"\d+"

    def get_queryset(self):  # type: ignore
        return services.list_rooms()

    def get_serializer_class(self):  # type: ignore
        if self.action in {"create", "update", "partial_update"}:
            return RoomWriteSerializer
        return RoomSerializer

    def get_object(self):  # type: ignore
        return services.get_room(int(self.kwargs["pk"]))

    def _principal(self) -> Principal:
        return Principal.from_user(self.request.user)

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = RoomWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        room = services.create_room(self._principal(), **serializer.validated_data)
        return Response(RoomSerializer(room).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):  # type: ignore
        partial = kwargs.pop("partial", False)
        serializer = RoomWriteSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        room = services.update_room(
            self._principal(), int(kwargs["pk"]), **serializer.validated_data
        )
        return Response(RoomSerializer(room).data)

    def destroy(self, request, *args, **kwargs):  # type: ignore
        services.delete_room(self._principal(), int(kwargs["pk"]))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["get"], permission_classes=[permissions.AllowAny])
    def available(self, request):  # type: ignore
        """Enabled rooms free over ``[start, end)`` with at least ``capacity`` seats."""
        query = AvailableRoomsQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        rooms = list_available(
            query.validated_data["interval"],
            min_capacity=query.validated_data["capacity"],
        )
        return Response(RoomSerializer(rooms, many=True).data)

    @action(detail=True, methods=["get"], permission_classes=[permissions.IsAuthenticated])
    def availability(self, request, pk=None):  # type: ignore
        """Tagged availability of one room over ``[start, end)``."""
        query = IntervalSerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        result = check_availability(int(pk), query.validated_data["interval"])
        return Response(AvailabilityResultSerializer(result.to_dict()).data)
