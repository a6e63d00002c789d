"""FilterSet for the room catalog listing."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Room


class RoomFilterSet(django_filters.FilterSet):
    """Narrow the catalog listing by location, size and enabled flag."""

    location = django_filters.CharFilter(field_name="location", lookup_expr="icontains")
    capacity_min = django_filters.NumberFilter(field_name="capacity", lookup_expr="gte")
    capacity_max = django_filters.NumberFilter(field_name="capacity", lookup_expr="lte")
    is_available = django_filters.BooleanFilter(field_name="is_available")

    class Meta:
        model = Room
        fields = ["location", "is_available"]
