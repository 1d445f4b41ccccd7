"""FilterSet definitions for room listing."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Room


class RoomFilterSet(django_filters.FilterSet):
    """Filters for the public room list."""

    name = django_filters.CharFilter(field_name="name", lookup_expr="icontains")
    type = django_filters.ChoiceFilter(field_name="type", choices=Room.RoomType.choices)
    capacity_min = django_filters.NumberFilter(field_name="capacity", lookup_expr="gte")
    capacity_max = django_filters.NumberFilter(field_name="capacity", lookup_expr="lte")

    class Meta:
        model = Room
        fields = ["name", "type"]
