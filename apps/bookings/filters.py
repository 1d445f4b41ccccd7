"""Filters for the booking list endpoint."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Booking


class BookingFilterSet(django_filters.FilterSet):
    room = django_filters.NumberFilter(field_name="room_id")
    start_after = django_filters.IsoDateTimeFilter(field_name="start_time", lookup_expr="gte")
    end_before = django_filters.IsoDateTimeFilter(field_name="end_time", lookup_expr="lte")

    class Meta:
        model = Booking
        fields = ["room", "start_after", "end_before"]
