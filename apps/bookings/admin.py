"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ("id", "room", "user", "start_time", "end_time", "created_at")
    list_filter = ("room", "start_time")
    search_fields = ("id", "room__name", "user__username")
    readonly_fields = ("id", "created_at", "updated_at")
    list_select_related = ("room", "user")
