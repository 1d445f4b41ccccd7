"""Admin registration for rooms."""

from __future__ import annotations

from django.contrib import admin

from .models import Room


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = ("name", "type", "capacity", "created_at")
    list_filter = ("type",)
    search_fields = ("name",)
    readonly_fields = ("created_at", "updated_at")
