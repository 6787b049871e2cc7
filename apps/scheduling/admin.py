"""Admin registration for schedule rows."""

from __future__ import annotations

from django.contrib import admin

from .models import Schedule


@admin.register(Schedule)
class ScheduleAdmin(admin.ModelAdmin):
    list_display = ("court", "date", "start_time", "end_time", "status", "display_name", "booking")
    list_filter = ("status", "court", "date")
    search_fields = ("display_name", "note")
    readonly_fields = ("user", "booking", "display_name", "updated_at")
