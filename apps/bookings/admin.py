"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "court",
        "user",
        "date",
        "start_time",
        "end_time",
        "status",
        "payment_status",
        "total_price",
        "created_at",
    )
    list_filter = ("status", "payment_status", "payment_method", "court", "date")
    search_fields = ("user__username", "user__email", "court__name")
    readonly_fields = (
        "status",
        "payment_status",
        "total_price",
        "confirmed_at",
        "cancelled_at",
        "created_at",
        "updated_at",
    )
