"""Admin registration for refunds."""

from __future__ import annotations

from django.contrib import admin

from .models import Refund


@admin.register(Refund)
class RefundAdmin(admin.ModelAdmin):
    list_display = ("id", "booking", "amount", "method", "e_wallet_type", "status", "created_at", "processed_at")
    list_filter = ("status", "method")
    search_fields = ("booking__id", "account_number")
    readonly_fields = ("booking", "amount", "status", "created_at", "processed_at")
