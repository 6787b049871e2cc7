"""Serializers for refunds."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Refund


class RefundSerializer(serializers.ModelSerializer):
    user_id = serializers.ReadOnlyField(source="booking.user_id")

    class Meta:
        model = Refund
        fields = [
            "id",
            "booking",
            "user_id",
            "amount",
            "method",
            "e_wallet_type",
            "account_number",
            "status",
            "note",
            "created_at",
            "processed_at",
        ]
        read_only_fields = fields


class RefundDecisionSerializer(serializers.Serializer):
    note = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
