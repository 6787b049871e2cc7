"""Serializers for the booking domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.finances.models import Refund

from .models import Booking


class BookingCreateSerializer(serializers.Serializer):
    """Booking request from a customer (or staff on a customer's behalf)."""

    court = serializers.IntegerField()
    date = serializers.DateField()
    start_time = serializers.TimeField()
    end_time = serializers.TimeField()
    user = serializers.IntegerField(required=False)

    def validate(self, attrs):  # type: ignore
        if attrs["start_time"] >= attrs["end_time"]:
            raise serializers.ValidationError("End time must be after start time.")
        return attrs


class PaymentSubmissionSerializer(serializers.Serializer):
    method = serializers.ChoiceField(choices=Booking.PaymentMethod.choices)
    proof = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")


class BookingStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Booking.Status.choices)
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    refund_method = serializers.ChoiceField(choices=Refund.Method.choices, required=False, default=Refund.Method.BANK_TRANSFER)
    refund_account = serializers.CharField(max_length=64, required=False, allow_blank=True, default="")
    refund_e_wallet_type = serializers.ChoiceField(
        choices=Refund.EWallet.choices, required=False, allow_blank=True, default="",
    )


class PaymentStatusSerializer(serializers.Serializer):
    payment_status = serializers.ChoiceField(choices=Booking.PaymentStatus.choices)


class BookingSerializer(serializers.ModelSerializer):
    """Detailed booking representation."""

    user_id = serializers.ReadOnlyField(source="user.id")
    court_id = serializers.ReadOnlyField(source="court.id")
    court_name = serializers.ReadOnlyField(source="court.name")
    owner_name = serializers.ReadOnlyField()

    class Meta:
        model = Booking
        fields = [
            "id",
            "user_id",
            "owner_name",
            "court_id",
            "court_name",
            "date",
            "start_time",
            "end_time",
            "total_price",
            "status",
            "payment_status",
            "payment_method",
            "payment_proof",
            "cancellation_reason",
            "cancelled_by",
            "confirmed_at",
            "cancelled_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
