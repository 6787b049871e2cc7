"""API views for the booking domain."""

from __future__ import annotations

from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from shared.domain.actors import Actor

from . import services
from .models import Booking
from .serializers import (
    BookingCreateSerializer,
    BookingSerializer,
    BookingStatusSerializer,
    PaymentStatusSerializer,
    PaymentSubmissionSerializer,
)


class BookingViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """Viewset for creating bookings and driving them through their lifecycle."""

    queryset = Booking.objects.select_related("court", "user").all()
    serializer_class = BookingSerializer
    permission_classes = [permissions.IsAuthenticated]
    filterset_fields = ["status", "payment_status", "court", "date"]
    lookup_value_regex = r"\d+"

    def get_queryset(self):  # type: ignore
        user = self.request.user
        qs = super().get_queryset()
        if getattr(user, "is_staff", False) or getattr(user, "is_superuser", False):
            return qs
        return qs.filter(user=user)

    def _actor(self) -> Actor:
        return Actor.from_user(self.request.user)

    def _respond(self, booking_id, http_status=status.HTTP_200_OK) -> Response:
        booking = Booking.objects.select_related("court", "user").get(pk=booking_id)
        return Response(BookingSerializer(booking, context=self.get_serializer_context()).data, status=http_status)

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        booking = services.create_booking(
            self._actor(),
            data.get("user", request.user.pk),
            data["court"],
            data["date"],
            data["start_time"],
            data["end_time"],
        )
        return self._respond(booking.id, status.HTTP_200_OK if booking.is_replay else status.HTTP_201_CREATED)

    def destroy(self, request, *args, **kwargs):  # type: ignore
        services.purge_booking(self._actor(), int(kwargs["pk"]))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"])
    def payment(self, request, pk=None):  # type: ignore
        serializer = PaymentSubmissionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = services.submit_payment(
            self._actor(), int(pk), serializer.validated_data["method"], serializer.validated_data["proof"],
        )
        return self._respond(booking.id)

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):  # type: ignore
        serializer = BookingStatusSerializer(data={**dict(request.data.items()), "status": Booking.Status.CANCELLED})
        serializer.is_valid(raise_exception=True)
        return self._set_status(int(pk), serializer.validated_data)

    @action(detail=True, methods=["post"], url_path="status")
    def set_status(self, request, pk=None):  # type: ignore
        serializer = BookingStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return self._set_status(int(pk), serializer.validated_data)

    def _set_status(self, booking_id: int, data: dict) -> Response:
        booking = services.set_booking_status(
            self._actor(),
            booking_id,
            data["status"],
            data.get("reason", ""),
            refund_method=data.get("refund_method", "bank_transfer"),
            refund_account=data.get("refund_account", ""),
            refund_e_wallet_type=data.get("refund_e_wallet_type", ""),
        )
        return self._respond(booking.id)

    @action(detail=True, methods=["post"], url_path="payment-status")
    def payment_status(self, request, pk=None):  # type: ignore
        serializer = PaymentStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = services.set_payment_status(self._actor(), int(pk), serializer.validated_data["payment_status"])
        return self._respond(booking.id)
