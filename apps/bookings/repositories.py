"""
Django persistence for the booking aggregate.

Translates between ``apps.bookings.models.Booking`` rows and the domain
``Booking`` aggregate. Model instances loaded through a repository are
kept so that ``save`` updates the same instance and the row-change feed
sees the values it was loaded with.
"""

from __future__ import annotations

from datetime import date, time
from typing import Dict, List

from django.conf import settings  # type: ignore
from django.contrib.auth import get_user_model  # type: ignore

from apps.courts.models import Court
from shared.domain.errors import NotFound, ValidationError
from shared.domain.value_objects import Money
from shared.infrastructure.locking import lock_queryset_if_possible

from .domain.entities import Booking
from .models import Booking as BookingModel, owner_display_name

UPDATABLE_FIELDS = [
    "status",
    "payment_status",
    "payment_method",
    "payment_proof",
    "cancellation_reason",
    "cancelled_by",
    "confirmed_at",
    "cancelled_at",
    "updated_at",
]


class DjangoBookingRepository:
    def __init__(self):
        self._models: Dict[int, BookingModel] = {}

    def _to_entity(self, model: BookingModel) -> Booking:
        self._models[model.pk] = model
        return Booking(
            id=model.pk,
            user_id=model.user_id,
            court_id=model.court_id,
            date=model.date,
            start_time=model.start_time,
            end_time=model.end_time,
            total_price=Money(model.total_price, settings.BOOKING_CURRENCY),
            status=model.status,
            payment_status=model.payment_status,
            payment_method=model.payment_method or None,
            payment_proof=model.payment_proof,
            owner_name=model.owner_name,
            cancellation_reason=model.cancellation_reason,
            cancelled_by=model.cancelled_by,
            confirmed_at=model.confirmed_at,
            cancelled_at=model.cancelled_at,
            created_at=model.created_at,
        )

    def get_by_id(self, booking_id: int, *, lock: bool = False) -> Booking:
        queryset = BookingModel.objects.select_related("user").filter(pk=booking_id)
        if lock:
            queryset = lock_queryset_if_possible(queryset)
        model = queryset.first()
        if model is None:
            raise NotFound(f"Booking {booking_id} not found", booking_id=booking_id)
        return self._to_entity(model)

    def lock_court(self, court_id: int) -> Court:
        """Lock the court row; claims on one court are serialised behind it."""
        court = lock_queryset_if_possible(Court.objects.filter(pk=court_id)).first()
        if court is None:
            raise NotFound(f"Court {court_id} not found", court_id=court_id)
        if not court.is_active:
            raise ValidationError(f"Court {court.name} is not accepting bookings", court_id=court_id)
        return court

    def owner_name(self, user_id: int) -> str:
        user = get_user_model().objects.filter(pk=user_id).first()
        if user is None:
            raise NotFound(f"User {user_id} not found", user_id=user_id)
        return owner_display_name(user)

    def find_active_duplicate(self, user_id: int, court_id: int, day: date, start: time, end: time) -> Booking | None:
        model = (
            BookingModel.objects.active()
            .select_related("user")
            .filter(user_id=user_id, court_id=court_id, date=day, start_time=start, end_time=end)
            .first()
        )
        return self._to_entity(model) if model else None

    def find_active_overlapping(self, court_id: int, day: date, start: time, end: time) -> List[Booking]:
        queryset = BookingModel.objects.active().overlapping(court_id, day, start, end).select_related("user")
        return [self._to_entity(model) for model in queryset]

    def add(self, booking: Booking) -> Booking:
        model = BookingModel.objects.create(
            user_id=booking.user_id,
            court_id=booking.court_id,
            date=booking.date,
            start_time=booking.start_time,
            end_time=booking.end_time,
            total_price=booking.total_price.amount,
            status=booking.status.value,
            payment_status=booking.payment_status.value,
        )
        booking.id = model.pk
        booking.created_at = model.created_at
        self._models[model.pk] = model
        return booking

    def _model_for(self, booking: Booking) -> BookingModel:
        model = self._models.get(booking.id)
        if model is None:
            model = BookingModel.objects.get(pk=booking.id)
            self._models[model.pk] = model
        return model

    def save(self, booking: Booking) -> None:
        model = self._model_for(booking)
        model.status = booking.status.value
        model.payment_status = booking.payment_status.value
        model.payment_method = booking.payment_method.value if booking.payment_method else ""
        model.payment_proof = booking.payment_proof
        model.cancellation_reason = booking.cancellation_reason
        model.cancelled_by = booking.cancelled_by
        model.confirmed_at = booking.confirmed_at
        model.cancelled_at = booking.cancelled_at
        model.save(update_fields=UPDATABLE_FIELDS)

    def delete(self, booking: Booking) -> None:
        self._model_for(booking).delete()
        self._models.pop(booking.id, None)

    def model(self, booking: Booking) -> BookingModel:
        return self._model_for(booking)
