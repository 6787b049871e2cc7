"""Celery tasks delivering notifications."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore
from django.db import DatabaseError  # type: ignore

from apps.bookings.models import Booking

logger = logging.getLogger(__name__)


@shared_task(
    name="notifications.deliver_notification",
    autoretry_for=(DatabaseError,),
    retry_backoff=True,
    retry_backoff_max=600,
    max_retries=5,
)
def deliver_notification(user_id: int, kind: str, context: dict, booking_id: int | None = None) -> int:
    """Store one notification; database errors are retried with backoff."""
    from .services import notify

    if booking_id is not None and not Booking.objects.filter(pk=booking_id).exists():
        # Booking purged before delivery: keep the message, drop the link.
        booking_id = None
    return notify(user_id, kind, context, booking_id).pk
