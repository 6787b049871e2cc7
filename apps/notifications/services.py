"""Notification rendering and storage."""

from __future__ import annotations

import logging
from typing import Iterable

from shared.domain.errors import ValidationError

from .models import Notification

logger = logging.getLogger(__name__)


MESSAGE_TEMPLATES = {
    "booking_created": (
        "Booking received",
        "Your booking for {court_name} on {date} at {time_range} is held. "
        "Please pay {amount} within {hold_minutes} minutes.",
    ),
    "payment_submitted": (
        "Payment submitted",
        "We received your {method} payment details for {court_name} on {date} at {time_range}. "
        "An admin will review them shortly.",
    ),
    "payment_paid": (
        "Payment accepted",
        "Your payment for {court_name} on {date} at {time_range} has been accepted.",
    ),
    "payment_failed": (
        "Payment rejected",
        "Your payment for {court_name} on {date} at {time_range} could not be verified. "
        "Please contact us or cancel the booking.",
    ),
    "booking_confirmed": (
        "Booking confirmed",
        "Your booking for {court_name} on {date} at {time_range} is confirmed. See you on court!",
    ),
    "booking_cancelled": (
        "Booking cancelled",
        "Your booking for {court_name} on {date} at {time_range} was cancelled. {reason}",
    ),
    "booking_expired": (
        "Booking expired",
        "Your booking for {court_name} on {date} at {time_range} expired because no payment arrived in time.",
    ),
    "booking_finished": (
        "Thanks for playing",
        "Your session on {court_name} on {date} at {time_range} is finished.",
    ),
    "refund_requested": (
        "Refund requested",
        "A refund of {amount} via {method} has been requested and will be processed by an admin.",
    ),
    "refund_completed": (
        "Refund completed",
        "Your refund of {amount} via {method} has been sent.",
    ),
    "refund_rejected": (
        "Refund rejected",
        "Your refund of {amount} was rejected. {note}",
    ),
}


def render_message(kind: str, context: dict) -> tuple[str, str]:
    """Return ``(title, message)`` for a notification kind."""
    try:
        title, template = MESSAGE_TEMPLATES[kind]
    except KeyError:
        raise ValidationError(f"Unknown notification kind {kind!r}", kind=kind)
    try:
        message = template.format(**context)
    except KeyError as e:
        raise ValidationError(f"Missing {e.args[0]!r} for notification {kind}", kind=kind)
    return title, message.strip()


def notify(user_id: int, kind: str, context: dict, booking_id: int | None = None) -> Notification:
    """Append a notification for ``user_id``."""
    title, message = render_message(kind, context)
    notification = Notification.objects.create(
        user_id=user_id,
        booking_id=booking_id,
        kind=kind,
        title=title,
        message=message,
    )
    logger.info(f"Notification {kind} stored for user {user_id}")
    return notification


def mark_read(user, ids: Iterable[int] | None = None) -> int:
    """Mark the user's notifications (all, or only ``ids``) as read."""
    queryset = Notification.objects.filter(user=user, is_read=False)
    if ids is not None:
        queryset = queryset.filter(pk__in=list(ids))
    return queryset.update(is_read=True)


def unread_count(user) -> int:
    return Notification.objects.filter(user=user, is_read=False).count()
