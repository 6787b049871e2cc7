"""
Domain event handlers queueing customer notifications.

Handlers run after commit (the unit of work publishes then) and only
enqueue ``deliver_notification``; a failure here is logged by the message
bus and never touches the booking.
"""

from __future__ import annotations

import logging

from django.conf import settings  # type: ignore

from apps.bookings.domain import events as booking_events
from apps.courts.models import Court
from apps.finances import events as refund_events
from shared.application.message_bus import message_bus
from shared.domain.value_objects import Money

from .tasks import deliver_notification

logger = logging.getLogger(__name__)


def _amount(value: int) -> str:
    return str(Money(value, settings.BOOKING_CURRENCY))


def booking_context(event: booking_events.BookingEvent, **extra) -> dict:
    court_name = Court.objects.filter(pk=event.court_id).values_list("name", flat=True).first()
    context = {
        "court_name": court_name or f"court {event.court_id}",
        "date": event.date.strftime("%d.%m.%Y"),
        "time_range": f"{event.start_time:%H:%M}-{event.end_time:%H:%M}",
    }
    context.update(extra)
    return context


def _send(user_id: int, kind: str, context: dict, booking_id: int | None) -> None:
    deliver_notification.delay(user_id, kind, context, booking_id)
    logger.debug("Queued %s notification for user %s", kind, user_id)


def on_booking_created(event: booking_events.BookingCreated) -> None:
    _send(event.user_id, "booking_created", booking_context(
        event,
        amount=_amount(event.total_price),
        hold_minutes=settings.BOOKING_HOLD_TIMEOUT_MINUTES,
    ), event.booking_id)


def on_payment_submitted(event: booking_events.PaymentSubmitted) -> None:
    method = event.method.replace("_", " ")
    _send(event.user_id, "payment_submitted", booking_context(event, method=method), event.booking_id)


def on_payment_status_changed(event: booking_events.PaymentStatusChanged) -> None:
    kind = {"paid": "payment_paid", "failed": "payment_failed"}.get(event.new_status)
    # paid -> cancelled is announced by the refund.
    if kind:
        _send(event.user_id, kind, booking_context(event), event.booking_id)


def on_booking_confirmed(event: booking_events.BookingConfirmed) -> None:
    _send(event.user_id, "booking_confirmed", booking_context(event), event.booking_id)


def on_booking_cancelled(event: booking_events.BookingCancelled) -> None:
    kind = "booking_expired" if event.cancelled_by == "system" else "booking_cancelled"
    _send(event.user_id, kind, booking_context(event, reason=event.reason), event.booking_id)


def on_booking_finished(event: booking_events.BookingFinished) -> None:
    _send(event.user_id, "booking_finished", booking_context(event), event.booking_id)


def _refund_context(event: refund_events.RefundEvent, **extra) -> dict:
    context = {"amount": _amount(event.amount), "method": event.method.replace("_", " ")}
    context.update(extra)
    return context


def on_refund_requested(event: refund_events.RefundRequested) -> None:
    _send(event.user_id, "refund_requested", _refund_context(event), event.booking_id)


def on_refund_completed(event: refund_events.RefundCompleted) -> None:
    _send(event.user_id, "refund_completed", _refund_context(event), event.booking_id)


def on_refund_rejected(event: refund_events.RefundRejected) -> None:
    _send(event.user_id, "refund_rejected", _refund_context(event, note=event.note), event.booking_id)


HANDLERS = {
    booking_events.BookingCreated: on_booking_created,
    booking_events.PaymentSubmitted: on_payment_submitted,
    booking_events.PaymentStatusChanged: on_payment_status_changed,
    booking_events.BookingConfirmed: on_booking_confirmed,
    booking_events.BookingCancelled: on_booking_cancelled,
    booking_events.BookingFinished: on_booking_finished,
    refund_events.RefundRequested: on_refund_requested,
    refund_events.RefundCompleted: on_refund_completed,
    refund_events.RefundRejected: on_refund_rejected,
}


def register_handlers(bus=message_bus):
    for event_type, handler in HANDLERS.items():
        bus.register_event_handler(event_type, handler)
