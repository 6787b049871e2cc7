"""Event handlers owned by the bookings app."""

from __future__ import annotations

import logging

from django.conf import settings  # type: ignore

from shared.application.message_bus import message_bus

from .domain.events import BookingCreated

logger = logging.getLogger(__name__)


def schedule_hold_expiry(event: BookingCreated) -> None:
    """Queue the one-shot expiry check for a fresh hold."""
    from .tasks import expire_hold

    countdown = settings.BOOKING_HOLD_TIMEOUT_MINUTES * 60 + 5
    try:
        expire_hold.apply_async(args=[event.booking_id], countdown=countdown)
    except Exception:
        # The periodic sweep still expires the hold.
        logger.warning("Could not schedule hold expiry for booking %s", event.booking_id, exc_info=True)


def register_handlers(bus=message_bus):
    bus.register_event_handler(BookingCreated, schedule_hold_expiry)
