"""Celery tasks for the booking domain."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from celery import shared_task  # type: ignore
from django.conf import settings  # type: ignore
from django.db.models import Q  # type: ignore
from django.utils import timezone  # type: ignore

from shared.domain.actors import Actor
from shared.domain.errors import DomainError, InvalidTransition

from .models import Booking
from .services import set_booking_status

logger = logging.getLogger(__name__)

EXPIRY_REASON = "Payment not received within the hold period"


def hold_deadline(now: datetime) -> datetime:
    return now - timedelta(minutes=settings.BOOKING_HOLD_TIMEOUT_MINUTES)


def stale_holds(now: datetime):
    return Booking.objects.filter(
        status=Booking.Status.PENDING,
        created_at__lt=hold_deadline(now),
    ).exclude(payment_status=Booking.PaymentStatus.PAID)


@shared_task(name="bookings.expire_hold")
def expire_hold(booking_id: int) -> bool:
    """Cancel one booking if its hold has lapsed. Safe to run any number of times."""

    now = timezone.now()
    if not stale_holds(now).filter(pk=booking_id).exists():
        return False
    deadline = hold_deadline(now)

    try:
        set_booking_status(
            Actor.system(), booking_id, Booking.Status.CANCELLED, EXPIRY_REASON, hold_deadline=deadline,
        )
    except DomainError as e:
        # Lost a race with a user or admin transition; their state wins.
        logger.info(f"Hold of booking {booking_id} not expired: {e}")
        return False
    return True


# ============================================================================
# PERIODIC TASKS (run by Celery Beat)
# ============================================================================

@shared_task(name="bookings.expire_stale_holds")
def expire_stale_holds(now: str | datetime | None = None) -> dict[str, int]:
    """
    Cancel pending bookings whose hold has lapsed.

    Picks bookings with status PENDING, payment not PAID and created more
    than BOOKING_HOLD_TIMEOUT_MINUTES ago, and cancels each through the
    lifecycle with the system actor. A failure is logged and skipped.

    Runs every minute via Celery Beat.

    Returns:
        dict: {"expired": cancelled bookings, "failed": skipped bookings}
    """
    moment = datetime.fromisoformat(now) if isinstance(now, str) else (now or timezone.now())
    if timezone.is_naive(moment):
        moment = timezone.make_aware(moment)
    expired_count = 0
    failed_count = 0

    deadline = hold_deadline(moment)

    for booking_id in stale_holds(moment).order_by("created_at").values_list("pk", flat=True):
        try:
            set_booking_status(
                Actor.system(),
                booking_id,
                Booking.Status.CANCELLED,
                EXPIRY_REASON,
                now=moment,
                hold_deadline=deadline,
            )
            expired_count += 1
            logger.info(f"Booking {booking_id} expired automatically")
        except InvalidTransition as e:
            # Paid, confirmed or cancelled since it was picked up.
            logger.info(f"Booking {booking_id} no longer expirable: {e}")
        except Exception as e:
            failed_count += 1
            logger.error(f"Error expiring booking {booking_id}: {e}", exc_info=True)

    if expired_count > 0:
        logger.info(f"Expired {expired_count} pending bookings")

    return {"expired": expired_count, "failed": failed_count}


@shared_task(name="bookings.finish_elapsed_bookings")
def finish_elapsed_bookings(now: str | datetime | None = None) -> dict[str, int]:
    """
    Mark confirmed bookings as finished once their end time has passed.

    Runs every hour.

    Returns:
        dict: {"finished": finished bookings, "failed": skipped bookings}
    """
    moment = timezone.localtime(
        datetime.fromisoformat(now) if isinstance(now, str) else (now or timezone.now())
    )
    finished_count = 0
    failed_count = 0

    elapsed = Booking.objects.filter(status=Booking.Status.CONFIRMED).filter(
        Q(date__lt=moment.date()) | Q(date=moment.date(), end_time__lte=moment.time())
    )

    for booking_id in elapsed.values_list("pk", flat=True):
        try:
            set_booking_status(Actor.system(), booking_id, Booking.Status.FINISHED, now=moment)
            finished_count += 1
        except Exception as e:
            failed_count += 1
            logger.error(f"Error finishing booking {booking_id}: {e}", exc_info=True)

    if finished_count > 0:
        logger.info(f"Finished {finished_count} bookings")

    return {"finished": finished_count, "failed": failed_count}
