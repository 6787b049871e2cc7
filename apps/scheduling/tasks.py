"""Celery tasks for the schedule projection."""

from __future__ import annotations

import logging
from datetime import timedelta

from celery import shared_task  # type: ignore
from django.utils import timezone  # type: ignore

from apps.courts.models import Court

from .synchronizer import audit_day

logger = logging.getLogger(__name__)


@shared_task(name="scheduling.audit_schedule_projection")
def audit_schedule_projection(days: int = 2) -> dict[str, int]:
    """
    Compare the projection of the next ``days`` days with the bookings.

    Mismatches are logged at error level by ``audit_day``; nothing is
    repaired automatically.
    """
    today = timezone.localdate()
    checked = 0
    mismatches = 0

    for court in Court.objects.active():
        for offset in range(days):
            day = today + timedelta(days=offset)
            try:
                mismatches += len(audit_day(court.pk, day))
                checked += 1
            except Exception as e:
                logger.error(f"Error auditing court {court.pk} on {day}: {e}", exc_info=True)

    if mismatches:
        logger.warning(f"Schedule audit found {mismatches} mismatched slot(s)")

    return {"checked": checked, "mismatches": mismatches}
