"""
Availability Resolver

Read-only answers to "is this slot free?" built from the schedule
projection. Answers may be stale; the booking write path re-checks under
lock before anything is claimed.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date, datetime, time
from enum import Enum
from typing import Dict, List

from django.conf import settings  # type: ignore
from django.utils import timezone  # type: ignore

from shared.domain.errors import ValidationError

from . import cache
from .domain.calendar import Slot, SlotCalendar
from .domain.derivation import ScheduleStatus, display_status
from .models import Schedule
from .synchronizer import calendar_for


class AvailabilityStatus(str, Enum):
    AVAILABLE = 'available'
    HELD = 'held'
    BOOKED = 'booked'
    MAINTENANCE = 'maintenance'
    HOLIDAY = 'holiday'


_BY_SCHEDULE_STATUS = {
    ScheduleStatus.AVAILABLE: AvailabilityStatus.AVAILABLE,
    ScheduleStatus.PENDING: AvailabilityStatus.HELD,
    ScheduleStatus.BOOKED: AvailabilityStatus.BOOKED,
    ScheduleStatus.MAINTENANCE: AvailabilityStatus.MAINTENANCE,
    ScheduleStatus.HOLIDAY: AvailabilityStatus.HOLIDAY,
}


@dataclass(frozen=True)
class SlotAvailability:
    status: AvailabilityStatus
    owner_display_name: str = ''
    raw_status: str = ScheduleStatus.AVAILABLE.value
    user_id: int | None = None
    booking_id: int | None = None

    @property
    def is_available(self) -> bool:
        return self.status is AvailabilityStatus.AVAILABLE

    @classmethod
    def from_row(cls, row: Schedule | None) -> 'SlotAvailability':
        if row is None:
            return cls(AvailabilityStatus.AVAILABLE)
        return cls(
            status=_BY_SCHEDULE_STATUS[display_status(row.status)],
            owner_display_name=row.display_name,
            raw_status=row.status,
            user_id=row.user_id,
            booking_id=row.booking_id,
        )


def resolve(
    court_id: int,
    day: date,
    start: time,
    *,
    for_booking: bool = False,
    now: datetime | None = None,
    calendar: SlotCalendar | None = None,
) -> SlotAvailability:
    """Classify one slot. ``for_booking`` also rejects slots that already started."""
    calendar = calendar or calendar_for(court_id)
    slot = calendar.slot_for(court_id, day, start)
    if for_booking:
        now = timezone.localtime(now or timezone.now())
        if SlotCalendar.is_past(slot, now):
            raise ValidationError(f"Slot {slot} is in the past", slot=slot)

    row = Schedule.objects.filter(court_id=court_id, date=day, start_time=slot.start_time).first()
    return SlotAvailability.from_row(row)


def is_bookable(court_id: int, day: date, start: time, user_id: int | None = None) -> bool:
    """Free, or held by the same user (a retry of their own booking)."""
    availability = resolve(court_id, day, start)
    if availability.is_available:
        return True
    return (
        availability.status is AvailabilityStatus.HELD
        and user_id is not None
        and availability.user_id == user_id
    )


def _grid_entry(slot: Slot, row: Schedule | None) -> dict:
    availability = SlotAvailability.from_row(row)
    entry = asdict(availability)
    entry["status"] = availability.status.value
    entry["start_time"] = slot.start_time.strftime("%H:%M")
    entry["end_time"] = slot.end_time.strftime("%H:%M")
    return entry


def _build_day(court, day: date) -> List[dict]:
    calendar = SlotCalendar.for_court(court)
    rows = {row.start_time: row for row in Schedule.objects.filter(court_id=court.pk, date=day)}
    return [_grid_entry(slot, rows.get(slot.start_time)) for slot in calendar.day_slots(court.pk, day)]


def day_grid(court, day: date) -> List[dict]:
    """Every slot of a court day with its display status; one query, cached."""
    return cache.get_cached_day(court.pk, day, lambda: _build_day(court, day))


def week_grid(court, start: date, days: int | None = None) -> Dict[str, List[dict]]:
    days = days or getattr(settings, "SCHEDULE_GRID_DAYS", 7)
    return {day.isoformat(): day_grid(court, day) for day in SlotCalendar.week(start, days)}
