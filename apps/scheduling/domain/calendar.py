"""
Slot Calendar

Pure computation over the one-hour slot grid of a court. Nothing here
touches the database; callers pass the court's operating window in.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from typing import List

from shared.domain.base import ValueObject
from shared.domain.errors import ValidationError

SLOT_LENGTH = timedelta(hours=1)


@dataclass(frozen=True)
class Slot(ValueObject):
    """One bookable hour of one court on one date."""

    court_id: int
    date: date
    hour: int

    def __post_init__(self):
        if not 0 <= self.hour <= 23:
            raise ValidationError(f"Hour {self.hour} is outside the day", hour=self.hour)

    @property
    def start_time(self) -> time:
        return time(self.hour)

    @property
    def end_time(self) -> time:
        # A slot starting at 23:00 ends at midnight of the next day.
        return time((self.hour + 1) % 24)

    def starts_at(self, tz: tzinfo | None = None) -> datetime:
        return datetime.combine(self.date, self.start_time, tzinfo=tz)

    def ends_at(self, tz: tzinfo | None = None) -> datetime:
        return self.starts_at(tz) + SLOT_LENGTH

    def next(self) -> 'Slot':
        moment = self.starts_at() + SLOT_LENGTH
        return Slot(self.court_id, moment.date(), moment.hour)

    def previous(self) -> 'Slot':
        moment = self.starts_at() - SLOT_LENGTH
        return Slot(self.court_id, moment.date(), moment.hour)

    def is_adjacent_to(self, other: 'Slot') -> bool:
        return other in (self.next(), self.previous())

    def __str__(self):
        return f"court {self.court_id} {self.date.isoformat()} {self.start_time:%H:%M}"


class SlotCalendar:
    """
    Operating window of a court and the slot grid inside it.

    Slots start on the hour in ``[opening_hour, closing_hour)``; a range may
    end exactly at ``closing_hour``.
    """

    def __init__(self, opening_hour: int = 8, closing_hour: int = 21):
        if not 0 <= opening_hour < closing_hour <= 23:
            raise ValidationError(
                "Operating window must satisfy 0 <= opening < closing <= 23",
                opening_hour=opening_hour,
                closing_hour=closing_hour,
            )
        self.opening_hour = opening_hour
        self.closing_hour = closing_hour

    @classmethod
    def for_court(cls, court) -> 'SlotCalendar':
        return cls(court.opening_hour, court.closing_hour)

    def __repr__(self):
        return f"SlotCalendar({self.opening_hour:02d}:00-{self.closing_hour:02d}:00)"

    @staticmethod
    def validate_boundary(value: time) -> int:
        """Return the hour of ``value``; reject anything not on the hour."""
        if value.minute or value.second or value.microsecond:
            raise ValidationError(f"{value:%H:%M:%S} is not on an hour boundary", time=value)
        return value.hour

    def slot_for(self, court_id: int, day: date, start: time) -> Slot:
        hour = self.validate_boundary(start)
        if not self.opening_hour <= hour < self.closing_hour:
            raise ValidationError(
                f"{start:%H:%M} is outside operating hours "
                f"{self.opening_hour:02d}:00-{self.closing_hour:02d}:00",
                time=start,
            )
        return Slot(court_id, day, hour)

    def slots_between(self, court_id: int, day: date, start: time, end: time) -> List[Slot]:
        """Expand ``[start, end)`` into one slot per hour."""
        first = self.validate_boundary(start)
        last = self.validate_boundary(end)
        if last <= first:
            raise ValidationError("End time must be after start time", start_time=start, end_time=end)
        if first < self.opening_hour or last > self.closing_hour:
            raise ValidationError(
                f"{start:%H:%M}-{end:%H:%M} is outside operating hours "
                f"{self.opening_hour:02d}:00-{self.closing_hour:02d}:00",
                start_time=start,
                end_time=end,
            )
        return [Slot(court_id, day, hour) for hour in range(first, last)]

    def expand(self, booking) -> List[Slot]:
        """Slots covered by anything carrying court, date and a time range."""
        return self.slots_between(booking.court_id, booking.date, booking.start_time, booking.end_time)

    def day_slots(self, court_id: int, day: date) -> List[Slot]:
        return [Slot(court_id, day, hour) for hour in range(self.opening_hour, self.closing_hour)]

    @staticmethod
    def week(start: date, days: int = 7) -> List[date]:
        return [start + timedelta(days=offset) for offset in range(days)]

    @staticmethod
    def is_past(slot: Slot, now: datetime) -> bool:
        """True once the slot has started at ``now`` (timezone of ``now`` applies)."""
        return slot.starts_at(now.tzinfo) <= now
