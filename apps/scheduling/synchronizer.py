"""
Schedule Synchronizer

The only writer of ``Schedule`` rows. Booking transitions call ``claim``
when a booking is created, ``project`` after every later status change and
``release`` when a booking is purged. Staff overrides (maintenance and
holiday) go through ``set_override``/``clear_override``.

All functions accept anything shaped like a booking: ``id``, ``user_id``,
``court_id``, ``date``, ``start_time``, ``end_time``, ``status``,
``payment_status`` and ``owner_name``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, time
from typing import Dict, Iterable, List, Tuple

from django.db import IntegrityError, transaction  # type: ignore

from apps.courts.models import Court
from shared.domain.actors import Actor
from shared.domain.errors import (
    InvalidTransition,
    NotFound,
    PermissionDenied,
    ProjectionInconsistency,
    SlotConflict,
    ValidationError,
)
from shared.infrastructure.locking import lock_queryset_if_possible

from . import cache
from .domain.calendar import Slot, SlotCalendar
from .domain.derivation import (
    OVERRIDE_STATUSES,
    ScheduleStatus,
    derive_schedule_status,
    display_status,
)
from .models import Schedule

logger = logging.getLogger(__name__)

ROW_FIELDS = ["status", "user", "booking", "display_name", "note", "end_time", "updated_at"]


@dataclass(frozen=True)
class ProjectionMismatch:
    """A schedule row that disagrees with the booking that should own it."""

    court_id: int
    date: date
    start_time: time
    expected: str
    actual: str
    booking_id: int | None
    row_booking_id: int | None

    def to_dict(self) -> dict:
        return {
            "court_id": self.court_id,
            "date": self.date.isoformat(),
            "start_time": self.start_time.strftime("%H:%M"),
            "expected": self.expected,
            "actual": self.actual,
            "booking_id": self.booking_id,
            "row_booking_id": self.row_booking_id,
        }


def calendar_for(court_id: int) -> SlotCalendar:
    try:
        court = Court.objects.get(pk=court_id)
    except Court.DoesNotExist:
        raise NotFound(f"Court {court_id} not found", court_id=court_id)
    return SlotCalendar.for_court(court)


def _locked_rows(court_id: int, day: date, start_times: Iterable[time]) -> Dict[time, Schedule]:
    queryset = Schedule.objects.filter(court_id=court_id, date=day, start_time__in=list(start_times))
    queryset = lock_queryset_if_possible(queryset)
    return {row.start_time: row for row in queryset}


def _invalidate_after_commit(pairs: Iterable[Tuple[int, date]]) -> None:
    pairs = set(pairs)
    transaction.on_commit(lambda: cache.invalidate_days(pairs))


def _assign(row: Schedule, booking, status: ScheduleStatus) -> None:
    row.status = status.value
    row.user_id = booking.user_id
    row.booking_id = booking.id
    row.display_name = booking.owner_name or ""
    row.note = ""


def _release_row(row: Schedule) -> None:
    row.status = Schedule.Status.AVAILABLE
    row.user_id = None
    row.booking_id = None
    row.display_name = ""
    row.note = ""
    row.save(update_fields=ROW_FIELDS)


def _insert_row(slot: Slot, booking, status: ScheduleStatus) -> Schedule:
    row = Schedule(court_id=slot.court_id, date=slot.date, start_time=slot.start_time, end_time=slot.end_time)
    _assign(row, booking, status)
    try:
        with transaction.atomic():
            row.save(force_insert=True)
    except IntegrityError:
        # Another transaction inserted the same slot between our lock and insert.
        raise SlotConflict(f"Slot {slot} was claimed concurrently", slot=slot, booking_id=booking.id)
    return row


def _is_claimable(row: Schedule, booking) -> bool:
    if row.booking_id is not None and row.booking_id == booking.id:
        return True
    return row.status == Schedule.Status.AVAILABLE


def claim(booking, *, calendar: SlotCalendar | None = None) -> List[Schedule]:
    """
    Compare-and-swap every slot the booking covers.

    An existing row is locked and must be available; a missing row is
    inserted under the unique slot key. Any lost slot raises
    ``SlotConflict`` and the caller's transaction rolls back every write.
    """
    calendar = calendar or calendar_for(booking.court_id)
    slots = calendar.expand(booking)
    status = derive_schedule_status(booking.status, booking.payment_status)

    claimed: List[Schedule] = []
    with transaction.atomic():
        rows = _locked_rows(booking.court_id, booking.date, [slot.start_time for slot in slots])
        for slot in slots:
            row = rows.get(slot.start_time)
            if row is None:
                claimed.append(_insert_row(slot, booking, status))
                continue
            if not _is_claimable(row, booking):
                raise SlotConflict(
                    f"Slot {slot} is {row.status}",
                    slot=slot,
                    status=row.status,
                    booking_id=booking.id,
                )
            _assign(row, booking, status)
            row.save(update_fields=ROW_FIELDS)
            claimed.append(row)

    _invalidate_after_commit([(booking.court_id, booking.date)])
    logger.info("Booking %s claimed %d slot(s) as %s", booking.id, len(claimed), status.value)
    return claimed


def project(booking, *, calendar: SlotCalendar | None = None) -> ScheduleStatus:
    """Write the derived status of ``booking`` onto every slot it covers."""
    calendar = calendar or calendar_for(booking.court_id)
    slots = calendar.expand(booking)
    status = derive_schedule_status(booking.status, booking.payment_status)

    with transaction.atomic():
        rows = _locked_rows(booking.court_id, booking.date, [slot.start_time for slot in slots])
        for slot in slots:
            row = rows.get(slot.start_time)

            if status is ScheduleStatus.AVAILABLE:
                # Only rows this booking owns are freed.
                if row is not None and row.booking_id == booking.id:
                    _release_row(row)
                continue

            if row is None:
                _insert_row(slot, booking, status)
                continue

            current = ScheduleStatus(row.status)
            foreign_owner = row.booking_id != booking.id
            if current in OVERRIDE_STATUSES or (foreign_owner and current.is_held):
                logger.error(
                    "Refusing to project booking %s onto %s: row is %s owned by booking %s",
                    booking.id, slot, row.status, row.booking_id,
                )
                raise ProjectionInconsistency(
                    f"Slot {slot} is {row.status} and not owned by booking {booking.id}",
                    slot=slot,
                    status=row.status,
                    booking_id=booking.id,
                    row_booking_id=row.booking_id,
                )
            _assign(row, booking, status)
            row.save(update_fields=ROW_FIELDS)

    _invalidate_after_commit([(booking.court_id, booking.date)])
    logger.info("Projected booking %s as %s", booking.id, status.value)
    return status


def release(booking) -> int:
    """Free every row owned by ``booking``; returns the number of rows freed."""
    with transaction.atomic():
        rows = lock_queryset_if_possible(Schedule.objects.filter(booking_id=booking.id))
        released = 0
        touched = set()
        for row in rows:
            if row.status in OVERRIDE_STATUSES:
                continue
            _release_row(row)
            touched.add((row.court_id, row.date))
            released += 1

    if touched:
        _invalidate_after_commit(touched)
    logger.info("Released %d slot(s) of booking %s", released, booking.id)
    return released


def _active_booking_at(court_id: int, day: date, start: time):
    from apps.bookings.models import Booking

    return (
        Booking.objects.active()
        .filter(court_id=court_id, date=day, start_time__lte=start, end_time__gt=start)
        .first()
    )


def set_override(
    actor: Actor,
    court_id: int,
    day: date,
    start: time,
    status: str,
    note: str = "",
) -> Schedule:
    """Mark a slot as maintenance or holiday; refused while a booking holds it."""
    if not actor.is_privileged:
        raise PermissionDenied("Only staff can block slots", actor=actor)
    try:
        override = ScheduleStatus(status)
    except ValueError:
        raise ValidationError(f"Unknown schedule status {status!r}", status=status)
    if override not in OVERRIDE_STATUSES:
        raise ValidationError(f"{override.value} is not an override status", status=status)

    slot = calendar_for(court_id).slot_for(court_id, day, start)

    with transaction.atomic():
        lock_queryset_if_possible(Court.objects.filter(pk=court_id)).get()
        row = _locked_rows(court_id, day, [slot.start_time]).get(slot.start_time)
        holder = _active_booking_at(court_id, day, slot.start_time)
        if holder is not None or (row is not None and ScheduleStatus(row.status).is_held):
            raise SlotConflict(
                f"Slot {slot} is held by a booking",
                slot=slot,
                booking_id=getattr(holder, "id", None) or getattr(row, "booking_id", None),
            )
        if row is None:
            row = Schedule(court_id=court_id, date=day, start_time=slot.start_time, end_time=slot.end_time)
        row.status = override.value
        row.user_id = None
        row.booking_id = None
        row.display_name = ""
        row.note = note
        row.save()

    _invalidate_after_commit([(court_id, day)])
    logger.info("%s set %s on %s", actor, override.value, slot)
    return row


def clear_override(actor: Actor, court_id: int, day: date, start: time) -> Schedule | None:
    """Return an overridden slot to available. Clearing a free slot is a no-op."""
    if not actor.is_privileged:
        raise PermissionDenied("Only staff can unblock slots", actor=actor)

    slot = calendar_for(court_id).slot_for(court_id, day, start)

    with transaction.atomic():
        row = _locked_rows(court_id, day, [slot.start_time]).get(slot.start_time)
        if row is None or row.status == Schedule.Status.AVAILABLE:
            return row
        if row.status not in OVERRIDE_STATUSES:
            raise InvalidTransition(
                f"Slot {slot} is {row.status}; only maintenance or holiday can be cleared",
                slot=slot,
                status=row.status,
            )
        _release_row(row)

    _invalidate_after_commit([(court_id, day)])
    logger.info("%s cleared override on %s", actor, slot)
    return row


def _expected_mismatches(booking, slots: List[Slot], rows: Dict[time, Schedule]) -> List[ProjectionMismatch]:
    expected = derive_schedule_status(booking.status, booking.payment_status)
    mismatches = []
    for slot in slots:
        row = rows.get(slot.start_time)
        if expected is ScheduleStatus.AVAILABLE:
            if row is not None and row.booking_id == booking.id and ScheduleStatus(row.status).is_held:
                actual = row.status
            else:
                continue
        elif row is None:
            actual = ScheduleStatus.AVAILABLE.value
        elif row.booking_id != booking.id or display_status(row.status) is not expected:
            actual = row.status
        else:
            continue
        mismatches.append(ProjectionMismatch(
            court_id=slot.court_id,
            date=slot.date,
            start_time=slot.start_time,
            expected=expected.value,
            actual=actual,
            booking_id=booking.id,
            row_booking_id=getattr(row, "booking_id", None),
        ))
    return mismatches


def verify(booking, *, calendar: SlotCalendar | None = None) -> None:
    """Raise ``ProjectionInconsistency`` unless the rows match the derivation."""
    calendar = calendar or calendar_for(booking.court_id)
    slots = calendar.expand(booking)
    rows = {
        row.start_time: row
        for row in Schedule.objects.filter(
            court_id=booking.court_id,
            date=booking.date,
            start_time__in=[slot.start_time for slot in slots],
        )
    }
    mismatches = _expected_mismatches(booking, slots, rows)
    if mismatches:
        logger.error(
            "Schedule projection of booking %s is inconsistent: %s",
            booking.id, [mismatch.to_dict() for mismatch in mismatches],
        )
        raise ProjectionInconsistency(
            f"{len(mismatches)} slot(s) of booking {booking.id} disagree with its status",
            booking_id=booking.id,
            mismatches=[mismatch.to_dict() for mismatch in mismatches],
        )


def audit_day(court_id: int, day: date) -> List[ProjectionMismatch]:
    """Compare a court day's rows with the active bookings of that day."""
    from apps.bookings.models import Booking

    calendar = calendar_for(court_id)
    rows = {row.start_time: row for row in Schedule.objects.filter(court_id=court_id, date=day)}
    bookings = list(Booking.objects.active().filter(court_id=court_id, date=day).select_related("user"))

    mismatches: List[ProjectionMismatch] = []
    owned = set()
    for booking in bookings:
        slots = calendar.expand(booking)
        owned.update((slot.start_time, booking.id) for slot in slots)
        mismatches.extend(_expected_mismatches(booking, slots, rows))

    for start, row in rows.items():
        if ScheduleStatus(row.status).is_held and (start, row.booking_id) not in owned:
            mismatches.append(ProjectionMismatch(
                court_id=court_id,
                date=day,
                start_time=start,
                expected=ScheduleStatus.AVAILABLE.value,
                actual=row.status,
                booking_id=None,
                row_booking_id=row.booking_id,
            ))

    for mismatch in mismatches:
        logger.error("Schedule projection mismatch: %s", mismatch.to_dict())
    return mismatches
