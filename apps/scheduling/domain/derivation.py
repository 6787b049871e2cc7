"""
Schedule status derivation.

The single table mapping a booking's ``(status, payment_status)`` onto the
status of the schedule rows it owns. Every write to the projection goes
through ``derive_schedule_status``.
"""

from __future__ import annotations

from enum import Enum

from shared.domain.errors import ProjectionInconsistency


class ScheduleStatus(str, Enum):
    AVAILABLE = 'available'
    PENDING = 'pending'
    BOOKED = 'booked'
    CONFIRMED = 'confirmed'  # legacy, read as BOOKED and never written
    MAINTENANCE = 'maintenance'
    HOLIDAY = 'holiday'

    @property
    def is_override(self) -> bool:
        return self in OVERRIDE_STATUSES

    @property
    def is_held(self) -> bool:
        return self in (ScheduleStatus.PENDING, ScheduleStatus.BOOKED, ScheduleStatus.CONFIRMED)


OVERRIDE_STATUSES = frozenset({ScheduleStatus.MAINTENANCE, ScheduleStatus.HOLIDAY})

_ANY = '*'

DERIVATION_TABLE = {
    ('pending', 'pending'): ScheduleStatus.PENDING,
    ('pending', 'failed'): ScheduleStatus.PENDING,
    ('pending', 'paid'): ScheduleStatus.PENDING,
    ('pending', 'cancelled'): ScheduleStatus.PENDING,
    ('confirmed', 'paid'): ScheduleStatus.BOOKED,
    ('cancelled', _ANY): ScheduleStatus.AVAILABLE,
    ('finished', _ANY): ScheduleStatus.AVAILABLE,
}


def _value(status) -> str:
    return getattr(status, 'value', status)


def derive_schedule_status(status, payment_status) -> ScheduleStatus:
    """Schedule status for a booking; raises for pairs with no defined projection."""
    status, payment_status = _value(status), _value(payment_status)
    derived = DERIVATION_TABLE.get((status, payment_status)) or DERIVATION_TABLE.get((status, _ANY))
    if derived is None:
        raise ProjectionInconsistency(
            f"No schedule status for booking state {status}/{payment_status}",
            status=status,
            payment_status=payment_status,
        )
    return derived


def display_status(raw_status) -> ScheduleStatus:
    """Status as shown on a grid: the legacy ``confirmed`` value reads as ``booked``."""
    status = ScheduleStatus(_value(raw_status))
    if status is ScheduleStatus.CONFIRMED:
        return ScheduleStatus.BOOKED
    return status
