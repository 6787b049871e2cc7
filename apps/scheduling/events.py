"""Scheduling events."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

from shared.domain.base import DomainEvent


@dataclass(kw_only=True)
class RowChange(DomainEvent):
    """
    A committed insert, update or delete of a ``schedules`` or ``bookings`` row.

    ``new`` is absent for deletes and ``old`` is absent for inserts. Both
    carry column values keyed by attname.
    """
    table: str
    operation: str
    new: Dict[str, Any] | None = None
    old: Dict[str, Any] | None = None

    INSERT = 'INSERT'
    UPDATE = 'UPDATE'
    DELETE = 'DELETE'

    def court_days(self) -> set:
        """(court_id, iso date) pairs this change touches."""
        pairs = set()
        for values in (self.new, self.old):
            if values and values.get('court_id') is not None and values.get('date'):
                pairs.add((values['court_id'], values['date']))
        return pairs
