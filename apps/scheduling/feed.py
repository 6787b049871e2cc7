"""
Row-change feed.

Model signals turn every write to ``schedules`` and ``bookings`` into a
``RowChange`` event published on the message bus once the surrounding
transaction commits. The feed only invalidates the projection cache; it
never patches schedule state.
"""

from __future__ import annotations

import logging
from datetime import date

from django.db import transaction  # type: ignore

from shared.application.message_bus import message_bus

from . import cache
from .events import RowChange

logger = logging.getLogger(__name__)


def emit(table: str, operation: str, new: dict | None, old: dict | None) -> RowChange:
    change = RowChange(table=table, operation=operation, new=new, old=old, aggregate_id=(new or old or {}).get('id'))
    transaction.on_commit(lambda: message_bus.publish(change))
    return change


def record_save(instance, created: bool) -> RowChange:
    old = None if created else instance.loaded_snapshot()
    change = emit(
        instance._meta.db_table,
        RowChange.INSERT if created else RowChange.UPDATE,
        instance.row_snapshot(),
        old,
    )
    instance.refresh_snapshot()
    return change


def record_delete(instance) -> RowChange:
    return emit(instance._meta.db_table, RowChange.DELETE, None, instance.row_snapshot())


def invalidate_on_row_change(change: RowChange) -> None:
    pairs = [(court_id, date.fromisoformat(day)) for court_id, day in change.court_days()]
    cache.invalidate_days(pairs)
    logger.debug("Row change on %s (%s) invalidated %d cached day(s)", change.table, change.operation, len(pairs))


def register_handlers() -> None:
    message_bus.register_event_handler(RowChange, invalidate_on_row_change)
