"""
Unit of Work Pattern

Wraps one database transaction and guarantees that domain events are
handed to the message bus only after that transaction commits. A failed
notification therefore never rolls back the state change behind it.
"""

from abc import ABC, abstractmethod
from typing import List
import logging

from django.db import transaction

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)


class AbstractUnitOfWork(ABC):
    """Abstract Unit of Work pattern"""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.commit()
        else:
            self.rollback()

    @abstractmethod
    def commit(self):
        """Commit the transaction"""

    @abstractmethod
    def rollback(self):
        """Rollback the transaction"""

    @abstractmethod
    def collect_events(self, aggregate):
        """Collect events from aggregate root"""

    @abstractmethod
    def record(self, event: DomainEvent):
        """Record an event that does not belong to an aggregate"""


class DjangoUnitOfWork(AbstractUnitOfWork):
    """
    Django implementation of Unit of Work

    Nested units share the outermost transaction (inner ones become
    savepoints); their events are still only published once the outermost
    block commits, because ``transaction.on_commit`` defers to it.

    Usage:
        with DjangoUnitOfWork() as uow:
            booking = booking_repo.get_by_id(booking_id, lock=True)
            booking.confirm(actor)
            uow.collect_events(booking)
            booking_repo.save(booking)
        # Events are published after commit
    """

    def __init__(self):
        self._events: List[DomainEvent] = []
        self._transaction = None

    def __enter__(self):
        """Start database transaction"""
        self._transaction = transaction.atomic()
        self._transaction.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Complete or rollback transaction"""
        try:
            if exc_type is None:
                self.commit()
            else:
                self.rollback()
        finally:
            if self._transaction:
                self._transaction.__exit__(exc_type, exc_val, exc_tb)

    def commit(self):
        """
        Schedule collected events for publishing

        Events are published using Django's transaction.on_commit()
        to ensure they're only sent after the database commit succeeds.
        """
        logger.debug("Committing unit of work with %d events", len(self._events))

        events = self._events.copy()
        self._events.clear()

        if events:
            transaction.on_commit(lambda: self._publish_events(events))

    def rollback(self):
        """Rollback changes and discard events"""
        if self._events:
            logger.warning("Rolling back transaction, discarding %d events", len(self._events))
        self._events.clear()

    def collect_events(self, aggregate):
        """Drain the aggregate's pending events into this unit of work"""
        new_events = getattr(aggregate, 'events', None)
        if new_events:
            self._events.extend(new_events)
            aggregate.clear_events()
            logger.debug(
                "Collected %d events from %s (ID: %s)",
                len(new_events), aggregate.__class__.__name__, aggregate.id,
            )

    def record(self, event: DomainEvent):
        self._events.append(event)

    def _publish_events(self, events: List[DomainEvent]):
        """Publish collected events to the message bus (after commit)"""
        from shared.application.message_bus import message_bus

        logger.info("Publishing %d domain events after commit", len(events))

        try:
            message_bus.publish_events(events)
        except Exception:
            # The state change is already committed; monitoring picks this up.
            logger.exception("Error publishing events")
