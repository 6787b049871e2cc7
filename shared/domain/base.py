"""
Base Domain Classes

Building blocks shared by the booking, scheduling and finance contexts:
- Entity: Objects with unique identity
- ValueObject: Immutable objects compared by value
- Aggregate: Consistency boundaries that record domain events
- DomainEvent: Something that happened, published after commit
"""

from abc import ABC
from dataclasses import dataclass, field, fields
from datetime import date, datetime, time
from typing import Any, List
from uuid import UUID, uuid4


@dataclass(kw_only=True)
class Entity(ABC):
    """
    Base class for all entities

    Entities are identified by their database primary key. A freshly built
    entity has no id until its repository assigns one.
    """
    id: int | None = None

    def __eq__(self, other):
        if not isinstance(other, self.__class__):
            return False
        if self.id is None or other.id is None:
            return self is other
        return self.id == other.id

    def __hash__(self):
        return hash((self.__class__.__name__, self.id))


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects

    Value objects are immutable and have no identity.
    Two value objects are equal if all their attributes are equal.
    """
    pass


@dataclass(kw_only=True, eq=False)
class Aggregate(Entity):
    """
    Base class for aggregate roots

    Aggregates collect domain events while they change; the unit of work
    drains them and publishes them once the transaction has committed.
    """
    _events: List['DomainEvent'] = field(default_factory=list, repr=False, init=False, compare=False)

    def add_event(self, event: 'DomainEvent'):
        """Record a domain event to be published after commit"""
        self._events.append(event)

    def clear_events(self):
        """Clear all collected events (called by the unit of work)"""
        self._events.clear()

    @property
    def events(self) -> List['DomainEvent']:
        """Get copy of collected events"""
        return self._events.copy()


def _serialize(value: Any) -> Any:
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    if hasattr(value, 'value') and not isinstance(value, (int, str)):
        return value.value
    return value


@dataclass(kw_only=True)
class DomainEvent:
    """
    Base class for domain events

    Base fields are keyword-only so concrete events can declare their own
    required fields without defaults.
    """
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=datetime.now)
    aggregate_id: int | None = None

    @property
    def event_type(self) -> str:
        return self.__class__.__name__

    def to_dict(self) -> dict:
        """Convert event to a JSON-friendly dictionary (Celery payloads, logs)"""
        payload = {f.name: _serialize(getattr(self, f.name)) for f in fields(self)}
        payload['event_type'] = self.event_type
        return payload
