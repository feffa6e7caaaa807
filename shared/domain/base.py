"""
Base Domain Classes

Building blocks shared by the booking domain:
- Entity: identity-bearing record with audit timestamps
- ValueObject: immutable object compared by value
- Aggregate: entity that records domain events until they are published
- DomainEvent: something that happened to an aggregate
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List
from uuid import UUID, uuid4


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Entity(ABC):
    """
    Base class for all entities

    Two entities are equal if their IDs are equal, whatever their state.
    """
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def __eq__(self, other):
        if not isinstance(other, self.__class__):
            return False
        return self.id == other.id

    def __hash__(self):
        return hash(self.id)

    def touch(self):
        self.updated_at = utcnow()


@dataclass(frozen=True)
class ValueObject(ABC):
    """Immutable object without identity, equal when all attributes are equal."""
    pass


@dataclass(eq=False)
class Aggregate(Entity):
    """
    Base class for aggregate roots

    Events are collected by the unit of work and published only after the
    surrounding transaction commits.
    """
    _events: List['DomainEvent'] = field(default_factory=list, repr=False, init=False, compare=False)

    def add_event(self, event: 'DomainEvent'):
        self._events.append(event)

    def clear_events(self):
        self._events.clear()

    @property
    def events(self) -> List['DomainEvent']:
        """Copy of the events recorded so far"""
        return self._events.copy()


@dataclass
class DomainEvent:
    """
    Base class for domain events

    Subclasses add their payload fields; all of them must have defaults
    because the base fields already do.
    """
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=utcnow)
    aggregate_id: UUID = None

    def to_dict(self) -> dict:
        """Convert event to a JSON-friendly dictionary"""
        return {
            'event_id': str(self.event_id),
            'event_type': self.__class__.__name__,
            'occurred_at': self.occurred_at.isoformat(),
            'aggregate_id': str(self.aggregate_id) if self.aggregate_id else None,
        }
