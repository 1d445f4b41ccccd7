"""
Domain building blocks

Entities are identified by id, value objects by their fields. Aggregates
record the events that describe their state changes until a unit of work
takes them over and publishes them after commit.
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List
from uuid import UUID, uuid4


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def isoformat_utc(value: datetime) -> str:
    """ISO-8601 in UTC with a trailing Z, the format the API renders."""
    text = value.astimezone(timezone.utc).isoformat()
    if text.endswith('+00:00'):
        text = text[:-6] + 'Z'
    return text


@dataclass
class Entity(ABC):
    """Mutable domain object whose equality is its id"""
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def __eq__(self, other):
        return isinstance(other, self.__class__) and self.id == other.id

    def __hash__(self):
        return hash(self.id)


@dataclass(frozen=True)
class ValueObject(ABC):
    """Immutable, identity-free, compared field by field"""


@dataclass(eq=False)
class Aggregate(Entity):
    """
    Aggregate root

    Keeps a list of pending events. ``events`` hands out a copy, and the
    unit of work calls ``clear_events`` once it has taken them.
    """
    _events: List['DomainEvent'] = field(default_factory=list, repr=False, init=False)

    def add_event(self, event: 'DomainEvent'):
        self._events.append(event)

    def clear_events(self):
        self._events.clear()

    @property
    def events(self) -> List['DomainEvent']:
        return list(self._events)


@dataclass
class DomainEvent:
    """
    Something that happened to an aggregate

    ``name`` is the wire name subscribers see; ``payload()`` is the flat
    record broadcast with it.
    """
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=utcnow)
    aggregate_id: UUID = None

    name = 'domainEvent'

    def payload(self) -> Dict[str, Any]:
        return {}

    def to_dict(self) -> dict:
        """Envelope used in log records"""
        return {
            'event_id': str(self.event_id),
            'event_type': self.name,
            'occurred_at': isoformat_utc(self.occurred_at),
            'aggregate_id': str(self.aggregate_id) if self.aggregate_id else None,
            'payload': self.payload(),
        }
