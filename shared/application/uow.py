"""
Unit of Work Pattern

Wraps one booking-engine write in a transaction and makes sure domain
events are published only once that write has committed.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
import logging

from django.db import transaction

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)


class AbstractUnitOfWork(ABC):
    """Abstract Unit of Work pattern"""

    def __init__(self, bus=None):
        self._events: List[DomainEvent] = []
        self._bus = bus

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

    def rollback(self):
        """Discard collected events; nothing was published"""
        if self._events:
            logger.warning("Rolling back unit of work, discarding %d events", len(self._events))
        self._events.clear()

    def collect_events(self, aggregate):
        """Move pending events from an aggregate into this unit of work"""
        new_events = aggregate.events
        if new_events:
            self._events.extend(new_events)
            aggregate.clear_events()
            logger.debug(
                "Collected %d events from %s (ID: %s)",
                len(new_events),
                aggregate.__class__.__name__,
                aggregate.id,
            )

    def _take_events(self) -> List[DomainEvent]:
        events = self._events.copy()
        self._events.clear()
        return events

    def _publish_events(self, events: List[DomainEvent]):
        bus = self._bus
        if bus is None:
            from shared.application.message_bus import message_bus as bus

        logger.info("Publishing %d domain events after commit", len(events))
        bus.publish_events(events)


class DjangoUnitOfWork(AbstractUnitOfWork):
    """
    Django implementation of Unit of Work

    Usage:
        with DjangoUnitOfWork() as uow:
            store.lock_resource(resource_id)
            ...validate...
            store.insert(booking)
            uow.collect_events(booking)
        # transaction committed, events scheduled with on_commit()
    """

    def __init__(self, bus=None, using: Optional[str] = None):
        super().__init__(bus)
        self._using = using
        self._transaction = None

    def __enter__(self):
        self._transaction = transaction.atomic(using=self._using)
        self._transaction.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
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
        Schedule event publishing for after the database commit

        The actual COMMIT happens when the atomic block exits.
        """
        events = self._take_events()
        logger.debug("Committing transaction with %d events", len(events))
        if events:
            transaction.on_commit(lambda: self._publish_events(events), using=self._using)


class InMemoryUnitOfWork(AbstractUnitOfWork):
    """Unit of work for the in-memory stores: commit publishes immediately."""

    def __init__(self, bus=None):
        super().__init__(bus)
        self.committed = False

    def commit(self):
        events = self._take_events()
        self.committed = True
        if events:
            self._publish_events(events)
