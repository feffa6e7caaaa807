from datetime import date

import pytest

from shared.application.message_bus import MessageBus
from shared.application.uow import InMemoryUnitOfWork
from apps.bookings.application.locks import ResourceLockRegistry
from apps.bookings.domain.events import BookingAccepted, BookingCancelled, BookingStatusChanged
from apps.bookings.domain.policy import BookingPolicy
from apps.bookings.repositories import InMemoryBlockedPeriodStore, InMemoryBookingStore
from apps.bookings.services import register_booking_handlers

TODAY = date(2024, 7, 15)


class Engine:
    """Booking engine bound to in-memory stores and a fixed clock."""

    def __init__(self, policy=None, lock_timeout=1.0):
        self.bus = MessageBus()
        self.bookings = InMemoryBookingStore()
        self.blocked = InMemoryBlockedPeriodStore()
        self.locks = ResourceLockRegistry(timeout=lock_timeout)
        self.published = []
        self.today = TODAY

        register_booking_handlers(
            self.bus,
            booking_store=self.bookings,
            blocked_store=self.blocked,
            locks=self.locks,
            uow_factory=lambda: InMemoryUnitOfWork(bus=self.bus),
            clock=lambda: self.today,
            policy=policy or BookingPolicy(),
            with_event_handlers=False,
        )
        for event_type in (BookingAccepted, BookingStatusChanged, BookingCancelled):
            self.bus.register_event_handler(event_type, self.published.append)

    def handle(self, command):
        return self.bus.handle_command(command)


@pytest.fixture
def engine():
    return Engine()


@pytest.fixture
def make_engine():
    return Engine
