"""Wiring of the booking engine to Django settings, storage and the message bus."""

from __future__ import annotations

import calendar
from datetime import date
from typing import Any, Callable, Dict, List, Optional

from django.conf import settings  # type: ignore
from django.utils import timezone  # type: ignore

from shared.application.uow import DjangoUnitOfWork

from .application.command_handlers import (
    AcceptBookingCommand,
    AcceptBookingHandler,
    CancelBookingCommand,
    CancelBookingHandler,
    CreateBlockedPeriodCommand,
    CreateBlockedPeriodHandler,
    DeleteBlockedPeriodCommand,
    DeleteBlockedPeriodHandler,
    RejectBookingCommand,
    RejectBookingHandler,
    SubmitBookingCommand,
    SubmitBookingHandler,
    UpdateBlockedPeriodCommand,
    UpdateBlockedPeriodHandler,
)
from .application.event_handlers import EVENT_HANDLERS
from .application.locks import ResourceLockRegistry
from .domain.availability import AvailabilityValidator, Conflicts
from .domain.entities import Booking
from .domain.month_view import CalendarDay, MonthViewGenerator
from .domain.policy import BookingPolicy
from .repositories import DjangoBlockedPeriodStore, DjangoBookingStore

DEFAULT_ENGINE_SETTINGS: Dict[str, Any] = {
    "LOCK_TIMEOUT_SECONDS": 5.0,
    "MAX_BOOKING_DAYS": 4,
    "MAX_ADVANCE_MONTHS": 3,
    "MAX_WEEKEND_BOOKINGS_PER_YEAR": 5,
    "CALENDAR_FIRST_WEEKDAY": calendar.SUNDAY,
}

COMMAND_HANDLERS = {
    SubmitBookingCommand: SubmitBookingHandler,
    AcceptBookingCommand: AcceptBookingHandler,
    RejectBookingCommand: RejectBookingHandler,
    CancelBookingCommand: CancelBookingHandler,
    CreateBlockedPeriodCommand: CreateBlockedPeriodHandler,
    UpdateBlockedPeriodCommand: UpdateBlockedPeriodHandler,
    DeleteBlockedPeriodCommand: DeleteBlockedPeriodHandler,
}

_lock_registry: Optional[ResourceLockRegistry] = None


def engine_settings() -> Dict[str, Any]:
    """BOOKING_ENGINE from Django settings over the defaults."""

    configured = getattr(settings, "BOOKING_ENGINE", None) or {}
    return {**DEFAULT_ENGINE_SETTINGS, **configured}


def build_policy(config: Optional[Dict[str, Any]] = None) -> BookingPolicy:
    config = config or engine_settings()
    return BookingPolicy(
        max_booking_days=config.get("MAX_BOOKING_DAYS"),
        max_advance_months=config.get("MAX_ADVANCE_MONTHS"),
        max_weekend_bookings_per_year=config.get("MAX_WEEKEND_BOOKINGS_PER_YEAR"),
    )


def get_lock_registry() -> ResourceLockRegistry:
    """Process-wide registry; every handler of this process must share it."""

    global _lock_registry
    if _lock_registry is None:
        _lock_registry = ResourceLockRegistry(timeout=float(engine_settings()["LOCK_TIMEOUT_SECONDS"]))
    return _lock_registry


def register_booking_handlers(
    bus,
    *,
    booking_store=None,
    blocked_store=None,
    locks: Optional[ResourceLockRegistry] = None,
    uow_factory: Optional[Callable] = None,
    clock: Optional[Callable[[], date]] = None,
    policy: Optional[BookingPolicy] = None,
    with_event_handlers: bool = True,
    replace: bool = False,
) -> None:
    """
    Bind one handler per booking command on ``bus``.

    Defaults are the production collaborators: Django stores, the shared
    lock registry, DjangoUnitOfWork publishing to ``bus`` and the local date.
    """

    booking_store = booking_store or DjangoBookingStore(
        lock_timeout=float(engine_settings()["LOCK_TIMEOUT_SECONDS"]),
    )
    blocked_store = blocked_store or DjangoBlockedPeriodStore()
    if uow_factory is None:
        def uow_factory():
            return DjangoUnitOfWork(bus=bus)

    for command_type, handler_class in COMMAND_HANDLERS.items():
        handler = handler_class(
            booking_store,
            blocked_store,
            locks=locks or get_lock_registry(),
            uow_factory=uow_factory,
            clock=clock or timezone.localdate,
            policy=policy or build_policy(),
        )
        bus.register_command_handler(command_type, handler, replace=replace)

    if with_event_handlers:
        for event_type, handlers in EVENT_HANDLERS.items():
            for event_handler in handlers:
                bus.register_event_handler(event_type, event_handler)


# ===== Queries =====

def list_bookings(
    *,
    requester_id: Optional[str] = None,
    resource_id: Optional[str] = None,
    status: Optional[str] = None,
) -> List[Booking]:
    store = DjangoBookingStore()
    if resource_id is not None:
        bookings = store.list_by_resource(resource_id)
        if requester_id is not None:
            bookings = [b for b in bookings if b.belongs_to(requester_id)]
    elif requester_id is not None:
        bookings = store.list_by_requester(requester_id)
    else:
        bookings = store.list_all()
    if status:
        bookings = [b for b in bookings if b.status.value == status]
    return bookings


def get_booking(booking_id) -> Booking:
    return DjangoBookingStore().get(booking_id)


def find_conflicts(resource_id: str, from_date: date, to_date: date) -> Conflicts:
    validator = AvailabilityValidator(DjangoBookingStore(), DjangoBlockedPeriodStore())
    return validator.find_conflicts(resource_id, from_date, to_date)


def build_month_view(resource_id: str, viewer_id: str, year: int, month: int) -> List[CalendarDay]:
    generator = MonthViewGenerator(DjangoBookingStore(), DjangoBlockedPeriodStore())
    return generator.build_month_view(
        resource_id,
        viewer_id,
        year,
        month,
        today=timezone.localdate(),
        first_weekday=int(engine_settings()["CALENDAR_FIRST_WEEKDAY"]),
    )
