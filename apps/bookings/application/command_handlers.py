"""
Booking Command Handlers

The use cases of the booking engine. Every write to a car's calendar goes
through one of these handlers, which validate, serialize per car and persist
inside a unit of work.

Commands:
- SubmitBookingCommand: a shareholder asks for a date range
- AcceptBookingCommand / RejectBookingCommand: administrative status change
- CancelBookingCommand: the requester (or an administrator) frees the dates
- Create/Update/DeleteBlockedPeriodCommand: administrative date blocks
"""

from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional
from uuid import UUID, uuid4
import logging

from django.utils import timezone

from shared.application.uow import DjangoUnitOfWork
from shared.domain.value_objects import DateRange
from apps.bookings.application.locks import ResourceLockRegistry
from apps.bookings.domain.availability import AvailabilityValidator
from apps.bookings.domain.entities import BlockedPeriod, Booking
from apps.bookings.domain.errors import Forbidden, InvalidRange, PastDate
from apps.bookings.domain.policy import BookingPolicy

logger = logging.getLogger(__name__)


# ===== Commands =====

@dataclass
class SubmitBookingCommand:
    """A shareholder's reservation request; eligibility is checked upstream."""
    resource_id: str
    requester_id: str
    from_date: date
    to_date: date
    comments: str = ''


@dataclass
class AcceptBookingCommand:
    booking_id: UUID
    actor_id: str


@dataclass
class RejectBookingCommand:
    booking_id: UUID
    actor_id: str


@dataclass
class CancelBookingCommand:
    booking_id: UUID
    actor_id: str
    actor_is_admin: bool = False


@dataclass
class CreateBlockedPeriodCommand:
    resource_id: str
    from_date: date
    to_date: date
    actor_id: str
    reason: str = 'Maintenance'


@dataclass
class UpdateBlockedPeriodCommand:
    """Fields left as None keep their current value"""
    period_id: UUID
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    reason: Optional[str] = None
    is_active: Optional[bool] = None


@dataclass
class DeleteBlockedPeriodCommand:
    period_id: UUID


# ===== Command Handlers =====

class BookingHandler:
    """Collaborators shared by every booking command handler."""

    def __init__(
        self,
        booking_store,
        blocked_store=None,
        *,
        locks: Optional[ResourceLockRegistry] = None,
        uow_factory: Callable = DjangoUnitOfWork,
        clock: Callable[[], date] = timezone.localdate,
        policy: Optional[BookingPolicy] = None,
    ):
        self.booking_store = booking_store
        self.blocked_store = blocked_store
        self.locks = locks or ResourceLockRegistry()
        self.uow_factory = uow_factory
        self.clock = clock
        self.policy = policy or BookingPolicy()
        self.validator = AvailabilityValidator(booking_store, blocked_store)

    def __call__(self, command):
        return self.handle(command)

    def handle(self, command):
        raise NotImplementedError


class SubmitBookingHandler(BookingHandler):
    """
    Handler for SubmitBooking command

    1. Reject inverted ranges (InvalidRange) and past dates (PastDate)
    2. Take the car's lock, bounded by the lock timeout (BookingBusy)
    3. Open a transaction and lock the car's row in storage
    4. Apply the booking policy and look for conflicts
    5. Insert the booking as accepted; events go out after commit

    Steps 4 and 5 never interleave with another writer of the same car, so
    two overlapping submissions cannot both be accepted.
    """

    def handle(self, command: SubmitBookingCommand) -> Booking:
        resource_id = str(command.resource_id)
        requester_id = str(command.requester_id)
        logger.info(
            "Booking requested for car %s by %s, dates %s - %s",
            resource_id, requester_id, command.from_date, command.to_date,
        )

        if command.from_date > command.to_date:
            raise InvalidRange()

        today = self.clock()
        if command.from_date < today or command.to_date < today:
            raise PastDate()

        dates = DateRange(command.from_date, command.to_date)

        with self.locks.hold(resource_id):
            with self.uow_factory() as uow:
                self.booking_store.lock_resource(resource_id)

                own_bookings = [
                    b for b in self.booking_store.list_by_requester(requester_id)
                    if b.resource_id == resource_id
                ]
                self.policy.check(dates, today, own_bookings)

                conflicts = self.validator.find_conflicts(resource_id, dates.start_date, dates.end_date)
                if conflicts:
                    error = conflicts.to_error(requester_id)
                    logger.info("Booking for car %s on %s refused: %s", resource_id, dates, error.code)
                    raise error

                booking = Booking.submit(resource_id, requester_id, dates, command.comments)
                self.booking_store.insert(booking)
                uow.collect_events(booking)

        logger.info("Booking %s accepted for car %s, %s", booking.id, resource_id, dates)
        return booking


class AcceptBookingHandler(BookingHandler):
    """
    Re-validates a rejected booking against the other accepted bookings
    before accepting it. Accepting an accepted booking changes nothing.
    """

    def handle(self, command: AcceptBookingCommand) -> Booking:
        booking = self.booking_store.get(command.booking_id)

        with self.locks.hold(booking.resource_id):
            with self.uow_factory() as uow:
                self.booking_store.lock_resource(booking.resource_id)
                booking = self.booking_store.get(command.booking_id)

                if booking.is_accepted:
                    logger.info("Booking %s is already accepted", booking.id)
                    return booking

                conflicts = self.validator.find_conflicts(
                    booking.resource_id,
                    booking.from_date,
                    booking.to_date,
                    excluding_booking_id=booking.id,
                )
                if conflicts:
                    error = conflicts.to_error(booking.requester_id)
                    logger.info("Cannot accept booking %s: %s", booking.id, error.code)
                    raise error

                booking.accept(command.actor_id)
                self.booking_store.update_status(booking)
                uow.collect_events(booking)

        logger.info("Booking %s accepted by %s", booking.id, command.actor_id)
        return booking


class RejectBookingHandler(BookingHandler):

    def handle(self, command: RejectBookingCommand) -> Booking:
        booking = self.booking_store.get(command.booking_id)

        with self.locks.hold(booking.resource_id):
            with self.uow_factory() as uow:
                booking = self.booking_store.get(command.booking_id)
                booking.reject(command.actor_id)
                self.booking_store.update_status(booking)
                uow.collect_events(booking)

        logger.info("Booking %s rejected by %s", booking.id, command.actor_id)
        return booking


class CancelBookingHandler(BookingHandler):
    """Only the requester or an administrator may cancel; the record is deleted."""

    def handle(self, command: CancelBookingCommand) -> None:
        booking = self.booking_store.get(command.booking_id)

        if not (command.actor_is_admin or booking.belongs_to(command.actor_id)):
            logger.warning("User %s tried to cancel booking %s of %s", command.actor_id, booking.id, booking.requester_id)
            raise Forbidden("Not authorized to cancel this booking.")

        with self.uow_factory() as uow:
            booking.mark_cancelled(command.actor_id)
            self.booking_store.delete(booking.id)
            uow.collect_events(booking)

        logger.info(
            "Booking %s for car %s (%s) cancelled by %s",
            booking.id, booking.resource_id, booking.dates, command.actor_id,
        )


class CreateBlockedPeriodHandler(BookingHandler):
    """Blocks future submissions; existing bookings in the period stay."""

    def handle(self, command: CreateBlockedPeriodCommand) -> BlockedPeriod:
        if command.from_date > command.to_date:
            raise InvalidRange()

        period = BlockedPeriod(
            id=uuid4(),
            resource_id=str(command.resource_id),
            dates=DateRange(command.from_date, command.to_date),
            reason=command.reason or 'Maintenance',
            created_by=str(command.actor_id),
        )

        with self.locks.hold(period.resource_id):
            with self.uow_factory():
                self.blocked_store.insert(period)

        logger.info("Car %s blocked %s (%s) by %s", period.resource_id, period.dates, period.reason, period.created_by)
        return period


class UpdateBlockedPeriodHandler(BookingHandler):

    def handle(self, command: UpdateBlockedPeriodCommand) -> BlockedPeriod:
        period = self.blocked_store.get(command.period_id)

        from_date = command.from_date or period.from_date
        to_date = command.to_date or period.to_date
        if from_date > to_date:
            raise InvalidRange()

        period.dates = DateRange(from_date, to_date)
        if command.reason is not None:
            period.reason = command.reason
        if command.is_active is not None:
            period.is_active = command.is_active
        period.touch()

        with self.locks.hold(period.resource_id):
            with self.uow_factory():
                self.blocked_store.update(period)

        logger.info("Blocked period %s updated: %s active=%s", period.id, period.dates, period.is_active)
        return period


class DeleteBlockedPeriodHandler(BookingHandler):

    def handle(self, command: DeleteBlockedPeriodCommand) -> None:
        period = self.blocked_store.get(command.period_id)
        with self.uow_factory():
            self.blocked_store.delete(period.id)
        logger.info("Blocked period %s for car %s removed", period.id, period.resource_id)
