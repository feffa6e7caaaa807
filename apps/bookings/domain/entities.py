"""
Booking Domain Entities

- BookingStatus: the two states a booking can be in
- Booking: aggregate root for one shareholder's hold on a car's dates
- BlockedPeriod: administrative hold on a car's dates (maintenance etc.)
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum

from shared.domain.base import Aggregate, Entity
from shared.domain.value_objects import DateRange


class BookingStatus(Enum):
    """
    Booking status

    A booking is born accepted (first come, first served); administrators
    can move it to rejected and back. Only accepted bookings hold dates.
    """
    ACCEPTED = 'accepted'
    REJECTED = 'rejected'


@dataclass(eq=False)
class Booking(Aggregate):
    """
    Booking Aggregate Root

    Key invariants:
    - resource_id and requester_id are required
    - dates, resource_id and requester_id never change after creation
    - no two accepted bookings of one resource overlap (enforced by the
      lifecycle handlers, which own every write)
    """
    resource_id: str = ''
    requester_id: str = ''
    dates: DateRange = None
    comments: str = ''
    status: BookingStatus = BookingStatus.ACCEPTED
    decided_by: str = ''

    def __post_init__(self):
        if not self.resource_id:
            raise ValueError("Booking must reference a resource")
        if not self.requester_id:
            raise ValueError("Booking must have a requester")
        if self.dates is None:
            raise ValueError("Booking must have dates")
        if isinstance(self.status, str):
            self.status = BookingStatus(self.status)

    @classmethod
    def submit(cls, resource_id: str, requester_id: str, dates: DateRange, comments: str = '') -> 'Booking':
        """Create an accepted booking and record BookingAccepted"""
        from apps.bookings.domain.events import BookingAccepted

        booking = cls(
            resource_id=resource_id,
            requester_id=requester_id,
            dates=dates,
            comments=comments or '',
            status=BookingStatus.ACCEPTED,
        )
        booking.add_event(BookingAccepted(
            aggregate_id=booking.id,
            booking_id=booking.id,
            resource_id=resource_id,
            requester_id=requester_id,
            dates=dates,
        ))
        return booking

    @property
    def from_date(self) -> date:
        return self.dates.start_date

    @property
    def to_date(self) -> date:
        return self.dates.end_date

    @property
    def is_accepted(self) -> bool:
        return self.status == BookingStatus.ACCEPTED

    def belongs_to(self, requester_id: str) -> bool:
        return self.requester_id == str(requester_id)

    def accept(self, actor_id: str):
        self._change_status(BookingStatus.ACCEPTED, actor_id)

    def reject(self, actor_id: str):
        self._change_status(BookingStatus.REJECTED, actor_id)

    def _change_status(self, new_status: BookingStatus, actor_id: str):
        from apps.bookings.domain.events import BookingStatusChanged

        old_status = self.status
        self.status = new_status
        self.decided_by = str(actor_id)
        self.touch()
        if old_status != new_status:
            self.add_event(BookingStatusChanged(
                aggregate_id=self.id,
                booking_id=self.id,
                resource_id=self.resource_id,
                requester_id=self.requester_id,
                old_status=old_status.value,
                new_status=new_status.value,
                actor_id=str(actor_id),
            ))

    def mark_cancelled(self, actor_id: str):
        """Record the cancellation; the store deletes the record afterwards"""
        from apps.bookings.domain.events import BookingCancelled

        self.add_event(BookingCancelled(
            aggregate_id=self.id,
            booking_id=self.id,
            resource_id=self.resource_id,
            requester_id=self.requester_id,
            dates=self.dates,
            actor_id=str(actor_id),
        ))

    def __str__(self):
        return f"Booking({self.id}, resource={self.resource_id}, {self.dates}, {self.status.value})"


@dataclass(eq=False)
class BlockedPeriod(Entity):
    """Dates an administrator has closed for booking on one car."""
    resource_id: str = ''
    dates: DateRange = None
    reason: str = 'Maintenance'
    is_active: bool = True
    created_by: str = ''

    def __post_init__(self):
        if not self.resource_id:
            raise ValueError("Blocked period must reference a resource")
        if self.dates is None:
            raise ValueError("Blocked period must have dates")

    @property
    def from_date(self) -> date:
        return self.dates.start_date

    @property
    def to_date(self) -> date:
        return self.dates.end_date
