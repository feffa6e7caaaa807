"""
Availability checks for a single car.

A candidate range is free when it overlaps no accepted booking and no
active blocked period of the same resource. Rejected bookings never count.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, TYPE_CHECKING

from shared.domain.value_objects import ranges_overlap

from .entities import BlockedPeriod, Booking
from .errors import AlreadyBookedByRequester, BookedByOther, BookingConflict, DatesBlocked

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from apps.bookings.repositories import BlockedPeriodStore, BookingStore


@dataclass
class Conflicts:
    """Everything standing in the way of a candidate range."""

    bookings: List[Booking] = field(default_factory=list)
    blocked_periods: List[BlockedPeriod] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.bookings or self.blocked_periods)

    def to_error(self, requester_id: str) -> BookingConflict:
        """Pick the error the requester should see for these conflicts."""
        if any(b.belongs_to(requester_id) for b in self.bookings):
            return AlreadyBookedByRequester(conflicts=self)
        if self.bookings:
            return BookedByOther(conflicts=self)
        reason = self.blocked_periods[0].reason or "Maintenance"
        return DatesBlocked(
            f"Selected dates are blocked due to {reason.lower()}. Please pick different dates.",
            conflicts=self,
        )


class AvailabilityValidator:
    """
    Answers "is [from, to] free on this car?"

    Linear in the number of bookings of the resource; per-car booking counts
    stay small, so no interval index is kept.
    """

    def __init__(self, booking_store: "BookingStore", blocked_store: Optional["BlockedPeriodStore"] = None):
        self.booking_store = booking_store
        self.blocked_store = blocked_store

    def find_conflicts(
        self,
        resource_id: str,
        from_date: date,
        to_date: date,
        *,
        excluding_booking_id=None,
    ) -> Conflicts:
        conflicts = Conflicts()

        for booking in self.booking_store.list_by_resource(resource_id):
            if not booking.is_accepted:
                continue
            if excluding_booking_id is not None and str(booking.id) == str(excluding_booking_id):
                continue
            if ranges_overlap(from_date, to_date, booking.from_date, booking.to_date):
                conflicts.bookings.append(booking)

        if self.blocked_store is not None:
            for period in self.blocked_store.list_by_resource(resource_id, active_only=True):
                if ranges_overlap(from_date, to_date, period.from_date, period.to_date):
                    conflicts.blocked_periods.append(period)

        return conflicts

    def is_available(
        self,
        resource_id: str,
        from_date: date,
        to_date: date,
        excluding_booking_id=None,
    ) -> bool:
        return not self.find_conflicts(
            resource_id,
            from_date,
            to_date,
            excluding_booking_id=excluding_booking_id,
        )
