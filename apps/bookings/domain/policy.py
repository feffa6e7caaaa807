"""Usage rules shareholders must follow when asking for a car."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from shared.domain.value_objects import DateRange

from .entities import Booking
from .errors import BookingRuleViolation


def add_months(day: date, months: int) -> date:
    """Same day ``months`` later, clamped to the end of shorter months."""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    return date(year, month, min(day.day, calendar.monthrange(year, month)[1]))


@dataclass(frozen=True)
class BookingPolicy:
    """
    Optional limits; a limit set to None is not enforced.

    max_booking_days: longest allowed range, both ends counted
    max_advance_months: how far ahead from_date may be
    max_weekend_bookings_per_year: accepted bookings touching a Saturday or
        Sunday a shareholder may hold on one car per calendar year
    """
    max_booking_days: Optional[int] = None
    max_advance_months: Optional[int] = None
    max_weekend_bookings_per_year: Optional[int] = None

    def check(self, dates: DateRange, today: date, requester_bookings: Iterable[Booking] = ()) -> None:
        if self.max_booking_days is not None and len(dates) > self.max_booking_days:
            raise BookingRuleViolation(f"Maximum booking duration is {self.max_booking_days} days.")

        if self.max_advance_months is not None:
            if dates.start_date > add_months(today, self.max_advance_months):
                raise BookingRuleViolation(
                    f"Advance booking is only allowed up to {self.max_advance_months} months ahead."
                )

        if self.max_weekend_bookings_per_year is not None and dates.includes_weekend():
            year = dates.start_date.year
            used = sum(
                1 for booking in requester_bookings
                if booking.is_accepted
                and booking.from_date.year == year
                and booking.dates.includes_weekend()
            )
            if used >= self.max_weekend_bookings_per_year:
                raise BookingRuleViolation(
                    f"You have reached the maximum of {self.max_weekend_bookings_per_year} "
                    f"weekend bookings per year for this car."
                )
