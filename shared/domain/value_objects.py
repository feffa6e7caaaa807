"""
Common Value Objects

Value objects and pure predicates used across the booking domain:
- DateRange: Represents a range of calendar days (both ends inclusive)
- ranges_overlap / date_in_range: the overlap evaluator every conflict
  check and calendar cell goes through
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterator

from shared.domain.base import ValueObject


def ranges_overlap(a_from: date, a_to: date, b_from: date, b_to: date) -> bool:
    """
    Inclusive-inclusive overlap test for two calendar ranges.

    Ranges that share a single day overlap, so a booking ending on the
    20th conflicts with one starting on the 20th.
    """
    return a_from <= b_to and b_from <= a_to


def date_in_range(day: date, range_from: date, range_to: date) -> bool:
    """True if ``day`` lies within ``[range_from, range_to]``."""
    return range_from <= day <= range_to


@dataclass(frozen=True)
class DateRange(ValueObject):
    """
    Date range value object

    Represents the days from start_date to end_date, both inclusive.
    A single-day range has start_date == end_date.
    """
    start_date: date
    end_date: date

    def __post_init__(self):
        if self.start_date > self.end_date:
            raise ValueError(f"Start date ({self.start_date}) must not be after end date ({self.end_date})")

    def overlaps_with(self, other: 'DateRange') -> bool:
        """
        Check if this range shares at least one day with another

        Examples:
            - DateRange(18, 20) overlaps with DateRange(20, 20) -> True
            - DateRange(18, 20) overlaps with DateRange(21, 25) -> False
        """
        if not isinstance(other, DateRange):
            raise TypeError("Can only check overlap with another DateRange")
        return ranges_overlap(self.start_date, self.end_date, other.start_date, other.end_date)

    def contains(self, check_date: date) -> bool:
        return date_in_range(check_date, self.start_date, self.end_date)

    def days(self) -> Iterator[date]:
        """Iterate over every calendar day in the range"""
        current = self.start_date
        while current <= self.end_date:
            yield current
            current += timedelta(days=1)

    def includes_weekend(self) -> bool:
        return any(day.weekday() >= 5 for day in self.days())

    def __len__(self) -> int:
        """Number of calendar days covered, counting both ends"""
        return (self.end_date - self.start_date).days + 1

    def __str__(self):
        return f"{self.start_date.strftime('%d.%m.%Y')} - {self.end_date.strftime('%d.%m.%Y')}"

    def __repr__(self):
        return f"DateRange({self.start_date}, {self.end_date})"
