from datetime import date

import pytest

from shared.domain.value_objects import DateRange
from apps.bookings.domain.entities import Booking, BookingStatus
from apps.bookings.domain.errors import BookingRuleViolation
from apps.bookings.domain.policy import BookingPolicy, add_months

TODAY = date(2024, 7, 15)


def test_add_months_clamps_to_month_end():
    assert add_months(date(2024, 11, 30), 3) == date(2025, 2, 28)
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2024, 7, 15), 3) == date(2024, 10, 15)


def test_no_limits_by_default():
    BookingPolicy().check(DateRange(date(2025, 7, 1), date(2025, 7, 30)), TODAY)


def test_max_booking_days_counts_both_ends():
    policy = BookingPolicy(max_booking_days=4)
    policy.check(DateRange(date(2024, 7, 16), date(2024, 7, 19)), TODAY)
    with pytest.raises(BookingRuleViolation):
        policy.check(DateRange(date(2024, 7, 16), date(2024, 7, 20)), TODAY)


def test_max_advance_months():
    policy = BookingPolicy(max_advance_months=3)
    policy.check(DateRange(date(2024, 10, 15), date(2024, 10, 16)), TODAY)
    with pytest.raises(BookingRuleViolation):
        policy.check(DateRange(date(2024, 10, 16), date(2024, 10, 16)), TODAY)


def test_weekend_limit_counts_accepted_weekend_bookings_of_the_year():
    policy = BookingPolicy(max_weekend_bookings_per_year=2)
    saturdays = [date(2024, 7, 20), date(2024, 7, 27)]
    held = [
        Booking(resource_id="car-1", requester_id="A", dates=DateRange(day, day))
        for day in saturdays
    ]
    held.append(Booking(
        resource_id="car-1",
        requester_id="A",
        dates=DateRange(date(2024, 8, 3), date(2024, 8, 3)),
        status=BookingStatus.REJECTED,
    ))

    # A weekday range is never limited
    policy.check(DateRange(date(2024, 8, 5), date(2024, 8, 6)), TODAY, held)

    with pytest.raises(BookingRuleViolation):
        policy.check(DateRange(date(2024, 8, 10), date(2024, 8, 10)), TODAY, held)

    policy.check(DateRange(date(2024, 8, 10), date(2024, 8, 10)), TODAY, held[:1])
