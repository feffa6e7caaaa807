import calendar
from datetime import date

import pytest
from django.utils import timezone

from shared.domain.value_objects import DateRange
from apps.bookings.domain.entities import BlockedPeriod, Booking, BookingStatus
from apps.bookings.domain.month_view import MonthViewGenerator
from apps.bookings.repositories import InMemoryBlockedPeriodStore, InMemoryBookingStore

TODAY = date(2024, 7, 15)


def _booking(requester, start, end, status=BookingStatus.ACCEPTED):
    return Booking(resource_id="car-1", requester_id=requester, dates=DateRange(start, end), status=status)


def _month(bookings=(), periods=(), viewer="A", year=2024, month=7, **kwargs):
    generator = MonthViewGenerator(InMemoryBookingStore(bookings), InMemoryBlockedPeriodStore(periods))
    cells = generator.build_month_view("car-1", viewer, year, month, today=TODAY, **kwargs)
    return cells, {cell.day: cell for cell in cells if not cell.is_empty}


def test_two_shareholders_in_july():
    cells, days = _month([
        _booking("A", date(2024, 7, 18), date(2024, 7, 20)),
        _booking("B", date(2024, 7, 22), date(2024, 7, 23)),
    ])

    # July 1st 2024 is a Monday: one leading cell for Sunday
    assert cells[0].is_empty
    assert not cells[1].is_empty and cells[1].day == 1
    assert len(cells) == 32

    assert days[18].booked_by_viewer and days[18].is_range_boundary
    assert days[19].booked_by_viewer and not days[19].is_range_boundary
    assert days[20].booked_by_viewer and days[20].is_range_boundary
    assert not days[21].booked_by_viewer and not days[21].booked_by_other
    assert days[21].is_available
    assert days[22].booked_by_other and days[22].is_range_boundary
    assert days[23].booked_by_other and days[23].is_range_boundary
    assert days[10].is_past and not days[10].is_available
    assert not days[15].is_past and days[15].is_available
    assert not days[18].is_available


def test_same_view_for_the_other_shareholder_is_mirrored():
    _, days = _month([_booking("A", date(2024, 7, 18), date(2024, 7, 20))], viewer="B")
    assert days[19].booked_by_other
    assert not days[19].booked_by_viewer


def test_rejected_bookings_are_not_shown():
    _, days = _month([_booking("B", date(2024, 7, 18), date(2024, 7, 20), status=BookingStatus.REJECTED)])
    assert days[19].is_available


def test_consecutive_bookings_of_one_shareholder_form_one_block():
    _, days = _month([
        _booking("A", date(2024, 7, 18), date(2024, 7, 19)),
        _booking("A", date(2024, 7, 20), date(2024, 7, 21)),
    ])
    assert days[18].is_range_boundary
    assert not days[19].is_range_boundary
    assert not days[20].is_range_boundary
    assert days[21].is_range_boundary


def test_adjacent_bookings_of_different_shareholders_are_separate_blocks():
    _, days = _month([
        _booking("A", date(2024, 7, 18), date(2024, 7, 20)),
        _booking("B", date(2024, 7, 21), date(2024, 7, 22)),
    ])
    assert days[20].is_range_boundary
    assert days[21].is_range_boundary


def test_blocks_crossing_the_month_start():
    _, days = _month([_booking("A", date(2024, 6, 29), date(2024, 7, 2))])
    assert not days[1].is_range_boundary
    assert days[2].is_range_boundary


def test_blocked_days():
    period = BlockedPeriod(resource_id="car-1", dates=DateRange(date(2024, 7, 25), date(2024, 7, 26)), reason="Servicing")
    _, days = _month(periods=[period])
    assert days[25].is_blocked and days[25].blocked_reason == "Servicing"
    assert not days[25].is_available
    assert not days[27].is_blocked


def test_monday_first_layout():
    cells, _ = _month(first_weekday=calendar.MONDAY)
    assert cells[0].day == 1


def test_february_of_a_leap_year():
    cells, days = _month(year=2024, month=2)
    assert max(days) == 29
    # February 1st 2024 is a Thursday
    assert sum(1 for cell in cells if cell.is_empty) == 4


@pytest.mark.parametrize("month", [0, 13])
def test_invalid_month(month):
    with pytest.raises(ValueError):
        _month(month=month)


def test_today_defaults_to_the_local_date():
    today = timezone.localdate()
    generator = MonthViewGenerator(InMemoryBookingStore())

    cells = generator.build_month_view("car-1", "A", today.year, today.month)

    days = {cell.day: cell for cell in cells if not cell.is_empty}
    assert days[today.day].is_available
    assert all(days[day].is_past for day in range(1, today.day))
