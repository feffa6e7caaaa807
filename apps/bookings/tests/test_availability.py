from datetime import date

from shared.domain.value_objects import DateRange
from apps.bookings.domain.availability import AvailabilityValidator, Conflicts
from apps.bookings.domain.entities import BlockedPeriod, Booking, BookingStatus
from apps.bookings.domain.errors import AlreadyBookedByRequester, BookedByOther, DatesBlocked
from apps.bookings.repositories import InMemoryBlockedPeriodStore, InMemoryBookingStore


def _booking(requester, start, end, resource="car-1", status=BookingStatus.ACCEPTED):
    return Booking(
        resource_id=resource,
        requester_id=requester,
        dates=DateRange(start, end),
        status=status,
    )


def _validator(bookings=(), periods=()):
    return AvailabilityValidator(InMemoryBookingStore(bookings), InMemoryBlockedPeriodStore(periods))


def test_free_when_no_bookings():
    assert _validator().is_available("car-1", date(2024, 7, 18), date(2024, 7, 20))


def test_boundary_day_conflicts():
    validator = _validator([_booking("A", date(2024, 7, 18), date(2024, 7, 20))])
    assert not validator.is_available("car-1", date(2024, 7, 20), date(2024, 7, 20))
    assert validator.is_available("car-1", date(2024, 7, 21), date(2024, 7, 21))


def test_other_resources_and_rejected_bookings_are_ignored():
    validator = _validator([
        _booking("A", date(2024, 7, 18), date(2024, 7, 20), resource="car-2"),
        _booking("B", date(2024, 7, 18), date(2024, 7, 20), status=BookingStatus.REJECTED),
    ])
    assert validator.is_available("car-1", date(2024, 7, 19), date(2024, 7, 19))


def test_check_is_idempotent():
    validator = _validator([_booking("A", date(2024, 7, 18), date(2024, 7, 20))])
    answers = {validator.is_available("car-1", date(2024, 7, 19), date(2024, 7, 22)) for _ in range(5)}
    assert answers == {False}


def test_excluding_booking_ignores_itself():
    booking = _booking("A", date(2024, 7, 18), date(2024, 7, 20))
    validator = _validator([booking])
    assert validator.is_available("car-1", date(2024, 7, 18), date(2024, 7, 20), excluding_booking_id=booking.id)


def test_inactive_blocked_period_does_not_block():
    active = BlockedPeriod(resource_id="car-1", dates=DateRange(date(2024, 7, 1), date(2024, 7, 3)))
    inactive = BlockedPeriod(
        resource_id="car-1",
        dates=DateRange(date(2024, 7, 10), date(2024, 7, 12)),
        is_active=False,
    )
    validator = _validator(periods=[active, inactive])

    assert not validator.is_available("car-1", date(2024, 7, 3), date(2024, 7, 4))
    assert validator.is_available("car-1", date(2024, 7, 10), date(2024, 7, 12))


def test_find_conflicts_lists_everything_in_the_way():
    validator = _validator(
        [_booking("A", date(2024, 7, 18), date(2024, 7, 20)), _booking("B", date(2024, 7, 22), date(2024, 7, 23))],
        [BlockedPeriod(resource_id="car-1", dates=DateRange(date(2024, 7, 25), date(2024, 7, 26)))],
    )

    conflicts = validator.find_conflicts("car-1", date(2024, 7, 20), date(2024, 7, 25))

    assert [b.requester_id for b in conflicts.bookings] == ["A", "B"]
    assert len(conflicts.blocked_periods) == 1


class TestConflictError:

    def test_own_booking_wins(self):
        conflicts = Conflicts(bookings=[
            _booking("B", date(2024, 7, 18), date(2024, 7, 18)),
            _booking("A", date(2024, 7, 19), date(2024, 7, 19)),
        ])
        assert isinstance(conflicts.to_error("A"), AlreadyBookedByRequester)

    def test_other_booking(self):
        conflicts = Conflicts(bookings=[_booking("B", date(2024, 7, 18), date(2024, 7, 18))])
        assert isinstance(conflicts.to_error("A"), BookedByOther)

    def test_blocked_period_mentions_reason(self):
        conflicts = Conflicts(blocked_periods=[
            BlockedPeriod(resource_id="car-1", dates=DateRange(date(2024, 7, 1), date(2024, 7, 2)), reason="Servicing"),
        ])
        error = conflicts.to_error("A")
        assert isinstance(error, DatesBlocked)
        assert "servicing" in error.message
        assert error.code == "dates_blocked"

    def test_empty_conflicts_are_falsy(self):
        assert not Conflicts()
