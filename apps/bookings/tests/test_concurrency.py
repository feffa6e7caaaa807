import threading
from datetime import date

import pytest

from apps.bookings.application.command_handlers import SubmitBookingCommand
from apps.bookings.application.locks import ResourceLockRegistry
from apps.bookings.domain.errors import BookedByOther, BookingBusy


def test_only_one_of_two_racing_submissions_wins(make_engine):
    engine = make_engine(lock_timeout=5.0)
    barrier = threading.Barrier(2)
    results = {}

    def attempt(requester):
        barrier.wait()
        try:
            results[requester] = engine.handle(SubmitBookingCommand(
                resource_id="car-1",
                requester_id=requester,
                from_date=date(2024, 7, 18),
                to_date=date(2024, 7, 20),
            ))
        except BookedByOther as exc:
            results[requester] = exc

    threads = [threading.Thread(target=attempt, args=(name,)) for name in ("A", "B")]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=10)

    outcomes = sorted(type(result).__name__ for result in results.values())
    assert outcomes == ["BookedByOther", "Booking"]
    assert len(engine.bookings.list_by_resource("car-1")) == 1


def test_many_racing_submissions_leave_one_booking(make_engine):
    engine = make_engine(lock_timeout=5.0)
    barrier = threading.Barrier(8)
    failures = []

    def attempt(requester):
        barrier.wait()
        try:
            engine.handle(SubmitBookingCommand(
                resource_id="car-1",
                requester_id=requester,
                from_date=date(2024, 7, 18),
                to_date=date(2024, 7, 18),
            ))
        except BookedByOther:
            failures.append(requester)

    threads = [threading.Thread(target=attempt, args=(f"user-{n}",)) for n in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=10)

    assert len(failures) == 7
    assert len(engine.bookings.list_by_resource("car-1")) == 1


def test_lock_timeout_raises_busy():
    locks = ResourceLockRegistry(timeout=0.05)
    raised = []

    def contender():
        try:
            with locks.hold("car-1"):
                pass
        except BookingBusy as exc:
            raised.append(exc)

    with locks.hold("car-1"):
        thread = threading.Thread(target=contender)
        thread.start()
        thread.join(timeout=5)

    assert len(raised) == 1
    assert raised[0].code == "booking_busy"


def test_other_resources_do_not_contend():
    locks = ResourceLockRegistry(timeout=0.05)
    with locks.hold("car-1"):
        with locks.hold("car-2"):
            pass


def test_lock_is_released_after_errors():
    locks = ResourceLockRegistry(timeout=0.05)
    with pytest.raises(RuntimeError):
        with locks.hold("car-1"):
            raise RuntimeError("boom")
    with locks.hold("car-1"):
        pass
