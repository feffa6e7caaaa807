"""
Booking event handlers

Run after the booking transaction commits. They only hand work over to
Celery; a broker outage is logged by the message bus and never undoes the
booking write.
"""

import logging

from apps.bookings.domain.events import BookingAccepted, BookingCancelled, BookingStatusChanged

logger = logging.getLogger(__name__)


def on_booking_accepted(event: BookingAccepted):
    from apps.bookings.tasks import notify_booking_accepted

    notify_booking_accepted.delay(str(event.booking_id))


def on_booking_status_changed(event: BookingStatusChanged):
    from apps.bookings.tasks import notify_booking_status_changed

    notify_booking_status_changed.delay(str(event.booking_id), event.old_status, event.new_status, event.actor_id)


def on_booking_cancelled(event: BookingCancelled):
    """The record is gone by now, so everything the task needs travels in the args"""
    from apps.bookings.tasks import notify_booking_cancelled

    logger.info(
        "Audit: booking %s of %s on car %s (%s) cancelled by %s",
        event.booking_id, event.requester_id, event.resource_id, event.dates, event.actor_id,
    )
    notify_booking_cancelled.delay(
        str(event.booking_id),
        event.resource_id,
        event.requester_id,
        event.dates.start_date.isoformat(),
        event.dates.end_date.isoformat(),
        event.actor_id,
    )


EVENT_HANDLERS = {
    BookingAccepted: [on_booking_accepted],
    BookingStatusChanged: [on_booking_status_changed],
    BookingCancelled: [on_booking_cancelled],
}
