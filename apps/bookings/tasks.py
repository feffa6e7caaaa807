"""Celery tasks for the booking domain.

Dispatched by the booking event handlers after commit. Delivery channels
(email, messengers) are not wired yet: each task resolves what it needs and
logs the notification it would send.
"""

from __future__ import annotations

import logging
from typing import Optional

from celery import shared_task  # type: ignore

from .domain.errors import BookingNotFound
from .repositories import DjangoBookingStore

logger = logging.getLogger(__name__)


@shared_task(name="bookings.notify_booking_accepted")
def notify_booking_accepted(booking_id: str) -> bool:
    """Confirmation to the requester. Returns False if the booking is gone."""

    try:
        booking = DjangoBookingStore().get(booking_id)
    except BookingNotFound:
        logger.info("Booking %s no longer exists, skipping acceptance notice", booking_id)
        return False

    logger.info(
        "Notify %s: booking %s for car %s on %s accepted",
        booking.requester_id, booking.id, booking.resource_id, booking.dates,
    )
    return True


@shared_task(name="bookings.notify_booking_status_changed")
def notify_booking_status_changed(
    booking_id: str,
    old_status: str,
    new_status: str,
    actor_id: Optional[str] = None,
) -> bool:
    try:
        booking = DjangoBookingStore().get(booking_id)
    except BookingNotFound:
        logger.info("Booking %s no longer exists, skipping status notice", booking_id)
        return False

    logger.info(
        "Notify %s: booking %s for car %s on %s changed %s -> %s by %s",
        booking.requester_id, booking.id, booking.resource_id, booking.dates,
        old_status, new_status, actor_id,
    )
    return True


@shared_task(name="bookings.notify_booking_cancelled")
def notify_booking_cancelled(
    booking_id: str,
    resource_id: str,
    requester_id: str,
    from_date: str,
    to_date: str,
    actor_id: Optional[str] = None,
) -> bool:
    if actor_id and actor_id != requester_id:
        logger.info(
            "Notify %s: booking %s for car %s (%s - %s) was cancelled by %s",
            requester_id, booking_id, resource_id, from_date, to_date, actor_id,
        )
    else:
        logger.info(
            "Booking %s for car %s (%s - %s) cancelled by its owner %s",
            booking_id, resource_id, from_date, to_date, requester_id,
        )
    return True
