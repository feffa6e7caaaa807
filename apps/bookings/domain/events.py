"""
Booking Domain Events

Published by the unit of work after the write that produced them commits.
"""

from dataclasses import dataclass
from uuid import UUID

from shared.domain.base import DomainEvent
from shared.domain.value_objects import DateRange


@dataclass
class BookingAccepted(DomainEvent):
    """
    Event: a submission was accepted and now holds its dates

    Triggers:
    - Confirmation notification to the requester
    """
    booking_id: UUID = None
    resource_id: str = ''
    requester_id: str = ''
    dates: DateRange = None


@dataclass
class BookingStatusChanged(DomainEvent):
    """
    Event: an administrator flipped a booking between accepted and rejected

    Triggers:
    - Notification to the requester
    """
    booking_id: UUID = None
    resource_id: str = ''
    requester_id: str = ''
    old_status: str = ''
    new_status: str = ''
    actor_id: str = ''


@dataclass
class BookingCancelled(DomainEvent):
    """
    Event: a booking was removed, its dates are free again

    The record itself is deleted, so this event (and its log line) is the
    audit trail of the cancellation.
    """
    booking_id: UUID = None
    resource_id: str = ''
    requester_id: str = ''
    dates: DateRange = None
    actor_id: str = ''
