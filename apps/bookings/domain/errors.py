"""
Booking Domain Errors

Every failure the booking engine reports to its callers. Each error has a
stable ``code`` that the HTTP layer returns so clients can pick the right
message ("you already booked this date" vs "pick another date").
"""

from typing import Optional


class BookingError(Exception):
    """Base class for booking engine failures."""

    code = "booking_error"
    default_message = "Booking request failed."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidRange(BookingError):
    code = "invalid_range"
    default_message = "From date cannot be after To date."


class PastDate(BookingError):
    code = "past_date"
    default_message = "Booking dates cannot be in the past."


class BookingRuleViolation(BookingError):
    code = "booking_rule_violation"
    default_message = "Booking does not satisfy the booking rules."


class BookingConflict(BookingError):
    """The requested dates overlap an accepted booking or a blocked period."""

    code = "booking_conflict"
    default_message = "Selected dates are not available."

    def __init__(self, message: Optional[str] = None, conflicts=None):
        super().__init__(message)
        self.conflicts = conflicts


class AlreadyBookedByRequester(BookingConflict):
    code = "already_booked_by_requester"
    default_message = "You already have a booking on these dates."


class BookedByOther(BookingConflict):
    code = "booked_by_other"
    default_message = "These dates are already booked by another shareholder. Please pick different dates."


class DatesBlocked(BookingConflict):
    code = "dates_blocked"
    default_message = "Selected dates are blocked. Please pick different dates."


class BookingBusy(BookingError):
    """Per-resource lock not acquired in time; retry the whole submission."""

    code = "booking_busy"
    default_message = "The car calendar is busy, please retry."


class BookingNotFound(BookingError):
    code = "booking_not_found"
    default_message = "Booking not found."


class Forbidden(BookingError):
    code = "forbidden"
    default_message = "Not authorized to change this booking."
