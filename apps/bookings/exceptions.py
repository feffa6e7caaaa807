"""Translation of booking engine errors into API responses."""

from __future__ import annotations

import logging

from rest_framework import status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler  # type: ignore

from .domain.errors import (
    BookingBusy,
    BookingConflict,
    BookingError,
    BookingNotFound,
    Forbidden,
)

logger = logging.getLogger(__name__)

RETRY_AFTER_SECONDS = 1


def status_for(exc: BookingError) -> int:
    if isinstance(exc, BookingConflict):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, BookingBusy):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    if isinstance(exc, BookingNotFound):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, Forbidden):
        return status.HTTP_403_FORBIDDEN
    return status.HTTP_400_BAD_REQUEST


def booking_exception_handler(exc, context):
    """REST_FRAMEWORK EXCEPTION_HANDLER: {"detail", "code"} for engine errors."""

    if not isinstance(exc, BookingError):
        return exception_handler(exc, context)

    response = Response({"detail": exc.message, "code": exc.code}, status=status_for(exc))
    if isinstance(exc, BookingBusy):
        response["Retry-After"] = str(RETRY_AFTER_SECONDS)
    logger.info("Booking request failed with %s: %s", exc.code, exc.message)
    return response
