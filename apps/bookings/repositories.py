"""
Booking and blocked-period stores.

A narrow persistence contract so the engine can run against Django's ORM in
production and against plain dictionaries in tests. Stores hold no business
rules: conflict checks and status transitions live in the domain and
application layers.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Dict, List

from django.core.exceptions import ValidationError  # type: ignore
from django.db import OperationalError, transaction  # type: ignore
from django.db.models import F  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore

from shared.domain.value_objects import DateRange

from .domain.entities import BlockedPeriod, Booking, BookingStatus
from .domain.errors import BookingBusy, BookingNotFound

logger = logging.getLogger(__name__)


def _ordering_key(record):
    return (record.from_date, record.created_at)


class BookingStore(ABC):
    """Persistence contract for bookings."""

    @abstractmethod
    def list_by_resource(self, resource_id: str) -> List[Booking]:
        """All bookings of a car, any status, ordered by from_date."""

    @abstractmethod
    def list_by_requester(self, requester_id: str) -> List[Booking]:
        """All bookings of a shareholder across cars, ordered by from_date."""

    @abstractmethod
    def list_all(self) -> List[Booking]:
        """Every booking of every car, ordered by from_date."""

    @abstractmethod
    def insert(self, booking: Booking) -> Booking:
        pass

    @abstractmethod
    def get(self, booking_id) -> Booking:
        """Return the booking or raise BookingNotFound."""

    @abstractmethod
    def update_status(self, booking: Booking) -> Booking:
        """Persist status, decided_by and updated_at; other fields are immutable."""

    @abstractmethod
    def delete(self, booking_id) -> None:
        pass

    def lock_resource(self, resource_id: str) -> None:
        """Take the storage-level lock of a car for the current transaction."""


class BlockedPeriodStore(ABC):
    """Persistence contract for administrative blocked periods."""

    @abstractmethod
    def list_by_resource(self, resource_id: str, active_only: bool = True) -> List[BlockedPeriod]:
        pass

    @abstractmethod
    def insert(self, period: BlockedPeriod) -> BlockedPeriod:
        pass

    @abstractmethod
    def get(self, period_id) -> BlockedPeriod:
        pass

    @abstractmethod
    def update(self, period: BlockedPeriod) -> BlockedPeriod:
        pass

    @abstractmethod
    def delete(self, period_id) -> None:
        pass


# ===== In-memory implementations =====

class InMemoryBookingStore(BookingStore):
    """Dictionary-backed store, safe to share between threads."""

    def __init__(self, bookings=()):
        self._bookings: Dict[str, Booking] = {}
        self._mutex = threading.Lock()
        for booking in bookings:
            self.insert(booking)

    @staticmethod
    def _copy(booking: Booking) -> Booking:
        copy = replace(booking)
        copy.clear_events()
        return copy

    def list_by_resource(self, resource_id: str) -> List[Booking]:
        with self._mutex:
            found = [self._copy(b) for b in self._bookings.values() if b.resource_id == str(resource_id)]
        return sorted(found, key=_ordering_key)

    def list_by_requester(self, requester_id: str) -> List[Booking]:
        with self._mutex:
            found = [self._copy(b) for b in self._bookings.values() if b.requester_id == str(requester_id)]
        return sorted(found, key=_ordering_key)

    def list_all(self) -> List[Booking]:
        with self._mutex:
            found = [self._copy(b) for b in self._bookings.values()]
        return sorted(found, key=_ordering_key)

    def insert(self, booking: Booking) -> Booking:
        with self._mutex:
            self._bookings[str(booking.id)] = self._copy(booking)
        return booking

    def get(self, booking_id) -> Booking:
        with self._mutex:
            booking = self._bookings.get(str(booking_id))
            if booking is None:
                raise BookingNotFound()
            return self._copy(booking)

    def update_status(self, booking: Booking) -> Booking:
        with self._mutex:
            stored = self._bookings.get(str(booking.id))
            if stored is None:
                raise BookingNotFound()
            stored.status = booking.status
            stored.decided_by = booking.decided_by
            stored.updated_at = booking.updated_at
        return booking

    def delete(self, booking_id) -> None:
        with self._mutex:
            if self._bookings.pop(str(booking_id), None) is None:
                raise BookingNotFound()


class InMemoryBlockedPeriodStore(BlockedPeriodStore):

    def __init__(self, periods=()):
        self._periods: Dict[str, BlockedPeriod] = {}
        self._mutex = threading.Lock()
        for period in periods:
            self.insert(period)

    def list_by_resource(self, resource_id: str, active_only: bool = True) -> List[BlockedPeriod]:
        with self._mutex:
            found = [
                replace(p) for p in self._periods.values()
                if p.resource_id == str(resource_id) and (p.is_active or not active_only)
            ]
        return sorted(found, key=_ordering_key)

    def insert(self, period: BlockedPeriod) -> BlockedPeriod:
        with self._mutex:
            self._periods[str(period.id)] = replace(period)
        return period

    def get(self, period_id) -> BlockedPeriod:
        with self._mutex:
            period = self._periods.get(str(period_id))
            if period is None:
                raise BookingNotFound("Blocked period not found.")
            return replace(period)

    def update(self, period: BlockedPeriod) -> BlockedPeriod:
        with self._mutex:
            if str(period.id) not in self._periods:
                raise BookingNotFound("Blocked period not found.")
            self._periods[str(period.id)] = replace(period)
        return period

    def delete(self, period_id) -> None:
        with self._mutex:
            if self._periods.pop(str(period_id), None) is None:
                raise BookingNotFound("Blocked period not found.")


# ===== Django ORM implementations =====

def _lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


class DjangoBookingStore(BookingStore):
    """Maps apps.bookings.models.Booking rows to domain Booking entities."""

    def __init__(self, lock_timeout: float = 5.0):
        self.lock_timeout = lock_timeout

    @staticmethod
    def _to_entity(row) -> Booking:
        return Booking(
            id=row.id,
            resource_id=row.resource_id,
            requester_id=row.requester_id,
            dates=DateRange(row.from_date, row.to_date),
            comments=row.comments,
            status=BookingStatus(row.status),
            decided_by=row.decided_by,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    @staticmethod
    def _model():
        from .models import Booking as BookingModel  # Local import keeps the domain importable without apps loaded

        return BookingModel

    def list_by_resource(self, resource_id: str) -> List[Booking]:
        rows = self._model().objects.filter(resource_id=str(resource_id)).order_by("from_date", "created_at")
        return [self._to_entity(row) for row in rows]

    def list_by_requester(self, requester_id: str) -> List[Booking]:
        rows = self._model().objects.filter(requester_id=str(requester_id)).order_by("from_date", "created_at")
        return [self._to_entity(row) for row in rows]

    def list_all(self) -> List[Booking]:
        rows = self._model().objects.order_by("from_date", "created_at")
        return [self._to_entity(row) for row in rows]

    def insert(self, booking: Booking) -> Booking:
        self._model().objects.create(
            id=booking.id,
            resource_id=booking.resource_id,
            requester_id=booking.requester_id,
            from_date=booking.from_date,
            to_date=booking.to_date,
            comments=booking.comments,
            status=booking.status.value,
            decided_by=booking.decided_by,
            created_at=booking.created_at,
            updated_at=booking.updated_at,
        )
        return booking

    def get(self, booking_id) -> Booking:
        model = self._model()
        try:
            return self._to_entity(model.objects.get(pk=booking_id))
        except (model.DoesNotExist, ValidationError, ValueError):
            # Malformed ids are reported the same way as unknown ones
            raise BookingNotFound()

    def update_status(self, booking: Booking) -> Booking:
        updated = self._model().objects.filter(pk=booking.id).update(
            status=booking.status.value,
            decided_by=booking.decided_by,
            updated_at=booking.updated_at,
        )
        if not updated:
            raise BookingNotFound()
        return booking

    def delete(self, booking_id) -> None:
        deleted, _ = self._model().objects.filter(pk=booking_id).delete()
        if not deleted:
            raise BookingNotFound()

    def lock_resource(self, resource_id: str) -> None:
        """
        Lock the car's ResourceLock row for the rest of the transaction.

        Blocks concurrent writers of the same car on databases with row
        locks (PostgreSQL), for at most ``lock_timeout`` seconds. A writer
        that cannot get the lock in time, or that SQLite refuses with
        "database is locked", gets BookingBusy.
        """
        from .models import ResourceLock

        resource_id = str(resource_id)
        connection = transaction.get_connection()
        try:
            if connection.vendor == "postgresql" and connection.in_atomic_block:
                with connection.cursor() as cursor:
                    cursor.execute("SET LOCAL lock_timeout = %d" % max(1, int(self.lock_timeout * 1000)))
            ResourceLock.objects.get_or_create(resource_id=resource_id)
            rows = ResourceLock.objects.filter(resource_id=resource_id)
            if connection.features.has_select_for_update:
                list(_lock_queryset_if_possible(rows))
            else:
                # No row locks here: a no-op write takes the database write lock
                rows.update(created_at=F("created_at"))
        except OperationalError as exc:
            logger.warning("Storage lock of car %s not acquired: %s", resource_id, exc)
            raise BookingBusy() from exc


class DjangoBlockedPeriodStore(BlockedPeriodStore):

    @staticmethod
    def _to_entity(row) -> BlockedPeriod:
        return BlockedPeriod(
            id=row.id,
            resource_id=row.resource_id,
            dates=DateRange(row.from_date, row.to_date),
            reason=row.reason,
            is_active=row.is_active,
            created_by=row.created_by,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    @staticmethod
    def _model():
        from .models import BlockedPeriod as BlockedPeriodModel

        return BlockedPeriodModel

    def list_by_resource(self, resource_id: str, active_only: bool = True) -> List[BlockedPeriod]:
        qs = self._model().objects.filter(resource_id=str(resource_id))
        if active_only:
            qs = qs.filter(is_active=True)
        return [self._to_entity(row) for row in qs.order_by("from_date", "created_at")]

    def insert(self, period: BlockedPeriod) -> BlockedPeriod:
        self._model().objects.create(
            id=period.id,
            resource_id=period.resource_id,
            from_date=period.from_date,
            to_date=period.to_date,
            reason=period.reason,
            is_active=period.is_active,
            created_by=period.created_by,
            created_at=period.created_at,
            updated_at=period.updated_at,
        )
        return period

    def get(self, period_id) -> BlockedPeriod:
        model = self._model()
        try:
            return self._to_entity(model.objects.get(pk=period_id))
        except (model.DoesNotExist, ValidationError, ValueError):
            raise BookingNotFound("Blocked period not found.")

    def update(self, period: BlockedPeriod) -> BlockedPeriod:
        updated = self._model().objects.filter(pk=period.id).update(
            from_date=period.from_date,
            to_date=period.to_date,
            reason=period.reason,
            is_active=period.is_active,
            updated_at=period.updated_at,
        )
        if not updated:
            raise BookingNotFound("Blocked period not found.")
        return period

    def delete(self, period_id) -> None:
        deleted, _ = self._model().objects.filter(pk=period_id).delete()
        if not deleted:
            raise BookingNotFound("Blocked period not found.")
