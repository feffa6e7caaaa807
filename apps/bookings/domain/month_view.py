"""
Month calendar for one car as seen by one shareholder.

Nothing here is stored: every call recomputes the grid from the current
bookings and blocked periods.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Optional, TYPE_CHECKING

from shared.domain.value_objects import date_in_range

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from apps.bookings.repositories import BlockedPeriodStore, BookingStore


@dataclass(frozen=True)
class CalendarDay:
    """One cell of the month grid; leading alignment cells are empty."""

    date: Optional[date]
    day: int
    is_empty: bool = False
    is_past: bool = False
    booked_by_viewer: bool = False
    booked_by_other: bool = False
    is_blocked: bool = False
    blocked_reason: str = ''
    is_available: bool = False
    is_range_boundary: bool = False

    @classmethod
    def empty(cls) -> 'CalendarDay':
        return cls(date=None, day=0, is_empty=True)


class MonthViewGenerator:

    def __init__(self, booking_store: "BookingStore", blocked_store: Optional["BlockedPeriodStore"] = None):
        self.booking_store = booking_store
        self.blocked_store = blocked_store

    def build_month_view(
        self,
        resource_id: str,
        viewer_id: str,
        year: int,
        month: int,
        *,
        today: Optional[date] = None,
        first_weekday: int = calendar.SUNDAY,
    ) -> List[CalendarDay]:
        if not 1 <= month <= 12:
            raise ValueError(f"Month must be between 1 and 12, got {month}")
        if today is None:
            from django.utils import timezone

            today = timezone.localdate()

        viewer_id = str(viewer_id)
        accepted = [b for b in self.booking_store.list_by_resource(resource_id) if b.is_accepted]
        blocked = (
            self.blocked_store.list_by_resource(resource_id, active_only=True)
            if self.blocked_store is not None
            else []
        )

        def holder(day: date) -> Optional[str]:
            holders = [b.requester_id for b in accepted if date_in_range(day, b.from_date, b.to_date)]
            if not holders:
                return None
            return viewer_id if viewer_id in holders else holders[0]

        def blocking_period(day: date):
            return next((p for p in blocked if date_in_range(day, p.from_date, p.to_date)), None)

        first = date(year, month, 1)
        leading = (first.weekday() - first_weekday) % 7
        cells: List[CalendarDay] = [CalendarDay.empty() for _ in range(leading)]

        for number in range(1, calendar.monthrange(year, month)[1] + 1):
            current = date(year, month, number)
            owner = holder(current)
            period = blocking_period(current)
            is_past = current < today
            by_viewer = owner == viewer_id
            by_other = owner is not None and not by_viewer
            boundary = owner is not None and (
                holder(current - timedelta(days=1)) != owner
                or holder(current + timedelta(days=1)) != owner
            )
            cells.append(CalendarDay(
                date=current,
                day=number,
                is_past=is_past,
                booked_by_viewer=by_viewer,
                booked_by_other=by_other,
                is_blocked=period is not None,
                blocked_reason=period.reason if period is not None else '',
                is_available=not (is_past or by_viewer or by_other or period is not None),
                is_range_boundary=boundary,
            ))

        return cells
