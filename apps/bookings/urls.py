"""URL routing for the booking domain."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import SimpleRouter  # type: ignore

from .views import BlockedPeriodViewSet, BookingViewSet, ResourceAvailabilityView, ResourceCalendarView

router = SimpleRouter()
router.register(r"blocked-periods", BlockedPeriodViewSet, basename="blocked-period")
router.register(r"", BookingViewSet, basename="booking")

urlpatterns = [
    path("resources/<str:resource_id>/calendar/", ResourceCalendarView.as_view(), name="resource-calendar"),
    path("resources/<str:resource_id>/availability/", ResourceAvailabilityView.as_view(), name="resource-availability"),
    path("", include(router.urls)),
]
