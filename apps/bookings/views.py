"""API views for the booking domain."""

from __future__ import annotations

from django.utils import timezone  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from shared.application.message_bus import message_bus

from .application.command_handlers import (
    AcceptBookingCommand,
    CancelBookingCommand,
    CreateBlockedPeriodCommand,
    DeleteBlockedPeriodCommand,
    RejectBookingCommand,
    SubmitBookingCommand,
    UpdateBlockedPeriodCommand,
)
from .domain.errors import Forbidden, InvalidRange
from .models import BlockedPeriod
from .serializers import (
    AvailabilityRequestSerializer,
    BlockedPeriodSerializer,
    BookingConflictSerializer,
    BookingCreateSerializer,
    BookingSerializer,
    BookingStatusSerializer,
    CalendarDaySerializer,
)
from .services import build_month_view, find_conflicts, get_booking, list_bookings


def _user_id(request) -> str:
    return str(request.user.pk)


def _is_admin(request) -> bool:
    return bool(getattr(request.user, "is_staff", False) or getattr(request.user, "is_superuser", False))


class IsStaffOrReadOnly(permissions.BasePermission):
    """Authenticated users read; only administrators write."""

    def has_permission(self, request, view):  # type: ignore
        if not request.user or not request.user.is_authenticated:
            return False
        if request.method in permissions.SAFE_METHODS:
            return True
        return _is_admin(request)


class BookingViewSet(viewsets.ViewSet):
    """Submission, listing, cancellation and status changes of bookings."""

    permission_classes = [permissions.IsAuthenticated]

    def list(self, request):  # type: ignore
        # Staff see every booking, optionally narrowed to one car
        bookings = list_bookings(
            requester_id=None if _is_admin(request) else _user_id(request),
            resource_id=request.query_params.get("resource_id"),
            status=request.query_params.get("status"),
        )
        return Response(BookingSerializer(bookings, many=True).data)

    def create(self, request):  # type: ignore
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        booking = message_bus.handle_command(SubmitBookingCommand(
            resource_id=data["resource_id"],
            requester_id=_user_id(request),
            from_date=data["from_date"],
            to_date=data["to_date"],
            comments=data.get("comments", ""),
        ))
        return Response(BookingSerializer(booking).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):  # type: ignore
        booking = get_booking(pk)
        if not (_is_admin(request) or booking.belongs_to(_user_id(request))):
            raise Forbidden("Not authorized to view this booking.")
        return Response(BookingSerializer(booking).data)

    def destroy(self, request, pk=None):  # type: ignore
        message_bus.handle_command(CancelBookingCommand(
            booking_id=pk,
            actor_id=_user_id(request),
            actor_is_admin=_is_admin(request),
        ))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"], url_path="status", permission_classes=[permissions.IsAdminUser])
    def change_status(self, request, pk=None):  # type: ignore
        serializer = BookingStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        if serializer.validated_data["status"] == "accepted":
            command = AcceptBookingCommand(booking_id=pk, actor_id=_user_id(request))
        else:
            command = RejectBookingCommand(booking_id=pk, actor_id=_user_id(request))
        booking = message_bus.handle_command(command)
        return Response(BookingSerializer(booking).data)


class ResourceCalendarView(APIView):
    """Month grid of one car for the calling shareholder."""

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, resource_id: str):  # type: ignore
        today = timezone.localdate()
        try:
            year = int(request.query_params.get("year", today.year))
            month = int(request.query_params.get("month", today.month))
            days = build_month_view(resource_id, _user_id(request), year, month)
        except ValueError as exc:
            return Response({"detail": str(exc), "code": "invalid_month"}, status=status.HTTP_400_BAD_REQUEST)

        return Response({
            "resource_id": resource_id,
            "year": year,
            "month": month,
            "days": CalendarDaySerializer(days, many=True).data,
        })


class ResourceAvailabilityView(APIView):
    """Pre-check of a date range; the submission itself re-checks under lock."""

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, resource_id: str):  # type: ignore
        serializer = AvailabilityRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        from_date = serializer.validated_data["from_date"]
        to_date = serializer.validated_data["to_date"]
        if from_date > to_date:
            raise InvalidRange()

        conflicts = find_conflicts(resource_id, from_date, to_date)
        context = {"viewer_id": _user_id(request)}
        return Response({
            "is_available": not conflicts,
            "conflicting_bookings": BookingConflictSerializer(conflicts.bookings, many=True, context=context).data,
            "conflicting_blocked_periods": [
                {
                    "id": str(period.id),
                    "from_date": period.from_date.isoformat(),
                    "to_date": period.to_date.isoformat(),
                    "reason": period.reason,
                }
                for period in conflicts.blocked_periods
            ],
        })


class BlockedPeriodViewSet(viewsets.ModelViewSet):
    """Administrative date blocks; reads go to the ORM, writes to the engine."""

    queryset = BlockedPeriod.objects.all()
    serializer_class = BlockedPeriodSerializer
    permission_classes = [IsStaffOrReadOnly]
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ["resource_id", "is_active"]
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]

    def perform_create(self, serializer):  # type: ignore
        data = serializer.validated_data
        period = message_bus.handle_command(CreateBlockedPeriodCommand(
            resource_id=data["resource_id"],
            from_date=data["from_date"],
            to_date=data["to_date"],
            actor_id=_user_id(self.request),
            reason=data.get("reason") or "Maintenance",
        ))
        serializer.instance = BlockedPeriod.objects.get(pk=period.id)

    def perform_update(self, serializer):  # type: ignore
        data = serializer.validated_data
        period = message_bus.handle_command(UpdateBlockedPeriodCommand(
            period_id=serializer.instance.pk,
            from_date=data.get("from_date"),
            to_date=data.get("to_date"),
            reason=data.get("reason"),
            is_active=data.get("is_active"),
        ))
        serializer.instance = BlockedPeriod.objects.get(pk=period.id)

    def perform_destroy(self, instance):  # type: ignore
        message_bus.handle_command(DeleteBlockedPeriodCommand(period_id=instance.pk))
