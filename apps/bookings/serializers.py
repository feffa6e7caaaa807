"""Serializers for the booking domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import BlockedPeriod


class BookingSerializer(serializers.Serializer):
    """Read representation of a domain Booking."""

    id = serializers.UUIDField(read_only=True)
    resource_id = serializers.CharField(read_only=True)
    requester_id = serializers.CharField(read_only=True)
    from_date = serializers.DateField(read_only=True)
    to_date = serializers.DateField(read_only=True)
    comments = serializers.CharField(read_only=True)
    status = serializers.CharField(source="status.value", read_only=True)
    decided_by = serializers.CharField(read_only=True)
    created_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)


class BookingConflictSerializer(BookingSerializer):
    """Hides the comments of bookings that belong to someone other than the viewer."""

    def to_representation(self, instance):  # type: ignore
        data = super().to_representation(instance)
        viewer_id = self.context.get("viewer_id")
        if viewer_id is None or not instance.belongs_to(viewer_id):
            data.pop("comments", None)
        return data


class BookingCreateSerializer(serializers.Serializer):
    """Submission of a booking by the authenticated shareholder."""

    resource_id = serializers.CharField(max_length=64)
    from_date = serializers.DateField()
    to_date = serializers.DateField()
    comments = serializers.CharField(required=False, allow_blank=True, default="")


class BookingStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=["accepted", "rejected"])


class AvailabilityRequestSerializer(serializers.Serializer):
    from_date = serializers.DateField()
    to_date = serializers.DateField()


class CalendarDaySerializer(serializers.Serializer):
    date = serializers.DateField(allow_null=True)
    day = serializers.IntegerField()
    is_empty = serializers.BooleanField()
    is_past = serializers.BooleanField()
    booked_by_viewer = serializers.BooleanField()
    booked_by_other = serializers.BooleanField()
    is_blocked = serializers.BooleanField()
    blocked_reason = serializers.CharField()
    is_available = serializers.BooleanField()
    is_range_boundary = serializers.BooleanField()


class BlockedPeriodSerializer(serializers.ModelSerializer):
    """Blocked periods as stored; writes are routed through the engine."""

    class Meta:
        model = BlockedPeriod
        fields = [
            "id",
            "resource_id",
            "from_date",
            "to_date",
            "reason",
            "is_active",
            "created_by",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "created_by",
            "created_at",
            "updated_at",
        ]
        extra_kwargs = {
            "reason": {"required": False},
        }
