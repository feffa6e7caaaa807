"""Admin registration for bookings."""

from __future__ import annotations

from django import forms
from django.contrib import admin

from shared.application.message_bus import message_bus

from .application.command_handlers import (
    CreateBlockedPeriodCommand,
    DeleteBlockedPeriodCommand,
    UpdateBlockedPeriodCommand,
)
from .domain.errors import InvalidRange
from .models import BlockedPeriod, Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "resource_id",
        "requester_id",
        "from_date",
        "to_date",
        "status",
        "decided_by",
        "created_at",
    )
    list_filter = ("status", "from_date")
    search_fields = ("resource_id", "requester_id", "comments")
    readonly_fields = (
        "id",
        "resource_id",
        "requester_id",
        "from_date",
        "to_date",
        "status",
        "decided_by",
        "created_at",
        "updated_at",
    )

    def has_add_permission(self, request):
        # Bookings are only created by shareholders through the API
        return False


class BlockedPeriodAdminForm(forms.ModelForm):

    class Meta:
        model = BlockedPeriod
        fields = ("resource_id", "from_date", "to_date", "reason", "is_active")

    def clean(self):
        cleaned_data = super().clean()
        from_date = cleaned_data.get("from_date")
        to_date = cleaned_data.get("to_date")
        if from_date and to_date and from_date > to_date:
            raise forms.ValidationError(InvalidRange.default_message, code=InvalidRange.code)
        return cleaned_data


@admin.register(BlockedPeriod)
class BlockedPeriodAdmin(admin.ModelAdmin):
    """Writes go through the blocked-period commands so they take the car lock."""

    form = BlockedPeriodAdminForm
    list_display = ("resource_id", "from_date", "to_date", "reason", "is_active", "created_by")
    list_filter = ("is_active",)
    search_fields = ("resource_id", "reason")
    readonly_fields = ("created_by", "created_at", "updated_at")

    def get_readonly_fields(self, request, obj=None):
        if obj is not None:
            return ("resource_id",) + tuple(self.readonly_fields)
        return self.readonly_fields

    def save_model(self, request, obj, form, change):
        if change:
            period = message_bus.handle_command(UpdateBlockedPeriodCommand(
                period_id=obj.pk,
                from_date=obj.from_date,
                to_date=obj.to_date,
                reason=obj.reason,
                is_active=obj.is_active,
            ))
        else:
            period = message_bus.handle_command(CreateBlockedPeriodCommand(
                resource_id=obj.resource_id,
                from_date=obj.from_date,
                to_date=obj.to_date,
                actor_id=str(request.user.pk),
                reason=obj.reason,
            ))
            if not obj.is_active:
                period = message_bus.handle_command(UpdateBlockedPeriodCommand(period_id=period.id, is_active=False))

        obj.pk = period.id
        obj.created_by = period.created_by
        obj.created_at = period.created_at
        obj.updated_at = period.updated_at

    def delete_model(self, request, obj):
        message_bus.handle_command(DeleteBlockedPeriodCommand(period_id=obj.pk))

    def delete_queryset(self, request, queryset):
        for period in queryset:
            self.delete_model(request, period)
