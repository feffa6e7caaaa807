"""Persistence models for the shared-car booking engine."""

from __future__ import annotations

import uuid

from django.db import models  # type: ignore
from django.db.models import F, Q  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Booking(models.Model):
    """A shareholder's hold on a car for an inclusive range of days."""

    class Status(models.TextChoices):
        ACCEPTED = "accepted", _("Accepted")
        REJECTED = "rejected", _("Rejected")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    resource_id = models.CharField(
        max_length=64,
        help_text=_("Identifier of the shared car."),
    )
    requester_id = models.CharField(
        max_length=64,
        help_text=_("Identifier of the shareholder who asked for the dates."),
    )
    from_date = models.DateField()
    to_date = models.DateField()
    comments = models.TextField(blank=True)
    status = models.CharField(
        max_length=16,
        choices=Status.choices,
        default=Status.ACCEPTED,
    )
    decided_by = models.CharField(
        max_length=64,
        blank=True,
        help_text=_("Administrator who last changed the status."),
    )
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField()

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["from_date", "created_at"]
        constraints = [
            models.CheckConstraint(
                condition=Q(to_date__gte=F("from_date")),
                name="booking_valid_dates",
            ),
        ]
        indexes = [
            models.Index(fields=["resource_id", "status"], name="booking_resource_status_idx"),
            models.Index(fields=["requester_id"], name="booking_requester_idx"),
        ]

    def __str__(self) -> str:
        return f"Booking {self.id} for car {self.resource_id} ({self.from_date} - {self.to_date})"


class BlockedPeriod(models.Model):
    """Dates an administrator has closed for booking (maintenance, servicing)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    resource_id = models.CharField(max_length=64)
    from_date = models.DateField()
    to_date = models.DateField()
    reason = models.CharField(max_length=255, default="Maintenance")
    is_active = models.BooleanField(default=True)
    created_by = models.CharField(max_length=64, blank=True)
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField()

    class Meta:
        verbose_name = _("Blocked period")
        verbose_name_plural = _("Blocked periods")
        ordering = ["from_date"]
        constraints = [
            models.CheckConstraint(
                condition=Q(to_date__gte=F("from_date")),
                name="blocked_period_valid_dates",
            ),
        ]
        indexes = [
            models.Index(fields=["resource_id", "is_active"], name="blocked_resource_active_idx"),
        ]

    def __str__(self) -> str:
        return f"Blocked {self.resource_id} {self.from_date} - {self.to_date}"


class ResourceLock(models.Model):
    """One row per car; locked FOR UPDATE to serialize writers of that car."""

    resource_id = models.CharField(max_length=64, primary_key=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return f"Lock {self.resource_id}"
