import uuid

import django.db.models.expressions
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="BlockedPeriod",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("resource_id", models.CharField(max_length=64)),
                ("from_date", models.DateField()),
                ("to_date", models.DateField()),
                ("reason", models.CharField(default="Maintenance", max_length=255)),
                ("is_active", models.BooleanField(default=True)),
                ("created_by", models.CharField(blank=True, max_length=64)),
                ("created_at", models.DateTimeField()),
                ("updated_at", models.DateTimeField()),
            ],
            options={
                "verbose_name": "Blocked period",
                "verbose_name_plural": "Blocked periods",
                "ordering": ["from_date"],
                "indexes": [
                    models.Index(fields=["resource_id", "is_active"], name="blocked_resource_active_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("to_date__gte", django.db.models.expressions.F("from_date"))),
                        name="blocked_period_valid_dates",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Booking",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("resource_id", models.CharField(help_text="Identifier of the shared car.", max_length=64)),
                (
                    "requester_id",
                    models.CharField(
                        help_text="Identifier of the shareholder who asked for the dates.",
                        max_length=64,
                    ),
                ),
                ("from_date", models.DateField()),
                ("to_date", models.DateField()),
                ("comments", models.TextField(blank=True)),
                (
                    "status",
                    models.CharField(
                        choices=[("accepted", "Accepted"), ("rejected", "Rejected")],
                        default="accepted",
                        max_length=16,
                    ),
                ),
                (
                    "decided_by",
                    models.CharField(
                        blank=True,
                        help_text="Administrator who last changed the status.",
                        max_length=64,
                    ),
                ),
                ("created_at", models.DateTimeField()),
                ("updated_at", models.DateTimeField()),
            ],
            options={
                "verbose_name": "Booking",
                "verbose_name_plural": "Bookings",
                "ordering": ["from_date", "created_at"],
                "indexes": [
                    models.Index(fields=["resource_id", "status"], name="booking_resource_status_idx"),
                    models.Index(fields=["requester_id"], name="booking_requester_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("to_date__gte", django.db.models.expressions.F("from_date"))),
                        name="booking_valid_dates",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="ResourceLock",
            fields=[
                ("resource_id", models.CharField(max_length=64, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
        ),
    ]
