import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("courts", "0001_initial"),
        ("bookings", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Schedule",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField()),
                ("start_time", models.TimeField()),
                ("end_time", models.TimeField()),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("available", "Available"),
                            ("pending", "Held, awaiting payment"),
                            ("booked", "Booked"),
                            ("confirmed", "Confirmed (legacy)"),
                            ("maintenance", "Maintenance"),
                            ("holiday", "Holiday"),
                        ],
                        default="available",
                        max_length=20,
                    ),
                ),
                ("display_name", models.CharField(blank=True, max_length=150)),
                ("note", models.CharField(blank=True, max_length=255)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "booking",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="schedule_rows",
                        to="bookings.booking",
                    ),
                ),
                (
                    "court",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="schedule_rows",
                        to="courts.court",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="schedule_rows",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Schedule slot",
                "verbose_name_plural": "Schedule slots",
                "db_table": "schedules",
                "ordering": ["court", "date", "start_time"],
                "indexes": [
                    models.Index(fields=["court", "date"], name="schedules_court_i_7d9a12_idx"),
                    models.Index(fields=["booking"], name="schedules_booking_4e6c80_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("court", "date", "start_time"), name="schedule_unique_slot"),
                ],
            },
        ),
    ]
