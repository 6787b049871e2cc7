import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("courts", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Booking",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField()),
                ("start_time", models.TimeField()),
                ("end_time", models.TimeField()),
                ("total_price", models.PositiveIntegerField(help_text="Hours times the court's hourly rate at booking time.")),
                (
                    "status",
                    models.CharField(
                        choices=[("pending", "Pending"), ("confirmed", "Confirmed"), ("cancelled", "Cancelled"), ("finished", "Finished")],
                        default="pending",
                        max_length=20,
                    ),
                ),
                (
                    "payment_status",
                    models.CharField(
                        choices=[("pending", "Awaiting payment"), ("paid", "Paid"), ("cancelled", "Cancelled"), ("failed", "Failed")],
                        default="pending",
                        max_length=20,
                    ),
                ),
                (
                    "payment_method",
                    models.CharField(
                        blank=True,
                        choices=[("transfer", "Bank transfer"), ("qris", "QRIS"), ("pay_at_venue", "Pay at venue")],
                        max_length=20,
                    ),
                ),
                ("payment_proof", models.CharField(blank=True, help_text="Reference to the uploaded transfer receipt.", max_length=255)),
                ("cancellation_reason", models.CharField(blank=True, max_length=255)),
                (
                    "cancelled_by",
                    models.CharField(
                        blank=True,
                        choices=[("customer", "Customer"), ("admin", "Admin"), ("system", "System")],
                        max_length=20,
                    ),
                ),
                ("confirmed_at", models.DateTimeField(blank=True, null=True)),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "court",
                    models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="bookings", to="courts.court"),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="bookings",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Booking",
                "verbose_name_plural": "Bookings",
                "db_table": "bookings",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["court", "date", "status"], name="bookings_court_i_3b1f0e_idx"),
                    models.Index(fields=["status", "created_at"], name="bookings_status_8c2d41_idx"),
                    models.Index(fields=["user", "status"], name="bookings_user_id_5a7e93_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        check=models.Q(("end_time__gt", models.F("start_time"))),
                        name="booking_valid_time_range",
                    ),
                ],
            },
        ),
    ]
