"""Booking models."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.infrastructure.tracking import SnapshotModel


class BookingQuerySet(models.QuerySet):
    def active(self):
        return self.filter(status__in=Booking.ACTIVE_STATUSES)

    def overlapping(self, court_id, day, start_time, end_time):
        return self.filter(
            court_id=court_id,
            date=day,
            start_time__lt=end_time,
            end_time__gt=start_time,
        )


class Booking(SnapshotModel):
    """A customer's reservation of consecutive one-hour slots on a court."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        CONFIRMED = "confirmed", _("Confirmed")
        CANCELLED = "cancelled", _("Cancelled")
        FINISHED = "finished", _("Finished")

    class PaymentStatus(models.TextChoices):
        PENDING = "pending", _("Awaiting payment")
        PAID = "paid", _("Paid")
        CANCELLED = "cancelled", _("Cancelled")
        FAILED = "failed", _("Failed")

    class PaymentMethod(models.TextChoices):
        TRANSFER = "transfer", _("Bank transfer")
        QRIS = "qris", _("QRIS")
        PAY_AT_VENUE = "pay_at_venue", _("Pay at venue")

    class CancelledBy(models.TextChoices):
        CUSTOMER = "customer", _("Customer")
        ADMIN = "admin", _("Admin")
        SYSTEM = "system", _("System")

    ACTIVE_STATUSES = (Status.PENDING, Status.CONFIRMED)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    court = models.ForeignKey(
        "courts.Court",
        on_delete=models.PROTECT,
        related_name="bookings",
    )
    date = models.DateField()
    start_time = models.TimeField()
    end_time = models.TimeField()
    total_price = models.PositiveIntegerField(
        help_text=_("Hours times the court's hourly rate at booking time."),
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
    )
    payment_status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )
    payment_method = models.CharField(
        max_length=20,
        choices=PaymentMethod.choices,
        blank=True,
    )
    payment_proof = models.CharField(
        max_length=255,
        blank=True,
        help_text=_("Reference to the uploaded transfer receipt."),
    )
    cancellation_reason = models.CharField(max_length=255, blank=True)
    cancelled_by = models.CharField(
        max_length=20,
        choices=CancelledBy.choices,
        blank=True,
    )
    confirmed_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = BookingQuerySet.as_manager()

    class Meta:
        db_table = "bookings"
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                check=models.Q(end_time__gt=models.F("start_time")),
                name="booking_valid_time_range",
            ),
        ]
        indexes = [
            models.Index(fields=["court", "date", "status"], name="bookings_court_i_3b1f0e_idx"),
            models.Index(fields=["status", "created_at"], name="bookings_status_8c2d41_idx"),
            models.Index(fields=["user", "status"], name="bookings_user_id_5a7e93_idx"),
        ]

    def __str__(self) -> str:
        return f"Booking #{self.pk} {self.court_id} {self.date} {self.start_time:%H:%M}-{self.end_time:%H:%M}"

    @property
    def is_active(self) -> bool:
        return self.status in self.ACTIVE_STATUSES

    @property
    def owner_name(self) -> str:
        return owner_display_name(self.user)


def owner_display_name(user) -> str:
    return (user.get_full_name() or user.get_username()) if user is not None else ""
