"""Schedule projection model."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.infrastructure.tracking import SnapshotModel

from .domain.derivation import ScheduleStatus, display_status


class Schedule(SnapshotModel):
    """
    One row per (court, date, start hour) that is not plainly free.

    Rows are written by the synchronizer only. A slot without a row is
    available.
    """

    class Status(models.TextChoices):
        AVAILABLE = ScheduleStatus.AVAILABLE.value, _("Available")
        PENDING = ScheduleStatus.PENDING.value, _("Held, awaiting payment")
        BOOKED = ScheduleStatus.BOOKED.value, _("Booked")
        CONFIRMED = ScheduleStatus.CONFIRMED.value, _("Confirmed (legacy)")
        MAINTENANCE = ScheduleStatus.MAINTENANCE.value, _("Maintenance")
        HOLIDAY = ScheduleStatus.HOLIDAY.value, _("Holiday")

    court = models.ForeignKey(
        "courts.Court",
        on_delete=models.CASCADE,
        related_name="schedule_rows",
    )
    date = models.DateField()
    start_time = models.TimeField()
    end_time = models.TimeField()
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.AVAILABLE,
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="schedule_rows",
    )
    booking = models.ForeignKey(
        "bookings.Booking",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="schedule_rows",
    )
    display_name = models.CharField(max_length=150, blank=True)
    note = models.CharField(max_length=255, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "schedules"
        verbose_name = _("Schedule slot")
        verbose_name_plural = _("Schedule slots")
        ordering = ["court", "date", "start_time"]
        constraints = [
            models.UniqueConstraint(
                fields=["court", "date", "start_time"],
                name="schedule_unique_slot",
            ),
        ]
        indexes = [
            models.Index(fields=["court", "date"], name="schedules_court_i_7d9a12_idx"),
            models.Index(fields=["booking"], name="schedules_booking_4e6c80_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.court_id} {self.date} {self.start_time:%H:%M} {self.status}"

    @property
    def schedule_status(self) -> ScheduleStatus:
        return ScheduleStatus(self.status)

    @property
    def shown_status(self) -> ScheduleStatus:
        return display_status(self.status)
