"""Court models."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.value_objects import Money


def default_opening_hour() -> int:
    return settings.COURT_OPENING_HOUR


def default_closing_hour() -> int:
    return settings.COURT_CLOSING_HOUR


class CourtQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)


class Court(models.Model):
    """A bookable court with an hourly price and daily operating window."""

    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True)
    hourly_rate = models.PositiveIntegerField(
        help_text=_("Price per hour in minor currency units."),
    )
    opening_hour = models.PositiveSmallIntegerField(
        default=default_opening_hour,
        validators=[MaxValueValidator(22)],
        help_text=_("First bookable hour of the day (0-22)."),
    )
    closing_hour = models.PositiveSmallIntegerField(
        default=default_closing_hour,
        validators=[MinValueValidator(1), MaxValueValidator(23)],
        help_text=_("Hour at which the last slot ends (1-23)."),
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CourtQuerySet.as_manager()

    class Meta:
        db_table = "courts"
        verbose_name = _("Court")
        verbose_name_plural = _("Courts")
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                check=models.Q(closing_hour__gt=models.F("opening_hour")),
                name="court_valid_operating_hours",
            ),
        ]

    def __str__(self) -> str:
        return self.name

    @property
    def rate(self) -> Money:
        return Money(self.hourly_rate, settings.BOOKING_CURRENCY)

    def price_for(self, hours: int) -> Money:
        return self.rate * hours
