"""
Common Value Objects

Value objects used across the court booking contexts:
- Money: Monetary amounts in integer minor units
- TimeRange: A half-open range of wall-clock times inside one day
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from shared.domain.base import ValueObject
from shared.domain.errors import ValidationError

SUPPORTED_CURRENCIES = ('IDR', 'USD', 'SGD')


@dataclass(frozen=True)
class Money(ValueObject):
    """
    Money value object

    Amounts are integers in the currency's minor unit, so arithmetic never
    rounds.
    """
    amount: int
    currency: str = 'IDR'

    def __post_init__(self):
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise ValidationError("Money amount must be an integer number of minor units")
        if self.amount < 0:
            raise ValidationError("Amount cannot be negative")
        if self.currency not in SUPPORTED_CURRENCIES:
            raise ValidationError(f"Unsupported currency: {self.currency}")

    def __add__(self, other: 'Money') -> 'Money':
        if not isinstance(other, Money):
            raise TypeError("Can only add Money to Money")
        if self.currency != other.currency:
            raise ValidationError(f"Cannot add different currencies: {self.currency} and {other.currency}")
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: 'Money') -> 'Money':
        if not isinstance(other, Money):
            raise TypeError("Can only subtract Money from Money")
        if self.currency != other.currency:
            raise ValidationError(f"Cannot subtract different currencies: {self.currency} and {other.currency}")
        return Money(self.amount - other.amount, self.currency)

    def __mul__(self, factor: int) -> 'Money':
        if isinstance(factor, bool) or not isinstance(factor, int):
            raise TypeError("Can only multiply Money by an integer")
        return Money(self.amount * factor, self.currency)

    __rmul__ = __mul__

    def __str__(self):
        grouped = f"{self.amount:,}".replace(',', '.')
        if self.currency == 'IDR':
            return f"Rp {grouped}"
        return f"{grouped} {self.currency}"

    def __repr__(self):
        return f"Money({self.amount}, '{self.currency}')"


@dataclass(frozen=True)
class TimeRange(ValueObject):
    """
    Time range value object

    Represents [start, end) on a single day. Used for booking periods and
    slot expansion.
    """
    start: time
    end: time

    def __post_init__(self):
        if self.start >= self.end:
            raise ValidationError(f"End time ({self.end:%H:%M}) must be after start time ({self.start:%H:%M})")

    def overlaps_with(self, other: 'TimeRange') -> bool:
        """
        Two ranges overlap if they share any instant.

        Examples:
            - 10:00-12:00 overlaps with 11:00-13:00 -> True
            - 10:00-11:00 overlaps with 11:00-12:00 -> False (adjacent)
        """
        if not isinstance(other, TimeRange):
            raise TypeError("Can only check overlap with another TimeRange")
        return self.start < other.end and self.end > other.start

    def contains(self, moment: time) -> bool:
        return self.start <= moment < self.end

    @property
    def duration(self) -> timedelta:
        anchor = date(2000, 1, 1)
        return datetime.combine(anchor, self.end) - datetime.combine(anchor, self.start)

    @property
    def hours(self) -> int:
        """Whole hours covered; callers validate hour alignment first."""
        return int(self.duration.total_seconds() // 3600)

    def __str__(self):
        return f"{self.start:%H:%M}-{self.end:%H:%M}"

    def __repr__(self):
        return f"TimeRange({self.start:%H:%M}, {self.end:%H:%M})"
