"""Tests for Money, TimeRange and Actor."""

from datetime import time, timedelta

import pytest

from shared.domain.actors import Actor
from shared.domain.errors import ValidationError
from shared.domain.value_objects import Money, TimeRange


class TestMoney:
    def test_arithmetic_stays_in_minor_units(self):
        assert Money(150_000) * 3 == Money(450_000)
        assert 2 * Money(1_000) == Money(2_000)
        assert Money(5_000) - Money(2_000) == Money(3_000)

    def test_rejects_fractional_and_negative_amounts(self):
        with pytest.raises(ValidationError):
            Money(10.5)
        with pytest.raises(ValidationError):
            Money(-1)

    def test_rejects_mixed_currencies(self):
        with pytest.raises(ValidationError):
            Money(1, 'IDR') + Money(1, 'USD')

    def test_formats_rupiah_with_dot_grouping(self):
        assert str(Money(150_000)) == "Rp 150.000"
        assert str(Money(2_500, 'SGD')) == "2.500 SGD"


class TestTimeRange:
    def test_end_must_follow_start(self):
        with pytest.raises(ValidationError):
            TimeRange(time(11), time(10))
        with pytest.raises(ValidationError):
            TimeRange(time(10), time(10))

    def test_adjacent_ranges_do_not_overlap(self):
        morning = TimeRange(time(10), time(11))

        assert not morning.overlaps_with(TimeRange(time(11), time(12)))
        assert morning.overlaps_with(TimeRange(time(10, 30), time(12)))

    def test_hours_and_duration(self):
        span = TimeRange(time(18), time(21))

        assert span.hours == 3
        assert span.duration == timedelta(hours=3)
        assert span.contains(time(18)) and not span.contains(time(21))
        assert str(span) == "18:00-21:00"


class TestActor:
    def test_labels(self):
        assert Actor(user_id=1).label == 'customer'
        assert Actor(user_id=2, is_staff=True).label == 'admin'
        assert Actor.system().label == 'system'

    def test_privilege_and_ownership(self):
        customer = Actor(user_id=7)

        assert not customer.is_privileged
        assert customer.owns(7) and not customer.owns(8)
        assert Actor.system().is_privileged
        assert not Actor.system().owns(None)
