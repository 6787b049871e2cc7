"""Shared pytest fixtures: users, actors, a court and a fixed booking day."""

from __future__ import annotations

from datetime import date, datetime, time

import pytest
from django.core.cache import cache
from django.utils import timezone

from apps.courts.models import Court
from shared.domain.actors import Actor

BOOKING_DAY = date(2024, 1, 10)


@pytest.fixture(autouse=True)
def _clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def customer(django_user_model):
    return django_user_model.objects.create_user(
        username="budi",
        password="pass",
        first_name="Budi",
        last_name="Santoso",
    )


@pytest.fixture
def other_customer(django_user_model):
    return django_user_model.objects.create_user(username="sari", password="pass")


@pytest.fixture
def staff_user(django_user_model):
    return django_user_model.objects.create_user(username="admin", password="pass", is_staff=True)


@pytest.fixture
def customer_actor(customer):
    return Actor.from_user(customer)


@pytest.fixture
def other_actor(other_customer):
    return Actor.from_user(other_customer)


@pytest.fixture
def admin_actor(staff_user):
    return Actor.from_user(staff_user)


@pytest.fixture
def court(db):
    return Court.objects.create(name="Court 1", hourly_rate=150_000)


@pytest.fixture
def booking_day():
    return BOOKING_DAY


@pytest.fixture
def day_before():
    """A moment before every slot of ``booking_day``."""
    return timezone.make_aware(datetime.combine(date(2024, 1, 9), time(12)))


@pytest.fixture
def book(customer_actor, customer, court, booking_day, day_before):
    """Create a booking for ``customer`` on ``court``; defaults to 10:00-11:00."""
    from apps.bookings.services import create_booking

    def _book(start=time(10), end=time(11), *, actor=None, user=None):
        return create_booking(
            actor or customer_actor,
            (user or customer).pk,
            court.pk,
            booking_day,
            start,
            end,
            now=day_before,
        )

    return _book
