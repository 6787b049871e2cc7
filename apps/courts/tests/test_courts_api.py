"""Court catalogue API."""

from __future__ import annotations

import pytest
from django.urls import reverse
from rest_framework.test import APIClient

from apps.courts.models import Court
from shared.domain.value_objects import Money


@pytest.fixture
def client():
    return APIClient()


@pytest.mark.django_db
def test_anonymous_users_see_active_courts_only(client, court):
    Court.objects.create(name="Closed court", hourly_rate=100_000, is_active=False)

    response = client.get(reverse("court-list"))

    assert response.status_code == 200
    assert [item["name"] for item in response.data] == ["Court 1"]


@pytest.mark.django_db
def test_staff_create_court_with_valid_hours(client, staff_user):
    client.force_authenticate(staff_user)
    payload = {"name": "Court 2", "hourly_rate": 175_000, "opening_hour": 8, "closing_hour": 20}

    response = client.post(reverse("court-list"), payload, format="json")

    assert response.status_code == 201, response.data
    assert Court.objects.get(name="Court 2").rate == Money(175_000)


@pytest.mark.django_db
def test_closing_hour_must_follow_opening(client, staff_user):
    client.force_authenticate(staff_user)
    payload = {"name": "Court 3", "hourly_rate": 100_000, "opening_hour": 20, "closing_hour": 8}

    response = client.post(reverse("court-list"), payload, format="json")

    assert response.status_code == 400


@pytest.mark.django_db
def test_customers_cannot_edit_courts(client, customer, court):
    client.force_authenticate(customer)

    response = client.patch(reverse("court-detail", args=[court.pk]), {"hourly_rate": 1}, format="json")

    assert response.status_code == 403


@pytest.mark.django_db
def test_court_with_bookings_cannot_be_deleted(client, staff_user, court, book):
    book()
    client.force_authenticate(staff_user)

    response = client.delete(reverse("court-detail", args=[court.pk]))

    assert response.status_code == 409
    assert Court.objects.filter(pk=court.pk).exists()


@pytest.mark.django_db
def test_price_for_hours(court):
    assert court.price_for(2) == Money(300_000)
