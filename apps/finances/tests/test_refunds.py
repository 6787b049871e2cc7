"""Refunds opened by paid cancellations and decided by staff."""

from __future__ import annotations

from datetime import time

import pytest
from django.urls import reverse
from rest_framework.test import APIClient

from apps.bookings.models import Booking
from apps.bookings.services import set_booking_status, set_payment_status
from apps.finances.models import Refund
from apps.finances.services import complete_refund, reject_refund
from apps.scheduling.models import Schedule
from shared.domain.errors import InvalidTransition, NotFound, PermissionDenied, ValidationError


@pytest.fixture
def paid_booking(book, admin_actor):
    booking = book()
    set_payment_status(admin_actor, booking.id, "paid")
    return set_booking_status(admin_actor, booking.id, "confirmed")


@pytest.fixture
def refund(paid_booking, customer_actor):
    set_booking_status(
        customer_actor,
        paid_booking.id,
        "cancelled",
        "Rained out",
        refund_method="bank_transfer",
        refund_account="1234567890",
    )
    return Refund.objects.get(booking_id=paid_booking.id)


@pytest.mark.django_db
def test_cancelling_paid_booking_opens_one_pending_refund(refund, paid_booking, court, booking_day):
    assert refund.status == Refund.Status.PENDING
    assert refund.amount == 150_000
    assert refund.account_number == "1234567890"
    booking = Booking.objects.get(pk=paid_booking.id)
    assert booking.status == "cancelled"
    assert booking.payment_status == "paid"
    assert Schedule.objects.get(court=court, date=booking_day, start_time=time(10)).status == "available"


@pytest.mark.django_db
def test_unpaid_cancellation_opens_no_refund(book, customer_actor):
    booking = book()

    set_booking_status(customer_actor, booking.id, "cancelled")

    assert not Refund.objects.exists()


@pytest.mark.django_db
def test_e_wallet_refund_needs_wallet_type(paid_booking, customer_actor):
    with pytest.raises(ValidationError):
        set_booking_status(customer_actor, paid_booking.id, "cancelled", refund_method="e_wallet")

    assert Booking.objects.get(pk=paid_booking.id).status == "confirmed"
    assert not Refund.objects.exists()


@pytest.mark.django_db
def test_completing_refund_cancels_payment(refund, admin_actor):
    completed = complete_refund(admin_actor, refund.pk)

    assert completed.status == Refund.Status.COMPLETED
    assert completed.processed_at is not None
    assert Booking.objects.get(pk=refund.booking_id).payment_status == "cancelled"

    with pytest.raises(InvalidTransition):
        complete_refund(admin_actor, refund.pk)


@pytest.mark.django_db
def test_rejecting_refund_keeps_payment(refund, admin_actor):
    rejected = reject_refund(admin_actor, refund.pk, "Cancelled too late")

    assert rejected.status == Refund.Status.REJECTED
    assert rejected.note == "Cancelled too late"
    assert Booking.objects.get(pk=refund.booking_id).payment_status == "paid"

    with pytest.raises(InvalidTransition):
        reject_refund(admin_actor, refund.pk)


@pytest.mark.django_db
def test_only_privileged_actors_decide_refunds(refund, customer_actor, admin_actor):
    with pytest.raises(PermissionDenied):
        complete_refund(customer_actor, refund.pk)
    with pytest.raises(PermissionDenied):
        reject_refund(customer_actor, refund.pk)
    with pytest.raises(NotFound):
        complete_refund(admin_actor, refund.pk + 100)


@pytest.mark.django_db
def test_refund_api(refund, customer, other_customer, staff_user):
    client = APIClient()

    client.force_authenticate(other_customer)
    assert client.get(reverse("refund-list")).data == []

    client.force_authenticate(customer)
    assert [item["id"] for item in client.get(reverse("refund-list")).data] == [refund.pk]
    assert client.post(reverse("refund-complete", args=[refund.pk])).status_code == 403

    client.force_authenticate(staff_user)
    response = client.post(reverse("refund-reject", args=[refund.pk]), {"note": "No proof"}, format="json")
    assert response.status_code == 200
    assert response.data["status"] == "rejected"

    response = client.post(reverse("refund-complete", args=[refund.pk]))
    assert response.status_code == 409


@pytest.mark.django_db
def test_refund_actions_need_numeric_id(staff_user):
    client = APIClient()
    client.force_authenticate(staff_user)

    assert client.post("/api/v1/finances/refunds/abc/complete/").status_code == 404
