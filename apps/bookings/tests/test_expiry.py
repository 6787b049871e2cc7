"""Hold expiry and finishing sweeps."""

from __future__ import annotations

from datetime import datetime, time, timedelta

import pytest
from django.utils import timezone

from apps.bookings import tasks
from apps.bookings.models import Booking
from apps.bookings.services import set_booking_status, set_payment_status, submit_payment
from apps.finances.models import Refund
from apps.scheduling.models import Schedule
from shared.domain.actors import Actor
from shared.domain.errors import InvalidTransition


def _age(booking_id, minutes):
    Booking.objects.filter(pk=booking_id).update(created_at=timezone.now() - timedelta(minutes=minutes))


# Scenario B
@pytest.mark.django_db
def test_unpaid_hold_expires_after_timeout(book, court, booking_day):
    booking = book()
    _age(booking.id, 31)

    result = tasks.expire_stale_holds()

    assert result == {"expired": 1, "failed": 0}
    stored = Booking.objects.get(pk=booking.id)
    assert stored.status == "cancelled"
    assert stored.cancelled_by == "system"
    assert Schedule.objects.get(court=court, date=booking_day, start_time=time(10)).status == "available"
    assert not Refund.objects.exists()


@pytest.mark.django_db
def test_sweep_is_idempotent(book):
    booking = book()
    _age(booking.id, 45)

    assert tasks.expire_stale_holds() == {"expired": 1, "failed": 0}
    assert tasks.expire_stale_holds() == {"expired": 0, "failed": 0}
    assert tasks.expire_hold(booking.id) is False


@pytest.mark.django_db
def test_fresh_and_paid_holds_are_kept(book, admin_actor, other_actor, other_customer):
    fresh = book()
    paid = book(time(12), time(13))
    _age(paid.id, 60)
    set_payment_status(admin_actor, paid.id, "paid")

    assert tasks.expire_stale_holds() == {"expired": 0, "failed": 0}
    assert set(Booking.objects.values_list("status", flat=True)) == {"pending"}
    assert fresh.id != paid.id


@pytest.mark.django_db
def test_submitting_proof_does_not_restart_the_timer(book, customer_actor):
    booking = book()
    _age(booking.id, 40)
    submit_payment(customer_actor, booking.id, "transfer", "receipt.jpg")

    assert tasks.expire_stale_holds()["expired"] == 1


@pytest.mark.django_db
def test_sweep_skips_failures_and_continues(book, monkeypatch):
    first = book()
    second = book(time(12), time(13))
    _age(first.id, 40)
    _age(second.id, 35)

    real = tasks.set_booking_status

    def flaky(actor, booking_id, *args, **kwargs):
        if booking_id == first.id:
            raise RuntimeError("database hiccup")
        return real(actor, booking_id, *args, **kwargs)

    monkeypatch.setattr(tasks, "set_booking_status", flaky)

    assert tasks.expire_stale_holds() == {"expired": 1, "failed": 1}
    assert Booking.objects.get(pk=first.id).status == "pending"
    assert Booking.objects.get(pk=second.id).status == "cancelled"


@pytest.mark.django_db
def test_sweep_spares_booking_paid_after_it_was_picked(book, admin_actor, monkeypatch):
    booking = book()
    _age(booking.id, 40)

    real = tasks.set_booking_status

    def paid_meanwhile(actor, booking_id, *args, **kwargs):
        set_payment_status(admin_actor, booking_id, "paid")
        return real(actor, booking_id, *args, **kwargs)

    monkeypatch.setattr(tasks, "set_booking_status", paid_meanwhile)

    assert tasks.expire_stale_holds() == {"expired": 0, "failed": 0}
    stored = Booking.objects.get(pk=booking.id)
    assert (stored.status, stored.payment_status) == ("pending", "paid")
    assert not Refund.objects.exists()


@pytest.mark.django_db
def test_expire_hold_spares_booking_paid_meanwhile(book, admin_actor, monkeypatch):
    booking = book()
    _age(booking.id, 31)

    real = tasks.set_booking_status

    def paid_meanwhile(actor, booking_id, *args, **kwargs):
        set_payment_status(admin_actor, booking_id, "paid")
        return real(actor, booking_id, *args, **kwargs)

    monkeypatch.setattr(tasks, "set_booking_status", paid_meanwhile)

    assert tasks.expire_hold(booking.id) is False
    assert Booking.objects.get(pk=booking.id).status == "pending"
    assert not Refund.objects.exists()


@pytest.mark.django_db
def test_expiry_deadline_is_checked_under_lock(book):
    booking = book()

    with pytest.raises(InvalidTransition):
        set_booking_status(
            Actor.system(), booking.id, "cancelled", tasks.EXPIRY_REASON,
            hold_deadline=tasks.hold_deadline(timezone.now()),
        )

    assert Booking.objects.get(pk=booking.id).status == "pending"


@pytest.mark.django_db
def test_expire_hold_cancels_one_lapsed_booking(book):
    booking = book()
    assert tasks.expire_hold(booking.id) is False

    _age(booking.id, 31)

    assert tasks.expire_hold(booking.id) is True
    assert Booking.objects.get(pk=booking.id).status == "cancelled"


@pytest.mark.django_db
def test_expiry_loses_to_user_cancellation(book, customer_actor):
    booking = book()
    _age(booking.id, 31)
    set_booking_status(customer_actor, booking.id, "cancelled")

    assert tasks.expire_hold(booking.id) is False
    assert Booking.objects.get(pk=booking.id).cancelled_by == "customer"


@pytest.mark.django_db
def test_finish_elapsed_bookings(book, admin_actor, court, booking_day):
    booking = book()
    set_payment_status(admin_actor, booking.id, "paid")
    set_booking_status(admin_actor, booking.id, "confirmed")

    during = timezone.make_aware(datetime.combine(booking_day, time(10, 30)))
    assert tasks.finish_elapsed_bookings(now=during) == {"finished": 0, "failed": 0}

    after = timezone.make_aware(datetime.combine(booking_day, time(11)))
    assert tasks.finish_elapsed_bookings(now=after) == {"finished": 1, "failed": 0}
    assert Booking.objects.get(pk=booking.id).status == "finished"
    assert Schedule.objects.get(court=court, date=booking_day, start_time=time(10)).status == "available"
