"""Booking lifecycle through the service layer, including the schedule projection."""

from __future__ import annotations

from datetime import time

import pytest

from apps.bookings.models import Booking
from apps.bookings.services import (
    create_booking,
    purge_booking,
    set_booking_status,
    set_payment_status,
    submit_payment,
)
from apps.finances.models import Refund
from apps.scheduling import availability
from apps.scheduling.models import Schedule
from shared.domain.actors import Actor
from shared.domain.errors import (
    InvalidTransition,
    NotFound,
    PaymentRequired,
    PermissionDenied,
    SlotConflict,
    ValidationError,
)


def _slot_status(court, day, hour=10):
    return Schedule.objects.get(court=court, date=day, start_time=time(hour)).status


def _confirmed(book, admin_actor):
    booking = book()
    set_payment_status(admin_actor, booking.id, "paid")
    return set_booking_status(admin_actor, booking.id, "confirmed")


# Scenario A
@pytest.mark.django_db
def test_second_booking_for_same_slot_conflicts(book, court, booking_day, other_actor, other_customer):
    booking = book()

    assert booking.status.value == "pending"
    assert booking.payment_status.value == "pending"
    assert _slot_status(court, booking_day) == "pending"

    with pytest.raises(SlotConflict):
        book(actor=other_actor, user=other_customer)

    assert Booking.objects.count() == 1


@pytest.mark.django_db
def test_partial_overlap_conflicts_and_rolls_back(book, court, booking_day, other_actor, other_customer):
    book(time(10), time(12))

    with pytest.raises(SlotConflict):
        book(time(11), time(13), actor=other_actor, user=other_customer)

    assert Booking.objects.count() == 1
    assert not Schedule.objects.filter(court=court, date=booking_day, start_time=time(12)).exists()


@pytest.mark.django_db
def test_repeated_request_returns_existing_booking(book):
    first = book()
    again = book()

    assert again.id == first.id
    assert Booking.objects.count() == 1


@pytest.mark.django_db
def test_price_is_hours_times_rate(book, court, booking_day):
    booking = book(time(18), time(21))

    assert booking.total_price.amount == 3 * 150_000
    assert Schedule.objects.filter(court=court, date=booking_day, booking_id=booking.id).count() == 3


@pytest.mark.django_db
def test_stale_projection_loses_to_booking_table(book, court, booking_day, other_actor, other_customer):
    book()
    # The projection forgot the hold; the pre-check now says free.
    Schedule.objects.filter(court=court, date=booking_day).delete()
    assert availability.resolve(court.pk, booking_day, time(10)).is_available

    with pytest.raises(SlotConflict):
        book(actor=other_actor, user=other_customer)

    assert Booking.objects.active().count() == 1


@pytest.mark.django_db
def test_held_row_without_booking_blocks_the_claim(book, court, booking_day):
    Schedule.objects.create(court=court, date=booking_day, start_time=time(10), end_time=time(11), status="booked")

    with pytest.raises(SlotConflict):
        book()

    assert Booking.objects.count() == 0


@pytest.mark.django_db
def test_override_blocks_booking(book, court, booking_day, admin_actor):
    from apps.scheduling.synchronizer import set_override

    set_override(admin_actor, court.pk, booking_day, time(10), "maintenance")

    with pytest.raises(SlotConflict):
        book()


@pytest.mark.django_db
def test_past_slot_is_rejected(customer_actor, customer, court, booking_day):
    with pytest.raises(ValidationError):
        create_booking(customer_actor, customer.pk, court.pk, booking_day, time(10), time(11))


@pytest.mark.django_db
def test_slot_outside_operating_hours_is_rejected(book):
    with pytest.raises(ValidationError):
        book(time(21), time(22))


@pytest.mark.django_db
def test_inactive_court_is_rejected(book, court):
    court.is_active = False
    court.save()

    with pytest.raises(ValidationError):
        book()


@pytest.mark.django_db
def test_unknown_court_is_not_found(customer_actor, customer, booking_day, day_before):
    with pytest.raises(NotFound):
        create_booking(customer_actor, customer.pk, 999, booking_day, time(10), time(11), now=day_before)


@pytest.mark.django_db
def test_customer_cannot_book_for_someone_else(book, other_actor):
    with pytest.raises(PermissionDenied):
        book(actor=other_actor)


@pytest.mark.django_db
def test_staff_can_book_on_behalf_of_customer(book, admin_actor, customer):
    booking = book(actor=admin_actor)

    assert booking.user_id == customer.pk


@pytest.mark.django_db
def test_submit_payment_keeps_statuses(book, customer_actor):
    booking = book()

    paid = submit_payment(customer_actor, booking.id, "transfer", "receipts/2024/01/budi.jpg")

    assert paid.status.value == "pending"
    assert paid.payment_status.value == "pending"
    stored = Booking.objects.get(pk=booking.id)
    assert stored.payment_method == "transfer"
    assert stored.payment_proof == "receipts/2024/01/budi.jpg"


@pytest.mark.django_db
def test_submit_payment_requires_proof_except_at_venue(book, customer_actor):
    booking = book()

    with pytest.raises(ValidationError):
        submit_payment(customer_actor, booking.id, "qris", "")

    submit_payment(customer_actor, booking.id, "pay_at_venue")
    assert Booking.objects.get(pk=booking.id).payment_method == "pay_at_venue"


@pytest.mark.django_db
def test_submit_payment_rejects_unknown_method_and_strangers(book, customer_actor, other_actor):
    booking = book()

    with pytest.raises(ValidationError):
        submit_payment(customer_actor, booking.id, "cash", "x")
    with pytest.raises(PermissionDenied):
        submit_payment(other_actor, booking.id, "transfer", "x")


@pytest.mark.django_db
def test_submit_payment_after_paid_is_invalid(book, customer_actor, admin_actor):
    booking = book()
    set_payment_status(admin_actor, booking.id, "paid")

    with pytest.raises(InvalidTransition):
        submit_payment(customer_actor, booking.id, "transfer", "again.jpg")


# Scenario C
@pytest.mark.django_db
def test_confirm_then_cancel_opens_refund_and_frees_slot(book, court, booking_day, admin_actor):
    booking = book()
    set_payment_status(admin_actor, booking.id, "paid")
    assert _slot_status(court, booking_day) == "pending"

    confirmed = set_booking_status(admin_actor, booking.id, "confirmed")
    assert confirmed.status.value == "confirmed"
    assert _slot_status(court, booking_day) == "booked"

    set_booking_status(admin_actor, booking.id, "cancelled", "Court flooded")

    refund = Refund.objects.get(booking_id=booking.id)
    assert refund.status == "pending"
    assert refund.amount == 150_000
    assert _slot_status(court, booking_day) == "available"
    stored = Booking.objects.get(pk=booking.id)
    assert stored.cancelled_by == "admin"
    assert stored.cancellation_reason == "Court flooded"
    assert stored.payment_status == "paid"


# Scenario D
@pytest.mark.django_db
def test_confirm_without_payment_is_refused(book, court, booking_day, admin_actor):
    booking = book()

    with pytest.raises(PaymentRequired):
        set_booking_status(admin_actor, booking.id, "confirmed")

    stored = Booking.objects.get(pk=booking.id)
    assert (stored.status, stored.payment_status) == ("pending", "pending")
    assert _slot_status(court, booking_day) == "pending"


@pytest.mark.django_db
def test_customer_may_cancel_own_pending_booking(book, court, booking_day, customer_actor):
    booking = book()

    cancelled = set_booking_status(customer_actor, booking.id, "cancelled", "Change of plans")

    assert cancelled.status.value == "cancelled"
    assert _slot_status(court, booking_day) == "available"
    assert not Refund.objects.exists()
    assert Booking.objects.get(pk=booking.id).cancelled_by == "customer"


@pytest.mark.django_db
def test_customer_cannot_confirm_or_touch_others(book, customer_actor, other_actor, admin_actor):
    booking = book()
    set_payment_status(admin_actor, booking.id, "paid")

    with pytest.raises(PermissionDenied):
        set_booking_status(customer_actor, booking.id, "confirmed")
    with pytest.raises(PermissionDenied):
        set_booking_status(other_actor, booking.id, "cancelled")
    with pytest.raises(PermissionDenied):
        set_payment_status(customer_actor, booking.id, "failed")


@pytest.mark.django_db
@pytest.mark.parametrize(
    "path,target",
    [
        (["cancelled"], "confirmed"),
        (["cancelled"], "pending"),
        ([], "finished"),
        (["paid-confirm", "finished"], "cancelled"),
    ],
)
def test_illegal_status_transitions(book, admin_actor, path, target):
    booking = book()
    for step in path:
        if step == "paid-confirm":
            set_payment_status(admin_actor, booking.id, "paid")
            set_booking_status(admin_actor, booking.id, "confirmed")
        else:
            set_booking_status(admin_actor, booking.id, step)

    with pytest.raises(InvalidTransition):
        set_booking_status(admin_actor, booking.id, target)


@pytest.mark.django_db
def test_failed_payment_keeps_the_hold(book, court, booking_day, admin_actor):
    booking = book()

    set_payment_status(admin_actor, booking.id, "failed")

    assert _slot_status(court, booking_day) == "pending"
    with pytest.raises(InvalidTransition):
        set_payment_status(admin_actor, booking.id, "paid")


@pytest.mark.django_db
def test_cancelling_payment_of_confirmed_booking_is_invalid(book, admin_actor):
    booking = _confirmed(book, admin_actor)

    with pytest.raises(InvalidTransition):
        set_payment_status(admin_actor, booking.id, "cancelled")


@pytest.mark.django_db
def test_paid_pending_booking_keeps_payment_until_cancelled(book, admin_actor):
    booking = book()
    set_payment_status(admin_actor, booking.id, "paid")

    with pytest.raises(InvalidTransition):
        set_payment_status(admin_actor, booking.id, "cancelled")

    set_booking_status(admin_actor, booking.id, "cancelled", "Court closed")

    refund = Refund.objects.get(booking_id=booking.id)
    assert (refund.status, refund.amount) == ("pending", 150_000)
    assert Booking.objects.get(pk=booking.id).payment_status == "paid"


@pytest.mark.django_db
def test_finishing_frees_the_slot(book, court, booking_day, admin_actor):
    booking = _confirmed(book, admin_actor)

    set_booking_status(Actor.system(), booking.id, "finished")

    assert _slot_status(court, booking_day) == "available"
    assert not Refund.objects.exists()


@pytest.mark.django_db
def test_freed_slot_can_be_booked_again(book, admin_actor, other_actor, other_customer, court, booking_day):
    first = book()
    set_booking_status(admin_actor, first.id, "cancelled")

    second = book(actor=other_actor, user=other_customer)

    row = Schedule.objects.get(court=court, date=booking_day, start_time=time(10))
    assert (row.status, row.booking_id, row.user_id) == ("pending", second.id, other_customer.pk)


@pytest.mark.django_db
def test_purge_deletes_booking_and_frees_rows(book, court, booking_day, admin_actor, customer_actor):
    booking = book(time(10), time(12))

    with pytest.raises(PermissionDenied):
        purge_booking(customer_actor, booking.id)

    purge_booking(admin_actor, booking.id)

    assert not Booking.objects.filter(pk=booking.id).exists()
    assert set(Schedule.objects.filter(court=court, date=booking_day).values_list("status", flat=True)) == {"available"}


@pytest.mark.django_db
def test_unknown_booking_is_not_found(admin_actor):
    with pytest.raises(NotFound):
        set_booking_status(admin_actor, 12345, "cancelled")


@pytest.mark.django_db
def test_events_are_published_after_commit(book, admin_actor, django_capture_on_commit_callbacks):
    from apps.bookings.domain.events import BookingConfirmed
    from shared.application.message_bus import message_bus

    seen = []
    message_bus.register_event_handler(BookingConfirmed, seen.append)
    try:
        booking = book()
        set_payment_status(admin_actor, booking.id, "paid")
        with django_capture_on_commit_callbacks(execute=False) as callbacks:
            set_booking_status(admin_actor, booking.id, "confirmed")
        assert seen == []

        for callback in callbacks:
            callback()
        assert [event.booking_id for event in seen] == [booking.id]
    finally:
        message_bus._event_handlers[BookingConfirmed].remove(seen.append)
