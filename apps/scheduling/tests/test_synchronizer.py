from datetime import time

import pytest

from apps.bookings.models import Booking
from apps.bookings.services import set_booking_status, set_payment_status
from apps.scheduling import synchronizer
from apps.scheduling.models import Schedule
from shared.domain.actors import Actor
from shared.domain.errors import (
    InvalidTransition,
    PermissionDenied,
    ProjectionInconsistency,
    SlotConflict,
    ValidationError,
)


def _row(court, day, hour):
    return Schedule.objects.get(court=court, date=day, start_time=time(hour))


@pytest.mark.django_db
def test_claim_writes_pending_rows_with_owner(book, court, booking_day, customer):
    booking = book(time(10), time(12))

    rows = Schedule.objects.filter(court=court, date=booking_day).order_by("start_time")
    assert [(r.start_time, r.status, r.booking_id) for r in rows] == [
        (time(10), "pending", booking.id),
        (time(11), "pending", booking.id),
    ]
    assert rows[0].user_id == customer.pk
    assert rows[0].display_name == "Budi Santoso"
    assert rows[1].end_time == time(12)


@pytest.mark.django_db
def test_claim_loses_to_concurrent_insert(book, court, booking_day, monkeypatch):
    winner = book()
    loser = Booking.objects.get(pk=winner.id)
    loser.pk = winner.id + 1000

    # The loser's lock saw no row; the unique slot key still stops the insert.
    monkeypatch.setattr(synchronizer, "_locked_rows", lambda *args: {})
    with pytest.raises(SlotConflict):
        synchronizer.claim(loser)

    assert _row(court, booking_day, 10).booking_id == winner.id


@pytest.mark.django_db
def test_project_never_releases_another_bookings_row(book, court, booking_day, admin_actor):
    booking = book()
    Schedule.objects.filter(court=court, date=booking_day).update(booking=None)

    set_booking_status(admin_actor, booking.id, "cancelled")

    assert _row(court, booking_day, 10).status == "pending"


@pytest.mark.django_db
def test_active_projection_over_override_is_inconsistent(book, court, booking_day, admin_actor):
    booking = book()
    Schedule.objects.filter(court=court, date=booking_day).update(status="maintenance", booking=None)
    model = Booking.objects.get(pk=booking.id)

    with pytest.raises(ProjectionInconsistency):
        synchronizer.project(model)


@pytest.mark.django_db
def test_override_is_refused_on_held_slot(book, court, booking_day, admin_actor):
    book()

    with pytest.raises(SlotConflict):
        synchronizer.set_override(admin_actor, court.pk, booking_day, time(10), "maintenance")


@pytest.mark.django_db
def test_override_roundtrip_on_free_slot(court, booking_day, admin_actor):
    row = synchronizer.set_override(admin_actor, court.pk, booking_day, time(14), "holiday", "Idul Fitri")

    assert row.status == "holiday"
    assert row.note == "Idul Fitri"

    cleared = synchronizer.clear_override(admin_actor, court.pk, booking_day, time(14))

    assert cleared.status == "available"
    assert cleared.note == ""


@pytest.mark.django_db
def test_override_needs_staff(court, booking_day, customer_actor):
    with pytest.raises(PermissionDenied):
        synchronizer.set_override(customer_actor, court.pk, booking_day, time(14), "maintenance")


@pytest.mark.django_db
def test_override_status_must_be_maintenance_or_holiday(court, booking_day):
    with pytest.raises(ValidationError):
        synchronizer.set_override(Actor.system(), court.pk, booking_day, time(14), "booked")


@pytest.mark.django_db
def test_clear_override_refuses_booking_rows(book, court, booking_day, admin_actor):
    book()

    with pytest.raises(InvalidTransition):
        synchronizer.clear_override(admin_actor, court.pk, booking_day, time(10))


@pytest.mark.django_db
def test_release_frees_owned_rows(book, court, booking_day):
    booking = book(time(10), time(12))

    released = synchronizer.release(Booking.objects.get(pk=booking.id))

    assert released == 2
    assert set(Schedule.objects.filter(court=court).values_list("status", flat=True)) == {"available"}
    assert not Schedule.objects.filter(booking_id=booking.id).exists()


@pytest.mark.django_db
def test_verify_and_audit_report_drift(book, court, booking_day, admin_actor):
    booking = book()
    set_payment_status(admin_actor, booking.id, "paid")
    set_booking_status(admin_actor, booking.id, "confirmed")
    model = Booking.objects.get(pk=booking.id)

    synchronizer.verify(model)
    assert synchronizer.audit_day(court.pk, booking_day) == []

    Schedule.objects.filter(booking_id=booking.id).update(status="pending")

    with pytest.raises(ProjectionInconsistency):
        synchronizer.verify(model)
    mismatches = synchronizer.audit_day(court.pk, booking_day)
    assert [(m.start_time, m.expected, m.actual) for m in mismatches] == [(time(10), "booked", "pending")]


@pytest.mark.django_db
def test_audit_flags_orphaned_hold(court, booking_day):
    Schedule.objects.create(court=court, date=booking_day, start_time=time(15), end_time=time(16), status="booked")

    mismatches = synchronizer.audit_day(court.pk, booking_day)

    assert len(mismatches) == 1
    assert mismatches[0].expected == "available"
    assert mismatches[0].row_booking_id is None
