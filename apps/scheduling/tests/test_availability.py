from datetime import time

import pytest

from apps.scheduling import availability
from apps.scheduling.availability import AvailabilityStatus
from apps.scheduling.models import Schedule
from apps.bookings.services import set_booking_status
from shared.domain.errors import ValidationError


@pytest.mark.django_db
def test_missing_row_is_available(court, booking_day):
    result = availability.resolve(court.pk, booking_day, time(9))

    assert result.status is AvailabilityStatus.AVAILABLE
    assert result.owner_display_name == ""


@pytest.mark.django_db
@pytest.mark.parametrize(
    "raw,shown",
    [
        ("pending", AvailabilityStatus.HELD),
        ("booked", AvailabilityStatus.BOOKED),
        ("confirmed", AvailabilityStatus.BOOKED),
        ("maintenance", AvailabilityStatus.MAINTENANCE),
        ("holiday", AvailabilityStatus.HOLIDAY),
        ("available", AvailabilityStatus.AVAILABLE),
    ],
)
def test_rows_are_classified_for_display(court, booking_day, raw, shown):
    Schedule.objects.create(
        court=court, date=booking_day, start_time=time(9), end_time=time(10), status=raw, display_name="Rina",
    )

    result = availability.resolve(court.pk, booking_day, time(9))

    assert result.status is shown
    assert result.raw_status == raw


@pytest.mark.django_db
def test_resolve_for_booking_rejects_past_slot(court, booking_day, day_before):
    with pytest.raises(ValidationError):
        availability.resolve(court.pk, booking_day, time(10), for_booking=True)

    result = availability.resolve(court.pk, booking_day, time(10), for_booking=True, now=day_before)
    assert result.is_available


@pytest.mark.django_db
def test_resolve_validates_slot_boundary(court, booking_day):
    with pytest.raises(ValidationError):
        availability.resolve(court.pk, booking_day, time(10, 15))


@pytest.mark.django_db
def test_hold_is_bookable_only_for_its_owner(book, court, booking_day, customer, other_customer):
    book()

    assert availability.is_bookable(court.pk, booking_day, time(10), user_id=customer.pk)
    assert not availability.is_bookable(court.pk, booking_day, time(10), user_id=other_customer.pk)
    assert availability.is_bookable(court.pk, booking_day, time(11), user_id=other_customer.pk)


@pytest.mark.django_db
def test_day_grid_lists_every_slot(book, court, booking_day):
    book()

    grid = availability.day_grid(court, booking_day)

    assert len(grid) == 13
    by_start = {entry["start_time"]: entry for entry in grid}
    assert by_start["10:00"]["status"] == "held"
    assert by_start["10:00"]["owner_display_name"] == "Budi Santoso"
    assert by_start["11:00"]["status"] == "available"


@pytest.mark.django_db
def test_week_grid_has_one_column_per_day(court, booking_day):
    grid = availability.week_grid(court, booking_day, 3)

    assert list(grid) == ["2024-01-10", "2024-01-11", "2024-01-12"]


@pytest.mark.django_db
def test_cached_grid_is_invalidated_after_commit(
    settings, book, court, booking_day, admin_actor, django_assert_num_queries, django_capture_on_commit_callbacks,
):
    settings.SCHEDULE_CACHE_ENABLED = True
    with django_capture_on_commit_callbacks(execute=True):
        booking = book()

    first = availability.day_grid(court, booking_day)
    with django_assert_num_queries(0):
        assert availability.day_grid(court, booking_day) == first

    with django_capture_on_commit_callbacks(execute=True):
        set_booking_status(admin_actor, booking.id, "cancelled")

    refreshed = {entry["start_time"]: entry for entry in availability.day_grid(court, booking_day)}
    assert refreshed["10:00"]["status"] == "available"
