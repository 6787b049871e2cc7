"""
Booking Command Handlers

These are the use cases for the booking domain.
They orchestrate domain operations within transactions.

Commands:
- CreateBookingCommand: Hold slots for a new booking
- SubmitPaymentCommand: Attach payment method and proof
- SetBookingStatusCommand: Confirm, cancel or finish a booking
- SetPaymentStatusCommand: Mark payment paid, failed or cancelled
- PurgeBookingCommand: Delete a booking and free its slots
"""

from dataclasses import dataclass
from datetime import date, datetime, time
import logging

from django.utils import timezone

from apps.finances.services import open_refund
from apps.scheduling import synchronizer
from apps.scheduling.domain.calendar import SlotCalendar
from apps.scheduling.domain.derivation import ScheduleStatus
from apps.scheduling.models import Schedule
from shared.application.message_bus import message_bus
from shared.application.uow import DjangoUnitOfWork
from shared.domain.actors import Actor
from shared.domain.errors import InvalidTransition, SlotConflict, ValidationError
from apps.bookings.domain import policies
from apps.bookings.domain.entities import Booking
from apps.bookings.repositories import DjangoBookingRepository

logger = logging.getLogger(__name__)


# ===== Commands =====

@dataclass
class CreateBookingCommand:
    """
    Command to create a new booking

    This is the primary entry point for holding slots.
    """
    actor: Actor
    user_id: int
    court_id: int
    date: date
    start_time: time
    end_time: time
    now: datetime | None = None


@dataclass
class SubmitPaymentCommand:
    """Command to attach payment details to a pending booking"""
    actor: Actor
    booking_id: int
    method: str
    proof_ref: str = ''


@dataclass
class SetBookingStatusCommand:
    """Command to move a booking to confirmed, cancelled or finished

    ``hold_deadline`` turns the command into an expiry: it only applies
    while the locked booking is still an unpaid hold created before it.
    """
    actor: Actor
    booking_id: int
    new_status: str
    reason: str = ''
    refund_method: str = 'bank_transfer'
    refund_account: str = ''
    refund_e_wallet_type: str = ''
    now: datetime | None = None
    hold_deadline: datetime | None = None


@dataclass
class SetPaymentStatusCommand:
    """Command to move the payment of a booking"""
    actor: Actor
    booking_id: int
    new_status: str


@dataclass
class PurgeBookingCommand:
    """Command to delete a booking outright (admin clean-up)"""
    actor: Actor
    booking_id: int


# ===== Command Handlers =====

class CreateBookingHandler:
    """
    Handler for CreateBooking command

    Double booking prevention:
    1. Start database transaction (atomic)
    2. Lock the court row (SELECT FOR UPDATE) so claims per court serialise
    3. Return an identical active booking of the same user unchanged
    4. Check active bookings for overlap (authoritative, not the projection)
    5. Insert the booking and claim every slot with compare-and-swap
    6. Unique (court, date, start_time) on schedules as the final guard
    7. Publish events after commit
    """

    def __init__(self, booking_repo):
        self.booking_repo = booking_repo

    def handle(self, command: CreateBookingCommand) -> Booking:
        """
        Handle booking creation

        Returns: the new (or retried) Booking aggregate

        Raises:
            ValidationError, NotFound, PermissionDenied, SlotConflict
        """
        policies.ensure_can_create(command.actor, command.user_id)
        now = timezone.localtime(command.now or timezone.now())

        logger.info(
            "Creating booking for court %s, user %s, %s %s-%s",
            command.court_id, command.user_id, command.date,
            command.start_time, command.end_time,
        )

        with DjangoUnitOfWork() as uow:
            court = self.booking_repo.lock_court(command.court_id)
            calendar = SlotCalendar.for_court(court)
            slots = calendar.slots_between(court.pk, command.date, command.start_time, command.end_time)
            if SlotCalendar.is_past(slots[0], now):
                raise ValidationError(f"Slot {slots[0]} is in the past", slot=slots[0])

            existing = self.booking_repo.find_active_duplicate(
                command.user_id, court.pk, command.date, command.start_time, command.end_time,
            )
            if existing is not None:
                logger.info("Returning existing booking %s for a repeated request", existing.id)
                existing.is_replay = True
                return existing

            overlapping = self.booking_repo.find_active_overlapping(
                court.pk, command.date, command.start_time, command.end_time,
            )
            if overlapping:
                self._report_stale_projection(slots, overlapping)
                raise SlotConflict(
                    f"Court {court.name} is already booked on {command.date} "
                    f"between {command.start_time:%H:%M} and {command.end_time:%H:%M}",
                    court_id=court.pk,
                    booking_ids=[booking.id for booking in overlapping],
                )

            booking = Booking(
                user_id=command.user_id,
                court_id=court.pk,
                date=command.date,
                start_time=command.start_time,
                end_time=command.end_time,
                total_price=court.price_for(len(slots)),
                owner_name=self.booking_repo.owner_name(command.user_id),
            )
            self.booking_repo.add(booking)
            booking.record_created()

            synchronizer.claim(booking, calendar=calendar)

            uow.collect_events(booking)

        logger.info("Booking %s created, holding %d slot(s)", booking.id, len(slots))
        return booking

    def _report_stale_projection(self, slots, overlapping):
        """Log when the schedule showed the slots free although bookings hold them."""
        rows = Schedule.objects.filter(
            court_id=slots[0].court_id,
            date=slots[0].date,
            start_time__in=[slot.start_time for slot in slots],
        )
        held = [row for row in rows if ScheduleStatus(row.status).is_held]
        if not held:
            logger.error(
                "Schedule projection shows %s free but bookings %s hold it",
                slots[0], [booking.id for booking in overlapping],
            )


class SubmitPaymentHandler:
    """Handler for attaching payment details"""

    def __init__(self, booking_repo):
        self.booking_repo = booking_repo

    def handle(self, command: SubmitPaymentCommand) -> Booking:
        logger.info("Submitting %s payment for booking %s", command.method, command.booking_id)

        with DjangoUnitOfWork() as uow:
            booking = self.booking_repo.get_by_id(command.booking_id, lock=True)
            policies.ensure_can_submit_payment(command.actor, booking)

            booking.submit_payment(command.method, command.proof_ref)

            uow.collect_events(booking)
            self.booking_repo.save(booking)
            # Event: PaymentSubmitted

        return booking


class SetBookingStatusHandler:
    """
    Handler for booking status changes

    Re-projects the schedule in the same transaction and opens a refund
    when a paid booking is cancelled.
    """

    def __init__(self, booking_repo):
        self.booking_repo = booking_repo

    def handle(self, command: SetBookingStatusCommand) -> Booking:
        logger.info("Setting booking %s to %s by %s", command.booking_id, command.new_status, command.actor)

        with DjangoUnitOfWork() as uow:
            booking = self.booking_repo.get_by_id(command.booking_id, lock=True)
            policies.ensure_can_set_status(command.actor, booking, command.new_status)
            if command.hold_deadline is not None and not booking.hold_lapsed(command.hold_deadline):
                raise InvalidTransition(
                    f"Booking {booking.id} is no longer an unpaid hold past its deadline",
                    booking_id=booking.id,
                    status=booking.status.value,
                    payment_status=booking.payment_status.value,
                )

            booking.change_status(
                command.new_status,
                now=command.now or timezone.now(),
                reason=command.reason,
                cancelled_by=command.actor.label,
            )
            self.booking_repo.save(booking)
            synchronizer.project(booking)

            if booking.refund_due:
                _, refund_event = open_refund(
                    booking,
                    method=command.refund_method,
                    account_number=command.refund_account,
                    e_wallet_type=command.refund_e_wallet_type,
                )
                uow.record(refund_event)

            uow.collect_events(booking)
            # Events: BookingConfirmed / BookingCancelled / BookingFinished

        logger.info("Booking %s is now %s", booking.id, booking.status.value)
        return booking


class SetPaymentStatusHandler:
    """Handler for payment status changes"""

    def __init__(self, booking_repo):
        self.booking_repo = booking_repo

    def handle(self, command: SetPaymentStatusCommand) -> Booking:
        logger.info("Setting payment of booking %s to %s", command.booking_id, command.new_status)

        with DjangoUnitOfWork() as uow:
            booking = self.booking_repo.get_by_id(command.booking_id, lock=True)
            policies.ensure_privileged(command.actor, "change payment status")

            booking.change_payment_status(command.new_status)
            self.booking_repo.save(booking)
            synchronizer.project(booking)

            uow.collect_events(booking)
            # Event: PaymentStatusChanged

        return booking


class PurgeBookingHandler:
    """Handler for deleting a booking and freeing its slots"""

    def __init__(self, booking_repo):
        self.booking_repo = booking_repo

    def handle(self, command: PurgeBookingCommand) -> None:
        logger.info("Purging booking %s by %s", command.booking_id, command.actor)

        with DjangoUnitOfWork() as uow:
            booking = self.booking_repo.get_by_id(command.booking_id, lock=True)
            policies.ensure_privileged(command.actor, "delete bookings")

            synchronizer.release(booking)
            booking.purge()
            uow.collect_events(booking)
            self.booking_repo.delete(booking)
            # Event: BookingPurged

        logger.info("Booking %s purged", command.booking_id)


HANDLERS = {
    CreateBookingCommand: CreateBookingHandler,
    SubmitPaymentCommand: SubmitPaymentHandler,
    SetBookingStatusCommand: SetBookingStatusHandler,
    SetPaymentStatusCommand: SetPaymentStatusHandler,
    PurgeBookingCommand: PurgeBookingHandler,
}


def _dispatch(handler_class):
    # A fresh repository per command keeps loaded rows from leaking between calls.
    def handle(command):
        return handler_class(DjangoBookingRepository()).handle(command)
    handle.__name__ = handler_class.__name__
    return handle


def register_handlers(bus=message_bus):
    for command_type, handler_class in HANDLERS.items():
        bus.register_command_handler(command_type, _dispatch(handler_class), replace=True)
