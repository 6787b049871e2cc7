"""
Booking Domain Entities

Core business entities for the booking domain:
- Booking: Main aggregate representing a court reservation
- BookingStatus: FSM states for the booking lifecycle
- PaymentStatus: FSM states for the payment
"""

from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum

from shared.domain.base import Aggregate
from shared.domain.errors import (
    InvalidTransition,
    PaymentRequired,
    ValidationError,
)
from shared.domain.value_objects import Money, TimeRange


class BookingStatus(str, Enum):
    """
    Booking Status Finite State Machine

    State transitions:
    - PENDING -> CONFIRMED (payment marked paid, admin confirms)
    - PENDING -> CANCELLED (customer, admin or hold expiry)
    - CONFIRMED -> FINISHED (slot time has passed)
    - CONFIRMED -> CANCELLED (refund opened when paid)
    """
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    CANCELLED = 'cancelled'
    FINISHED = 'finished'


class PaymentStatus(str, Enum):
    """
    Payment Status Finite State Machine

    State transitions:
    - PENDING -> PAID
    - PENDING -> FAILED
    - PAID -> CANCELLED (refund completed)
    """
    PENDING = 'pending'
    PAID = 'paid'
    CANCELLED = 'cancelled'
    FAILED = 'failed'


class PaymentMethod(str, Enum):
    TRANSFER = 'transfer'
    QRIS = 'qris'
    PAY_AT_VENUE = 'pay_at_venue'

    @property
    def needs_proof(self) -> bool:
        return self is not PaymentMethod.PAY_AT_VENUE


STATUS_TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: {BookingStatus.FINISHED, BookingStatus.CANCELLED},
    BookingStatus.CANCELLED: set(),
    BookingStatus.FINISHED: set(),
}

PAYMENT_TRANSITIONS = {
    PaymentStatus.PENDING: {PaymentStatus.PAID, PaymentStatus.FAILED},
    PaymentStatus.PAID: {PaymentStatus.CANCELLED},
    PaymentStatus.CANCELLED: set(),
    PaymentStatus.FAILED: set(),
}

ACTIVE_STATUSES = frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED})


def parse_choice(enum_type, value, field_name):
    try:
        return enum_type(getattr(value, 'value', value))
    except ValueError:
        raise ValidationError(f"Unknown {field_name} {value!r}", **{field_name: value})


@dataclass(kw_only=True, eq=False)
class Booking(Aggregate):
    """
    Booking Aggregate Root

    Represents a customer's reservation of consecutive one-hour slots on a
    court. The aggregate enforces the lifecycle tables; keeping the schedule
    projection in step is the command handlers' job.

    Key invariants:
    - start_time < end_time, both on the hour
    - status becomes CONFIRMED only while payment_status is PAID
    - a paid booking that gets cancelled is owed a refund
    """

    user_id: int
    court_id: int
    date: date
    start_time: time
    end_time: time
    total_price: Money

    status: BookingStatus = BookingStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_method: PaymentMethod | None = None
    payment_proof: str = ''

    owner_name: str = ''
    cancellation_reason: str = ''
    cancelled_by: str = ''

    confirmed_at: datetime | None = None
    cancelled_at: datetime | None = None
    created_at: datetime | None = None
    # Returned for a repeated identical request; nothing was written.
    is_replay: bool = False

    def __post_init__(self):
        self.status = BookingStatus(self.status)
        self.payment_status = PaymentStatus(self.payment_status)
        if self.payment_method:
            self.payment_method = PaymentMethod(self.payment_method)
        # Raises on an empty or inverted range.
        TimeRange(self.start_time, self.end_time)

    @property
    def time_range(self) -> TimeRange:
        return TimeRange(self.start_time, self.end_time)

    @property
    def hours(self) -> int:
        return self.time_range.hours

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    def hold_lapsed(self, deadline: datetime) -> bool:
        """Still an unpaid pending hold created before ``deadline``."""
        return (
            self.status is BookingStatus.PENDING
            and self.payment_status is not PaymentStatus.PAID
            and self.created_at is not None
            and self.created_at < deadline
        )

    @property
    def refund_due(self) -> bool:
        """Cancelled while paid: the customer is owed the total price back."""
        return self.status is BookingStatus.CANCELLED and self.payment_status is PaymentStatus.PAID

    def same_request(self, user_id: int, court_id: int, day: date, start: time, end: time) -> bool:
        return (self.user_id, self.court_id, self.date, self.start_time, self.end_time) == (
            user_id, court_id, day, start, end,
        )

    def _event_fields(self) -> dict:
        return dict(
            aggregate_id=self.id,
            booking_id=self.id,
            user_id=self.user_id,
            court_id=self.court_id,
            date=self.date,
            start_time=self.start_time,
            end_time=self.end_time,
        )

    def record_created(self):
        from apps.bookings.domain.events import BookingCreated

        self.add_event(BookingCreated(total_price=self.total_price.amount, **self._event_fields()))

    def submit_payment(self, method, proof_ref: str = ''):
        """
        Attach payment details to a pending booking

        Both statuses stay as they are; an admin reviews the proof.
        Events: PaymentSubmitted
        """
        if self.status is not BookingStatus.PENDING or self.payment_status is not PaymentStatus.PENDING:
            raise InvalidTransition(
                f"Cannot submit payment for booking {self.id} in state "
                f"{self.status.value}/{self.payment_status.value}",
                booking_id=self.id,
            )

        method = parse_choice(PaymentMethod, method, 'method')
        proof_ref = (proof_ref or '').strip()
        if method.needs_proof and not proof_ref:
            raise ValidationError(f"Payment proof is required for {method.value}", method=method.value)

        from apps.bookings.domain.events import PaymentSubmitted

        self.payment_method = method
        self.payment_proof = proof_ref
        self.add_event(PaymentSubmitted(method=method.value, **self._event_fields()))

    def change_status(self, new_status, *, now: datetime, reason: str = '', cancelled_by: str = '') -> BookingStatus:
        """
        Move the booking through its lifecycle

        Returns the previous status.
        Events: BookingConfirmed, BookingCancelled or BookingFinished
        """
        new_status = parse_choice(BookingStatus, new_status, 'status')
        old_status = self.status
        if new_status not in STATUS_TRANSITIONS[old_status]:
            raise InvalidTransition(
                f"Cannot move booking {self.id} from {old_status.value} to {new_status.value}",
                booking_id=self.id,
                status=old_status.value,
                requested=new_status.value,
            )
        if new_status is BookingStatus.CONFIRMED and self.payment_status is not PaymentStatus.PAID:
            raise PaymentRequired(
                f"Booking {self.id} cannot be confirmed while payment is {self.payment_status.value}",
                booking_id=self.id,
                payment_status=self.payment_status.value,
            )

        from apps.bookings.domain import events

        self.status = new_status
        if new_status is BookingStatus.CONFIRMED:
            self.confirmed_at = now
            self.add_event(events.BookingConfirmed(**self._event_fields()))
        elif new_status is BookingStatus.CANCELLED:
            self.cancelled_at = now
            self.cancellation_reason = reason
            self.cancelled_by = cancelled_by
            self.add_event(events.BookingCancelled(
                old_status=old_status.value,
                reason=reason,
                cancelled_by=cancelled_by,
                refund_due=self.refund_due,
                **self._event_fields(),
            ))
        else:
            self.add_event(events.BookingFinished(**self._event_fields()))
        return old_status

    def change_payment_status(self, new_status) -> PaymentStatus:
        """
        Move the payment through its table

        A paid payment is only cancelled once the booking itself is cancelled
        (refund completion); cancel the booking first so the refund opens.
        Events: PaymentStatusChanged
        """
        new_status = parse_choice(PaymentStatus, new_status, 'payment_status')
        old_status = self.payment_status
        if new_status not in PAYMENT_TRANSITIONS[old_status]:
            raise InvalidTransition(
                f"Cannot move payment of booking {self.id} from {old_status.value} to {new_status.value}",
                booking_id=self.id,
                payment_status=old_status.value,
                requested=new_status.value,
            )
        if new_status is PaymentStatus.CANCELLED and self.status is not BookingStatus.CANCELLED:
            raise InvalidTransition(
                f"Booking {self.id} is {self.status.value}; cancel the booking before its payment",
                booking_id=self.id,
                status=self.status.value,
            )

        from apps.bookings.domain.events import PaymentStatusChanged

        self.payment_status = new_status
        self.add_event(PaymentStatusChanged(
            old_status=old_status.value,
            new_status=new_status.value,
            **self._event_fields(),
        ))
        return old_status

    def purge(self):
        from apps.bookings.domain.events import BookingPurged

        self.add_event(BookingPurged(status=self.status.value, **self._event_fields()))

    def __str__(self):
        return f"Booking {self.id} ({self.status.value}/{self.payment_status.value})"

    def __repr__(self):
        return (
            f"Booking(id={self.id}, court_id={self.court_id}, date={self.date}, "
            f"time={self.time_range}, status={self.status.value})"
        )
