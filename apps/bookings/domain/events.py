"""
Booking Domain Events

Events that represent things that have happened to a booking.
They are published after the transaction that produced them commits.
"""

from dataclasses import dataclass
from datetime import date, time

from shared.domain.base import DomainEvent


@dataclass(kw_only=True)
class BookingEvent(DomainEvent):
    """Fields every booking event carries so handlers need no extra query."""
    booking_id: int
    user_id: int
    court_id: int
    date: date
    start_time: time
    end_time: time


@dataclass(kw_only=True)
class BookingCreated(BookingEvent):
    """
    Event: A new booking was created and its slots are held

    Triggers:
    - Notify the customer that payment is awaited
    - Schedule the hold expiry check
    """
    total_price: int


@dataclass(kw_only=True)
class PaymentSubmitted(BookingEvent):
    """
    Event: The customer attached payment details

    Triggers:
    - Notify the customer that the payment is under review
    """
    method: str


@dataclass(kw_only=True)
class PaymentStatusChanged(BookingEvent):
    """Event: payment_status moved (pending -> paid/failed, paid -> cancelled)"""
    old_status: str
    new_status: str


@dataclass(kw_only=True)
class BookingConfirmed(BookingEvent):
    """
    Event: Booking confirmed (pending -> confirmed)

    Triggers:
    - Send booking confirmation to the customer
    """


@dataclass(kw_only=True)
class BookingCancelled(BookingEvent):
    """
    Event: Booking cancelled by the customer, an admin or the expiry sweep

    ``refund_due`` is set when the booking was paid at cancellation time.
    """
    old_status: str
    reason: str = ''
    cancelled_by: str = ''
    refund_due: bool = False


@dataclass(kw_only=True)
class BookingFinished(BookingEvent):
    """Event: Booking played out (confirmed -> finished)"""


@dataclass(kw_only=True)
class BookingPurged(BookingEvent):
    """Event: An admin deleted the booking and freed its slots"""
    status: str
