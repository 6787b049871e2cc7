"""
Booking lifecycle operations.

Thin entry points over the command handlers; every function takes the
acting principal explicitly and returns the domain ``Booking``.
"""

from __future__ import annotations

from datetime import date, datetime, time

from shared.application.message_bus import message_bus
from shared.domain.actors import Actor

from .application.command_handlers import (
    CreateBookingCommand,
    PurgeBookingCommand,
    SetBookingStatusCommand,
    SetPaymentStatusCommand,
    SubmitPaymentCommand,
)
from .domain.entities import Booking


def create_booking(
    actor: Actor,
    user_id: int,
    court_id: int,
    day: date,
    start_time: time,
    end_time: time,
    *,
    now: datetime | None = None,
) -> Booking:
    return message_bus.handle_command(CreateBookingCommand(
        actor=actor,
        user_id=user_id,
        court_id=court_id,
        date=day,
        start_time=start_time,
        end_time=end_time,
        now=now,
    ))


def submit_payment(actor: Actor, booking_id: int, method: str, proof_ref: str = "") -> Booking:
    return message_bus.handle_command(SubmitPaymentCommand(
        actor=actor, booking_id=booking_id, method=method, proof_ref=proof_ref,
    ))


def set_booking_status(
    actor: Actor,
    booking_id: int,
    new_status: str,
    reason: str = "",
    *,
    refund_method: str = "bank_transfer",
    refund_account: str = "",
    refund_e_wallet_type: str = "",
    now: datetime | None = None,
    hold_deadline: datetime | None = None,
) -> Booking:
    return message_bus.handle_command(SetBookingStatusCommand(
        actor=actor,
        booking_id=booking_id,
        new_status=new_status,
        reason=reason,
        refund_method=refund_method,
        refund_account=refund_account,
        refund_e_wallet_type=refund_e_wallet_type,
        now=now,
        hold_deadline=hold_deadline,
    ))


def set_payment_status(actor: Actor, booking_id: int, new_status: str) -> Booking:
    return message_bus.handle_command(SetPaymentStatusCommand(
        actor=actor, booking_id=booking_id, new_status=new_status,
    ))


def purge_booking(actor: Actor, booking_id: int) -> None:
    message_bus.handle_command(PurgeBookingCommand(actor=actor, booking_id=booking_id))


def cancel_booking(actor: Actor, booking_id: int, reason: str = "", **refund) -> Booking:
    return set_booking_status(actor, booking_id, "cancelled", reason, **refund)
