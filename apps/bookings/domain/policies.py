"""
Authorisation rules for booking operations.

Customers act on their own bookings; everything that decides money or
availability for others needs staff or the system actor.
"""

from shared.domain.actors import Actor
from shared.domain.errors import PermissionDenied

from .entities import Booking, BookingStatus, parse_choice


def ensure_can_create(actor: Actor, user_id: int):
    if actor.is_privileged or actor.owns(user_id):
        return
    raise PermissionDenied("Customers can only book for themselves", actor=actor, user_id=user_id)


def ensure_can_view(actor: Actor, booking: Booking):
    if actor.is_privileged or actor.owns(booking.user_id):
        return
    raise PermissionDenied(f"Booking {booking.id} belongs to another customer", actor=actor)


def ensure_can_submit_payment(actor: Actor, booking: Booking):
    if actor.owns(booking.user_id) or actor.is_privileged:
        return
    raise PermissionDenied(f"Only the owner can pay for booking {booking.id}", actor=actor)


def ensure_can_set_status(actor: Actor, booking: Booking, new_status):
    if actor.is_privileged:
        return
    new_status = parse_choice(BookingStatus, new_status, 'status')
    if new_status is BookingStatus.CANCELLED and actor.owns(booking.user_id):
        return
    raise PermissionDenied(
        f"{actor.label} cannot set booking {booking.id} to {new_status.value}",
        actor=actor,
    )


def ensure_privileged(actor: Actor, action: str):
    if not actor.is_privileged:
        raise PermissionDenied(f"Only staff can {action}", actor=actor)
