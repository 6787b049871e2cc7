"""
Refund workflows.

``open_refund`` runs inside the cancellation transaction of a paid
booking. Completing a refund also moves the booking's payment from paid
to cancelled, in the same transaction.
"""

from __future__ import annotations

import logging

from django.utils import timezone  # type: ignore

from apps.scheduling import synchronizer
from shared.application.uow import DjangoUnitOfWork
from shared.domain.actors import Actor
from shared.domain.errors import InvalidTransition, NotFound, ValidationError
from shared.infrastructure.locking import lock_queryset_if_possible

from .events import RefundCompleted, RefundRejected, RefundRequested
from .models import Refund

logger = logging.getLogger(__name__)


def _event_fields(refund: Refund, user_id: int) -> dict:
    return dict(
        aggregate_id=refund.pk,
        refund_id=refund.pk,
        booking_id=refund.booking_id,
        user_id=user_id,
        amount=refund.amount,
        method=refund.method,
    )


def open_refund(
    booking,
    *,
    method: str = Refund.Method.BANK_TRANSFER,
    account_number: str = "",
    e_wallet_type: str = "",
) -> tuple[Refund, RefundRequested]:
    """Create the pending refund for a booking cancelled while paid."""
    if method not in Refund.Method.values:
        raise ValidationError(f"Unknown refund method {method!r}", method=method)
    if method == Refund.Method.E_WALLET and e_wallet_type not in Refund.EWallet.values:
        raise ValidationError("An e-wallet refund needs a known e-wallet type", e_wallet_type=e_wallet_type)
    if method != Refund.Method.E_WALLET:
        e_wallet_type = ""
    if Refund.objects.filter(booking_id=booking.id).exists():
        raise InvalidTransition(f"Booking {booking.id} already has a refund", booking_id=booking.id)

    refund = Refund.objects.create(
        booking_id=booking.id,
        amount=booking.total_price.amount,
        method=method,
        e_wallet_type=e_wallet_type,
        account_number=account_number,
    )
    logger.info("Opened refund %s of %s for booking %s", refund.pk, booking.total_price, booking.id)
    return refund, RefundRequested(**_event_fields(refund, booking.user_id))


def _locked_pending_refund(refund_id: int) -> Refund:
    refund = lock_queryset_if_possible(Refund.objects.filter(pk=refund_id)).first()
    if refund is None:
        raise NotFound(f"Refund {refund_id} not found", refund_id=refund_id)
    if refund.status != Refund.Status.PENDING:
        raise InvalidTransition(
            f"Refund {refund_id} is already {refund.status}",
            refund_id=refund_id,
            status=refund.status,
        )
    return refund


def complete_refund(actor: Actor, refund_id: int) -> Refund:
    from apps.bookings.domain.policies import ensure_privileged
    from apps.bookings.repositories import DjangoBookingRepository

    ensure_privileged(actor, "complete refunds")
    booking_repo = DjangoBookingRepository()

    with DjangoUnitOfWork() as uow:
        refund = _locked_pending_refund(refund_id)
        booking = booking_repo.get_by_id(refund.booking_id, lock=True)

        booking.change_payment_status("cancelled")
        booking_repo.save(booking)
        synchronizer.project(booking)

        refund.status = Refund.Status.COMPLETED
        refund.processed_at = timezone.now()
        refund.save(update_fields=["status", "processed_at"])

        uow.collect_events(booking)
        uow.record(RefundCompleted(**_event_fields(refund, booking.user_id)))

    logger.info("%s completed refund %s for booking %s", actor, refund.pk, refund.booking_id)
    return refund


def reject_refund(actor: Actor, refund_id: int, note: str = "") -> Refund:
    from apps.bookings.domain.policies import ensure_privileged

    ensure_privileged(actor, "reject refunds")

    with DjangoUnitOfWork() as uow:
        refund = _locked_pending_refund(refund_id)
        refund.status = Refund.Status.REJECTED
        refund.note = note
        refund.processed_at = timezone.now()
        refund.save(update_fields=["status", "note", "processed_at"])
        uow.record(RefundRejected(note=note, **_event_fields(refund, refund.booking.user_id)))

    logger.info("%s rejected refund %s for booking %s", actor, refund.pk, refund.booking_id)
    return refund
