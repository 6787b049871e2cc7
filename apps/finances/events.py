"""Refund events."""

from dataclasses import dataclass

from shared.domain.base import DomainEvent


@dataclass(kw_only=True)
class RefundEvent(DomainEvent):
    refund_id: int
    booking_id: int
    user_id: int
    amount: int
    method: str


@dataclass(kw_only=True)
class RefundRequested(RefundEvent):
    """A paid booking was cancelled and a pending refund opened."""


@dataclass(kw_only=True)
class RefundCompleted(RefundEvent):
    """Staff paid the money back."""


@dataclass(kw_only=True)
class RefundRejected(RefundEvent):
    """Staff declined the refund."""
    note: str = ''
