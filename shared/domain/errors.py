"""Domain error taxonomy.

Every lifecycle operation raises one of these synchronously to its caller.
The API layer maps them onto HTTP responses in
``shared.infrastructure.api``.
"""

from __future__ import annotations


class DomainError(Exception):
    """Base class for errors raised by the booking core."""

    code = "domain_error"

    def __init__(self, message: str = "", **context):
        super().__init__(message or self.__class__.__doc__)
        self.message = message or (self.__class__.__doc__ or "").strip()
        self.context = context

    def to_dict(self) -> dict:
        payload = {"code": self.code, "detail": self.message}
        if self.context:
            payload["context"] = {key: str(value) for key, value in self.context.items()}
        return payload


class ValidationError(DomainError):
    """Malformed slot or time range."""

    code = "validation_error"


class NotFound(DomainError):
    """Referenced court, booking or refund does not exist."""

    code = "not_found"


class PermissionDenied(DomainError):
    """The actor is not allowed to perform this operation."""

    code = "permission_denied"


class SlotConflict(DomainError):
    """The slot is already claimed by another booking or blocked by an override."""

    code = "slot_conflict"


class InvalidTransition(DomainError):
    """Requested status change is not allowed from the current state."""

    code = "invalid_transition"


class PaymentRequired(DomainError):
    """A booking can only be confirmed once its payment is marked paid."""

    code = "payment_required"


class ProjectionInconsistency(DomainError):
    """Schedule rows disagree with the booking that owns them."""

    code = "projection_inconsistency"
