"""The principal performing an operation.

Lifecycle operations receive the actor explicitly instead of reading the
current request user from ambient state.
"""

from dataclasses import dataclass

from shared.domain.base import ValueObject


@dataclass(frozen=True)
class Actor(ValueObject):
    user_id: int | None
    is_staff: bool = False
    is_system: bool = False

    @classmethod
    def system(cls) -> 'Actor':
        """Actor used by Celery jobs (expiry sweep, finishing bookings)."""
        return cls(user_id=None, is_staff=False, is_system=True)

    @classmethod
    def from_user(cls, user) -> 'Actor':
        return cls(
            user_id=user.pk,
            is_staff=bool(getattr(user, 'is_staff', False) or getattr(user, 'is_superuser', False)),
        )

    @property
    def is_privileged(self) -> bool:
        return self.is_staff or self.is_system

    def owns(self, user_id: int | None) -> bool:
        return self.user_id is not None and self.user_id == user_id

    @property
    def label(self) -> str:
        if self.is_system:
            return 'system'
        if self.is_staff:
            return 'admin'
        return 'customer'

    def __str__(self):
        if self.is_system:
            return 'system'
        return f"{self.label}:{self.user_id}"
