"""Notification model.

Defines the in-app notification delivered to a customer about one of
their bookings. Rows are append-only apart from ``is_read``.
"""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore


class Notification(models.Model):
    """A message sent to a user about some event."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='notifications'
    )
    booking = models.ForeignKey(
        'bookings.Booking', on_delete=models.SET_NULL, null=True, blank=True, related_name='notifications'
    )
    kind = models.CharField(max_length=40)
    title = models.CharField(max_length=255)
    message = models.TextField()
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'notifications'
        ordering = ['-created_at']
        indexes = [models.Index(fields=['user', 'is_read'], name='notificatio_user_id_9c3e51_idx')]

    def __str__(self) -> str:
        return f"Notification to {self.user_id}: {self.title}"
