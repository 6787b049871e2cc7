"""Model signal receivers feeding the row-change stream."""

from django.db.models.signals import post_delete, post_save  # type: ignore
from django.dispatch import receiver  # type: ignore

from apps.bookings.models import Booking

from .feed import record_delete, record_save
from .models import Schedule


@receiver(post_save, sender=Schedule)
@receiver(post_save, sender=Booking)
def publish_row_saved(sender, instance, created, **kwargs):
    record_save(instance, created)


@receiver(post_delete, sender=Schedule)
@receiver(post_delete, sender=Booking)
def publish_row_deleted(sender, instance, **kwargs):
    record_delete(instance)
