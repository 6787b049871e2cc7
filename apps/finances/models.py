"""Refund models."""

from __future__ import annotations

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Refund(models.Model):
    """Money owed back for a booking cancelled after it was paid."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        COMPLETED = "completed", _("Completed")
        REJECTED = "rejected", _("Rejected")

    class Method(models.TextChoices):
        BANK_TRANSFER = "bank_transfer", _("Bank transfer")
        E_WALLET = "e_wallet", _("E-wallet")

    class EWallet(models.TextChoices):
        GOPAY = "gopay", _("GoPay")
        OVO = "ovo", _("OVO")
        DANA = "dana", _("DANA")
        SHOPEEPAY = "shopeepay", _("ShopeePay")

    booking = models.OneToOneField(
        "bookings.Booking",
        on_delete=models.CASCADE,
        related_name="refund",
    )
    amount = models.PositiveIntegerField()
    method = models.CharField(
        max_length=20,
        choices=Method.choices,
        default=Method.BANK_TRANSFER,
    )
    e_wallet_type = models.CharField(
        max_length=20,
        choices=EWallet.choices,
        blank=True,
    )
    account_number = models.CharField(max_length=64, blank=True)
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
    )
    note = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    processed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "refunds"
        verbose_name = _("Refund")
        verbose_name_plural = _("Refunds")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="refunds_status_2f8b7c_idx"),
        ]

    def __str__(self) -> str:
        return f"Refund {self.pk} for booking {self.booking_id} ({self.status})"
