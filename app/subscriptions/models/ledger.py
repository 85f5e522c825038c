"""
Subscription ledger models.

Every successful charge is recorded as a standalone ledger row keyed by its
Paystack reference, independent of the user profile. Two ledgers share the
same shape: the main subscription ledger and the student cohort ledger.

Ledgers are addressed by collection name so the activator and the sweeps
can be pointed at either one from configuration:

    get_ledger_model("subscriptions")           -> LedgerEntry
    get_ledger_model("subscriptions_students")  -> StudentLedgerEntry
"""

from __future__ import annotations

from django.db import models

from django_fsm import FSMField

from core.models import BaseModel

from subscriptions.exceptions import UnknownLedgerCollectionError
from subscriptions.states import SubscriptionStatus


class BaseLedgerEntry(BaseModel):
    """
    Abstract ledger row: one charge, keyed by its transaction reference.

    Re-delivery of the same charge converges on the same row because the
    reference is the primary key and writes are update_or_create.
    """

    reference = models.CharField(
        max_length=255,
        primary_key=True,
        help_text="Paystack transaction reference",
    )

    user_id = models.CharField(
        max_length=128,
        db_index=True,
        help_text="User the charge activated (UserProfile.user_id)",
    )

    email = models.EmailField(
        blank=True,
        default="",
        help_text="Payer email from the charge customer",
    )

    status = FSMField(
        default=SubscriptionStatus.ACTIVE,
        choices=SubscriptionStatus.choices,
        protected=False,
        help_text="Ledger status",
    )

    plan_id = models.CharField(max_length=255)

    plan_name = models.CharField(max_length=255, blank=True, default="")

    paid_at = models.DateTimeField()

    expires_at = models.DateTimeField()

    channel = models.CharField(max_length=50, blank=True, default="")

    amount = models.DecimalField(max_digits=12, decimal_places=2)

    currency = models.CharField(max_length=3, blank=True, default="")

    class Meta:
        abstract = True
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.__class__.__name__}({self.reference}, {self.status})"


class LedgerEntry(BaseLedgerEntry):
    """Main subscription ledger, written on every activation."""

    class Meta(BaseLedgerEntry.Meta):
        db_table = "subscriptions"
        verbose_name = "Ledger Entry"
        verbose_name_plural = "Ledger Entries"
        indexes = [
            models.Index(
                fields=["status", "expires_at"],
                name="ledger_status_expiry_idx",
            ),
        ]


class StudentLedgerEntry(BaseLedgerEntry):
    """Ledger for the student cohort, expired by its own cron endpoint."""

    class Meta(BaseLedgerEntry.Meta):
        db_table = "subscriptions_students"
        verbose_name = "Student Ledger Entry"
        verbose_name_plural = "Student Ledger Entries"
        indexes = [
            models.Index(
                fields=["status", "expires_at"],
                name="student_ledger_status_exp_idx",
            ),
        ]


LEDGER_MODELS: dict[str, type[BaseLedgerEntry]] = {
    LedgerEntry._meta.db_table: LedgerEntry,
    StudentLedgerEntry._meta.db_table: StudentLedgerEntry,
}


def get_ledger_model(collection: str) -> type[BaseLedgerEntry]:
    """
    Return the ledger model stored under a collection name.

    Raises:
        UnknownLedgerCollectionError: No ledger uses that name
    """
    try:
        return LEDGER_MODELS[collection]
    except KeyError:
        raise UnknownLedgerCollectionError(
            f"Unknown ledger collection: {collection}",
            details={"collection": collection, "known": sorted(LEDGER_MODELS)},
        ) from None
