"""
Expiry sweeps for lapsed subscriptions.

Two independent sweeps, both triggered from outside (cron endpoint or
Celery beat):

Ledger sweep:
    Every row of one ledger with status=active and expires_at <= now is
    set to expired in a single atomic bulk update.

Claim revocation sweep:
    Every profile subscription with status=active and expires_at <= now
    has its claims cleared, then is set to expired with its plan removed.
    Users are processed one at a time. A failure for one user is logged
    and counted and the sweep moves on; the user is picked up again by the
    next run because its status is still active.

Both sweeps read their matching keys first and only then write, so rows
that lapse or get reactivated after the read wait for the next run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from django.db import transaction
from django.utils import timezone

from subscriptions.claims import ClaimsStore, get_claims_store
from subscriptions.conf import SubscriptionConfig
from subscriptions.models import ProfileSubscription, get_ledger_model
from subscriptions.states import SubscriptionStatus

logger = logging.getLogger(__name__)

# Keeps "IN (...)" lists under the SQLite bound-parameter limit
UPDATE_BATCH_SIZE = 500


@dataclass(frozen=True)
class SweepResult:
    """Counts from a claim revocation sweep."""

    revoked: int = 0
    failed: int = 0


class ExpirySweeper:
    """
    Runs the ledger and claim expiry sweeps.

    The config names the collections the cron endpoint and the periodic
    task sweep; expire_ledger_entries() itself accepts any ledger name.
    """

    def __init__(
        self,
        claims_store: ClaimsStore,
        config: SubscriptionConfig | None = None,
    ):
        self.claims_store = claims_store
        self.config = config or SubscriptionConfig()

    @classmethod
    def from_settings(cls) -> ExpirySweeper:
        return cls(get_claims_store(), SubscriptionConfig.from_settings())

    def expire_ledger_entries(self, collection: str, now: datetime | None = None) -> int:
        """
        Expire the lapsed rows of one ledger.

        Args:
            collection: Ledger collection name (e.g. "subscriptions_students")
            now: Cut-off time (defaults to the current time)

        Returns:
            Number of rows transitioned to expired

        Raises:
            UnknownLedgerCollectionError: No ledger uses that name
        """
        model = get_ledger_model(collection)
        now = now or timezone.now()

        references = list(
            model.objects.filter(
                status=SubscriptionStatus.ACTIVE,
                expires_at__lte=now,
            ).values_list("pk", flat=True)
        )

        if references:
            # update() bypasses auto_now
            updated_at = timezone.now()
            with transaction.atomic():
                for start in range(0, len(references), UPDATE_BATCH_SIZE):
                    model.objects.filter(
                        pk__in=references[start : start + UPDATE_BATCH_SIZE]
                    ).update(status=SubscriptionStatus.EXPIRED, updated_at=updated_at)

        logger.info(
            f"Expired {len(references)} entries in {collection}",
            extra={"collection": collection, "expired": len(references)},
        )
        return len(references)

    def revoke_expired_claims(self, now: datetime | None = None) -> SweepResult:
        """
        Revoke claims of every user whose subscription has lapsed.

        Args:
            now: Cut-off time (defaults to the current time)

        Returns:
            SweepResult with the revoked and failed user counts
        """
        now = now or timezone.now()

        user_ids = list(
            ProfileSubscription.objects.filter(
                status=SubscriptionStatus.ACTIVE,
                expires_at__lte=now,
            ).values_list("profile_id", flat=True)
        )

        revoked = 0
        failed = 0

        for user_id in user_ids:
            try:
                if self._revoke_user(user_id, now):
                    revoked += 1
            except Exception as e:
                failed += 1
                logger.error(
                    f"Failed to revoke claims for {user_id}: {e}",
                    extra={"user_id": user_id, "error": str(e)},
                    exc_info=True,
                )

        logger.info(
            f"Revoked claims for {revoked} users ({failed} failed)",
            extra={"revoked": revoked, "failed": failed, "matched": len(user_ids)},
        )
        return SweepResult(revoked=revoked, failed=failed)

    def _revoke_user(self, user_id: str, now: datetime) -> bool:
        with transaction.atomic():
            subscription = ProfileSubscription.objects.select_for_update().get(
                profile_id=user_id
            )
            # Reactivated since the snapshot
            if not subscription.is_lapsed(now):
                logger.info(
                    f"Skipping {user_id}: subscription no longer lapsed",
                    extra={"user_id": user_id},
                )
                return False

            self.claims_store.clear_claims(user_id)

            subscription.expire()
            subscription.save(
                update_fields=["status", "plan_id", "plan_name", "updated_at"]
            )

        logger.info(
            f"Claims revoked for {user_id}",
            extra={"user_id": user_id},
        )
        return True
