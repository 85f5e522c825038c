"""
Subscription activation from successful charges.

Activation performs three writes against backends that fail independently,
always in this order:

1. Profile: merge the charge into the user's ProfileSubscription
2. Ledger: upsert the ledger row keyed by the charge reference
3. Claims: replace the user's claims with {subscription, plan, role}

Each write goes through core.retry on its own. There is no transaction
across the three; every write is an upsert keyed by a stable identifier,
so when a later write exhausts its retries the webhook answers 500 and
Paystack's redelivery converges on the same final state.

Usage:
    from subscriptions.services import SubscriptionActivator

    activator = SubscriptionActivator.from_settings()
    activation = activator.activate(charge)
    activation.expires_at  # charge.paid_at + plan duration
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any

from django.db import transaction

from core.retry import with_retries

from subscriptions.claims import ClaimsStore, get_claims_store
from subscriptions.conf import SubscriptionConfig
from subscriptions.models import ProfileSubscription, UserProfile, get_ledger_model
from subscriptions.plans import compute_expiry, resolve_duration_days
from subscriptions.states import SubscriptionStatus

if TYPE_CHECKING:
    from collections.abc import Callable

    from subscriptions.webhooks.events import ChargeSuccess

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Activation:
    """Outcome of a successful activation."""

    user_id: str
    reference: str
    plan_id: str
    duration_days: int
    expires_at: datetime
    claims: dict[str, Any] = field(default_factory=dict)


class SubscriptionActivator:
    """
    Activates subscriptions for successful charges.

    Dependencies are fixed at construction: the claims store, the
    configuration (durations, role, ledger collection, retry policy) and the
    sleep function used between retry attempts.
    """

    def __init__(
        self,
        claims_store: ClaimsStore,
        config: SubscriptionConfig | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.claims_store = claims_store
        self.config = config or SubscriptionConfig()
        self.sleep = sleep
        self.ledger_model = get_ledger_model(self.config.ledger_collection)

    @classmethod
    def from_settings(cls) -> SubscriptionActivator:
        """Build an activator from Django settings and the process claims store."""
        return cls(get_claims_store(), SubscriptionConfig.from_settings())

    def activate(self, charge: ChargeSuccess) -> Activation:
        """
        Apply a charge to the profile, the ledger and the claims.

        Raises:
            RetryExhaustedError: One of the writes failed on every attempt;
                the writes before it have been applied
        """
        duration_days = resolve_duration_days(
            charge.plan_id, self.config.default_duration_days
        )
        expires_at = compute_expiry(
            charge.paid_at, charge.plan_id, self.config.default_duration_days
        )
        claims = {
            "subscription": SubscriptionStatus.ACTIVE.value,
            "plan": charge.plan_id,
            "role": charge.role or self.config.default_role,
        }

        log_extra = {
            "user_id": charge.user_id,
            "reference": charge.reference,
            "plan_id": charge.plan_id,
        }
        logger.info(
            f"Activating subscription for {charge.user_id} ({charge.plan_id})",
            extra={**log_extra, "expires_at": expires_at.isoformat()},
        )

        self._with_retries(
            lambda: self._upsert_profile(charge, expires_at),
            "profile subscription upsert",
        )
        self._with_retries(
            lambda: self._upsert_ledger(charge, expires_at),
            f"{self.config.ledger_collection} ledger upsert",
        )
        self._with_retries(
            lambda: self.claims_store.set_claims(charge.user_id, claims),
            "claims update",
        )

        logger.info(
            f"Subscription activated for {charge.user_id} ({charge.plan_id})",
            extra=log_extra,
        )

        return Activation(
            user_id=charge.user_id,
            reference=charge.reference,
            plan_id=charge.plan_id,
            duration_days=duration_days,
            expires_at=expires_at,
            claims=claims,
        )

    # ==========================================================================
    # Writes
    # ==========================================================================

    def _with_retries(self, operation: Callable[[], Any], description: str) -> Any:
        return with_retries(
            operation,
            self.config.retry_policy,
            sleep=self.sleep,
            description=description,
        )

    def _upsert_profile(self, charge: ChargeSuccess, expires_at: datetime) -> None:
        with transaction.atomic():
            profile, _ = UserProfile.objects.get_or_create(user_id=charge.user_id)
            ProfileSubscription.objects.update_or_create(
                profile=profile,
                defaults={
                    "status": SubscriptionStatus.ACTIVE,
                    "plan_id": charge.plan_id,
                    "plan_name": charge.plan_name,
                    "paid_at": charge.paid_at,
                    "expires_at": expires_at,
                    "reference": charge.reference,
                    "channel": charge.channel,
                    "amount": charge.amount,
                    "currency": charge.currency,
                },
            )

    def _upsert_ledger(self, charge: ChargeSuccess, expires_at: datetime) -> None:
        self.ledger_model.objects.update_or_create(
            reference=charge.reference,
            defaults={
                "user_id": charge.user_id,
                "email": charge.email,
                "status": SubscriptionStatus.ACTIVE,
                "plan_id": charge.plan_id,
                "plan_name": charge.plan_name,
                "paid_at": charge.paid_at,
                "expires_at": expires_at,
                "channel": charge.channel,
                "amount": charge.amount,
                "currency": charge.currency,
            },
        )
