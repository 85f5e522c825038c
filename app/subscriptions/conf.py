"""
Explicit configuration for the subscription services.

Business code never reads settings or the environment directly; views and
tasks build a SubscriptionConfig once per call and hand it to the
components they construct.

Usage:
    from subscriptions.conf import SubscriptionConfig

    config = SubscriptionConfig.from_settings()
    activator = SubscriptionActivator(claims_store, config)

    # Tests build one directly
    config = SubscriptionConfig(retry_policy=RetryPolicy(base_delay=0))
"""

from __future__ import annotations

from dataclasses import dataclass, field

from django.conf import settings

from core.retry import RetryPolicy
from subscriptions.plans import DEFAULT_DURATION_DAYS


@dataclass(frozen=True)
class SubscriptionConfig:
    """Settings consumed by the activator and sweeper."""

    default_duration_days: int = DEFAULT_DURATION_DAYS
    default_role: str = "teacher"
    ledger_collection: str = "subscriptions"
    student_ledger_collection: str = "subscriptions_students"
    sweep_collections: tuple[str, ...] = ("subscriptions", "subscriptions_students")
    retry_policy: RetryPolicy = field(default_factory=RetryPolicy)

    @classmethod
    def from_settings(cls) -> SubscriptionConfig:
        """Build the configuration from Django settings."""
        return cls(
            default_duration_days=settings.SUBSCRIPTION_DEFAULT_DURATION_DAYS,
            default_role=settings.SUBSCRIPTION_DEFAULT_ROLE,
            ledger_collection=settings.SUBSCRIPTION_LEDGER_COLLECTION,
            student_ledger_collection=settings.SUBSCRIPTION_STUDENT_LEDGER_COLLECTION,
            sweep_collections=tuple(settings.SUBSCRIPTION_SWEEP_COLLECTIONS),
            retry_policy=RetryPolicy(
                max_attempts=settings.SUBSCRIPTION_WRITE_MAX_ATTEMPTS,
                base_delay=settings.SUBSCRIPTION_WRITE_RETRY_DELAY_SECONDS,
            ),
        )
