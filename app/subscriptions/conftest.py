"""
Pytest fixtures shared by the subscription test packages.

Provides the reference charge.success payload, the claims store, and a
configuration object with no retry backoff.
"""

import json
from datetime import datetime, timezone as dt_timezone

import pytest

from core.retry import RetryPolicy
from subscriptions.claims import DatabaseClaimsStore
from subscriptions.conf import SubscriptionConfig
from subscriptions.tests.factories import WEBHOOK_SECRET, make_charge_event


# =============================================================================
# Payload Fixtures
# =============================================================================


@pytest.fixture
def charge_event() -> dict:
    """The reference charge.success event for user u1."""
    return make_charge_event()


@pytest.fixture
def charge_body(charge_event) -> bytes:
    """Raw bytes of charge_event, as they would arrive on the wire."""
    return json.dumps(charge_event).encode("utf-8")


@pytest.fixture
def paid_at() -> datetime:
    return datetime(2024, 1, 1, tzinfo=dt_timezone.utc)


# =============================================================================
# Service Fixtures
# =============================================================================


@pytest.fixture
def claims_store():
    return DatabaseClaimsStore()


@pytest.fixture
def config():
    """Default configuration with no delay between retries."""
    return SubscriptionConfig(retry_policy=RetryPolicy(max_attempts=3, base_delay=0))


@pytest.fixture
def webhook_secret(settings):
    """Pin the Paystack secret the signatures in tests are made with."""
    settings.PAYSTACK_SECRET_KEY = WEBHOOK_SECRET
    return WEBHOOK_SECRET
