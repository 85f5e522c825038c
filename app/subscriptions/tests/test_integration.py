"""
End-to-end tests: signed webhook delivery through to the expiry sweeps.

These walk the reference journey for user u1:
1. A signed charge.success for a monthly plan activates the subscription
2. Replaying the same delivery changes nothing
3. Once the expiry passes, the sweeps expire the ledger and revoke claims
"""

import json
from datetime import datetime, timezone as dt_timezone
from decimal import Decimal

import pytest
from freezegun import freeze_time

from subscriptions.claims import get_claims_store
from subscriptions.models import LedgerEntry, ProfileSubscription, UserClaims
from subscriptions.states import SubscriptionStatus
from subscriptions.tests.factories import sign

WEBHOOK_URL = "/paystack/webhook"


@pytest.fixture(autouse=True)
def default_claims_store():
    get_claims_store.cache_clear()
    yield
    get_claims_store.cache_clear()


def deliver(client, body: bytes, signature: str):
    return client.post(
        WEBHOOK_URL,
        data=body,
        content_type="application/json",
        HTTP_X_PAYSTACK_SIGNATURE=signature,
    )


@pytest.mark.django_db
class TestSubscriptionJourney:
    """Activation, replay, and expiry for one user."""

    def test_monthly_plan_activation(self, client, webhook_secret, charge_body):
        response = deliver(client, charge_body, sign(charge_body))

        assert response.status_code == 200
        assert response.content == b"OK"

        subscription = ProfileSubscription.objects.get(profile_id="u1")
        assert subscription.status == SubscriptionStatus.ACTIVE
        assert subscription.plan_id == "plan_monthly_x"
        assert subscription.plan_name == "Pro"
        assert subscription.paid_at == datetime(2024, 1, 1, tzinfo=dt_timezone.utc)
        assert subscription.expires_at == datetime(2024, 1, 31, tzinfo=dt_timezone.utc)
        assert subscription.amount == Decimal("50")
        assert subscription.reference == "ref1"

        ledger = LedgerEntry.objects.get(reference="ref1")
        assert ledger.user_id == "u1"
        assert ledger.email == "a@b.com"
        assert ledger.status == SubscriptionStatus.ACTIVE
        assert ledger.expires_at == subscription.expires_at

        assert UserClaims.objects.get(user_id="u1").claims == {
            "subscription": "active",
            "plan": "plan_monthly_x",
            "role": "teacher",
        }

    def test_replay_is_idempotent(self, client, webhook_secret, charge_body):
        signature = sign(charge_body)

        deliver(client, charge_body, signature)
        first = LedgerEntry.objects.values().get(reference="ref1")
        response = deliver(client, charge_body, signature)
        second = LedgerEntry.objects.values().get(reference="ref1")

        assert response.status_code == 200
        assert LedgerEntry.objects.count() == 1
        assert ProfileSubscription.objects.count() == 1
        first.pop("updated_at")
        second.pop("updated_at")
        assert first == second

    def test_invalid_signature_writes_nothing(self, client, webhook_secret, charge_body):
        response = deliver(client, charge_body, sign(charge_body, secret="wrong"))

        assert response.status_code == 400
        assert response.content == b"Invalid signature"
        assert ProfileSubscription.objects.count() == 0
        assert LedgerEntry.objects.count() == 0
        assert UserClaims.objects.count() == 0

    def test_sweeps_after_expiry(self, client, webhook_secret, charge_body):
        deliver(client, charge_body, sign(charge_body))

        with freeze_time("2024-02-01 00:00:00"):
            revoke = client.get("/cron/revoke-expired-claims")

        assert revoke.content == b"Revoked claims for 1 users"
        subscription = ProfileSubscription.objects.get(profile_id="u1")
        assert subscription.status == SubscriptionStatus.EXPIRED
        assert subscription.plan_id is None
        assert subscription.plan_name is None
        assert not UserClaims.objects.filter(user_id="u1").exists()

    def test_sweep_before_expiry_changes_nothing(self, client, webhook_secret, charge_body):
        deliver(client, charge_body, sign(charge_body))

        with freeze_time("2024-01-30 23:59:59"):
            revoke = client.get("/cron/revoke-expired-claims")

        assert revoke.content == b"Revoked claims for 0 users"
        assert UserClaims.objects.filter(user_id="u1").exists()

    def test_renewal_after_expiry_reactivates(self, client, webhook_secret, charge_body):
        deliver(client, charge_body, sign(charge_body))
        with freeze_time("2024-02-01 00:00:00"):
            client.get("/cron/revoke-expired-claims")

        renewal = json.loads(charge_body)
        renewal["data"]["reference"] = "ref2"
        renewal["data"]["paid_at"] = "2024-02-01T09:00:00Z"
        body = json.dumps(renewal).encode("utf-8")
        response = deliver(client, body, sign(body))

        assert response.status_code == 200
        subscription = ProfileSubscription.objects.get(profile_id="u1")
        assert subscription.status == SubscriptionStatus.ACTIVE
        assert subscription.plan_id == "plan_monthly_x"
        assert subscription.reference == "ref2"
        assert LedgerEntry.objects.count() == 2
        assert UserClaims.objects.get(user_id="u1").claims["subscription"] == "active"
