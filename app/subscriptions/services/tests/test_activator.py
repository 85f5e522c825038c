"""
Tests for SubscriptionActivator.

Tests cover:
- Field values written to profile, ledger and claims
- Plan duration and role resolution
- Retry of transient failures and exhaustion
- Convergence when a failed delivery is redelivered
"""

from datetime import datetime, timezone as dt_timezone
from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest

from core.exceptions import RetryExhaustedError
from core.retry import RetryPolicy
from subscriptions.conf import SubscriptionConfig
from subscriptions.exceptions import UnknownLedgerCollectionError
from subscriptions.models import LedgerEntry, ProfileSubscription, StudentLedgerEntry, UserClaims
from subscriptions.services import SubscriptionActivator
from subscriptions.states import SubscriptionStatus
from subscriptions.tests.factories import ProfileSubscriptionFactory, make_charge_event
from subscriptions.webhooks.events import ChargeSuccess


def make_charge(**kwargs) -> ChargeSuccess:
    return ChargeSuccess.from_event_data(make_charge_event(**kwargs)["data"])


@pytest.fixture
def sleep():
    return MagicMock()


@pytest.fixture
def activator(claims_store, config, sleep):
    return SubscriptionActivator(claims_store, config, sleep=sleep)


@pytest.mark.django_db
class TestActivate:
    """Test a clean activation."""

    def test_writes_profile_subscription(self, activator):
        activator.activate(make_charge())

        subscription = ProfileSubscription.objects.get(profile_id="u1")
        assert subscription.status == SubscriptionStatus.ACTIVE
        assert subscription.plan_id == "plan_monthly_x"
        assert subscription.plan_name == "Pro"
        assert subscription.expires_at == datetime(2024, 1, 31, tzinfo=dt_timezone.utc)
        assert subscription.reference == "ref1"
        assert subscription.channel == "card"
        assert subscription.amount == Decimal("50.00")
        assert subscription.currency == "NGN"

    def test_writes_ledger_entry(self, activator):
        activator.activate(make_charge())

        entry = LedgerEntry.objects.get(reference="ref1")
        assert entry.user_id == "u1"
        assert entry.email == "a@b.com"
        assert entry.status == SubscriptionStatus.ACTIVE
        assert entry.amount == Decimal("50.00")
        assert entry.expires_at == datetime(2024, 1, 31, tzinfo=dt_timezone.utc)

    def test_sets_claims(self, activator, claims_store):
        activator.activate(make_charge(role="student"))

        assert claims_store.get_claims("u1") == {
            "subscription": "active",
            "plan": "plan_monthly_x",
            "role": "student",
        }

    def test_returns_activation(self, activator):
        activation = activator.activate(make_charge(plan_id="school_annual"))

        assert activation.user_id == "u1"
        assert activation.reference == "ref1"
        assert activation.duration_days == 365
        assert activation.expires_at == datetime(2024, 12, 31, tzinfo=dt_timezone.utc)
        assert activation.claims["plan"] == "school_annual"

    def test_configured_default_duration(self, claims_store, sleep):
        config = SubscriptionConfig(
            default_duration_days=7,
            retry_policy=RetryPolicy(base_delay=0),
        )
        activator = SubscriptionActivator(claims_store, config, sleep=sleep)

        activation = activator.activate(make_charge(plan_id="plan_weekly"))

        assert activation.duration_days == 7
        assert activation.expires_at == datetime(2024, 1, 8, tzinfo=dt_timezone.utc)

    def test_configured_ledger_collection(self, claims_store, sleep):
        config = SubscriptionConfig(ledger_collection="subscriptions_students")
        activator = SubscriptionActivator(claims_store, config, sleep=sleep)

        activator.activate(make_charge())

        assert StudentLedgerEntry.objects.filter(reference="ref1").exists()
        assert not LedgerEntry.objects.exists()

    def test_unknown_ledger_collection_fails_at_construction(self, claims_store):
        with pytest.raises(UnknownLedgerCollectionError):
            SubscriptionActivator(claims_store, SubscriptionConfig(ledger_collection="nope"))


@pytest.mark.django_db
class TestIdempotence:
    """Test repeated and overlapping activations."""

    def test_same_charge_twice_converges(self, activator):
        activator.activate(make_charge())
        activator.activate(make_charge())

        assert LedgerEntry.objects.count() == 1
        assert ProfileSubscription.objects.count() == 1
        assert UserClaims.objects.count() == 1

    def test_new_charge_merges_into_existing_profile(self, activator):
        ProfileSubscriptionFactory(
            profile__user_id="u1",
            status=SubscriptionStatus.EXPIRED,
            plan_id=None,
            plan_name=None,
        )

        activator.activate(make_charge(reference="ref_new", plan_id="plan_daily"))

        subscription = ProfileSubscription.objects.get(profile_id="u1")
        assert subscription.status == SubscriptionStatus.ACTIVE
        assert subscription.plan_id == "plan_daily"
        assert subscription.reference == "ref_new"
        assert subscription.expires_at == datetime(2024, 1, 2, tzinfo=dt_timezone.utc)


@pytest.mark.django_db
class TestRetries:
    """Test transient failures in each write."""

    def test_transient_claims_failure_is_retried(self, claims_store, config, sleep):
        flaky_store = MagicMock(wraps=claims_store)
        flaky_store.set_claims.side_effect = [ConnectionError("timeout"), None]
        activator = SubscriptionActivator(flaky_store, config, sleep=sleep)

        activator.activate(make_charge())

        assert flaky_store.set_claims.call_count == 2
        sleep.assert_called_once_with(0)

    def test_transient_ledger_failure_is_retried(self, activator):
        original = LedgerEntry.objects.update_or_create
        calls = {"n": 0}

        def flaky_update_or_create(*args, **kwargs):
            calls["n"] += 1
            if calls["n"] == 1:
                raise ConnectionError("database restarting")
            return original(*args, **kwargs)

        with patch.object(LedgerEntry.objects, "update_or_create", side_effect=flaky_update_or_create):
            activator.activate(make_charge())

        assert calls["n"] == 2
        assert LedgerEntry.objects.filter(reference="ref1").exists()

    def test_backoff_is_linear(self, claims_store, sleep):
        store = MagicMock(wraps=claims_store)
        store.set_claims.side_effect = [ConnectionError("a"), ConnectionError("b"), None]
        config = SubscriptionConfig(retry_policy=RetryPolicy(max_attempts=3, base_delay=1.0))
        activator = SubscriptionActivator(store, config, sleep=sleep)

        activator.activate(make_charge())

        assert [c.args[0] for c in sleep.call_args_list] == [1.0, 2.0]

    def test_exhausted_claims_write_keeps_earlier_writes(self, claims_store, config, sleep):
        failing_store = MagicMock(wraps=claims_store)
        failing_store.set_claims.side_effect = ConnectionError("identity backend down")
        activator = SubscriptionActivator(failing_store, config, sleep=sleep)

        with pytest.raises(RetryExhaustedError) as exc_info:
            activator.activate(make_charge())

        assert failing_store.set_claims.call_count == 3
        assert exc_info.value.details["operation"] == "claims update"
        # Profile and ledger were written before the claims step
        assert ProfileSubscription.objects.filter(profile_id="u1").exists()
        assert LedgerEntry.objects.filter(reference="ref1").exists()
        assert UserClaims.objects.count() == 0

    def test_exhausted_profile_write_stops_before_ledger(self, activator):
        with patch(
            "subscriptions.services.activator.UserProfile.objects.get_or_create",
            side_effect=ConnectionError("database down"),
        ):
            with pytest.raises(RetryExhaustedError):
                activator.activate(make_charge())

        assert LedgerEntry.objects.count() == 0
        assert UserClaims.objects.count() == 0

    def test_redelivery_after_failure_converges(self, claims_store, config, sleep):
        failing_store = MagicMock(wraps=claims_store)
        failing_store.set_claims.side_effect = ConnectionError("identity backend down")
        with pytest.raises(RetryExhaustedError):
            SubscriptionActivator(failing_store, config, sleep=sleep).activate(make_charge())

        SubscriptionActivator(claims_store, config, sleep=sleep).activate(make_charge())

        assert LedgerEntry.objects.count() == 1
        assert ProfileSubscription.objects.count() == 1
        assert claims_store.get_claims("u1")["subscription"] == "active"


class TestFromSettings:
    def test_builds_from_settings(self, settings):
        settings.SUBSCRIPTION_DEFAULT_ROLE = "student"

        activator = SubscriptionActivator.from_settings()

        assert activator.config.default_role == "student"
        assert activator.ledger_model is LedgerEntry
