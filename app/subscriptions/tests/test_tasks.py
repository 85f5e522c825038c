"""
Tests for the expiry sweep Celery tasks.

Tasks are called directly (synchronously); no broker is involved.
"""

from unittest.mock import patch

import pytest

from subscriptions.claims import get_claims_store
from subscriptions.exceptions import UnknownLedgerCollectionError
from subscriptions.states import SubscriptionStatus
from subscriptions.tasks import (
    expire_ledger_entries,
    revoke_expired_claims,
    sweep_expired_ledgers,
)
from subscriptions.tests.factories import (
    LedgerEntryFactory,
    ProfileSubscriptionFactory,
    StudentLedgerEntryFactory,
)


@pytest.fixture(autouse=True)
def default_claims_store():
    get_claims_store.cache_clear()
    yield
    get_claims_store.cache_clear()


@pytest.mark.django_db
class TestExpireLedgerEntriesTask:
    """Test the single-collection task."""

    def test_returns_count(self):
        LedgerEntryFactory.create_batch(3, lapsed=True)

        result = expire_ledger_entries("subscriptions")

        assert result == {"collection": "subscriptions", "expired": 3}

    def test_unknown_collection_raises(self):
        with pytest.raises(UnknownLedgerCollectionError):
            expire_ledger_entries("nope")


@pytest.mark.django_db
class TestSweepExpiredLedgersTask:
    """Test the all-collections task."""

    def test_sweeps_every_configured_collection(self):
        main = LedgerEntryFactory(lapsed=True)
        student = StudentLedgerEntryFactory(lapsed=True)

        result = sweep_expired_ledgers()

        assert result == {
            "expired": {"subscriptions": 1, "subscriptions_students": 1},
            "failed": [],
        }
        main.refresh_from_db()
        student.refresh_from_db()
        assert main.status == SubscriptionStatus.EXPIRED
        assert student.status == SubscriptionStatus.EXPIRED

    def test_sweeps_only_configured_collections(self, settings):
        settings.SUBSCRIPTION_SWEEP_COLLECTIONS = ["subscriptions"]
        main = LedgerEntryFactory(lapsed=True)
        student = StudentLedgerEntryFactory(lapsed=True)

        result = sweep_expired_ledgers()

        assert result == {"expired": {"subscriptions": 1}, "failed": []}
        student.refresh_from_db()
        assert student.status == SubscriptionStatus.ACTIVE
        main.refresh_from_db()
        assert main.status == SubscriptionStatus.EXPIRED

    def test_bad_collection_does_not_stop_others(self, settings):
        settings.SUBSCRIPTION_SWEEP_COLLECTIONS = ["missing", "subscriptions_students"]
        StudentLedgerEntryFactory(lapsed=True)

        result = sweep_expired_ledgers()

        assert result == {"expired": {"subscriptions_students": 1}, "failed": ["missing"]}


@pytest.mark.django_db
class TestRevokeExpiredClaimsTask:
    """Test the claim revocation task."""

    def test_returns_counts(self):
        ProfileSubscriptionFactory.create_batch(2, lapsed=True)

        with patch(
            "subscriptions.claims.DatabaseClaimsStore.clear_claims",
            side_effect=[None, RuntimeError("boom")],
        ):
            result = revoke_expired_claims()

        assert result == {"revoked": 1, "failed": 1}
