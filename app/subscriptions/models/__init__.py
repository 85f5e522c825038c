"""
Subscription domain models.

This module contains all subscription-related models:
- UserProfile: A user known to the service, keyed by the external user ID
- ProfileSubscription: The single subscription sub-record of a profile
- LedgerEntry: Per-transaction subscription ledger keyed by payment reference
- StudentLedgerEntry: Ledger of the student cohort (same shape)
- UserClaims: Access-control claims held by the database claims store
"""

from subscriptions.models.claims import UserClaims
from subscriptions.models.ledger import (
    LEDGER_MODELS,
    BaseLedgerEntry,
    LedgerEntry,
    StudentLedgerEntry,
    get_ledger_model,
)
from subscriptions.models.profile import ProfileSubscription, UserProfile

__all__ = [
    "LEDGER_MODELS",
    "BaseLedgerEntry",
    "LedgerEntry",
    "ProfileSubscription",
    "StudentLedgerEntry",
    "UserClaims",
    "UserProfile",
    "get_ledger_model",
]
