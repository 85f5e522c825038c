"""
Subscription services.

- SubscriptionActivator: Applies a successful charge to profile, ledger and claims
- ExpirySweeper: Expires lapsed ledger rows and revokes lapsed claims
"""

from subscriptions.services.activator import Activation, SubscriptionActivator
from subscriptions.services.sweeper import ExpirySweeper, SweepResult

__all__ = [
    "Activation",
    "ExpirySweeper",
    "SubscriptionActivator",
    "SweepResult",
]
