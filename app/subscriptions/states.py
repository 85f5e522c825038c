"""
State enums for subscription models.

Subscription lifecycle:
    (none) → active     on a successful charge
    active → expired    by the ledger sweep or the claim revocation sweep
    expired → active    on a later successful charge (upsert overwrites)

Claim values:
    The "subscription" claim mirrors the profile status while active and is
    removed altogether (with the rest of the claim set) on revocation.
"""

from django.db import models


class SubscriptionStatus(models.TextChoices):
    """
    Status shared by profile subscriptions and ledger entries.

    Terminal state within a billing period: EXPIRED.
    """

    ACTIVE = "active", "Active"
    EXPIRED = "expired", "Expired"
