"""
Subscriptions app: Paystack webhook intake and subscription lifecycle.

Verified charge events activate a user's subscription (profile, ledger and
access claims); scheduled sweeps expire subscriptions whose expiry has
passed and revoke the matching claims.
"""
