"""
Subscription-specific exceptions.

Exception Hierarchy:
    SubscriptionError (base for the subscription domain)
    ├── WebhookSignatureError - Signature mismatch (reject, never retried)
    ├── MalformedPayloadError - Verified body that cannot be decoded
    └── UnknownLedgerCollectionError - Collection name with no ledger model

Transient storage and claims failures are not modelled here: any exception
from a backend call is retried by core.retry and surfaces as
core.exceptions.RetryExhaustedError once the attempts run out.

Usage:
    from subscriptions.exceptions import MalformedPayloadError

    if not isinstance(envelope.get("data"), dict):
        raise MalformedPayloadError(
            "Event data must be an object",
            details={"field": "data"},
        )
"""

from __future__ import annotations

from core.exceptions import BaseApplicationError


class SubscriptionError(BaseApplicationError):
    """Base exception for all subscription operations."""

    default_error_code: str = "SUBSCRIPTION_ERROR"


class WebhookSignatureError(SubscriptionError):
    """
    Raised when a webhook body does not carry a valid Paystack signature.

    The request must be rejected with a client error and nothing in the
    body may be parsed or acted upon.
    """

    default_error_code: str = "INVALID_SIGNATURE"


class MalformedPayloadError(SubscriptionError):
    """
    Raised when a verified webhook body cannot be turned into an event.

    Use for:
    - Bodies that are not UTF-8 JSON
    - Envelopes without an event kind or data object
    - Charge data missing required fields or with unparseable values

    This is a server-side failure (HTTP 500); Paystack redelivers.
    """

    default_error_code: str = "MALFORMED_PAYLOAD"


class UnknownLedgerCollectionError(SubscriptionError):
    """Raised when a ledger collection name maps to no ledger model."""

    default_error_code: str = "UNKNOWN_LEDGER_COLLECTION"
