"""
Paystack webhook signature verification.

Paystack signs every webhook with HMAC-SHA512 of the raw request body,
keyed with the account secret key, and sends the lowercase hex digest in
the x-paystack-signature header.

The digest must be computed over request.body exactly as received. Parsing
and re-serializing the JSON changes whitespace and key order, so the
signature of a re-serialized body never matches.

The header is compared exactly as sent: an uppercase or padded digest is
rejected.

Verification is fail-closed: a missing secret, a missing header or any
error while hashing rejects the delivery.

Usage:
    from subscriptions.webhooks.signature import PaystackSignatureVerifier

    verifier = PaystackSignatureVerifier(settings.PAYSTACK_SECRET_KEY)
    try:
        verifier.verify_or_raise(request.body, request.headers.get("x-paystack-signature"))
    except WebhookSignatureError:
        return HttpResponse("Invalid signature", status=400)
"""

from __future__ import annotations

import hashlib
import hmac
import logging

from subscriptions.exceptions import WebhookSignatureError

logger = logging.getLogger(__name__)


def compute_signature(secret: str, payload: bytes) -> str:
    """Return the hex HMAC-SHA512 of payload keyed with secret."""
    return hmac.new(secret.encode("utf-8"), payload, hashlib.sha512).hexdigest()


class PaystackSignatureVerifier:
    """
    Verifies x-paystack-signature headers against a shared secret.

    The secret is fixed at construction; the verifier holds no other state
    and can be shared between requests.
    """

    def __init__(self, secret: str):
        self.secret = secret

    def verify(self, payload: bytes, signature: str | None) -> bool:
        """
        Check a signature against the raw payload.

        Args:
            payload: Request body bytes, untouched
            signature: Header value (hex digest), or None when absent

        Returns:
            True only when the signature matches
        """
        if not self.secret:
            logger.error("Webhook rejected: Paystack secret key is not configured")
            return False

        if not signature or not isinstance(signature, str):
            logger.warning("Webhook rejected: missing signature header")
            return False

        try:
            expected = compute_signature(self.secret, payload)
            matched = hmac.compare_digest(expected, signature)
        except Exception as e:
            logger.error(
                f"Webhook rejected: signature check raised {type(e).__name__}",
                extra={"error": str(e)},
                exc_info=True,
            )
            return False

        if not matched:
            logger.warning(
                "Webhook rejected: signature mismatch",
                extra={"payload_size": len(payload)},
            )
        return matched

    def verify_or_raise(self, payload: bytes, signature: str | None) -> None:
        """
        Like verify(), but raise instead of returning False.

        Raises:
            WebhookSignatureError: The signature does not match
        """
        if not self.verify(payload, signature):
            raise WebhookSignatureError("Invalid webhook signature")
