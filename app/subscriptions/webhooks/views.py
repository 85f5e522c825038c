"""
Webhook endpoint view for Paystack.

The view:
1. Verifies the x-paystack-signature header over the raw body
2. Parses the event envelope
3. Dispatches it to the registered handler
4. Answers 200 only once the handler has finished

Processing happens inside the request: Paystack redelivers on any non-2xx
answer, and that redelivery is what recovers from exhausted retries.

Usage:
    # In urls.py
    from subscriptions.webhooks.views import paystack_webhook

    urlpatterns = [
        path("paystack/webhook", paystack_webhook, name="paystack_webhook"),
    ]
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.http import HttpRequest, HttpResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from subscriptions.exceptions import WebhookSignatureError
from subscriptions.webhooks.events import parse_event
from subscriptions.webhooks.handlers import dispatch_event
from subscriptions.webhooks.signature import PaystackSignatureVerifier

logger = logging.getLogger(__name__)


@csrf_exempt
@require_POST
def paystack_webhook(request: HttpRequest) -> HttpResponse:
    """
    Receive and process a Paystack webhook.

    Security:
    - The signature is checked against request.body before anything reads it
    - A rejected delivery is neither parsed nor acted upon
    - CSRF exemption required for external webhooks

    Returns:
        HttpResponse with status:
        - 200: Event processed, or kind not handled
        - 400: Missing or invalid signature
        - 500: Malformed event or processing failure (Paystack retries)
    """
    payload = request.body
    signature = request.headers.get(settings.PAYSTACK_SIGNATURE_HEADER)

    verifier = PaystackSignatureVerifier(settings.PAYSTACK_SECRET_KEY)
    try:
        verifier.verify_or_raise(payload, signature)
    except WebhookSignatureError:
        return HttpResponse("Invalid signature", status=400, content_type="text/plain")

    try:
        event = parse_event(payload)
        logger.info(
            f"Verified Paystack event: {event.kind}",
            extra={"event": event.kind, "reference": event.data.get("reference")},
        )
        result = dispatch_event(event)
    except Exception as e:
        logger.error(
            f"Error handling webhook: {type(e).__name__}: {e}",
            exc_info=True,
        )
        return HttpResponse("Webhook processing failed", status=500, content_type="text/plain")

    if not result:
        logger.error(
            f"Webhook handler failed: {result.error}",
            extra=result.to_dict(),
        )
        return HttpResponse("Webhook processing failed", status=500, content_type="text/plain")

    return HttpResponse("OK", status=200, content_type="text/plain")
