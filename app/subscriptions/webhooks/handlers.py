"""
Webhook event handlers for Paystack events.

This module provides a handler registry keyed by event kind. Kinds with no
handler are acknowledged without any state change, so new Paystack event
types never fail deliveries.

Usage:
    from subscriptions.webhooks.handlers import dispatch_event, register_handler

    @register_handler("subscription.disable")
    def handle_subscription_disable(event: PaystackEvent) -> ServiceResult:
        ...

    result = dispatch_event(event)
"""

from __future__ import annotations

import logging
from typing import Callable

from core.services import ServiceResult

from subscriptions.exceptions import MalformedPayloadError
from subscriptions.services import SubscriptionActivator
from subscriptions.webhooks.events import CHARGE_SUCCESS, ChargeSuccess, PaystackEvent

logger = logging.getLogger(__name__)


# =============================================================================
# Handler Registry
# =============================================================================


# Maps event kind strings to handler functions
EVENT_HANDLERS: dict[str, Callable[[PaystackEvent], ServiceResult]] = {}


def register_handler(kind: str) -> Callable:
    """
    Decorator to register a webhook event handler.

    Args:
        kind: Paystack event kind (e.g., "charge.success")
    """

    def decorator(func: Callable[[PaystackEvent], ServiceResult]) -> Callable:
        EVENT_HANDLERS[kind] = func
        logger.debug(f"Registered webhook handler for {kind}")
        return func

    return decorator


def dispatch_event(event: PaystackEvent) -> ServiceResult:
    """
    Dispatch an event to its handler.

    Returns:
        ServiceResult from the handler, or success(None) if no handler
        is registered for the kind
    """
    handler = EVENT_HANDLERS.get(event.kind)

    if not handler:
        logger.info(
            f"No handler registered for event kind: {event.kind}",
            extra={"event": event.kind},
        )
        return ServiceResult.success(None)

    logger.info(
        f"Dispatching {event.kind} to handler",
        extra={"event": event.kind, "reference": event.data.get("reference")},
    )

    return handler(event)


# =============================================================================
# Charge Handlers
# =============================================================================


@register_handler(CHARGE_SUCCESS)
def handle_charge_success(event: PaystackEvent) -> ServiceResult:
    """
    Activate the subscription paid for by a successful charge.

    Returns:
        ServiceResult with the Activation, or a failure when the charge
        data is malformed

    Raises:
        RetryExhaustedError: A profile, ledger or claims write kept failing
    """
    activator = SubscriptionActivator.from_settings()

    try:
        charge = ChargeSuccess.from_event_data(
            event.data,
            default_role=activator.config.default_role,
        )
    except MalformedPayloadError as e:
        logger.error(
            f"charge.success: {e.message}",
            extra={"reference": event.data.get("reference"), **e.details},
        )
        return ServiceResult.from_exception(e)

    return ServiceResult.success(activator.activate(charge))
