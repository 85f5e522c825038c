"""
Paystack webhook event parsing.

A verified webhook body is a JSON envelope:

    {"event": "charge.success", "data": {...}}

parse_event() turns the raw bytes into a PaystackEvent. Event kinds are not
validated here; dispatch decides which kinds are acted on.

For charge.success, ChargeSuccess.from_event_data() extracts the typed
fields the activator needs:

    data.metadata.userId     required
    data.metadata.planId     required
    data.metadata.planName   optional, ""
    data.metadata.role       optional, configured default role
    data.reference           required
    data.paid_at             required, ISO-8601 (naive values are UTC)
    data.amount              required, integer minor units
    data.channel             optional, ""
    data.currency            optional, ""
    data.customer.email      optional, ""
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone as dt_timezone
from decimal import Decimal
from typing import Any

from django.utils.dateparse import parse_datetime

from subscriptions.exceptions import MalformedPayloadError

CHARGE_SUCCESS = "charge.success"


@dataclass(frozen=True)
class PaystackEvent:
    """A decoded webhook envelope."""

    kind: str
    data: dict[str, Any] = field(default_factory=dict)


def parse_event(payload: bytes) -> PaystackEvent:
    """
    Decode a verified webhook body.

    Raises:
        MalformedPayloadError: Not UTF-8 JSON, not an object, or missing
            the event kind or data object
    """
    try:
        envelope = json.loads(payload.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as e:
        raise MalformedPayloadError(
            f"Webhook body is not valid JSON: {e}",
        ) from e

    if not isinstance(envelope, dict):
        raise MalformedPayloadError("Webhook body must be a JSON object")

    kind = envelope.get("event")
    if not isinstance(kind, str) or not kind:
        raise MalformedPayloadError(
            "Webhook body has no event kind",
            details={"field": "event"},
        )

    data = envelope.get("data")
    if not isinstance(data, dict):
        raise MalformedPayloadError(
            "Event data must be an object",
            details={"field": "data", "event": kind},
        )

    return PaystackEvent(kind=kind, data=data)


def _required_str(source: dict[str, Any], key: str, path: str) -> str:
    value = source.get(key)
    if value is None or value == "":
        raise MalformedPayloadError(
            f"Charge is missing {path}",
            details={"field": path},
        )
    return str(value)


def _optional_str(source: dict[str, Any], key: str, default: str = "") -> str:
    value = source.get(key)
    return default if value is None else str(value)


def _parse_paid_at(value: Any) -> datetime:
    try:
        parsed = parse_datetime(value) if isinstance(value, str) else None
    except ValueError:
        parsed = None
    if parsed is None:
        raise MalformedPayloadError(
            f"Charge paid_at is not an ISO-8601 timestamp: {value!r}",
            details={"field": "paid_at"},
        )
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt_timezone.utc)
    return parsed


def _parse_amount(value: Any) -> Decimal:
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedPayloadError(
            f"Charge amount must be an integer in minor units: {value!r}",
            details={"field": "amount"},
        )
    return Decimal(value) / 100


@dataclass(frozen=True)
class ChargeSuccess:
    """
    Typed charge.success payload.

    Attributes:
        user_id: Profile the charge pays for
        plan_id: Plan identifier (its name encodes the billing period)
        plan_name: Plan display name
        role: Role to grant in claims
        reference: Paystack transaction reference (ledger key)
        paid_at: Payment time, timezone-aware
        amount: Major currency units (minor units / 100)
        channel: Payment channel (card, bank, ...)
        currency: ISO 4217 code
        email: Payer email
    """

    user_id: str
    plan_id: str
    plan_name: str
    role: str
    reference: str
    paid_at: datetime
    amount: Decimal
    channel: str = ""
    currency: str = ""
    email: str = ""

    @classmethod
    def from_event_data(cls, data: dict[str, Any], default_role: str = "teacher") -> ChargeSuccess:
        """
        Build a charge from the data object of a charge.success event.

        Raises:
            MalformedPayloadError: A required field is missing or invalid
        """
        metadata = data.get("metadata")
        if not isinstance(metadata, dict):
            raise MalformedPayloadError(
                "Charge metadata must be an object",
                details={"field": "metadata"},
            )

        customer = data.get("customer")
        if not isinstance(customer, dict):
            customer = {}

        return cls(
            user_id=_required_str(metadata, "userId", "metadata.userId"),
            plan_id=_required_str(metadata, "planId", "metadata.planId"),
            plan_name=_optional_str(metadata, "planName"),
            role=_optional_str(metadata, "role") or default_role,
            reference=_required_str(data, "reference", "reference"),
            paid_at=_parse_paid_at(data.get("paid_at")),
            amount=_parse_amount(data.get("amount")),
            channel=_optional_str(data, "channel"),
            currency=_optional_str(data, "currency"),
            email=_optional_str(customer, "email"),
        )
