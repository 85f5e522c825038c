"""
Paystack webhook intake.

Modules:
- signature: HMAC-SHA512 verification of the raw request body
- events: Envelope parsing and the typed charge.success payload
- handlers: Event kind registry and dispatch
- views: The POST /paystack/webhook endpoint
"""
