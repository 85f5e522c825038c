"""
Core Application - Infrastructure & Base Classes

Generic, domain-agnostic building blocks used by the subscriptions app.

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Services (import from core.services):
    - ServiceResult: Standard result wrapper for success/failure handling

Exceptions (import from core.exceptions):
    - BaseApplicationError: Base exception with error codes
    - ExternalServiceError: Backend call failures
    - RetryExhaustedError: Final failure after all retry attempts

Retry (import from core.retry):
    - RetryPolicy: Attempt count and linear backoff
    - with_retries: Run a fallible, idempotent operation with retries

Views (import from core.views):
    - liveness: Plain-text root probe
    - health_check: Database health probe
"""
