"""
Base exception classes for application-wide error handling.

This module provides a standardized exception hierarchy that enables:
- Consistent error responses across the application
- Machine-readable error codes for logs and callers
- Detailed error information for debugging

Exception Hierarchy:
    BaseApplicationError (base)
    └── ExternalServiceError - Backend or third-party call failures
        └── RetryExhaustedError - Final failure after every retry attempt

Usage:
    from core.exceptions import ExternalServiceError, RetryExhaustedError

    # Raise with message only
    raise ExternalServiceError("Claims backend unavailable")

    # Raise with error code and details
    raise ExternalServiceError(
        "Claims backend rejected the write",
        error_code="CLAIMS_REJECTED",
        details={"user_id": user_id},
    )

    # Convert to dict for a log line or response body
    try:
        ...
    except BaseApplicationError as e:
        logger.error(e.message, extra=e.to_dict())
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code
        details: Additional error context (field errors, metadata, etc.)
    """

    default_error_code: str = "APPLICATION_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to a dictionary.

        Returns:
            Dict with error, error_code, and (when present) details keys

        Example:
            {
                "error": "Operation failed after 3 attempts",
                "error_code": "RETRY_EXHAUSTED",
                "details": {"attempts": 3, "operation": "ledger upsert"}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ExternalServiceError(BaseApplicationError):
    """
    Raised when a call to a backing service fails.

    Use for:
    - Database write failures
    - Identity/claims backend failures
    - Network timeouts

    Note:
        Log the original error for debugging but don't expose
        internal details to callers.
    """

    default_error_code: str = "EXTERNAL_SERVICE_ERROR"


class RetryExhaustedError(ExternalServiceError):
    """
    Raised by core.retry.with_retries after the final attempt fails.

    The last underlying exception is chained as __cause__ and the
    details carry the attempt count and operation description.

    Example:
        try:
            with_retries(write_ledger, policy)
        except RetryExhaustedError as e:
            logger.error(str(e), extra=e.details)
            return HttpResponse(status=500)
    """

    default_error_code: str = "RETRY_EXHAUSTED"
