"""
Result wrapper for service-layer operations.

Services encapsulate business logic separate from views and models.
Views handle HTTP concerns, models handle data, services handle logic.

Pattern Comparison:
    - ServiceResult: Use for expected failures (bad input, business rules)
    - Exceptions: Use for unexpected failures (database errors, exhausted retries)

Usage:
    from core.services import ServiceResult

    def handle_charge(event) -> ServiceResult[Activation]:
        if not event.data:
            return ServiceResult.failure("Empty charge", error_code="EMPTY_CHARGE")
        return ServiceResult.success(activator.activate(charge))

    # In a view
    result = dispatch_event(event)
    if not result:
        return HttpResponse("Processing failed", status=500)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeVar

if TYPE_CHECKING:
    from typing import Any

# Generic type for ServiceResult data
T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    Standard result wrapper for service operations.

    Attributes:
        success: Whether the operation succeeded
        data: Result data if successful (None if failed)
        error: Error message if failed (None if successful)
        error_code: Machine-readable error code
    """

    success: bool
    data: T | None = None
    error: str | None = None
    error_code: str | None = None

    @classmethod
    def success(cls, data: T) -> ServiceResult[T]:
        """Create a successful result carrying data."""
        return cls(success=True, data=data)

    @classmethod
    def failure(cls, error: str, error_code: str | None = None) -> ServiceResult[T]:
        """
        Create a failed result.

        Args:
            error: Human-readable error message
            error_code: Machine-readable error code

        Example:
            return ServiceResult.failure("Unknown plan", "UNKNOWN_PLAN")
        """
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def from_exception(cls, exc: Exception, error_code: str | None = None) -> ServiceResult[T]:
        """
        Create a failed result from an exception.

        The error code defaults to the exception's own error_code when it
        has one, else to the upper-cased class name.
        """
        return cls(
            success=False,
            error=getattr(exc, "message", str(exc)),
            error_code=error_code
            or getattr(exc, "error_code", None)
            or exc.__class__.__name__.upper(),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dict for logs and task results."""
        if self.success:
            return {"success": True, "data": self.data}
        return {
            "success": False,
            "error": self.error,
            "error_code": self.error_code,
        }

    def __bool__(self) -> bool:
        """Allow using result in boolean context."""
        return self.success
