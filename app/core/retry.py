"""
Retry with linear backoff for fallible, idempotent units of work.

This module provides a generic retry executor used around writes to
backing stores that fail independently (database, identity/claims store).

The executor knows nothing about the operation it runs. Callers are
responsible for only wrapping operations that are safe to repeat
(upserts keyed by a stable identifier, full-state overwrites).

Backoff:
    The delay before attempt N+1 is base_delay * N, so with the default
    policy (3 attempts, 1 second) a failing operation waits 1s then 2s
    before the final failure is raised.

Usage:
    from core.retry import RetryPolicy, with_retries

    policy = RetryPolicy(max_attempts=3, base_delay=1.0)

    with_retries(
        lambda: LedgerEntry.objects.update_or_create(reference=ref, defaults=fields),
        policy,
        description="ledger upsert",
    )

    # Tests pass a no-op sleep to skip the backoff
    with_retries(operation, policy, sleep=lambda seconds: None)
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeVar

from core.exceptions import RetryExhaustedError

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Attempt count and backoff for with_retries."""

    max_attempts: int = 3
    """Total attempts including the first one."""

    base_delay: float = 1.0
    """Seconds multiplied by the failed attempt number to get the wait."""

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0:
            raise ValueError("base_delay cannot be negative")

    def delay_for(self, attempt: int) -> float:
        """Return the wait after the given (1-based) failed attempt."""
        return self.base_delay * attempt


def with_retries(
    operation: Callable[[], T],
    policy: RetryPolicy | None = None,
    *,
    sleep: Callable[[float], None] = time.sleep,
    description: str = "operation",
) -> T:
    """
    Run an operation, retrying on failure with linear backoff.

    Every failed attempt is logged with its attempt number and reason.
    The final failure is not swallowed: it is raised as
    RetryExhaustedError chained from the last exception.

    Args:
        operation: Zero-argument callable; its return value is returned
        policy: Attempt count and backoff (defaults to RetryPolicy())
        sleep: Function used to wait between attempts
        description: Short label used in logs and error details

    Returns:
        Whatever the first successful call of operation returns

    Raises:
        RetryExhaustedError: Every attempt raised
    """
    policy = policy or RetryPolicy()

    attempt = 1
    while True:
        try:
            return operation()
        except Exception as exc:
            logger.warning(
                f"Attempt {attempt}/{policy.max_attempts} of {description} failed: {exc}",
                extra={
                    "operation": description,
                    "attempt": attempt,
                    "max_attempts": policy.max_attempts,
                    "error": str(exc),
                    "error_type": type(exc).__name__,
                },
            )
            if attempt >= policy.max_attempts:
                raise RetryExhaustedError(
                    f"{description} failed after {attempt} attempts: {exc}",
                    details={
                        "operation": description,
                        "attempts": attempt,
                        "last_error": str(exc),
                    },
                ) from exc
            sleep(policy.delay_for(attempt))
            attempt += 1


__all__ = [
    "RetryPolicy",
    "with_retries",
]
