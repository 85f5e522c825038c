"""
Access-control claims store.

Claims are a derived projection of the profile subscription status that
downstream services read to authorize a user. They live behind a small
store interface so the identity backend can be swapped from settings.

Available Stores:
    DatabaseClaimsStore: Claims kept in the user_claims table (default)

Usage:
    from subscriptions.claims import get_claims_store

    store = get_claims_store()
    store.set_claims("u1", {"subscription": "active", "plan": "plan_monthly_x", "role": "teacher"})
    store.get_claims("u1")   # {"subscription": "active", ...}
    store.clear_claims("u1")
    store.get_claims("u1")   # {}

Note:
    The store is built once per process from SUBSCRIPTION_CLAIMS_BACKEND and
    cached. Implementations must be stateless between calls.
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Protocol, runtime_checkable

from django.conf import settings
from django.utils.module_loading import import_string

from subscriptions.models import UserClaims

logger = logging.getLogger(__name__)


@runtime_checkable
class ClaimsStore(Protocol):
    """
    Protocol for identity claim backends.

    set_claims replaces the whole claim set of a user; clear_claims removes
    it entirely. Both may raise on backend failure and are safe to repeat.
    """

    def set_claims(self, user_id: str, claims: dict[str, Any]) -> None:
        """Replace the claims of a user."""
        ...

    def clear_claims(self, user_id: str) -> None:
        """Remove every claim of a user."""
        ...

    def get_claims(self, user_id: str) -> dict[str, Any]:
        """Return the claims of a user, or an empty dict."""
        ...


class DatabaseClaimsStore:
    """ClaimsStore backed by the UserClaims model."""

    def set_claims(self, user_id: str, claims: dict[str, Any]) -> None:
        UserClaims.objects.update_or_create(
            user_id=user_id,
            defaults={"claims": dict(claims)},
        )
        logger.debug(
            f"Claims set for user {user_id}",
            extra={"user_id": user_id, "claims": claims},
        )

    def clear_claims(self, user_id: str) -> None:
        deleted, _ = UserClaims.objects.filter(user_id=user_id).delete()
        logger.debug(
            f"Claims cleared for user {user_id}",
            extra={"user_id": user_id, "deleted": deleted},
        )

    def get_claims(self, user_id: str) -> dict[str, Any]:
        row = UserClaims.objects.filter(user_id=user_id).first()
        return dict(row.claims) if row else {}


@functools.lru_cache(maxsize=1)
def get_claims_store() -> ClaimsStore:
    """
    Return the process-wide claims store.

    Built on first use from the SUBSCRIPTION_CLAIMS_BACKEND dotted path.
    Call get_claims_store.cache_clear() after changing the setting.
    """
    backend_path = settings.SUBSCRIPTION_CLAIMS_BACKEND
    store = import_string(backend_path)()
    logger.info(
        f"Claims store initialized: {backend_path}",
        extra={"backend": backend_path},
    )
    return store
