"""
Celery tasks for the expiry sweeps.

Tasks:
- expire_ledger_entries: Expire lapsed rows of one ledger collection
- sweep_expired_ledgers: Run the ledger sweep over every configured collection
- revoke_expired_claims: Revoke claims of users whose subscription has lapsed

Usage:
    # Scheduled via celery-beat (see migration 0002_add_sweep_schedules)
    from subscriptions.tasks import sweep_expired_ledgers

    sweep_expired_ledgers.delay()
    expire_ledger_entries.delay("subscriptions_students")
"""

from __future__ import annotations

import logging

from celery import shared_task

from subscriptions.services import ExpirySweeper

logger = logging.getLogger(__name__)


@shared_task
def expire_ledger_entries(collection: str) -> dict:
    """
    Expire lapsed rows of one ledger collection.

    Returns:
        Dict with the collection and the number of rows expired
    """
    expired = ExpirySweeper.from_settings().expire_ledger_entries(collection)
    return {"collection": collection, "expired": expired}


@shared_task
def sweep_expired_ledgers() -> dict:
    """
    Expire lapsed rows in every configured sweep collection.

    A failing collection is logged and reported; the others still run.

    Returns:
        Dict with expired counts per collection and the failed collections
    """
    logger.info("Starting ledger expiry sweep")

    sweeper = ExpirySweeper.from_settings()
    expired: dict[str, int] = {}
    failed: list[str] = []

    for collection in sweeper.config.sweep_collections:
        try:
            expired[collection] = sweeper.expire_ledger_entries(collection)
        except Exception as e:
            failed.append(collection)
            logger.error(
                f"Ledger sweep failed for {collection}: {e}",
                extra={"collection": collection, "error": str(e)},
                exc_info=True,
            )

    logger.info(
        f"Ledger expiry sweep complete: {sum(expired.values())} expired",
        extra={"expired": expired, "failed": failed},
    )
    return {"expired": expired, "failed": failed}


@shared_task
def revoke_expired_claims() -> dict:
    """
    Revoke claims of users whose subscription has lapsed.

    Returns:
        Dict with revoked and failed user counts
    """
    result = ExpirySweeper.from_settings().revoke_expired_claims()
    return {"revoked": result.revoked, "failed": result.failed}
