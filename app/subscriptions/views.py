"""
Cron endpoints for the expiry sweeps.

Both endpoints are meant to be hit by an external scheduler and answer in
plain text. They are idempotent: a second call right after the first finds
nothing left to expire.
"""

from __future__ import annotations

import logging

from django.http import HttpRequest, HttpResponse
from django.views.decorators.http import require_GET

from subscriptions.services import ExpirySweeper

logger = logging.getLogger(__name__)


@require_GET
def cleanup_expired_student_plans(request: HttpRequest) -> HttpResponse:
    """Expire lapsed rows of the student ledger."""
    try:
        sweeper = ExpirySweeper.from_settings()
        count = sweeper.expire_ledger_entries(sweeper.config.student_ledger_collection)
    except Exception as e:
        logger.error(f"Cleanup error: {e}", exc_info=True)
        return HttpResponse("Cleanup failed", status=500, content_type="text/plain")

    return HttpResponse(
        f"Cleaned up {count} expired student subscriptions.",
        content_type="text/plain",
    )


@require_GET
def revoke_expired_claims(request: HttpRequest) -> HttpResponse:
    """
    Revoke claims of users whose subscription has lapsed.

    Per-user failures do not fail the request; they are reported in the
    summary as "(M failed)".
    """
    try:
        result = ExpirySweeper.from_settings().revoke_expired_claims()
    except Exception as e:
        logger.error(f"Revoke error: {e}", exc_info=True)
        return HttpResponse("Claim revocation failed", status=500, content_type="text/plain")

    message = f"Revoked claims for {result.revoked} users"
    if result.failed:
        message += f" ({result.failed} failed)"
    return HttpResponse(message, content_type="text/plain")
