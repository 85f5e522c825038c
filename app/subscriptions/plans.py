"""
Plan duration policy.

A plan identifier encodes its billing period by substring convention
(e.g. "plan_monthly_pro", "school_annual"). The rules are checked in
order and the first match wins, so an identifier containing both "daily"
and "annual" resolves to one day.

    "daily"   → 1 day
    "monthly" → 30 days
    "annual"  → 365 days
    otherwise → the configured default (30 days)

Durations are whole days added to the payment timestamp; there is no
calendar-month arithmetic.
"""

from __future__ import annotations

from datetime import datetime, timedelta

DEFAULT_DURATION_DAYS = 30

PLAN_DURATION_RULES: tuple[tuple[str, int], ...] = (
    ("daily", 1),
    ("monthly", 30),
    ("annual", 365),
)


def resolve_duration_days(plan_id: str, default: int = DEFAULT_DURATION_DAYS) -> int:
    """Return the subscription length in days for a plan identifier."""
    for marker, days in PLAN_DURATION_RULES:
        if marker in plan_id:
            return days
    return default


def compute_expiry(
    paid_at: datetime,
    plan_id: str,
    default: int = DEFAULT_DURATION_DAYS,
) -> datetime:
    """Return paid_at shifted by the plan's duration."""
    return paid_at + timedelta(days=resolve_duration_days(plan_id, default))
