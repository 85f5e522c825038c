"""
UserClaims model backing the database claims store.

The claims of a user are a flat JSON object, replaced wholesale on every
write. Clearing claims deletes the row, so "no row" and "no claims" are the
same state.
"""

from __future__ import annotations

from django.db import models

from core.models import BaseModel


class UserClaims(BaseModel):
    """Access-control claims for one user identity."""

    user_id = models.CharField(
        max_length=128,
        primary_key=True,
        help_text="User identity the claims are attached to",
    )

    claims = models.JSONField(
        default=dict,
        blank=True,
        help_text='Claim set, e.g. {"subscription": "active", "plan": ..., "role": ...}',
    )

    class Meta:
        db_table = "user_claims"
        ordering = ["-created_at"]
        verbose_name = "User Claims"
        verbose_name_plural = "User Claims"

    def __str__(self) -> str:
        return f"UserClaims({self.user_id})"
