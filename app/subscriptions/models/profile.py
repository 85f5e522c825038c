"""
User profile and its embedded subscription.

A profile holds at most one subscription. Activation merges into the
existing ProfileSubscription row (update_or_create on the one-to-one key)
rather than adding a new one, so the row always reflects the latest charge.

Usage:
    from subscriptions.models import ProfileSubscription, UserProfile

    profile, _ = UserProfile.objects.get_or_create(user_id="u1")
    ProfileSubscription.objects.update_or_create(
        profile=profile,
        defaults={"status": SubscriptionStatus.ACTIVE, "plan_id": "plan_monthly_x", ...},
    )

    # Claim revocation sweep
    subscription.expire()
    subscription.save()
"""

from __future__ import annotations

from datetime import datetime

from django.db import models
from django.utils import timezone

from django_fsm import FSMField, transition

from core.models import BaseModel

from subscriptions.states import SubscriptionStatus


class UserProfile(BaseModel):
    """
    A user identified by the ID carried in charge metadata.

    Profiles are created lazily on the first successful charge for a user.
    """

    user_id = models.CharField(
        max_length=128,
        primary_key=True,
        help_text="External user identifier (charge metadata userId)",
    )

    class Meta:
        db_table = "users"
        ordering = ["-created_at"]
        verbose_name = "User Profile"
        verbose_name_plural = "User Profiles"

    def __str__(self) -> str:
        return f"UserProfile({self.user_id})"


class ProfileSubscription(BaseModel):
    """
    Subscription state embedded in a user profile.

    Fields:
        profile: Owning profile (also the primary key)
        status: active or expired
        plan_id/plan_name: Plan identifiers, cleared when claims are revoked
        paid_at/expires_at: Payment time and computed expiry (UTC)
        reference: Paystack transaction reference of the latest charge
        channel/amount/currency: Charge details (amount in major units)
    """

    profile = models.OneToOneField(
        UserProfile,
        on_delete=models.CASCADE,
        primary_key=True,
        related_name="subscription",
        help_text="Profile this subscription belongs to",
    )

    # ==========================================================================
    # State
    # ==========================================================================

    status = FSMField(
        default=SubscriptionStatus.ACTIVE,
        choices=SubscriptionStatus.choices,
        protected=False,
        help_text="Subscription status",
    )

    # ==========================================================================
    # Plan
    # ==========================================================================

    plan_id = models.CharField(
        max_length=255,
        null=True,
        blank=True,
        help_text="Plan identifier; encodes the billing period",
    )

    plan_name = models.CharField(
        max_length=255,
        null=True,
        blank=True,
        help_text="Plan display name",
    )

    paid_at = models.DateTimeField(help_text="When the charge was paid")

    expires_at = models.DateTimeField(help_text="When access lapses")

    # ==========================================================================
    # Charge
    # ==========================================================================

    reference = models.CharField(
        max_length=255,
        help_text="Paystack transaction reference",
    )

    channel = models.CharField(max_length=50, blank=True, default="")

    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text="Amount in major currency units (minor units / 100)",
    )

    currency = models.CharField(max_length=3, blank=True, default="")

    class Meta:
        db_table = "user_subscriptions"
        ordering = ["-created_at"]
        verbose_name = "Profile Subscription"
        verbose_name_plural = "Profile Subscriptions"
        indexes = [
            models.Index(
                fields=["status", "expires_at"],
                name="profile_sub_status_exp_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"ProfileSubscription({self.profile_id}, {self.status}, {self.plan_id})"

    def is_lapsed(self, now: datetime | None = None) -> bool:
        """Check whether an active subscription is past its expiry at now."""
        return (
            self.status == SubscriptionStatus.ACTIVE
            and self.expires_at <= (now or timezone.now())
        )

    # ==========================================================================
    # State Transitions (django-fsm)
    # ==========================================================================

    @transition(
        field=status,
        source=SubscriptionStatus.ACTIVE,
        target=SubscriptionStatus.EXPIRED,
    )
    def expire(self):
        """
        Expire the subscription and drop its plan.

        Transition: ACTIVE -> EXPIRED
        """
        self.plan_id = None
        self.plan_name = None
