"""
Subscriptions admin configuration.

Registers profiles, profile subscriptions, both ledgers and user claims
with the Django admin for support lookups.
"""

from django.contrib import admin

from subscriptions.models import (
    LedgerEntry,
    ProfileSubscription,
    StudentLedgerEntry,
    UserClaims,
    UserProfile,
)


class ProfileSubscriptionInline(admin.StackedInline):
    model = ProfileSubscription
    can_delete = False
    readonly_fields = ["created_at", "updated_at"]


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    """Admin configuration for UserProfile."""

    list_display = ["user_id", "subscription_status", "created_at"]
    search_fields = ["user_id"]
    readonly_fields = ["created_at", "updated_at"]
    ordering = ["-created_at"]
    inlines = [ProfileSubscriptionInline]

    @admin.display(description="Subscription")
    def subscription_status(self, obj):
        subscription = getattr(obj, "subscription", None)
        return subscription.status if subscription else "-"


@admin.register(ProfileSubscription)
class ProfileSubscriptionAdmin(admin.ModelAdmin):
    """
    Admin configuration for ProfileSubscription.

    Status is managed by activation and the claim revocation sweep.
    """

    list_display = [
        "profile",
        "status",
        "plan_id",
        "paid_at",
        "expires_at",
        "reference",
    ]
    list_filter = ["status", "currency"]
    search_fields = ["profile__user_id", "reference", "plan_id"]
    readonly_fields = ["created_at", "updated_at"]
    ordering = ["-created_at"]


class BaseLedgerEntryAdmin(admin.ModelAdmin):
    """Shared admin configuration for ledger models."""

    list_display = [
        "reference",
        "user_id",
        "status",
        "plan_id",
        "amount",
        "currency",
        "expires_at",
    ]
    list_filter = ["status", "currency", "channel"]
    search_fields = ["reference", "user_id", "email"]
    readonly_fields = ["created_at", "updated_at"]
    ordering = ["-created_at"]
    date_hierarchy = "paid_at"

    fieldsets = (
        (
            None,
            {
                "fields": ("reference", "user_id", "email", "status"),
            },
        ),
        (
            "Plan",
            {
                "fields": ("plan_id", "plan_name", "paid_at", "expires_at"),
            },
        ),
        (
            "Charge",
            {
                "fields": ("channel", "amount", "currency"),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
                "classes": ("collapse",),
            },
        ),
    )


@admin.register(LedgerEntry)
class LedgerEntryAdmin(BaseLedgerEntryAdmin):
    pass


@admin.register(StudentLedgerEntry)
class StudentLedgerEntryAdmin(BaseLedgerEntryAdmin):
    pass


@admin.register(UserClaims)
class UserClaimsAdmin(admin.ModelAdmin):
    """Admin configuration for UserClaims."""

    list_display = ["user_id", "claims", "updated_at"]
    search_fields = ["user_id"]
    readonly_fields = ["created_at", "updated_at"]
    ordering = ["-updated_at"]
