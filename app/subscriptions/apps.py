"""
Subscriptions app configuration.

This app provides:
- Paystack webhook verification and event dispatch
- Subscription activation across profile, ledger and access claims
- Ledger and claim expiry sweeps (HTTP cron endpoints and Celery tasks)
"""

from django.apps import AppConfig


class SubscriptionsConfig(AppConfig):
    """Configuration for the subscriptions application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "subscriptions"
    verbose_name = "Subscriptions"
