"""
URL configuration for the subscriptions app.

Paths have no trailing slash; Paystack and the cron scheduler are
configured with these exact URLs.
"""

from django.urls import path

from subscriptions import views
from subscriptions.webhooks.views import paystack_webhook

app_name = "subscriptions"

urlpatterns = [
    path("paystack/webhook", paystack_webhook, name="paystack_webhook"),
    path(
        "cron/cleanup-expired-student-plans",
        views.cleanup_expired_student_plans,
        name="cleanup_expired_student_plans",
    ),
    path(
        "cron/revoke-expired-claims",
        views.revoke_expired_claims,
        name="revoke_expired_claims",
    ),
]
