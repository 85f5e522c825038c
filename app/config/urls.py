"""
URL configuration for the Django application.

The `urlpatterns` list routes URLs to views. This is the root URL configuration
that includes all app-specific routes.

URL Structure:
    /                                      - Liveness text
    /admin/                                - Django admin interface
    /health/                               - Health check endpoint (load balancers, Docker)
    /paystack/webhook                      - Paystack webhook endpoint (POST)
    /cron/cleanup-expired-student-plans    - Expire the student ledger (GET)
    /cron/revoke-expired-claims            - Revoke claims of expired users (GET)

Paystack and the scheduler call these paths verbatim, so they carry no
version prefix and no trailing slash.

For more information, see:
https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""

from django.contrib import admin
from django.urls import include, path

from core.views import health_check, liveness

urlpatterns = [
    path("", liveness, name="liveness"),
    # Admin
    path("admin/", admin.site.urls),
    # Health check (Docker, Kubernetes, load balancers)
    path("health/", health_check, name="health_check"),
    # Webhook and cron endpoints
    path("", include("subscriptions.urls")),
]

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "Subscriptions Admin"
admin.site.site_title = "Admin Portal"
admin.site.index_title = "Subscription records"
