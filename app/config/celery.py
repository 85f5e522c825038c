"""
Celery configuration for the Django application.

Celery runs the scheduled subscription sweeps outside the request cycle:
- Expiring ledger entries past their expiry timestamp
- Revoking access claims of users whose subscription lapsed

This configuration uses Redis as both the message broker and result backend.
Tasks are auto-discovered from all installed Django apps, and the beat
schedule lives in the database (django-celery-beat).

Usage:
    # Run a worker and the scheduler
    celery -A config worker -l info
    celery -A config beat -l info

    # Trigger a sweep by hand
    from subscriptions.tasks import revoke_expired_claims
    revoke_expired_claims.delay()

For more information, see:
https://docs.celeryq.dev/en/stable/django/first-steps-with-django.html
"""

import os

from celery import Celery

# Set the default Django settings module for the Celery worker
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("config")

# All Celery settings are prefixed with CELERY_ in settings.py
app.config_from_object("django.conf:settings", namespace="CELERY")

# Celery will look for a tasks.py module in each installed app
app.autodiscover_tasks()
