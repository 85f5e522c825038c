"""
Pytest configuration for the Django apps under app/.

This module adjusts settings for fast tests and auto-marks tests by
filename. App-specific fixtures are defined in each app's tests/conftest.py.
"""

import os

import django
import pytest

# Ensure Django settings are configured before any tests run
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")


def pytest_configure():
    """Configure Django settings before tests run."""
    django.setup()

    from django.conf import settings

    # No backoff between retry attempts
    settings.SUBSCRIPTION_WRITE_RETRY_DELAY_SECONDS = 0

    # Deterministic webhook secret for signature tests
    settings.PAYSTACK_SECRET_KEY = "sk_test_webhook_secret"


def pytest_collection_modifyitems(items):
    """
    Auto-mark tests based on filename patterns.

    Mapping:
    - test_integration.py → e2e (full webhook-to-sweep journeys)
    - test_views.py, test_tasks.py, test_handlers.py, etc. → integration
    - test_plans.py, test_signature.py, test_events.py, etc. → unit
    - Unmatched files → integration (safe default for Django)

    Explicit markers on test functions/classes take precedence.
    """
    # Filename patterns for each category
    e2e_patterns = ["test_integration.py"]

    integration_patterns = [
        "test_views.py",
        "test_tasks.py",
        "test_handlers.py",
        "test_activator.py",
        "test_sweeper.py",
        "test_claims.py",
        "test_migrations.py",
    ]

    unit_patterns = [
        "test_models.py",
        "test_plans.py",
        "test_signature.py",
        "test_events.py",
        "test_retry.py",
        "test_exceptions.py",
        "test_conf.py",
    ]

    for item in items:
        # Skip if test already has unit/integration/e2e marker
        existing_markers = {m.name for m in item.iter_markers()}
        if existing_markers & {"unit", "integration", "e2e"}:
            continue

        filepath = str(item.fspath)
        filename = filepath.split("/")[-1]

        # Check patterns in priority order
        if any(pattern in filename for pattern in e2e_patterns):
            item.add_marker(pytest.mark.e2e)
        elif any(pattern in filename for pattern in integration_patterns):
            item.add_marker(pytest.mark.integration)
        elif any(pattern in filename for pattern in unit_patterns):
            item.add_marker(pytest.mark.unit)
        else:
            # Default: integration (safe for Django where most tests hit DB)
            item.add_marker(pytest.mark.integration)
