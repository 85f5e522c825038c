"""
Add celery-beat schedules for the subscription expiry sweeps.

This migration creates two periodic tasks:
- sweep_expired_ledgers: hourly, expires lapsed rows in every configured ledger
- revoke_expired_claims: hourly, revokes claims of users whose subscription lapsed
"""

from django.db import migrations

PERIODIC_TASKS = [
    {
        "name": "Sweep Expired Subscription Ledgers",
        "task": "subscriptions.tasks.sweep_expired_ledgers",
        "description": (
            "Sets status=expired on active ledger rows whose expiry has passed, "
            "for every ledger in SUBSCRIPTION_SWEEP_COLLECTIONS."
        ),
    },
    {
        "name": "Revoke Expired Subscription Claims",
        "task": "subscriptions.tasks.revoke_expired_claims",
        "description": (
            "Clears access claims and expires the profile subscription of "
            "users whose subscription has lapsed."
        ),
    },
]


def create_periodic_tasks(apps, schema_editor):
    """Create the periodic tasks for the expiry sweeps."""
    IntervalSchedule = apps.get_model("django_celery_beat", "IntervalSchedule")
    PeriodicTask = apps.get_model("django_celery_beat", "PeriodicTask")

    # Create interval schedule: every hour
    schedule, _ = IntervalSchedule.objects.get_or_create(
        every=1,
        period="hours",
    )

    for entry in PERIODIC_TASKS:
        PeriodicTask.objects.get_or_create(
            name=entry["name"],
            defaults={
                "task": entry["task"],
                "interval": schedule,
                "enabled": True,
                "description": entry["description"],
            },
        )


def remove_periodic_tasks(apps, schema_editor):
    """Remove the periodic tasks on migration rollback."""
    PeriodicTask = apps.get_model("django_celery_beat", "PeriodicTask")

    PeriodicTask.objects.filter(
        name__in=[entry["name"] for entry in PERIODIC_TASKS],
    ).delete()


class Migration(migrations.Migration):
    dependencies = [
        ("subscriptions", "0001_initial"),
        ("django_celery_beat", "0019_alter_periodictasks_options"),
    ]

    operations = [
        migrations.RunPython(create_periodic_tasks, remove_periodic_tasks),
    ]
