import django.db.models.deletion
import django_fsm
from django.db import migrations, models

STATUS_CHOICES = [("active", "Active"), ("expired", "Expired")]


def ledger_fields():
    return [
        (
            "created_at",
            models.DateTimeField(
                auto_now_add=True,
                db_index=True,
                help_text="Timestamp when this record was created",
            ),
        ),
        (
            "updated_at",
            models.DateTimeField(
                auto_now=True,
                help_text="Timestamp when this record was last modified",
            ),
        ),
        (
            "reference",
            models.CharField(
                help_text="Paystack transaction reference",
                max_length=255,
                primary_key=True,
                serialize=False,
            ),
        ),
        (
            "user_id",
            models.CharField(
                db_index=True,
                help_text="User the charge activated (UserProfile.user_id)",
                max_length=128,
            ),
        ),
        (
            "email",
            models.EmailField(
                blank=True,
                default="",
                help_text="Payer email from the charge customer",
                max_length=254,
            ),
        ),
        (
            "status",
            django_fsm.FSMField(
                choices=STATUS_CHOICES,
                default="active",
                help_text="Ledger status",
                max_length=50,
            ),
        ),
        ("plan_id", models.CharField(max_length=255)),
        ("plan_name", models.CharField(blank=True, default="", max_length=255)),
        ("paid_at", models.DateTimeField()),
        ("expires_at", models.DateTimeField()),
        ("channel", models.CharField(blank=True, default="", max_length=50)),
        ("amount", models.DecimalField(decimal_places=2, max_digits=12)),
        ("currency", models.CharField(blank=True, default="", max_length=3)),
    ]


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="UserProfile",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "user_id",
                    models.CharField(
                        help_text="External user identifier (charge metadata userId)",
                        max_length=128,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
            ],
            options={
                "verbose_name": "User Profile",
                "verbose_name_plural": "User Profiles",
                "db_table": "users",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="ProfileSubscription",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "profile",
                    models.OneToOneField(
                        help_text="Profile this subscription belongs to",
                        on_delete=django.db.models.deletion.CASCADE,
                        primary_key=True,
                        related_name="subscription",
                        serialize=False,
                        to="subscriptions.userprofile",
                    ),
                ),
                (
                    "status",
                    django_fsm.FSMField(
                        choices=STATUS_CHOICES,
                        default="active",
                        help_text="Subscription status",
                        max_length=50,
                    ),
                ),
                (
                    "plan_id",
                    models.CharField(
                        blank=True,
                        help_text="Plan identifier; encodes the billing period",
                        max_length=255,
                        null=True,
                    ),
                ),
                (
                    "plan_name",
                    models.CharField(
                        blank=True,
                        help_text="Plan display name",
                        max_length=255,
                        null=True,
                    ),
                ),
                ("paid_at", models.DateTimeField(help_text="When the charge was paid")),
                ("expires_at", models.DateTimeField(help_text="When access lapses")),
                (
                    "reference",
                    models.CharField(
                        help_text="Paystack transaction reference",
                        max_length=255,
                    ),
                ),
                ("channel", models.CharField(blank=True, default="", max_length=50)),
                (
                    "amount",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Amount in major currency units (minor units / 100)",
                        max_digits=12,
                    ),
                ),
                ("currency", models.CharField(blank=True, default="", max_length=3)),
            ],
            options={
                "verbose_name": "Profile Subscription",
                "verbose_name_plural": "Profile Subscriptions",
                "db_table": "user_subscriptions",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["status", "expires_at"],
                        name="profile_sub_status_exp_idx",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="LedgerEntry",
            fields=ledger_fields(),
            options={
                "verbose_name": "Ledger Entry",
                "verbose_name_plural": "Ledger Entries",
                "db_table": "subscriptions",
                "ordering": ["-created_at"],
                "abstract": False,
                "indexes": [
                    models.Index(
                        fields=["status", "expires_at"],
                        name="ledger_status_expiry_idx",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="StudentLedgerEntry",
            fields=ledger_fields(),
            options={
                "verbose_name": "Student Ledger Entry",
                "verbose_name_plural": "Student Ledger Entries",
                "db_table": "subscriptions_students",
                "ordering": ["-created_at"],
                "abstract": False,
                "indexes": [
                    models.Index(
                        fields=["status", "expires_at"],
                        name="student_ledger_status_exp_idx",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="UserClaims",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "user_id",
                    models.CharField(
                        help_text="User identity the claims are attached to",
                        max_length=128,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "claims",
                    models.JSONField(
                        blank=True,
                        default=dict,
                        help_text='Claim set, e.g. {"subscription": "active", "plan": ..., "role": ...}',
                    ),
                ),
            ],
            options={
                "verbose_name": "User Claims",
                "verbose_name_plural": "User Claims",
                "db_table": "user_claims",
                "ordering": ["-created_at"],
            },
        ),
    ]
