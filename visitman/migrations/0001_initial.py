# Generated migration for Business, Customer, CheckIn and RewardClaim

import uuid

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Business",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("name", models.CharField(max_length=200, verbose_name="name")),
                ("email", models.EmailField(max_length=254, verbose_name="email")),
                ("phone", models.CharField(blank=True, max_length=20, verbose_name="phone")),
                (
                    "reward_rule",
                    models.JSONField(
                        blank=True,
                        help_text="Reward tiers for this business. Empty uses the global default.",
                        null=True,
                        verbose_name="reward rule",
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        default=django.utils.timezone.now, verbose_name="created at"
                    ),
                ),
            ],
            options={
                "verbose_name": "business",
                "verbose_name_plural": "businesses",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Customer",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "phone",
                    models.CharField(
                        help_text="Canonical form: (DDD) DDD-DDDD",
                        max_length=20,
                        verbose_name="phone",
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        db_index=True,
                        default=django.utils.timezone.now,
                        verbose_name="created at",
                    ),
                ),
                (
                    "business",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="customers",
                        to="visitman.business",
                        verbose_name="business",
                    ),
                ),
            ],
            options={
                "verbose_name": "customer",
                "verbose_name_plural": "customers",
                "ordering": ["created_at", "phone"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("business", "phone"),
                        name="visitman_unique_business_phone",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="CheckIn",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "staff_user_id",
                    models.CharField(
                        blank=True,
                        help_text="Identifier of the staff member who recorded the visit",
                        max_length=255,
                        verbose_name="staff user",
                    ),
                ),
                (
                    "checkin_time",
                    models.DateTimeField(
                        db_index=True,
                        default=django.utils.timezone.now,
                        verbose_name="check-in time",
                    ),
                ),
                (
                    "customer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="checkins",
                        to="visitman.customer",
                        verbose_name="customer",
                    ),
                ),
            ],
            options={
                "verbose_name": "check-in",
                "verbose_name_plural": "check-ins",
                "db_table": "visitman_checkin",
                "ordering": ["checkin_time", "id"],
                "indexes": [
                    models.Index(
                        fields=["customer", "checkin_time"],
                        name="visitman_checkin_cust_time_idx",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="RewardClaim",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("visits_required", models.PositiveIntegerField(verbose_name="visits required")),
                ("reward_description", models.CharField(max_length=200, verbose_name="reward")),
                (
                    "claimed_at",
                    models.DateTimeField(
                        default=django.utils.timezone.now, verbose_name="claimed at"
                    ),
                ),
                (
                    "staff_user_id",
                    models.CharField(blank=True, max_length=255, verbose_name="staff user"),
                ),
                (
                    "customer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="reward_claims",
                        to="visitman.customer",
                        verbose_name="customer",
                    ),
                ),
            ],
            options={
                "verbose_name": "reward claim",
                "verbose_name_plural": "reward claims",
                "db_table": "visitman_reward",
                "ordering": ["-claimed_at"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("customer", "visits_required"),
                        name="visitman_unique_claim_per_tier",
                    )
                ],
            },
        ),
    ]
