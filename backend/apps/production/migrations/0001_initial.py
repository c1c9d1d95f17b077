import uuid

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("inventory", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Machine",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=64, unique=True)),
                ("cavities", models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("producing", "Producing"),
                            ("mold_change", "Mold change"),
                            ("minor_stop", "Minor stop"),
                            ("major_stop", "Major stop"),
                        ],
                        default="producing",
                        max_length=16,
                    ),
                ),
                ("quantity_ordered", models.PositiveIntegerField(default=0)),
                ("quantity_produced", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "current_product",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="machines",
                        to="inventory.product",
                    ),
                ),
            ],
            options={
                "db_table": "production_machine",
                "ordering": ["name"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(cavities__gte=1),
                        name="ck_production_machine_cavities_positive",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="ProductionTallyBucket",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("hour_timestamp", models.DateTimeField()),
                ("count", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "machine",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="tally_buckets",
                        to="production.machine",
                    ),
                ),
            ],
            options={
                "db_table": "production_tally_bucket",
                "ordering": ["-hour_timestamp", "machine"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("machine", "hour_timestamp"),
                        name="uq_production_tally_machine_hour",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="ProductionOrder",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "quantity_ordered",
                    models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)]),
                ),
                ("machine_name", models.CharField(max_length=64)),
                (
                    "status",
                    models.CharField(
                        choices=[("pending", "pending"), ("completed", "completed")],
                        default="pending",
                        max_length=16,
                    ),
                ),
                ("notes", models.TextField(blank=True, null=True)),
                ("actor_id", models.CharField(blank=True, max_length=128, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="production_orders",
                        to="inventory.product",
                    ),
                ),
            ],
            options={
                "db_table": "production_order",
                "ordering": ["-created_at"],
                "constraints": [
                    models.CheckConstraint(
                        condition=(
                            models.Q(status="pending", completed_at__isnull=True)
                            | models.Q(status="completed", completed_at__isnull=False)
                        ),
                        name="ck_production_order_completed_at_matches_status",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="ShiftComment",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("comment_date", models.DateField()),
                ("shift_number", models.PositiveSmallIntegerField(choices=[(1, "1"), (2, "2"), (3, "3")])),
                ("comments", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "production_shift_comment",
                "ordering": ["-comment_date", "shift_number"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("comment_date", "shift_number"),
                        name="uq_production_shift_comment_date_shift",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="ShiftReport",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("report_date", models.DateField()),
                ("shift_number", models.PositiveSmallIntegerField(choices=[(1, "1"), (2, "2"), (3, "3")])),
                ("machine_name", models.CharField(max_length=64)),
                ("product_name", models.CharField(blank=True, max_length=255, null=True)),
                ("cycle_time", models.CharField(blank=True, max_length=32, null=True)),
                ("production_goal", models.PositiveIntegerField(default=0)),
                ("production_achieved", models.PositiveIntegerField(default=0)),
                ("notes", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "production_shift_report",
                "ordering": ["report_date", "shift_number", "machine_name"],
                "indexes": [
                    models.Index(fields=["report_date", "shift_number"], name="idx_production_report_shift"),
                ],
            },
        ),
    ]
