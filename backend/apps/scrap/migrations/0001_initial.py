import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models

import apps.scrap.models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("inventory", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="ScrapRecord",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("machine_name", models.CharField(max_length=64)),
                (
                    "scrap_type",
                    models.CharField(
                        choices=[
                            ("SCRAP", "Scrap"),
                            ("PLASTA", "Plasta"),
                            ("PURGA", "Purga"),
                            ("PREFORMA", "Preforma"),
                        ],
                        max_length=16,
                    ),
                ),
                (
                    "quantity_kg",
                    models.DecimalField(
                        decimal_places=3,
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.001"))],
                    ),
                ),
                ("actor_id", models.CharField(blank=True, max_length=128, null=True)),
                ("record_date", models.DateField(default=apps.scrap.models.today)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "product",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="scrap_records",
                        to="inventory.product",
                    ),
                ),
            ],
            options={
                "db_table": "scrap_record",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["record_date", "machine_name"], name="idx_scrap_date_machine"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(quantity_kg__gt=0),
                        name="ck_scrap_record_quantity_positive",
                    ),
                ],
            },
        ),
    ]
