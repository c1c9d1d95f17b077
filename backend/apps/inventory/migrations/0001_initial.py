import uuid

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255, unique=True)),
                (
                    "pieces_per_package",
                    models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)]),
                ),
                ("total_pieces", models.BigIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                "db_table": "inventory_product",
                "ordering": ["name"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(total_pieces__gte=0),
                        name="ck_inventory_product_total_pieces_non_negative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(pieces_per_package__gte=1),
                        name="ck_inventory_product_pieces_per_package_positive",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="InventoryMovement",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("actor_id", models.CharField(blank=True, max_length=128, null=True)),
                (
                    "movement_type",
                    models.CharField(choices=[("entry", "entry"), ("exit", "exit")], max_length=8),
                ),
                (
                    "quantity_pieces",
                    models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)]),
                ),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="movements",
                        to="inventory.product",
                    ),
                ),
            ],
            options={
                "db_table": "inventory_movement",
                "ordering": ["-created_at", "id"],
                "indexes": [
                    models.Index(fields=["product", "created_at"], name="idx_inventory_mov_product_ts"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(quantity_pieces__gt=0),
                        name="ck_inventory_movement_quantity_positive",
                    ),
                ],
            },
        ),
    ]
