import uuid
from fractions import Fraction

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class MovementType(models.TextChoices):
    ENTRY = "entry", "entry"
    EXIT = "exit", "exit"


class Product(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255, unique=True)
    pieces_per_package = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    total_pieces = models.BigIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "inventory_product"
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total_pieces__gte=0),
                name="ck_inventory_product_total_pieces_non_negative",
            ),
            models.CheckConstraint(
                condition=models.Q(pieces_per_package__gte=1),
                name="ck_inventory_product_pieces_per_package_positive",
            ),
        ]

    def __str__(self) -> str:
        return self.name

    @property
    def pallets(self) -> Fraction:
        return Fraction(self.total_pieces, self.pieces_per_package)


class InventoryMovement(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name="movements")
    actor_id = models.CharField(max_length=128, blank=True, null=True)
    movement_type = models.CharField(max_length=8, choices=MovementType.choices)
    quantity_pieces = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    created_at = models.DateTimeField(default=timezone.now, editable=False)

    class Meta:
        db_table = "inventory_movement"
        ordering = ["-created_at", "id"]
        indexes = [
            models.Index(fields=["product", "created_at"], name="idx_inventory_mov_product_ts"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity_pieces__gt=0),
                name="ck_inventory_movement_quantity_positive",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.movement_type} {self.quantity_pieces} pc"
