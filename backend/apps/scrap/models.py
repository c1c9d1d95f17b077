import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from apps.inventory.models import Product


class ScrapType(models.TextChoices):
    SCRAP = "SCRAP", "Scrap"
    PLASTA = "PLASTA", "Plasta"
    PURGA = "PURGA", "Purga"
    PREFORMA = "PREFORMA", "Preforma"


def today():
    return timezone.localdate()


class ScrapRecord(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    machine_name = models.CharField(max_length=64)
    product = models.ForeignKey(
        Product,
        on_delete=models.SET_NULL,
        related_name="scrap_records",
        blank=True,
        null=True,
    )
    scrap_type = models.CharField(max_length=16, choices=ScrapType.choices)
    quantity_kg = models.DecimalField(
        max_digits=10,
        decimal_places=3,
        validators=[MinValueValidator(Decimal("0.001"))],
    )
    actor_id = models.CharField(max_length=128, blank=True, null=True)
    record_date = models.DateField(default=today)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "scrap_record"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["record_date", "machine_name"], name="idx_scrap_date_machine"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity_kg__gt=0),
                name="ck_scrap_record_quantity_positive",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.machine_name} {self.scrap_type} {self.quantity_kg} kg"
