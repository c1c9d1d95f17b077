import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from apps.inventory.models import Product


ALMOST_DONE_RATIO = Decimal("0.9")


class MachineStatus(models.TextChoices):
    PRODUCING = "producing", "Producing"
    MOLD_CHANGE = "mold_change", "Mold change"
    MINOR_STOP = "minor_stop", "Minor stop"
    MAJOR_STOP = "major_stop", "Major stop"


class ShiftNumber(models.IntegerChoices):
    FIRST = 1, "1"
    SECOND = 2, "2"
    THIRD = 3, "3"


class Machine(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=64, unique=True)
    cavities = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    status = models.CharField(max_length=16, choices=MachineStatus.choices, default=MachineStatus.PRODUCING)
    current_product = models.ForeignKey(
        Product,
        on_delete=models.SET_NULL,
        related_name="machines",
        blank=True,
        null=True,
    )
    quantity_ordered = models.PositiveIntegerField(default=0)
    quantity_produced = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "production_machine"
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(cavities__gte=1),
                name="ck_production_machine_cavities_positive",
            ),
        ]

    def __str__(self) -> str:
        return self.name

    @property
    def progress_ratio(self) -> Decimal | None:
        if not self.quantity_ordered:
            return None
        return Decimal(self.quantity_produced) / Decimal(self.quantity_ordered)

    @property
    def is_almost_done(self) -> bool:
        ratio = self.progress_ratio
        return ratio is not None and ratio >= ALMOST_DONE_RATIO


class ProductionTallyBucket(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    machine = models.ForeignKey(Machine, on_delete=models.CASCADE, related_name="tally_buckets")
    hour_timestamp = models.DateTimeField()
    count = models.PositiveBigIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "production_tally_bucket"
        ordering = ["-hour_timestamp", "machine"]
        constraints = [
            models.UniqueConstraint(
                fields=["machine", "hour_timestamp"],
                name="uq_production_tally_machine_hour",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.machine_id} @ {self.hour_timestamp:%Y-%m-%d %H:00}: {self.count}"


class ProductionOrder(models.Model):
    class Status(models.TextChoices):
        PENDING = "pending", "pending"
        COMPLETED = "completed", "completed"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name="production_orders")
    quantity_ordered = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    machine_name = models.CharField(max_length=64)
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.PENDING)
    notes = models.TextField(blank=True, null=True)
    actor_id = models.CharField(max_length=128, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    completed_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        db_table = "production_order"
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(status="pending", completed_at__isnull=True)
                    | models.Q(status="completed", completed_at__isnull=False)
                ),
                name="ck_production_order_completed_at_matches_status",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.product_id} x{self.quantity_ordered} on {self.machine_name} ({self.status})"


class ShiftComment(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    comment_date = models.DateField()
    shift_number = models.PositiveSmallIntegerField(choices=ShiftNumber.choices)
    comments = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "production_shift_comment"
        ordering = ["-comment_date", "shift_number"]
        constraints = [
            models.UniqueConstraint(
                fields=["comment_date", "shift_number"],
                name="uq_production_shift_comment_date_shift",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.comment_date} shift {self.shift_number}"


class ShiftReport(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    report_date = models.DateField()
    shift_number = models.PositiveSmallIntegerField(choices=ShiftNumber.choices)
    machine_name = models.CharField(max_length=64)
    product_name = models.CharField(max_length=255, blank=True, null=True)
    cycle_time = models.CharField(max_length=32, blank=True, null=True)
    production_goal = models.PositiveIntegerField(default=0)
    production_achieved = models.PositiveIntegerField(default=0)
    notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "production_shift_report"
        ordering = ["report_date", "shift_number", "machine_name"]
        indexes = [
            models.Index(fields=["report_date", "shift_number"], name="idx_production_report_shift"),
        ]

    def __str__(self) -> str:
        return f"{self.report_date} shift {self.shift_number} - {self.machine_name}"
