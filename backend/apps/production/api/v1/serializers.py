from decimal import ROUND_HALF_UP, Decimal

from rest_framework import serializers

from apps.core.validation import MAX_WHOLE_NUMBER
from apps.production.models import (
    Machine,
    MachineStatus,
    ProductionOrder,
    ShiftComment,
    ShiftNumber,
    ShiftReport,
)


class MachineSerializer(serializers.ModelSerializer):
    status_label = serializers.CharField(source="get_status_display", read_only=True)
    current_product_name = serializers.CharField(source="current_product.name", read_only=True, default=None)
    progress_percent = serializers.SerializerMethodField()
    is_almost_done = serializers.BooleanField(read_only=True)

    class Meta:
        model = Machine
        fields = (
            "id",
            "name",
            "cavities",
            "status",
            "status_label",
            "current_product",
            "current_product_name",
            "quantity_ordered",
            "quantity_produced",
            "progress_percent",
            "is_almost_done",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields

    def get_progress_percent(self, obj: Machine):
        ratio = obj.progress_ratio
        if ratio is None:
            return None
        percent = min(ratio * 100, Decimal("100"))
        return str(percent.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


class MachineCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=64)
    cavities = serializers.IntegerField(min_value=1)


class MachineUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=64, required=False)
    cavities = serializers.IntegerField(min_value=1, required=False)


class MachineStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=MachineStatus.choices)


class MachineAssignmentSerializer(serializers.Serializer):
    product = serializers.UUIDField(allow_null=True)
    quantity_ordered = serializers.IntegerField(min_value=0, required=False, default=0)


class MachineProgressSerializer(serializers.Serializer):
    quantity_produced = serializers.IntegerField(min_value=0, max_value=MAX_WHOLE_NUMBER)


class ProductionCountSerializer(serializers.Serializer):
    count = serializers.IntegerField(min_value=1, max_value=MAX_WHOLE_NUMBER)
    occurred_at = serializers.DateTimeField(required=False, allow_null=True)


class ProductionOrderSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source="product.name", read_only=True)

    class Meta:
        model = ProductionOrder
        fields = (
            "id",
            "product",
            "product_name",
            "quantity_ordered",
            "machine_name",
            "status",
            "notes",
            "actor_id",
            "created_at",
            "completed_at",
        )
        read_only_fields = fields


class ProductionOrderCreateSerializer(serializers.Serializer):
    product = serializers.UUIDField()
    quantity_ordered = serializers.IntegerField(min_value=1, max_value=MAX_WHOLE_NUMBER)
    machine_name = serializers.CharField(max_length=64)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    actor_id = serializers.CharField(max_length=128, required=False, allow_blank=True)


class ShiftCommentSerializer(serializers.ModelSerializer):
    class Meta:
        model = ShiftComment
        fields = ("id", "comment_date", "shift_number", "comments", "updated_at")
        read_only_fields = ("id", "updated_at")
        # The (date, shift) pair is the upsert key, not a uniqueness error.
        validators = []


class ShiftReportSerializer(serializers.ModelSerializer):
    class Meta:
        model = ShiftReport
        fields = (
            "id",
            "report_date",
            "shift_number",
            "machine_name",
            "product_name",
            "cycle_time",
            "production_goal",
            "production_achieved",
            "notes",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("id", "created_at", "updated_at")


class ShiftReportUpdateSerializer(serializers.Serializer):
    machine_name = serializers.CharField(max_length=64, required=False)
    product_name = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)
    cycle_time = serializers.CharField(max_length=32, required=False, allow_blank=True, allow_null=True)
    production_goal = serializers.IntegerField(min_value=0, required=False)
    production_achieved = serializers.IntegerField(min_value=0, required=False)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class ShiftQuerySerializer(serializers.Serializer):
    date = serializers.DateField()
    shift = serializers.ChoiceField(choices=ShiftNumber.choices)
