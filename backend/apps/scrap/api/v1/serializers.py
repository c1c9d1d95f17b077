from decimal import Decimal

from rest_framework import serializers

from apps.scrap.models import ScrapRecord, ScrapType


class ScrapRecordSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source="product.name", read_only=True, default=None)
    scrap_type_label = serializers.CharField(source="get_scrap_type_display", read_only=True)

    class Meta:
        model = ScrapRecord
        fields = (
            "id",
            "machine_name",
            "product",
            "product_name",
            "scrap_type",
            "scrap_type_label",
            "quantity_kg",
            "actor_id",
            "record_date",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class ScrapRecordWriteSerializer(serializers.Serializer):
    machine_name = serializers.CharField(max_length=64)
    product = serializers.UUIDField(required=False, allow_null=True)
    scrap_type = serializers.CharField(max_length=16)
    quantity_kg = serializers.DecimalField(max_digits=10, decimal_places=3)
    record_date = serializers.DateField(required=False, allow_null=True)
    actor_id = serializers.CharField(max_length=128, required=False, allow_blank=True)

    def validate_scrap_type(self, value):
        normalized = value.strip().upper()
        if normalized not in ScrapType.values:
            raise serializers.ValidationError(f"scrap_type must be one of: {', '.join(ScrapType.values)}.")
        return normalized

    def validate_quantity_kg(self, value):
        if value <= 0:
            raise serializers.ValidationError("quantity_kg must be greater than 0.")
        return value


class ScrapSummaryRowSerializer(serializers.Serializer):
    machine_name = serializers.CharField()
    SCRAP = serializers.DecimalField(max_digits=14, decimal_places=3)
    PLASTA = serializers.DecimalField(max_digits=14, decimal_places=3)
    PURGA = serializers.DecimalField(max_digits=14, decimal_places=3)
    PREFORMA = serializers.DecimalField(max_digits=14, decimal_places=3)
    total = serializers.DecimalField(max_digits=14, decimal_places=3)


def summary_rows(summary: dict[str, dict[str, Decimal]]) -> list[dict]:
    return [{"machine_name": machine_name, **row} for machine_name, row in summary.items()]
