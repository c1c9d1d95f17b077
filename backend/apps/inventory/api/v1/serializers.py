from decimal import ROUND_HALF_UP, Decimal
from fractions import Fraction

from rest_framework import serializers

from apps.core.validation import MAX_WHOLE_NUMBER
from apps.inventory.models import InventoryMovement, MovementType, Product


PALLETS_QUANTUM = Decimal("0.0001")


def format_pallets(value: Fraction) -> str:
    pallets = Decimal(value.numerator) / Decimal(value.denominator)
    return str(pallets.quantize(PALLETS_QUANTUM, rounding=ROUND_HALF_UP))


class ProductSerializer(serializers.ModelSerializer):
    pallets = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = (
            "id",
            "name",
            "pieces_per_package",
            "total_pieces",
            "pallets",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields

    def get_pallets(self, obj: Product) -> str:
        return format_pallets(obj.pallets)


class ProductCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    pieces_per_package = serializers.IntegerField(min_value=1)
    pallets = serializers.DecimalField(
        max_digits=14,
        decimal_places=4,
        min_value=Decimal("0"),
        required=False,
        default=Decimal("0"),
    )


class ProductUpdateSerializer(serializers.Serializer):
    pieces_per_package = serializers.IntegerField(min_value=1)


class InventoryMovementSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source="product.name", read_only=True)

    class Meta:
        model = InventoryMovement
        fields = (
            "id",
            "product",
            "product_name",
            "actor_id",
            "movement_type",
            "quantity_pieces",
            "created_at",
        )
        read_only_fields = fields


class MovementCreateSerializer(serializers.Serializer):
    movement_type = serializers.ChoiceField(choices=MovementType.choices)
    quantity_pieces = serializers.IntegerField(min_value=1, max_value=MAX_WHOLE_NUMBER, required=False)
    quantity_pallets = serializers.DecimalField(
        max_digits=14,
        decimal_places=4,
        min_value=Decimal("0.0001"),
        required=False,
    )
    actor_id = serializers.CharField(max_length=128, required=False, allow_blank=True)

    def validate(self, attrs):
        has_pieces = attrs.get("quantity_pieces") is not None
        has_pallets = attrs.get("quantity_pallets") is not None
        if has_pieces == has_pallets:
            raise serializers.ValidationError(
                {"quantity_pieces": "Send exactly one of quantity_pieces or quantity_pallets."}
            )
        return attrs
