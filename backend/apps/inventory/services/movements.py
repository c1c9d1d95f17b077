"""Movement engine: the only code path that changes a product's stock.

Each movement locks the product row, applies the change with a conditional
arithmetic UPDATE and appends the immutable movement row, all inside one
transaction. An exit that would take stock below zero is rejected before
anything is written.
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from django.conf import settings
from django.db.models import F
from django.utils import timezone

from apps.core.exceptions import InsufficientStock, ValidationError, ledger_transaction
from apps.core.lookups import ensure_exists, get_or_not_found
from apps.core.validation import coerce_positive_decimal, coerce_whole_number
from apps.inventory.models import InventoryMovement, MovementType, Product

logger = logging.getLogger(__name__)


def coerce_movement_type(value: Any) -> str:
    normalized = str(value or "").strip().lower()
    if normalized not in MovementType.values:
        raise ValidationError(
            f"Movement type must be one of: {', '.join(MovementType.values)}.",
            field="movement_type",
        )
    return normalized


def pallets_to_pieces(pallets: Any, pieces_per_package: int, field: str = "quantity_pallets") -> int:
    value = coerce_positive_decimal(pallets, field)
    return int((value * pieces_per_package).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _lock_product(product_id) -> Product:
    return get_or_not_found(Product.objects.select_for_update(), "Product not found.", pk=product_id)


def apply_movement(product_id, movement_type: str, quantity_pieces: Any, actor_id: str | None = None) -> Product:
    """Apply one entry or exit and return the product as committed."""
    quantity = coerce_whole_number(quantity_pieces, "quantity_pieces")
    movement_type = coerce_movement_type(movement_type)

    with ledger_transaction():
        product = _lock_product(product_id)
        now = timezone.now()
        if movement_type == MovementType.ENTRY:
            Product.objects.filter(pk=product.pk).update(
                total_pieces=F("total_pieces") + quantity,
                updated_at=now,
            )
        else:
            updated = Product.objects.filter(pk=product.pk, total_pieces__gte=quantity).update(
                total_pieces=F("total_pieces") - quantity,
                updated_at=now,
            )
            if not updated:
                logger.warning(
                    "Rejected exit of %s pieces from %s: only %s in stock",
                    quantity,
                    product.name,
                    product.total_pieces,
                )
                raise InsufficientStock(
                    f"Not enough stock for {product.name}: {product.total_pieces} pieces available, "
                    f"{quantity} requested."
                )

        InventoryMovement.objects.create(
            product=product,
            actor_id=actor_id or None,
            movement_type=movement_type,
            quantity_pieces=quantity,
            created_at=now,
        )
        product.refresh_from_db()

    logger.info(
        "Movement %s %s pieces on %s by %s -> total_pieces=%s",
        movement_type,
        quantity,
        product.name,
        actor_id or "unknown",
        product.total_pieces,
    )
    return product


def apply_movement_in_pallets(product_id, movement_type: str, pallets: Any, actor_id: str | None = None) -> Product:
    with ledger_transaction():
        product = _lock_product(product_id)
        quantity = pallets_to_pieces(pallets, product.pieces_per_package)
        if quantity <= 0:
            raise ValidationError("Pallet quantity rounds to zero pieces.", field="quantity_pallets")
        return apply_movement(product.pk, movement_type, quantity, actor_id=actor_id)


def list_movements(product_id=None, limit: int | None = None):
    limit = limit or settings.PLANTLEDGER_MOVEMENTS_LIMIT
    queryset = InventoryMovement.objects.select_related("product").order_by("-created_at", "id")
    if product_id:
        ensure_exists(Product.objects, "Product not found.", pk=product_id)
        queryset = queryset.filter(product_id=product_id)
    return list(queryset[:limit])
