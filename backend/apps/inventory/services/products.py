from __future__ import annotations

import logging
from typing import Any

from django.conf import settings
from django.db import IntegrityError
from django.utils import timezone

from apps.core.exceptions import ValidationError, ledger_transaction
from apps.core.lookups import get_or_not_found
from apps.core.validation import coerce_whole_number, require_text
from apps.inventory.models import Product
from apps.inventory.services.movements import pallets_to_pieces

logger = logging.getLogger(__name__)

STOCK_FILTERS = {"low", "high"}
SORT_ORDERS = {"asc", "desc"}


def get_product(product_id) -> Product:
    return get_or_not_found(Product.objects.all(), "Product not found.", pk=product_id)


def create_product(name: str, pieces_per_package: Any, pallets: Any = 0) -> Product:
    """Register a product with its opening stock expressed in pallets."""
    name = require_text(name, "name")
    pieces = coerce_whole_number(pieces_per_package, "pieces_per_package")
    opening = 0
    if pallets not in (None, "", 0):
        opening = pallets_to_pieces(pallets, pieces, field="pallets")

    try:
        with ledger_transaction():
            product = Product.objects.create(
                name=name,
                pieces_per_package=pieces,
                total_pieces=opening,
            )
    except IntegrityError as exc:
        raise ValidationError(f"A product named {name} already exists.", field="name") from exc

    logger.info("Created product %s with %s pieces (%s per package)", name, opening, pieces)
    return product


def update_pieces_per_package(product_id, pieces_per_package: Any) -> Product:
    pieces = coerce_whole_number(pieces_per_package, "pieces_per_package")
    with ledger_transaction():
        product = get_or_not_found(Product.objects.select_for_update(), "Product not found.", pk=product_id)
        product.pieces_per_package = pieces
        product.updated_at = timezone.now()
        product.save(update_fields=["pieces_per_package", "updated_at"])

    logger.info("Product %s now packs %s pieces per package", product.name, pieces)
    return product


def list_products(stock: str | None = None, order: str | None = None):
    queryset = Product.objects.all()
    threshold = settings.PLANTLEDGER_LOW_STOCK_PIECES

    if stock:
        if stock not in STOCK_FILTERS:
            raise ValidationError("stock must be 'low' or 'high'.", field="stock")
        if stock == "low":
            queryset = queryset.filter(total_pieces__lt=threshold)
        else:
            queryset = queryset.filter(total_pieces__gte=threshold)

    if order:
        if order not in SORT_ORDERS:
            raise ValidationError("order must be 'asc' or 'desc'.", field="order")
        queryset = queryset.order_by("total_pieces" if order == "asc" else "-total_pieces", "name")
    else:
        queryset = queryset.order_by("name")
    return list(queryset)
