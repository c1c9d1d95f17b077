from __future__ import annotations

import logging
from typing import Any

from django.utils import timezone

from apps.core.exceptions import InvalidTransition, ValidationError, ledger_transaction
from apps.core.lookups import get_or_not_found
from apps.core.validation import coerce_whole_number, require_text
from apps.inventory.models import Product
from apps.production.models import ProductionOrder

logger = logging.getLogger(__name__)


def create_order(
    product_id,
    quantity_ordered: Any,
    machine_name: str,
    notes: str | None = None,
    actor_id: str | None = None,
) -> ProductionOrder:
    quantity = coerce_whole_number(quantity_ordered, "quantity_ordered")
    machine_name = require_text(machine_name, "machine_name")
    with ledger_transaction():
        product = get_or_not_found(Product.objects.all(), "Product not found.", pk=product_id)
        order = ProductionOrder.objects.create(
            product=product,
            quantity_ordered=quantity,
            machine_name=machine_name,
            notes=(notes or "").strip() or None,
            actor_id=actor_id or None,
        )
    logger.info("Order %s created: %s x%s on %s", order.id, product.name, quantity, machine_name)
    return order


def complete_order(order_id) -> ProductionOrder:
    with ledger_transaction():
        order = get_or_not_found(ProductionOrder.objects.select_for_update(), "Order not found.", pk=order_id)
        updated = ProductionOrder.objects.filter(pk=order.pk, status=ProductionOrder.Status.PENDING).update(
            status=ProductionOrder.Status.COMPLETED,
            completed_at=timezone.now(),
        )
        order.refresh_from_db()
        if not updated:
            logger.warning("Rejected completion of order %s: already %s", order.id, order.status)
            raise InvalidTransition(f"Order {order.id} is already {order.status}.")
    logger.info("Order %s completed", order.id)
    return order


def delete_order(order_id) -> None:
    with ledger_transaction():
        order = get_or_not_found(ProductionOrder.objects.all(), "Order not found.", pk=order_id)
        status = order.status
        order.delete()
    logger.info("Order %s deleted while %s", order_id, status)


def list_orders(status: str | None = None) -> list[ProductionOrder]:
    queryset = ProductionOrder.objects.select_related("product").order_by("-created_at")
    if status and status != "all":
        if status not in ProductionOrder.Status.values:
            raise ValidationError("status must be 'pending', 'completed' or 'all'.", field="status")
        queryset = queryset.filter(status=status)
    return list(queryset)


def count_by_status() -> dict[str, int]:
    return {
        value: ProductionOrder.objects.filter(status=value).count()
        for value in ProductionOrder.Status.values
    }
