"""Scrap ledger.

Records are inserted one per operator entry. Corrections overwrite the same
row and deletes remove it; the daily summary is always recomputed from the
rows of that date.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Any

from django.conf import settings

from apps.core.exceptions import ValidationError, ledger_transaction
from apps.core.lookups import get_or_not_found
from apps.core.validation import coerce_positive_decimal, require_text
from apps.inventory.models import Product
from apps.scrap.models import ScrapRecord, ScrapType, today

logger = logging.getLogger(__name__)

SIZE_FILTERS = {"low", "high"}
EDITABLE_FIELDS = ("machine_name", "product_id", "scrap_type", "quantity_kg", "record_date")
QUANTITY_KG_FIELD = ScrapRecord._meta.get_field("quantity_kg")


def coerce_scrap_type(value: Any) -> str:
    normalized = str(value or "").strip().upper()
    if normalized not in ScrapType.values:
        raise ValidationError(
            f"scrap_type must be one of: {', '.join(ScrapType.values)}.",
            field="scrap_type",
        )
    return normalized


def _coerce_weight(value: Any) -> Decimal:
    return coerce_positive_decimal(
        value,
        "quantity_kg",
        decimal_places=QUANTITY_KG_FIELD.decimal_places,
        max_digits=QUANTITY_KG_FIELD.max_digits,
    )


def _resolve_product(product_id) -> Product | None:
    if product_id in (None, ""):
        return None
    return get_or_not_found(Product.objects.all(), "Product not found.", pk=product_id)


def record_scrap(
    machine_name: str,
    product_id,
    scrap_type: Any,
    quantity_kg: Any,
    actor_id: str | None = None,
    record_date: date | None = None,
) -> ScrapRecord:
    machine_name = require_text(machine_name, "machine_name")
    scrap_type = coerce_scrap_type(scrap_type)
    quantity = _coerce_weight(quantity_kg)

    with ledger_transaction():
        product = _resolve_product(product_id)
        record = ScrapRecord.objects.create(
            machine_name=machine_name,
            product=product,
            scrap_type=scrap_type,
            quantity_kg=quantity,
            actor_id=actor_id or None,
            record_date=record_date or today(),
        )

    logger.info("Scrap %s %s kg on %s by %s", scrap_type, quantity, machine_name, actor_id or "unknown")
    return record


def update_scrap(scrap_id, **fields) -> ScrapRecord:
    """Correct a record in place; every supplied field is validated as on insert."""
    unknown = set(fields) - set(EDITABLE_FIELDS)
    if unknown:
        field = sorted(unknown)[0]
        raise ValidationError(f"Unknown field {field}.", field=field)

    with ledger_transaction():
        record = get_or_not_found(ScrapRecord.objects.select_for_update(), "Scrap record not found.", pk=scrap_id)
        if "machine_name" in fields:
            record.machine_name = require_text(fields["machine_name"], "machine_name")
        if "product_id" in fields:
            record.product = _resolve_product(fields["product_id"])
        if "scrap_type" in fields:
            record.scrap_type = coerce_scrap_type(fields["scrap_type"])
        if "quantity_kg" in fields:
            record.quantity_kg = _coerce_weight(fields["quantity_kg"])
        if "record_date" in fields:
            if not isinstance(fields["record_date"], date):
                raise ValidationError("record_date must be a date.", field="record_date")
            record.record_date = fields["record_date"]
        record.save()

    logger.info("Scrap record %s corrected", record.id)
    return record


def delete_scrap(scrap_id) -> None:
    with ledger_transaction():
        record = get_or_not_found(ScrapRecord.objects.all(), "Scrap record not found.", pk=scrap_id)
        record.delete()
    logger.info("Scrap record %s deleted", scrap_id)


def list_for_date(record_date: date | None = None, size: str | None = None) -> list[ScrapRecord]:
    queryset = ScrapRecord.objects.select_related("product").filter(record_date=record_date or today())
    if size:
        if size not in SIZE_FILTERS:
            raise ValidationError("size must be 'low' or 'high'.", field="size")
        threshold = Decimal(str(settings.PLANTLEDGER_HIGH_SCRAP_KG))
        if size == "low":
            queryset = queryset.filter(quantity_kg__lt=threshold)
        else:
            queryset = queryset.filter(quantity_kg__gte=threshold)
    return list(queryset.order_by("-created_at"))


def empty_summary_row() -> dict[str, Decimal]:
    row = {scrap_type: Decimal("0") for scrap_type in ScrapType.values}
    row["total"] = Decimal("0")
    return row


def summarize(record_date: date | None = None) -> dict[str, dict[str, Decimal]]:
    """Per-machine kilograms by scrap type for one day, plus a per-machine total."""
    summary: dict[str, dict[str, Decimal]] = {}
    records = ScrapRecord.objects.filter(record_date=record_date or today()).values_list(
        "machine_name", "scrap_type", "quantity_kg"
    )
    for machine_name, scrap_type, quantity in records.order_by("machine_name"):
        row = summary.setdefault(machine_name, empty_summary_row())
        row[scrap_type] += quantity
        row["total"] += quantity
    return summary


def grand_total(summary: dict[str, dict[str, Decimal]]) -> Decimal:
    return sum((row["total"] for row in summary.values()), Decimal("0"))
