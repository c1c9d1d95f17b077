from __future__ import annotations

import logging
from datetime import date
from typing import Any

from apps.core.exceptions import ValidationError, ledger_transaction
from apps.core.lookups import get_or_not_found
from apps.core.validation import coerce_whole_number, require_text
from apps.production.models import ShiftComment, ShiftNumber, ShiftReport

logger = logging.getLogger(__name__)

REPORT_FIELDS = (
    "machine_name",
    "product_name",
    "cycle_time",
    "production_goal",
    "production_achieved",
    "notes",
)


def coerce_shift(value: Any) -> int:
    try:
        shift = int(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError("shift_number must be 1, 2 or 3.", field="shift_number") from exc
    if shift not in ShiftNumber.values:
        raise ValidationError("shift_number must be 1, 2 or 3.", field="shift_number")
    return shift


def upsert_shift_comment(comment_date: date, shift_number: Any, comments: str) -> ShiftComment:
    shift = coerce_shift(shift_number)
    with ledger_transaction():
        comment, created = ShiftComment.objects.update_or_create(
            comment_date=comment_date,
            shift_number=shift,
            defaults={"comments": comments or ""},
        )
    logger.info("%s shift comment for %s shift %s", "Created" if created else "Updated", comment_date, shift)
    return comment


def get_shift_comment(comment_date: date, shift_number: Any) -> ShiftComment | None:
    shift = coerce_shift(shift_number)
    return ShiftComment.objects.filter(comment_date=comment_date, shift_number=shift).first()


def _clean_report_fields(fields: dict[str, Any]) -> dict[str, Any]:
    cleaned: dict[str, Any] = {}
    for key, value in fields.items():
        if key not in REPORT_FIELDS:
            raise ValidationError(f"Unknown field {key}.", field=key)
        if key == "machine_name":
            cleaned[key] = require_text(value, key)
        elif key in {"production_goal", "production_achieved"}:
            cleaned[key] = coerce_whole_number(value or 0, key, minimum=0)
        else:
            cleaned[key] = (str(value).strip() if value is not None else "") or None
    return cleaned


def create_shift_report(report_date: date, shift_number: Any, **fields) -> ShiftReport:
    shift = coerce_shift(shift_number)
    if "machine_name" not in fields:
        raise ValidationError("machine_name is required.", field="machine_name")
    cleaned = _clean_report_fields(fields)
    with ledger_transaction():
        report = ShiftReport.objects.create(report_date=report_date, shift_number=shift, **cleaned)
    logger.info("Shift report %s for %s on %s shift %s", report.id, report.machine_name, report_date, shift)
    return report


def update_shift_report(report_id, **fields) -> ShiftReport:
    cleaned = _clean_report_fields(fields)
    with ledger_transaction():
        report = get_or_not_found(ShiftReport.objects.select_for_update(), "Shift report not found.", pk=report_id)
        for key, value in cleaned.items():
            setattr(report, key, value)
        report.save(update_fields=[*cleaned.keys(), "updated_at"])
    logger.info("Shift report %s updated (%s)", report.id, ", ".join(cleaned) or "no changes")
    return report


def delete_shift_report(report_id) -> None:
    with ledger_transaction():
        report = get_or_not_found(ShiftReport.objects.all(), "Shift report not found.", pk=report_id)
        report.delete()
    logger.info("Shift report %s deleted", report_id)


def list_shift_reports(report_date: date, shift_number: Any) -> list[ShiftReport]:
    shift = coerce_shift(shift_number)
    return list(ShiftReport.objects.filter(report_date=report_date, shift_number=shift).order_by("machine_name"))
