from datetime import date, datetime

from django.utils import timezone
from django.utils.dateparse import parse_datetime

from apps.core.exceptions import ValidationError


def parse_iso_date(raw_value, field: str = "date") -> date | None:
    if not raw_value:
        return None
    if isinstance(raw_value, date):
        return raw_value
    try:
        return date.fromisoformat(str(raw_value))
    except ValueError as exc:
        raise ValidationError(f"Query param '{field}' must be YYYY-MM-DD.", field=field) from exc


def parse_iso_datetime(raw_value, field: str = "hour") -> datetime | None:
    if not raw_value:
        return None
    if isinstance(raw_value, datetime):
        parsed = raw_value
    else:
        try:
            parsed = parse_datetime(str(raw_value).strip())
        except ValueError:
            parsed = None
    if parsed is None:
        raise ValidationError(f"Query param '{field}' must be an ISO-8601 datetime.", field=field)
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed)
    return parsed


def parse_positive_int(raw_value, default: int, field: str = "limit") -> int:
    if raw_value in (None, ""):
        return default
    try:
        value = int(raw_value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Query param '{field}' must be an integer.", field=field) from exc
    if value <= 0:
        raise ValidationError(f"Query param '{field}' must be greater than 0.", field=field)
    return value
