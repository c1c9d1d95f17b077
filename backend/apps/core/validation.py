from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from apps.core.exceptions import ValidationError

# PostgreSQL integer columns.
MAX_WHOLE_NUMBER = 2_147_483_647


def coerce_whole_number(value: Any, field: str, minimum: int = 1, maximum: int = MAX_WHOLE_NUMBER) -> int:
    """Accept ints and integral floats/decimals; reject bools, fractions and anything outside [minimum, maximum]."""
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a whole number.", field=field)
    if isinstance(value, int):
        number = value
    elif isinstance(value, (float, Decimal)):
        try:
            integral = Decimal(str(value))
        except InvalidOperation as exc:
            raise ValidationError(f"{field} must be a whole number.", field=field) from exc
        if not integral.is_finite() or integral != integral.to_integral_value():
            raise ValidationError(f"{field} must be a whole number.", field=field)
        number = int(integral)
    else:
        raise ValidationError(f"{field} must be a whole number.", field=field)
    if number < minimum:
        raise ValidationError(f"{field} must be at least {minimum}.", field=field)
    if number > maximum:
        raise ValidationError(f"{field} must be at most {maximum}.", field=field)
    return number


def coerce_positive_decimal(
    value: Any,
    field: str,
    decimal_places: int | None = None,
    max_digits: int | None = None,
) -> Decimal:
    """Parse a positive number; with decimal_places it is rounded to the column scale first."""
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{field} must be a number.", field=field)
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValidationError(f"{field} must be a number.", field=field) from exc
    if not number.is_finite():
        raise ValidationError(f"{field} must be a number.", field=field)
    if decimal_places is not None:
        try:
            number = number.quantize(Decimal(1).scaleb(-decimal_places), rounding=ROUND_HALF_UP)
        except InvalidOperation as exc:
            raise ValidationError(f"{field} is too large.", field=field) from exc
    if number <= 0:
        raise ValidationError(f"{field} must be greater than 0.", field=field)
    if max_digits is not None:
        integer_digits = max_digits - (decimal_places or 0)
        if number >= Decimal(10) ** integer_digits:
            raise ValidationError(f"{field} must be less than {10 ** integer_digits}.", field=field)
    return number


def require_text(value: Any, field: str) -> str:
    text = str(value or "").strip()
    if not text:
        raise ValidationError(f"{field} is required.", field=field)
    return text
