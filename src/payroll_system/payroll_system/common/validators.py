from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

from ..core.constants import MONEY_QUANT
from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def to_decimal(value: Any, field_name: str, *, default: Optional[Decimal] = None) -> Decimal:
    """Coerce a JSON/form number into Decimal.

    Floats go through ``str`` so 0.1 stays 0.1 instead of its binary expansion.
    """

    if value is None or value == "":
        if default is None:
            raise ValidationError(f"{field_name} is required")
        return default
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not result.is_finite():
        raise ValidationError(f"{field_name} must be a number")
    return result


def cents(value: Decimal) -> Decimal:
    """Round a money amount to whole cents, half-up."""
    return value.quantize(MONEY_QUANT, rounding=ROUND_HALF_UP)


def require_positive(value: Any, field_name: str) -> Decimal:
    result = to_decimal(value, field_name)
    if result <= 0:
        raise ValidationError(f"{field_name} must be greater than 0")
    return result


def require_non_negative(value: Any, field_name: str, *, default: Decimal = Decimal("0")) -> Decimal:
    result = to_decimal(value, field_name, default=default)
    if result < 0:
        raise ValidationError(f"{field_name} must not be negative")
    return result


def require_in_range(value: Decimal, field_name: str, *, low: Decimal, high: Decimal) -> Decimal:
    if value < low or value > high:
        raise ValidationError(f"{field_name} must be between {low} and {high}")
    return value


def optional_int(value: Any, field_name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer")
    try:
        as_decimal = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} must be an integer")
    if as_decimal != as_decimal.to_integral_value():
        raise ValidationError(f"{field_name} must be an integer")
    return int(as_decimal)
