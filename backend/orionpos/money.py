# backend/orionpos/money.py
from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union

from .errors import ValidationError

NumberLike = Union[Decimal, int, float, str]

_log = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_decimal(value: NumberLike, field: str = "amount") -> Decimal:
    """
    Convert user/config input to Decimal.

    Floats go through str() so 5.99 becomes Decimal("5.99") rather than its
    binary expansion. Booleans, NaN and infinities are rejected.
    """
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{field} must be a number", details={field: value})
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError) as e:
            _log.debug("to_decimal: failed to parse %r for %s: %s", value, field, e)
            raise ValidationError(f"{field} must be a number", details={field: value}) from e
    if not result.is_finite():
        raise ValidationError(f"{field} must be a finite number", details={field: str(value)})
    return result


def to_quantity(value, field: str = "quantity") -> int:
    """Strict integer parse; rejects floats with a fractional part and bools."""
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer", details={field: value})
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(f"{field} must be an integer, not a decimal", details={field: value})
        return int(value)
    if isinstance(value, str):
        stripped = value.strip()
        try:
            return int(stripped)
        except ValueError:
            raise ValidationError(f"{field} must be an integer", details={field: value})
    raise ValidationError(f"{field} must be an integer", details={field: value})


def quantize_money(value: Decimal, places: int = 2) -> Decimal:
    """Round to the display convention (half-up)."""
    exp = Decimal(1).scaleb(-places)
    return to_decimal(value).quantize(exp, rounding=ROUND_HALF_UP)


def fmt_money(value: NumberLike, places: int = 2) -> str:
    """Format a number as money with a fixed number of decimals, e.g. '31.39'."""
    return f"{quantize_money(to_decimal(value), places):.{places}f}"
