"""Decimal helpers for monetary values."""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

CENT = Decimal("0.01")

Number = Union[Decimal, float, int, str]


def to_money(value: Number) -> Decimal:
    """Coerce a wire value to a Decimal rounded to cents."""
    if isinstance(value, float):
        value = repr(value)
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def as_float(value: Optional[Number]) -> float:
    """Convert a stored amount back to the float used on the JSON boundary."""
    if value is None:
        return 0.0
    return float(value)
