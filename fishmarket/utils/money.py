"""
Fixed-point helpers for currency amounts.

Amounts live as ``Decimal`` quantized to two places from the request
boundary down to the ``Numeric(10, 2)`` columns; floats appear only in
serialized responses.
"""
from decimal import Decimal, ROUND_FLOOR, ROUND_HALF_UP
from typing import Optional, Union

CENT = Decimal("0.01")

Number = Union[Decimal, int, float, str]


def to_money(value: Number) -> Decimal:
    if isinstance(value, float):
        # go through repr so 0.1 stays 0.1 instead of its binary expansion
        value = repr(value)
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def money_to_wire(value: Optional[Decimal]) -> Optional[float]:
    if value is None:
        return None
    return float(to_money(value))


def whole_units(value: Number) -> int:
    """Floor of an amount, e.g. 50.99 -> 50."""
    return int(to_money(value).to_integral_value(rounding=ROUND_FLOOR))
