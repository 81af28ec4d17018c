from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

_CENT = Decimal("0.01")


def round2(value: float) -> float:
    """Round half-up to 2 decimals.

    Goes through ``repr`` so that 0.125 rounds to 0.13 instead of following
    the binary representation of the float.
    """
    return float(Decimal(repr(float(value))).quantize(_CENT, rounding=ROUND_HALF_UP))


def parse_amount(value: Any) -> float:
    """Lenient numeric parse: anything unparseable (or non-finite) becomes 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        try:
            number = float(Decimal(str(value).strip()))
        except (InvalidOperation, ValueError):
            return 0.0
    if number != number or number in (float("inf"), float("-inf")):
        return 0.0
    return number
