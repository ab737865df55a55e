"""
Decimal helpers for prices, quantities and percentages.
"""
from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from wholesale.domain.errors import InvalidInputError

ZERO = Decimal("0")
CENT = Decimal("0.01")
TENTH = Decimal("0.1")


def as_decimal(value, field: str = "value") -> Decimal:
    """Coerce int/float/str/Decimal to Decimal (floats go through str)."""
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool):
        raise InvalidInputError(f"{field} must be a number")
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, ValueError, TypeError):
            raise InvalidInputError(f"{field} must be a number, got {value!r}")
    if not result.is_finite():
        raise InvalidInputError(f"{field} must be finite")
    return result


def round_money(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def percentage(part: Decimal, whole: Decimal) -> Decimal:
    """Share of ``whole`` as a percentage with one decimal; 0 when whole is 0."""
    if not whole:
        return ZERO
    return (part / whole * 100).quantize(TENTH, rounding=ROUND_HALF_UP)
