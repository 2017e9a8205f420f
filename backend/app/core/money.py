"""Decimal helpers for dollar amounts."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional

ZERO = Decimal("0.00")
CENT = Decimal("0.01")


def to_decimal(value: Any) -> Decimal:
    """Coerce a stored amount (Decimal, int, float, str or None) to Decimal."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_cents(value: Any) -> Decimal:
    """Round an amount to the cent, halves away from zero."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def safe_divide(numerator: Any, denominator: Any) -> Decimal:
    """
    Divide two amounts, yielding zero when the denominator is zero or missing.

    Args:
        numerator: Dividend
        denominator: Divisor

    Returns:
        Quotient, or Decimal zero for a zero denominator
    """
    denominator = to_decimal(denominator)
    if denominator == 0:
        return Decimal("0")
    return to_decimal(numerator) / denominator


def optional_decimal(value: Any) -> Optional[Decimal]:
    """Like to_decimal but keeps None."""
    if value is None:
        return None
    return to_decimal(value)
