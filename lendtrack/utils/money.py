"""Decimal money helpers"""

from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_decimal(value) -> Decimal:
    """Convert int/float/str input without binary float artifacts"""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round2(value: Decimal) -> Decimal:
    """Round money to cents, half-up (0.005 -> 0.01)"""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def round_int(value: Decimal) -> int:
    """Round half-up to a whole number (49.5 -> 50)"""
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
