"""Decimal helpers for wallet amounts."""

from decimal import ROUND_DOWN, Decimal

# Smallest currency unit stored (DECIMAL(18, 8))
AMOUNT_QUANTUM = Decimal("0.00000001")
ZERO = Decimal("0")


def to_decimal(value) -> Decimal:
    """Convert int/float/str/Decimal to Decimal without float artifacts."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quantize_down(amount: Decimal) -> Decimal:
    """Truncate amount to the smallest currency unit (never rounds up)."""
    return to_decimal(amount).quantize(AMOUNT_QUANTUM, rounding=ROUND_DOWN)
