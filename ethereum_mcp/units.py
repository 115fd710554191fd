"""Conversion between human-decimal token amounts and integer base units."""

from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation, localcontext

from .errors import ConversionError

UINT256_MAX = 2**256 - 1

# Enough significant digits to hold any uint256 exactly
DECIMAL_PRECISION = 100


def units_to_decimal(raw_amount: int, decimals: int) -> Decimal:
    """Convert integer base units to a decimal amount (raw / 10**decimals)."""
    if raw_amount < 0 or raw_amount > UINT256_MAX:
        raise ConversionError(f"Value {raw_amount} is outside the uint256 range")
    if decimals < 0 or decimals > 255:
        raise ConversionError(f"Unsupported decimal count: {decimals}")

    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        return Decimal(raw_amount) / (Decimal(10) ** decimals)


def decimal_to_units(amount: Decimal, decimals: int) -> int:
    """Convert a decimal amount to integer base units.

    The scaled value is rounded half-to-even to a whole number of units.
    Negative, non-finite and beyond-uint256 amounts raise ConversionError.
    """
    if not isinstance(amount, Decimal):
        amount = Decimal(str(amount))
    if not amount.is_finite():
        raise ConversionError(f"Amount is not a finite number: {amount}")
    if amount < 0:
        raise ConversionError("Amount cannot be negative")
    if decimals < 0 or decimals > 255:
        raise ConversionError(f"Unsupported decimal count: {decimals}")

    try:
        with localcontext() as ctx:
            ctx.prec = DECIMAL_PRECISION
            scaled = amount.scaleb(decimals).to_integral_value(rounding=ROUND_HALF_EVEN)
    except InvalidOperation as e:
        raise ConversionError(f"Failed to convert amount {amount}: {e}") from e

    units = int(scaled)
    if units > UINT256_MAX:
        raise ConversionError(f"Amount {amount} overflows uint256 at {decimals} decimals")
    return units
