"""Tests for decimal <-> base unit conversion."""

from decimal import Decimal

import pytest

from ethereum_mcp.errors import ConversionError
from ethereum_mcp.units import UINT256_MAX, decimal_to_units, units_to_decimal


class TestUnitsToDecimal:
    def test_scales_by_decimals(self):
        assert units_to_decimal(1_500_000, 6) == Decimal("1.5")
        assert units_to_decimal(10**18, 18) == Decimal(1)

    def test_zero_decimals(self):
        assert units_to_decimal(42, 0) == Decimal(42)

    def test_max_uint256_is_exact(self):
        assert units_to_decimal(UINT256_MAX, 0) == Decimal(UINT256_MAX)
        assert str(units_to_decimal(UINT256_MAX, 18)).replace(".", "") == str(UINT256_MAX)

    def test_rejects_out_of_range(self):
        with pytest.raises(ConversionError):
            units_to_decimal(UINT256_MAX + 1, 18)
        with pytest.raises(ConversionError):
            units_to_decimal(-1, 18)


class TestDecimalToUnits:
    def test_scales_by_decimals(self):
        assert decimal_to_units(Decimal("1.5"), 6) == 1_500_000
        assert decimal_to_units(Decimal(1), 18) == 10**18

    def test_rounds_half_to_even(self):
        assert decimal_to_units(Decimal("0.0000005"), 6) == 0
        assert decimal_to_units(Decimal("0.0000015"), 6) == 2
        assert decimal_to_units(Decimal("0.0000016"), 6) == 2

    @pytest.mark.parametrize("decimals", [0, 6, 8, 18])
    def test_negative_amount_fails(self, decimals):
        with pytest.raises(ConversionError):
            decimal_to_units(Decimal("-0.000001"), decimals)

    def test_non_finite_fails(self):
        with pytest.raises(ConversionError):
            decimal_to_units(Decimal("NaN"), 18)
        with pytest.raises(ConversionError):
            decimal_to_units(Decimal("Infinity"), 18)

    def test_overflow_fails(self):
        with pytest.raises(ConversionError):
            decimal_to_units(Decimal(UINT256_MAX + 1), 0)
        with pytest.raises(ConversionError):
            decimal_to_units(Decimal(10) ** 60, 18)


@pytest.mark.parametrize(
    "amount,decimals",
    [
        ("0", 18),
        ("1", 0),
        ("123.456789", 6),
        ("0.000000000000000001", 18),
        ("98765432109876543210.123456789012345678", 18),
        ("0.12345678", 8),
    ],
)
def test_round_trip_recovers_amount(amount, decimals):
    value = Decimal(amount)
    assert units_to_decimal(decimal_to_units(value, decimals), decimals) == value
