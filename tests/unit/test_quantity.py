"""Unit tests for the Quantity value object."""

from decimal import Decimal

import pytest

from costing_kernel.domain.values import Quantity
from costing_kernel.exceptions import (
    DivisionByZeroError,
    InvalidAmountError,
    NegativeDivisorError,
    NegativeFactorError,
    NegativeResultError,
    NonFiniteAmountError,
    UnitMismatchError,
)


class TestQuantity:

    def test_of_defaults_to_units(self):
        qty = Quantity.of(100)
        assert qty.value == Decimal("100")
        assert qty.unit == "units"

    def test_zero(self):
        assert Quantity.zero("kg").is_zero

    def test_negative_rejected(self):
        with pytest.raises(InvalidAmountError):
            Quantity.of(-1)

    def test_nan_rejected(self):
        with pytest.raises(NonFiniteAmountError):
            Quantity.of("NaN")

    def test_add_same_unit(self):
        assert Quantity.of(100, "kg").add(Quantity.of(50, "kg")).equals(Quantity.of(150, "kg"))

    def test_add_unit_mismatch(self):
        with pytest.raises(UnitMismatchError) as exc_info:
            Quantity.of(1, "kg").add(Quantity.of(1, "liters"))
        assert str(exc_info.value) == "Cannot operate on different units: kg and liters"
        assert exc_info.value.code == "UNIT_MISMATCH"

    def test_subtract(self):
        assert (Quantity.of(10) - Quantity.of(4)).value == Decimal("6")

    def test_subtract_below_zero(self):
        with pytest.raises(NegativeResultError):
            Quantity.of(4).subtract(Quantity.of(10))

    def test_multiply_and_divide(self):
        assert Quantity.of(10).multiply("2.5").value == Decimal("25")
        assert Quantity.of(10).divide(4).value == Decimal("2.5")

    def test_divide_by_zero(self):
        with pytest.raises(DivisionByZeroError):
            Quantity.of(10).divide(0)

    def test_comparisons(self):
        assert Quantity.of(2).is_greater_than(Quantity.of(1))
        assert Quantity.of(1) < Quantity.of(2)
        with pytest.raises(UnitMismatchError):
            Quantity.of(1, "kg").is_less_than(Quantity.of(2, "g"))

    def test_equals_different_unit(self):
        assert not Quantity.of(1, "kg").equals(Quantity.of(1, "g"))

    def test_str_has_no_exponent(self):
        assert str(Quantity.of(Decimal("1E+2"), "kg")) == "100 kg"
        assert str(Quantity.of("2.50")) == "2.5 units"
        assert str(Quantity.zero()) == "0 units"

    def test_to_dict(self):
        assert Quantity.of(3, "kg").to_dict() == {"value": Decimal("3"), "unit": "kg"}

    def test_multiply_negative_factor(self):
        with pytest.raises(NegativeFactorError):
            Quantity.of(10).multiply(-1)

    def test_divide_negative_divisor(self):
        with pytest.raises(NegativeDivisorError):
            Quantity.of(10).divide("-2.5")

    def test_multiply_overflow_is_non_finite(self):
        with pytest.raises(NonFiniteAmountError):
            Quantity.of("9e999999", "kg").multiply(1000)

    def test_unit_kept_as_given(self):
        assert Quantity.of(1, "kg ").unit == "kg "
        with pytest.raises(UnitMismatchError):
            Quantity.of(1, "kg ").add(Quantity.of(1, "kg"))

    def test_blank_unit_rejected(self):
        with pytest.raises(ValueError):
            Quantity.of(1, " ")
