"""
Unit tests for the Money value object.

Verifies:
- Construction and Decimal conversion (str, int, float, Decimal)
- Rejection of negative, NaN and infinite amounts
- Same-currency arithmetic and comparisons
- Display and serialization
"""

from decimal import Decimal

import pytest

from costing_kernel.domain.values import DEFAULT_CURRENCY, Money
from costing_kernel.exceptions import (
    CurrencyMismatchError,
    DivisionByZeroError,
    InvalidAmountError,
    NegativeDivisorError,
    NegativeFactorError,
    NegativeResultError,
    NonFiniteAmountError,
    ValidationError,
)


class TestMoneyConstruction:
    """Tests for Money.of / Money.zero."""

    def test_of_defaults_to_sar(self):
        money = Money.of(100)
        assert money.amount == Decimal("100")
        assert money.currency == "SAR"
        assert DEFAULT_CURRENCY == "SAR"

    def test_float_goes_through_str(self):
        """0.1 must be Decimal('0.1'), not its binary approximation."""
        assert Money.of(0.1).amount == Decimal("0.1")

    def test_string_amount(self):
        assert Money.of("1234.5678", "USD").amount == Decimal("1234.5678")

    def test_zero(self):
        money = Money.zero("EUR")
        assert money.is_zero
        assert money.currency == "EUR"

    def test_negative_amount_rejected(self):
        with pytest.raises(InvalidAmountError) as exc_info:
            Money.of(-100)
        assert "cannot be negative" in str(exc_info.value)
        assert exc_info.value.code == "INVALID_AMOUNT"

    def test_negative_zero_normalized(self):
        money = Money.of("-0")
        assert money.is_zero
        assert not money.amount.is_signed()

    @pytest.mark.parametrize("value", ["NaN", "Infinity", "-Infinity", float("inf")])
    def test_non_finite_rejected(self, value):
        with pytest.raises(NonFiniteAmountError):
            Money.of(value)

    def test_garbage_rejected(self):
        with pytest.raises(InvalidAmountError):
            Money.of("not a number")

    def test_bool_rejected(self):
        with pytest.raises(InvalidAmountError):
            Money.of(True)

    def test_validation_errors_share_base(self):
        with pytest.raises(ValidationError):
            Money.of(-1)

    def test_empty_currency_rejected(self):
        with pytest.raises(ValueError):
            Money.of(1, "")

    def test_immutable(self):
        money = Money.of(1)
        with pytest.raises(AttributeError):
            money.amount = Decimal("2")


class TestMoneyArithmetic:
    """Tests for add/subtract/multiply/divide."""

    def test_add(self):
        assert Money.of(100).add(Money.of(50)).equals(Money.of(150))

    def test_add_operator(self):
        assert (Money.of("10.25") + Money.of("0.75")).amount == Decimal("11.00")

    def test_add_currency_mismatch(self):
        with pytest.raises(CurrencyMismatchError) as exc_info:
            Money.of(100, "SAR").add(Money.of(100, "USD"))
        assert exc_info.value.left == "SAR"
        assert exc_info.value.right == "USD"
        assert str(exc_info.value) == "Cannot operate on different currencies: SAR and USD"

    def test_subtract(self):
        assert Money.of(100).subtract(Money.of(30)).amount == Decimal("70")

    def test_subtract_to_zero(self):
        assert Money.of(100).subtract(Money.of(100)).is_zero

    def test_subtract_below_zero_fails(self):
        with pytest.raises(NegativeResultError):
            Money.of(30).subtract(Money.of(100))

    def test_subtract_currency_mismatch(self):
        with pytest.raises(CurrencyMismatchError):
            Money.of(100, "SAR") - Money.of(1, "USD")

    def test_multiply(self):
        assert Money.of(100).multiply(Decimal("1.5")).amount == Decimal("150")

    def test_multiply_by_zero(self):
        assert Money.of(100).multiply(0).is_zero

    def test_rmul(self):
        assert (3 * Money.of(10)).amount == Decimal("30")

    def test_multiply_negative_factor(self):
        with pytest.raises(NegativeFactorError):
            Money.of(100).multiply(-2)

    def test_divide(self):
        assert Money.of(100).divide(4).amount == Decimal("25")

    def test_divide_by_zero(self):
        with pytest.raises(DivisionByZeroError, match="Cannot divide by zero"):
            Money.of(100).divide(0)

    def test_divide_by_negative(self):
        with pytest.raises(NegativeDivisorError):
            Money.of(100).divide(-5)

    def test_operations_return_new_instances(self):
        original = Money.of(100)
        original.add(Money.of(1))
        original.multiply(3)
        assert original.amount == Decimal("100")


class TestMoneyComparison:
    """Tests for comparisons and equality."""

    def test_greater_and_less(self):
        assert Money.of(200).is_greater_than(Money.of(100))
        assert Money.of(100).is_less_than(Money.of(200))
        assert not Money.of(100).is_greater_than(Money.of(100))

    def test_operators(self):
        assert Money.of(1) < Money.of(2)
        assert Money.of(2) >= Money.of(2)
        assert Money.of(3) > Money.of(2)
        assert Money.of(2) <= Money.of(2)

    def test_compare_currency_mismatch(self):
        with pytest.raises(CurrencyMismatchError):
            Money.of(1, "SAR").is_greater_than(Money.of(1, "USD"))

    def test_equals_different_currency_is_false(self):
        assert not Money.of(1, "SAR").equals(Money.of(1, "USD"))

    def test_equals_ignores_trailing_zeros(self):
        assert Money.of("100.00").equals(Money.of(100))


class TestMoneyDisplay:
    """Tests for str() and to_dict()."""

    def test_str_two_decimals(self):
        assert str(Money.of("1234.5")) == "1234.50 SAR"

    def test_str_rounds_for_display_only(self):
        money = Money.of("10.005")
        assert money.amount == Decimal("10.005")
        assert str(money).endswith(" SAR")

    def test_to_dict(self):
        assert Money.of("99.95", "USD").to_dict() == {
            "amount": Decimal("99.95"),
            "currency": "USD",
        }


class TestMoneyLimits:
    """Tests for results beyond the Decimal range and for opaque tags."""

    def test_multiply_overflow_is_non_finite(self):
        with pytest.raises(NonFiniteAmountError):
            Money.of("9e999999").multiply(100)

    def test_divide_overflow_is_non_finite(self):
        with pytest.raises(NonFiniteAmountError):
            Money.of("9e999999").divide("0.001")

    def test_add_overflow_is_non_finite(self):
        huge = Money.of("9e999999")
        with pytest.raises(NonFiniteAmountError):
            huge.add(huge)

    def test_currency_kept_as_given(self):
        money = Money.of(1, " SAR ")
        assert money.currency == " SAR "
        assert not money.equals(Money.of(1, "SAR"))

    def test_padded_currency_is_a_different_tag(self):
        with pytest.raises(CurrencyMismatchError):
            Money.of(1, "SAR ").add(Money.of(1, "SAR"))

    def test_blank_currency_rejected(self):
        with pytest.raises(ValueError):
            Money.of(1, "   ")
