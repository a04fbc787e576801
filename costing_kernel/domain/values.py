"""
Values -- Immutable, self-validating cost value objects.

Responsibility:
    Provides the arithmetic primitives for every cost computation:
    Money, Quantity and HourlyRate. These replace primitive numbers
    wherever amounts, unit counts or labor rates appear in domain logic.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Imported by every other domain module. No outward dependencies except
    costing_kernel.exceptions.

Invariants enforced:
    - Amounts and quantities are finite, non-negative Decimals. No negative
      balance is representable, so subtraction below zero fails instead of
      producing one.
    - Binary operations require equal currency (Money) or unit (Quantity)
      tags. Tags are opaque strings compared for equality only.
    - Immutability: every operation returns a new instance.

Failure modes:
    - InvalidAmountError / NonFiniteAmountError on construction
    - CurrencyMismatchError / UnitMismatchError on mixed-tag operations
    - NegativeResultError, NegativeFactorError, NegativeDivisorError,
      DivisionByZeroError from arithmetic
    - NonFiniteAmountError when a result exceeds the Decimal exponent range
    - ZeroRateError / NegativeHoursError from HourlyRate

Numeric inputs:
    Decimal, int, str and float are accepted. Non-Decimal values are
    converted through ``str()`` so ``0.1`` becomes ``Decimal("0.1")`` rather
    than its binary approximation.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, Overflow
from typing import Any, Union

from costing_kernel.exceptions import (
    CurrencyMismatchError,
    DivisionByZeroError,
    InvalidAmountError,
    NegativeDivisorError,
    NegativeFactorError,
    NegativeHoursError,
    NegativeResultError,
    NonFiniteAmountError,
    UnitMismatchError,
    ZeroRateError,
)

DEFAULT_CURRENCY = "SAR"
DEFAULT_UNIT = "units"

Numeric = Union[Decimal, int, float, str]

_ZERO = Decimal("0")


def to_decimal(value: Any) -> Decimal:
    """
    Convert a numeric input to a finite Decimal.

    Raises:
        InvalidAmountError: If the value cannot be parsed as a number.
        NonFiniteAmountError: If the value is NaN or infinite.
    """
    if isinstance(value, bool):
        raise InvalidAmountError(repr(value), "booleans are not amounts")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, ValueError, TypeError) as e:
            raise InvalidAmountError(repr(value), "not a number") from e
    if not result.is_finite():
        raise NonFiniteAmountError(str(value))
    return result


def non_negative_decimal(value: Any) -> Decimal:
    """Convert to Decimal and reject negatives. ``-0`` is normalized to ``0``."""
    result = to_decimal(value)
    if result < _ZERO:
        raise InvalidAmountError(str(result), "cannot be negative")
    if result.is_signed():
        result = result.copy_abs()
    return result


def plain(value: Decimal) -> str:
    """Render a Decimal without exponent or trailing zeros ("1E+2" -> "100")."""
    if value.is_zero():
        return "0"
    return format(value.normalize(), "f")


def _require_tag(tag: str, what: str) -> str:
    # Tags are opaque: compared as given, never trimmed or case-folded.
    if not isinstance(tag, str) or not tag.strip():
        raise ValueError(f"{what} is required")
    return tag


@contextmanager
def _overflow_guard(expression: str) -> Iterator[None]:
    """Report a result beyond the Decimal exponent range as non-finite."""
    try:
        yield
    except Overflow as e:
        raise NonFiniteAmountError(expression) from e


@dataclass(frozen=True, slots=True)
class Money:
    """
    Non-negative monetary amount value object.

    Contract:
        Pairs a Decimal amount with its currency tag -- they are NEVER
        separated.

    Guarantees:
        - Immutable and hashable (frozen dataclass with slots)
        - amount is always a finite Decimal >= 0
        - Arithmetic never mixes currencies and never goes below zero

    Non-goals:
        - Does NOT convert between currencies
        - Does NOT round; ``str()`` shows two decimals for display only
    """

    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", non_negative_decimal(self.amount))
        object.__setattr__(self, "currency", _require_tag(self.currency, "Currency"))

    @classmethod
    def of(cls, amount: Numeric, currency: str = DEFAULT_CURRENCY) -> Money:
        """
        Factory method for creating Money.

        Raises:
            InvalidAmountError: If amount is negative or not a number.
            NonFiniteAmountError: If amount is NaN or infinite.
        """
        return cls(amount=non_negative_decimal(amount), currency=currency)

    @classmethod
    def zero(cls, currency: str = DEFAULT_CURRENCY) -> Money:
        """Create a zero amount in the given currency."""
        return cls(amount=_ZERO, currency=currency)

    def _check_currency(self, other: Money) -> None:
        if not isinstance(other, Money):
            raise TypeError(f"Expected Money, got {type(other).__name__}")
        if self.currency != other.currency:
            raise CurrencyMismatchError(self.currency, other.currency)

    @property
    def is_zero(self) -> bool:
        """Check if amount is zero."""
        return self.amount == _ZERO

    def add(self, other: Money) -> Money:
        """Add two Money values. Must be same currency."""
        self._check_currency(other)
        with _overflow_guard(f"{self.amount} + {other.amount}"):
            result = self.amount + other.amount
        return Money(amount=result, currency=self.currency)

    def subtract(self, other: Money) -> Money:
        """
        Subtract ``other`` from this amount.

        Raises:
            CurrencyMismatchError: If currencies differ.
            NegativeResultError: If the result would be below zero.
        """
        self._check_currency(other)
        result = self.amount - other.amount
        if result < _ZERO:
            raise NegativeResultError(str(self), str(other))
        return Money(amount=result, currency=self.currency)

    def multiply(self, factor: Numeric) -> Money:
        """Multiply by a non-negative scalar. Zero yields zero Money."""
        factor = to_decimal(factor)
        if factor < _ZERO:
            raise NegativeFactorError(str(factor))
        with _overflow_guard(f"{self.amount} * {factor}"):
            result = self.amount * factor
        return Money(amount=result, currency=self.currency)

    def divide(self, divisor: Numeric) -> Money:
        """Divide by a strictly positive scalar."""
        divisor = to_decimal(divisor)
        if divisor == _ZERO:
            raise DivisionByZeroError()
        if divisor < _ZERO:
            raise NegativeDivisorError(str(divisor))
        with _overflow_guard(f"{self.amount} / {divisor}"):
            result = self.amount / divisor
        return Money(amount=result, currency=self.currency)

    def is_greater_than(self, other: Money) -> bool:
        self._check_currency(other)
        return self.amount > other.amount

    def is_less_than(self, other: Money) -> bool:
        self._check_currency(other)
        return self.amount < other.amount

    def equals(self, other: Money) -> bool:
        """Same amount and same currency. A different currency is simply unequal."""
        return (
            isinstance(other, Money)
            and self.currency == other.currency
            and self.amount == other.amount
        )

    def to_dict(self) -> dict[str, Any]:
        return {"amount": self.amount, "currency": self.currency}

    def __add__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return self.subtract(other)

    def __mul__(self, factor: Numeric) -> Money:
        if isinstance(factor, Money):
            return NotImplemented
        return self.multiply(factor)

    def __rmul__(self, factor: Numeric) -> Money:
        return self.__mul__(factor)

    def __truediv__(self, divisor: Numeric) -> Money:
        if isinstance(divisor, Money):
            return NotImplemented
        return self.divide(divisor)

    def __lt__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.is_less_than(other)

    def __le__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return not self.is_greater_than(other)

    def __gt__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.is_greater_than(other)

    def __ge__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return not self.is_less_than(other)

    def __str__(self) -> str:
        return f"{self.amount:.2f} {self.currency}"

    def __repr__(self) -> str:
        return f"Money({self.amount!r}, {self.currency!r})"


@dataclass(frozen=True, slots=True)
class Quantity:
    """
    Non-negative numeric quantity with unit value object.

    Contract:
        Pairs a Decimal value with its unit of measure. Used for produced
        units, material quantities and labor hours.

    Guarantees:
        - Immutable and hashable (frozen dataclass with slots)
        - value is always a finite Decimal >= 0
        - Arithmetic enforces the same-unit constraint

    Non-goals:
        - Does NOT perform unit conversion
        - Does NOT validate against a unit registry
    """

    value: Decimal
    unit: str = DEFAULT_UNIT

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", non_negative_decimal(self.value))
        object.__setattr__(self, "unit", _require_tag(self.unit, "Quantity unit"))

    @classmethod
    def of(cls, value: Numeric, unit: str = DEFAULT_UNIT) -> Quantity:
        """Factory method for creating Quantity."""
        return cls(value=non_negative_decimal(value), unit=unit)

    @classmethod
    def zero(cls, unit: str = DEFAULT_UNIT) -> Quantity:
        """Create a zero quantity with the given unit."""
        return cls(value=_ZERO, unit=unit)

    def _check_unit(self, other: Quantity) -> None:
        if not isinstance(other, Quantity):
            raise TypeError(f"Expected Quantity, got {type(other).__name__}")
        if self.unit != other.unit:
            raise UnitMismatchError(self.unit, other.unit)

    @property
    def is_zero(self) -> bool:
        return self.value == _ZERO

    def add(self, other: Quantity) -> Quantity:
        self._check_unit(other)
        with _overflow_guard(f"{self.value} + {other.value}"):
            result = self.value + other.value
        return Quantity(value=result, unit=self.unit)

    def subtract(self, other: Quantity) -> Quantity:
        self._check_unit(other)
        result = self.value - other.value
        if result < _ZERO:
            raise NegativeResultError(str(self), str(other))
        return Quantity(value=result, unit=self.unit)

    def multiply(self, factor: Numeric) -> Quantity:
        factor = to_decimal(factor)
        if factor < _ZERO:
            raise NegativeFactorError(str(factor))
        with _overflow_guard(f"{self.value} * {factor}"):
            result = self.value * factor
        return Quantity(value=result, unit=self.unit)

    def divide(self, divisor: Numeric) -> Quantity:
        divisor = to_decimal(divisor)
        if divisor == _ZERO:
            raise DivisionByZeroError()
        if divisor < _ZERO:
            raise NegativeDivisorError(str(divisor))
        with _overflow_guard(f"{self.value} / {divisor}"):
            result = self.value / divisor
        return Quantity(value=result, unit=self.unit)

    def is_greater_than(self, other: Quantity) -> bool:
        self._check_unit(other)
        return self.value > other.value

    def is_less_than(self, other: Quantity) -> bool:
        self._check_unit(other)
        return self.value < other.value

    def equals(self, other: Quantity) -> bool:
        return (
            isinstance(other, Quantity)
            and self.unit == other.unit
            and self.value == other.value
        )

    def to_dict(self) -> dict[str, Any]:
        return {"value": self.value, "unit": self.unit}

    def __add__(self, other: Quantity) -> Quantity:
        if not isinstance(other, Quantity):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: Quantity) -> Quantity:
        if not isinstance(other, Quantity):
            return NotImplemented
        return self.subtract(other)

    def __mul__(self, factor: Numeric) -> Quantity:
        if isinstance(factor, Quantity):
            return NotImplemented
        return self.multiply(factor)

    def __rmul__(self, factor: Numeric) -> Quantity:
        return self.__mul__(factor)

    def __truediv__(self, divisor: Numeric) -> Quantity:
        if isinstance(divisor, Quantity):
            return NotImplemented
        return self.divide(divisor)

    def __lt__(self, other: Quantity) -> bool:
        if not isinstance(other, Quantity):
            return NotImplemented
        return self.is_less_than(other)

    def __le__(self, other: Quantity) -> bool:
        if not isinstance(other, Quantity):
            return NotImplemented
        return not self.is_greater_than(other)

    def __gt__(self, other: Quantity) -> bool:
        if not isinstance(other, Quantity):
            return NotImplemented
        return self.is_greater_than(other)

    def __ge__(self, other: Quantity) -> bool:
        if not isinstance(other, Quantity):
            return NotImplemented
        return not self.is_less_than(other)

    def __str__(self) -> str:
        return f"{plain(self.value)} {self.unit}"

    def __repr__(self) -> str:
        return f"Quantity({self.value!r}, {self.unit!r})"


@dataclass(frozen=True, slots=True)
class HourlyRate:
    """
    Labor rate: Money per hour.

    Contract:
        Wraps a strictly positive Money. A zero rate is rejected as a
        configuration error, unlike ``Money.zero()`` which is a valid amount.
    """

    rate: Money

    def __post_init__(self) -> None:
        if not isinstance(self.rate, Money):
            raise TypeError(f"rate must be Money, got {type(self.rate).__name__}")
        if self.rate.is_zero:
            raise ZeroRateError(self.rate.currency)

    @classmethod
    def of(cls, amount: Numeric, currency: str = DEFAULT_CURRENCY) -> HourlyRate:
        """
        Factory method for creating an HourlyRate.

        Raises:
            ZeroRateError: If amount is exactly zero.
            InvalidAmountError: If amount is negative.
        """
        return cls(rate=Money.of(amount, currency))

    @property
    def amount(self) -> Decimal:
        return self.rate.amount

    @property
    def currency(self) -> str:
        return self.rate.currency

    def calculate_cost(self, hours: Numeric) -> Money:
        """Labor cost for ``hours`` worked."""
        hours = to_decimal(hours)
        if hours < _ZERO:
            raise NegativeHoursError(str(hours))
        return self.rate.multiply(hours)

    def to_dict(self) -> dict[str, Any]:
        return self.rate.to_dict()

    def __str__(self) -> str:
        return f"{self.rate}/h"
