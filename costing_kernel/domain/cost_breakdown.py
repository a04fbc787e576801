"""
CostBreakdown -- Material / labor / overhead costs of a production run.

Responsibility:
    Aggregates the three process-costing cost buckets against the quantity
    of units produced, and derives totals, per-unit cost, percentage
    composition and variances against a baseline (standard) breakdown.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Built on costing_kernel.domain.values.

Invariants enforced:
    - All three costs share one currency.
    - quantity is strictly positive: a breakdown always represents at least
      one unit. ``zero()`` uses quantity 1 to mean "no cost data".
    - Immutability: every ``with_*``/arithmetic method returns a new instance.

Failure modes:
    - NonPositiveQuantityError when quantity <= 0
    - CurrencyMismatchError / UnitMismatchError when combining breakdowns
    - NegativeResultError from ``variance_from`` when any bucket is below
      its baseline
    - NegativeFactorError from ``scale``
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Any

from costing_kernel.domain.values import (
    DEFAULT_CURRENCY,
    DEFAULT_UNIT,
    Money,
    Numeric,
    Quantity,
    to_decimal,
)
from costing_kernel.exceptions import (
    CurrencyMismatchError,
    NegativeFactorError,
    NonPositiveQuantityError,
)

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


def _percentage_of(part: Decimal, total: Decimal) -> Decimal:
    if total == _ZERO:
        return _ZERO
    return part / total * _HUNDRED


def _percentage_change(current: Decimal, base: Decimal) -> Decimal:
    # A move away from a zero base counts as a full 100% swing.
    if base == _ZERO:
        return _ZERO if current == _ZERO else _HUNDRED
    return (current - base) / base * _HUNDRED


@dataclass(frozen=True)
class CostBreakdown:
    """
    Cost of producing ``quantity`` units, split by cost bucket.

    Contract:
        Construct through ``create``, ``zero`` or ``from_raw_data``. Direct
        construction is validated the same way.

    Guarantees:
        - ``total_cost`` = material + labor + overhead
        - ``cost_per_unit()`` = total / quantity
        - percentage helpers sum to 100 whenever total cost is non-zero,
          and return 0 (never NaN) when it is zero

    Non-goals:
        - Does NOT round; presentation layers format amounts
    """

    material_cost: Money
    labor_cost: Money
    overhead_cost: Money
    quantity: Quantity

    def __post_init__(self) -> None:
        currency = self.material_cost.currency
        for cost in (self.labor_cost, self.overhead_cost):
            if cost.currency != currency:
                raise CurrencyMismatchError(currency, cost.currency)
        if self.quantity.is_zero:
            raise NonPositiveQuantityError(str(self.quantity.value))

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def create(
        cls,
        material_cost: Numeric,
        labor_cost: Numeric,
        overhead_cost: Numeric,
        quantity: Numeric,
        currency: str = DEFAULT_CURRENCY,
        unit: str = DEFAULT_UNIT,
    ) -> CostBreakdown:
        """
        Build a breakdown from raw numbers.

        Raises:
            NonPositiveQuantityError: If quantity <= 0.
            InvalidAmountError: If any cost is negative.
            NonFiniteAmountError: If any input is NaN or infinite.
        """
        qty = to_decimal(quantity)
        if qty <= _ZERO:
            raise NonPositiveQuantityError(str(qty))
        return cls(
            material_cost=Money.of(material_cost, currency),
            labor_cost=Money.of(labor_cost, currency),
            overhead_cost=Money.of(overhead_cost, currency),
            quantity=Quantity.of(qty, unit),
        )

    @classmethod
    def zero(cls, currency: str = DEFAULT_CURRENCY) -> CostBreakdown:
        """A zero-cost breakdown over a single unit."""
        return cls(
            material_cost=Money.zero(currency),
            labor_cost=Money.zero(currency),
            overhead_cost=Money.zero(currency),
            quantity=Quantity.of(1),
        )

    @classmethod
    def from_raw_data(cls, data: Mapping[str, Any]) -> CostBreakdown:
        """Rebuild a breakdown from ``to_dict()`` output (or camelCase JSON)."""

        def pick(snake: str, camel: str) -> Any:
            return data[snake] if snake in data else data[camel]

        return cls.create(
            pick("material_cost", "materialCost"),
            pick("labor_cost", "laborCost"),
            pick("overhead_cost", "overheadCost"),
            data["quantity"],
            currency=data.get("currency") or DEFAULT_CURRENCY,
            unit=data.get("unit") or DEFAULT_UNIT,
        )

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def currency(self) -> str:
        return self.material_cost.currency

    @property
    def total_cost(self) -> Money:
        return self.material_cost.add(self.labor_cost).add(self.overhead_cost)

    def cost_per_unit(self) -> Money:
        if self.quantity.is_zero:
            return Money.zero(self.currency)
        return self.total_cost.divide(self.quantity.value)

    def material_percentage(self) -> Decimal:
        return _percentage_of(self.material_cost.amount, self.total_cost.amount)

    def labor_percentage(self) -> Decimal:
        return _percentage_of(self.labor_cost.amount, self.total_cost.amount)

    def overhead_percentage(self) -> Decimal:
        return _percentage_of(self.overhead_cost.amount, self.total_cost.amount)

    # ------------------------------------------------------------------
    # Variance
    # ------------------------------------------------------------------

    def variance_from(self, baseline: CostBreakdown) -> CostBreakdown:
        """
        Per-bucket excess of this breakdown over ``baseline``.

        Only defined when every bucket is at or above its baseline; use
        ``percentage_variance_from`` for signed comparisons.

        Raises:
            NegativeResultError: If any bucket is below the baseline.
            CurrencyMismatchError: If currencies differ.
        """
        return CostBreakdown(
            material_cost=self.material_cost.subtract(baseline.material_cost),
            labor_cost=self.labor_cost.subtract(baseline.labor_cost),
            overhead_cost=self.overhead_cost.subtract(baseline.overhead_cost),
            quantity=self.quantity,
        )

    def percentage_variance_from(self, baseline: CostBreakdown) -> dict[str, Decimal]:
        """
        Signed percentage change per bucket and in total.

        ``(current - base) / base * 100``; when base is 0 the result is 0 if
        current is also 0, otherwise 100.
        """
        return {
            "material": _percentage_change(
                self.material_cost.amount, baseline.material_cost.amount
            ),
            "labor": _percentage_change(
                self.labor_cost.amount, baseline.labor_cost.amount
            ),
            "overhead": _percentage_change(
                self.overhead_cost.amount, baseline.overhead_cost.amount
            ),
            "total": _percentage_change(
                self.total_cost.amount, baseline.total_cost.amount
            ),
        }

    # ------------------------------------------------------------------
    # Immutable updates
    # ------------------------------------------------------------------

    def _money(self, amount: Numeric | Money) -> Money:
        if isinstance(amount, Money):
            return amount
        return Money.of(amount, self.currency)

    def with_material_cost(self, amount: Numeric | Money) -> CostBreakdown:
        return replace(self, material_cost=self._money(amount))

    def with_labor_cost(self, amount: Numeric | Money) -> CostBreakdown:
        return replace(self, labor_cost=self._money(amount))

    def with_overhead_cost(self, amount: Numeric | Money) -> CostBreakdown:
        return replace(self, overhead_cost=self._money(amount))

    def with_quantity(self, value: Numeric) -> CostBreakdown:
        qty = to_decimal(value)
        if qty <= _ZERO:
            raise NonPositiveQuantityError(str(qty))
        return replace(self, quantity=Quantity.of(qty, self.quantity.unit))

    def add(self, other: CostBreakdown) -> CostBreakdown:
        """Field-wise sum, quantities included."""
        return CostBreakdown(
            material_cost=self.material_cost.add(other.material_cost),
            labor_cost=self.labor_cost.add(other.labor_cost),
            overhead_cost=self.overhead_cost.add(other.overhead_cost),
            quantity=self.quantity.add(other.quantity),
        )

    def scale(self, factor: Numeric) -> CostBreakdown:
        """Scale the three costs by ``factor``. Quantity is left unchanged."""
        factor = to_decimal(factor)
        if factor < _ZERO:
            raise NegativeFactorError(str(factor))
        return CostBreakdown(
            material_cost=self.material_cost.multiply(factor),
            labor_cost=self.labor_cost.multiply(factor),
            overhead_cost=self.overhead_cost.multiply(factor),
            quantity=self.quantity,
        )

    # ------------------------------------------------------------------
    # Comparison / serialization
    # ------------------------------------------------------------------

    def equals(self, other: CostBreakdown) -> bool:
        return (
            isinstance(other, CostBreakdown)
            and self.material_cost.equals(other.material_cost)
            and self.labor_cost.equals(other.labor_cost)
            and self.overhead_cost.equals(other.overhead_cost)
            and self.quantity.equals(other.quantity)
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "material_cost": self.material_cost.amount,
            "labor_cost": self.labor_cost.amount,
            "overhead_cost": self.overhead_cost.amount,
            "quantity": self.quantity.value,
            "currency": self.currency,
            "unit": self.quantity.unit,
        }
