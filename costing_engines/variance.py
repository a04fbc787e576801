"""
costing_engines.variance -- Actual vs. standard cost variance analysis.

Responsibility:
    Compare an actual CostBreakdown against a standard (budgeted) one,
    decompose the difference by cost bucket, and classify how serious the
    total deviation is (LOW / MEDIUM / HIGH).

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import costing_kernel.

Invariants enforced:
    - Identical inputs produce identical outputs; no clock access.
    - Actual and standard must share a currency.
    - Variances are signed Decimals (actual - standard): negative means the
      run cost less than standard (favorable). CostBreakdown.variance_from
      cannot express that, so the engine works on raw amounts.

Failure modes:
    - CurrencyMismatchError if actual and standard currencies differ.
    - ValueError from VarianceThresholds on inverted or negative limits.

Usage:
    from costing_engines.variance import CostVarianceCalculator

    report = CostVarianceCalculator().analyze(actual=actual, standard=standard)
    report.severity        # VarianceSeverity.MEDIUM
    report.total_variance  # Decimal("120")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from costing_engines.tracer import traced_engine
from costing_kernel.domain.cost_breakdown import CostBreakdown
from costing_kernel.exceptions import CurrencyMismatchError
from costing_kernel.logging_config import get_logger

logger = get_logger("engines.variance")


class VarianceSeverity(str, Enum):
    """How far actual cost strayed from standard."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


@dataclass(frozen=True)
class VarianceThresholds:
    """
    Percentage limits for severity classification.

    Applied to the absolute total percentage variance: at or above
    ``high_percent`` is HIGH, at or above ``medium_percent`` is MEDIUM.
    """

    medium_percent: Decimal = Decimal("5")
    high_percent: Decimal = Decimal("10")

    def __post_init__(self) -> None:
        object.__setattr__(self, "medium_percent", Decimal(str(self.medium_percent)))
        object.__setattr__(self, "high_percent", Decimal(str(self.high_percent)))
        if self.medium_percent < 0:
            raise ValueError("medium_percent cannot be negative")
        if self.medium_percent > self.high_percent:
            raise ValueError(
                f"medium_percent ({self.medium_percent}) cannot exceed "
                f"high_percent ({self.high_percent})"
            )

    def classify(self, percent: Decimal) -> VarianceSeverity:
        magnitude = abs(percent)
        if magnitude >= self.high_percent:
            return VarianceSeverity.HIGH
        if magnitude >= self.medium_percent:
            return VarianceSeverity.MEDIUM
        return VarianceSeverity.LOW


@dataclass(frozen=True)
class CostVarianceReport:
    """
    Result of comparing actual against standard cost.

    All amounts are signed (actual - standard) in ``currency``.
    """

    currency: str
    material_variance: Decimal
    labor_variance: Decimal
    overhead_variance: Decimal
    percentages: dict[str, Decimal] = field(default_factory=dict)
    severity: VarianceSeverity = VarianceSeverity.LOW

    @property
    def total_variance(self) -> Decimal:
        return self.material_variance + self.labor_variance + self.overhead_variance

    @property
    def is_favorable(self) -> bool:
        """True when the run cost less than standard in total."""
        return self.total_variance < Decimal("0")


class CostVarianceCalculator:
    """
    Pure function calculator for process cost variances.

    Contract:
        No I/O, fully deterministic. Thresholds are injected (typically from
        ``costing_config``); defaults are 5% / 10%.
    """

    def __init__(self, thresholds: VarianceThresholds | None = None):
        self.thresholds = thresholds or VarianceThresholds()

    @traced_engine("variance", "1.0", fingerprint_fields=("actual", "standard"))
    def analyze(
        self,
        *,
        actual: CostBreakdown,
        standard: CostBreakdown,
    ) -> CostVarianceReport:
        """
        Decompose actual - standard by bucket and classify the total.

        Raises:
            CurrencyMismatchError: If currencies differ.
        """
        if actual.currency != standard.currency:
            logger.error("cost_variance_currency_mismatch", extra={
                "actual_currency": actual.currency,
                "standard_currency": standard.currency,
            })
            raise CurrencyMismatchError(actual.currency, standard.currency)

        percentages = actual.percentage_variance_from(standard)
        severity = self.thresholds.classify(percentages["total"])

        report = CostVarianceReport(
            currency=actual.currency,
            material_variance=actual.material_cost.amount - standard.material_cost.amount,
            labor_variance=actual.labor_cost.amount - standard.labor_cost.amount,
            overhead_variance=actual.overhead_cost.amount - standard.overhead_cost.amount,
            percentages=percentages,
            severity=severity,
        )

        logger.info("cost_variance_calculated", extra={
            "currency": report.currency,
            "total_variance": str(report.total_variance),
            "total_percent": str(percentages["total"]),
            "severity": severity.value,
            "is_favorable": report.is_favorable,
        })
        return report
