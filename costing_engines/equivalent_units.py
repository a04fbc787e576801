"""
costing_engines.equivalent_units -- Equivalent units by cost component.

Responsibility:
    Weighted-average equivalent units of production (EUP) when materials and
    conversion costs (labor + overhead) are at different stages of
    completion, and the cost per equivalent unit for each component.

    Materials are often added in full at the start of a stage while labor
    and overhead accrue evenly, so ending WIP may be 100% complete for
    materials and only 40% complete for conversion.

Architecture position:
    Engines -- pure calculation layer, zero I/O. May only import costing_kernel.

Failure modes:
    - NegativeUnitsError for negative unit counts.
    - PercentageOutOfRangeError for completion percentages outside [0, 100].
    - Zero equivalent units yield zero cost per unit, never a division error.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from costing_engines.tracer import traced_engine
from costing_kernel.domain.cost_breakdown import CostBreakdown
from costing_kernel.domain.process_stage import ProcessStage
from costing_kernel.domain.values import Money, Numeric, to_decimal
from costing_kernel.exceptions import NegativeUnitsError, PercentageOutOfRangeError
from costing_kernel.logging_config import get_logger

logger = get_logger("engines.equivalent_units")

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


@dataclass(frozen=True)
class EquivalentUnitsInput:
    """Physical flow of one stage for an EUP calculation."""

    units_completed: Decimal
    ending_wip_units: Decimal
    material_completion_percent: Decimal = _HUNDRED
    conversion_completion_percent: Decimal = _HUNDRED

    def __post_init__(self) -> None:
        for name in ("units_completed", "ending_wip_units"):
            value = to_decimal(getattr(self, name))
            if value < _ZERO:
                raise NegativeUnitsError(name, str(value))
            object.__setattr__(self, name, value)
        for name in ("material_completion_percent", "conversion_completion_percent"):
            value = to_decimal(getattr(self, name))
            if value < _ZERO or value > _HUNDRED:
                raise PercentageOutOfRangeError(str(value))
            object.__setattr__(self, name, value)


@dataclass(frozen=True)
class EquivalentUnitsResult:
    material: Decimal
    conversion: Decimal


@dataclass(frozen=True)
class CostPerEquivalentUnit:
    """Cost of one fully completed unit, by component."""

    material: Money
    conversion: Money

    @property
    def total(self) -> Money:
        return self.material.add(self.conversion)


class EquivalentUnitsCalculator:
    """
    Weighted-average EUP calculator.

    Formula per component: completed + ending_wip * completion% / 100.
    """

    @traced_engine("equivalent_units", "1.0", fingerprint_fields=("flow",))
    def calculate(self, *, flow: EquivalentUnitsInput) -> EquivalentUnitsResult:
        result = EquivalentUnitsResult(
            material=flow.units_completed
            + flow.ending_wip_units * flow.material_completion_percent / _HUNDRED,
            conversion=flow.units_completed
            + flow.ending_wip_units * flow.conversion_completion_percent / _HUNDRED,
        )
        logger.info("equivalent_units_calculated", extra={
            "material_eup": str(result.material),
            "conversion_eup": str(result.conversion),
        })
        return result

    @traced_engine("equivalent_units", "1.0", fingerprint_fields=("costs", "units"))
    def cost_per_equivalent_unit(
        self,
        *,
        costs: CostBreakdown,
        units: EquivalentUnitsResult,
    ) -> CostPerEquivalentUnit:
        """Material cost / material EUP and (labor + overhead) / conversion EUP."""
        conversion_cost = costs.labor_cost.add(costs.overhead_cost)
        return CostPerEquivalentUnit(
            material=_per_unit(costs.material_cost, units.material),
            conversion=_per_unit(conversion_cost, units.conversion),
        )

    @staticmethod
    def flow_from_stage(
        stage: ProcessStage,
        material_completion_percent: Numeric | None = None,
    ) -> EquivalentUnitsInput:
        """
        Physical flow of a ProcessStage.

        The stage's own completion percentage is used for conversion; for
        materials too unless ``material_completion_percent`` is given.
        """
        pct = stage.completion_percentage
        return EquivalentUnitsInput(
            units_completed=stage.units_completed.value,
            ending_wip_units=stage.units_in_progress.value,
            material_completion_percent=(
                pct if material_completion_percent is None else material_completion_percent
            ),
            conversion_completion_percent=pct,
        )


def _per_unit(cost: Money, units: Decimal) -> Money:
    if units == _ZERO:
        return Money.zero(cost.currency)
    return cost.divide(units)
