"""
costing_engines.stage_route -- Roll-up of the stages of one manufacturing order.

A manufacturing order flows through several ProcessStages ordered by
``sequence`` (mixing, filling, packing, ...). ``summarize_stages`` orders
them, checks they belong together, and totals cost, WIP and equivalent
units.

``transfer_stage_costs`` carries cost down the route: each later stage
receives the units it handled (good + scrap) at the unit cost of the
stage before it, adds its own conversion cost, and nets off any credit
for sold waste. Direct materials enter at the first stage only.

    transferred_in = (good + scrap) * previous unit cost
    total          = transferred_in + materials + labor + overhead
                     + rework - waste credit
    unit cost      = total / good          (zero when nothing is good)

Pure calculation layer, zero I/O.

Failure modes:
    - DuplicateStageSequenceError when two stages share a sequence.
    - MaterialsOutsideFirstStageError for materials on a later stage.
    - NegativeResultError when a waste credit exceeds the stage cost.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, TypeVar

from costing_engines.tracer import traced_engine
from costing_kernel.domain.process_stage import ProcessStage, StageStatus
from costing_kernel.domain.values import (
    DEFAULT_CURRENCY,
    Money,
    non_negative_decimal,
    to_decimal,
)
from costing_kernel.exceptions import (
    CurrencyMismatchError,
    DuplicateStageSequenceError,
    InvalidSequenceError,
    MaterialsOutsideFirstStageError,
    NegativeUnitsError,
)
from costing_kernel.logging_config import get_logger

logger = get_logger("engines.stage_route")

_ZERO = Decimal("0")

_T = TypeVar("_T")


def _order_by_sequence(
    items: Iterable[_T],
    sequence_of: Callable[[_T], int],
    id_of: Callable[[_T], str],
) -> tuple[_T, ...]:
    ordered = tuple(sorted(items, key=sequence_of))
    by_sequence: dict[int, list[str]] = defaultdict(list)
    for item in ordered:
        by_sequence[sequence_of(item)].append(id_of(item))
    for sequence, ids in by_sequence.items():
        if len(ids) > 1:
            raise DuplicateStageSequenceError(sequence, ids)
    return ordered


# ---------------------------------------------------------------------------
# Route summary
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StageRouteSummary:
    stages: tuple[ProcessStage, ...]
    total_accumulated_cost: Money
    total_wip: Money
    total_equivalent_units: Decimal

    @property
    def current_stage(self) -> ProcessStage | None:
        """First stage, in sequence order, that has not completed."""
        for stage in self.stages:
            if stage.status != StageStatus.COMPLETED:
                return stage
        return None

    @property
    def is_complete(self) -> bool:
        return bool(self.stages) and self.current_stage is None


@traced_engine("stage_route", "1.0")
def summarize_stages(
    stages: Iterable[ProcessStage],
    currency: str = DEFAULT_CURRENCY,
) -> StageRouteSummary:
    """
    Order stages by sequence and total their costs.

    ``currency`` is only used for the totals of an empty route.

    Raises:
        DuplicateStageSequenceError: If two stages share a sequence number.
        CurrencyMismatchError: If stages accumulate cost in different currencies.
    """
    ordered = _order_by_sequence(stages, lambda s: s.sequence, lambda s: s.id)

    if ordered:
        currency = ordered[0].currency
    total_cost = Money.zero(currency)
    total_wip = Money.zero(currency)
    total_eu = Decimal("0")
    for stage in ordered:
        if stage.currency != currency:
            raise CurrencyMismatchError(currency, stage.currency)
        total_cost = total_cost.add(stage.accumulated_cost)
        total_wip = total_wip.add(stage.total_wip)
        total_eu += stage.equivalent_units

    return StageRouteSummary(
        stages=ordered,
        total_accumulated_cost=total_cost,
        total_wip=total_wip,
        total_equivalent_units=total_eu,
    )


# ---------------------------------------------------------------------------
# Transferred-in cost
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StageCostInput:
    """Output and costs incurred by one stage of a route."""

    stage_id: str
    sequence: int
    good_units: Decimal
    scrap_units: Decimal = _ZERO
    direct_materials_cost: Decimal = _ZERO
    direct_labor_cost: Decimal = _ZERO
    overhead_cost: Decimal = _ZERO
    rework_cost: Decimal = _ZERO
    waste_credit: Decimal = _ZERO

    def __post_init__(self) -> None:
        if self.sequence < 1:
            raise InvalidSequenceError(self.sequence)
        for name in ("good_units", "scrap_units"):
            value = to_decimal(getattr(self, name))
            if value < _ZERO:
                raise NegativeUnitsError(name, str(value))
            object.__setattr__(self, name, value)
        for name in (
            "direct_materials_cost",
            "direct_labor_cost",
            "overhead_cost",
            "rework_cost",
            "waste_credit",
        ):
            object.__setattr__(self, name, non_negative_decimal(getattr(self, name)))

    @property
    def units_handled(self) -> Decimal:
        return self.good_units + self.scrap_units

    def to_dict(self) -> dict[str, Any]:
        return {
            "stage_id": self.stage_id,
            "sequence": self.sequence,
            "good_units": self.good_units,
            "scrap_units": self.scrap_units,
            "direct_materials_cost": self.direct_materials_cost,
            "direct_labor_cost": self.direct_labor_cost,
            "overhead_cost": self.overhead_cost,
            "rework_cost": self.rework_cost,
            "waste_credit": self.waste_credit,
        }


@dataclass(frozen=True)
class StageCostResult:
    stage_id: str
    sequence: int
    good_units: Decimal
    scrap_units: Decimal
    transferred_in_cost: Money
    direct_materials_cost: Money
    direct_labor_cost: Money
    overhead_cost: Money
    rework_cost: Money
    waste_credit: Money
    total_cost: Money
    unit_cost: Money

    @property
    def equivalent_units(self) -> Decimal:
        """Scrap is costed like good output, so both count in full."""
        return self.good_units + self.scrap_units

    @property
    def conversion_cost(self) -> Money:
        return self.direct_labor_cost.add(self.overhead_cost)


@dataclass(frozen=True)
class StageCostRoute:
    stages: tuple[StageCostResult, ...]
    currency: str

    @property
    def finished_unit_cost(self) -> Money:
        """Unit cost of good output leaving the last stage."""
        if not self.stages:
            return Money.zero(self.currency)
        return self.stages[-1].unit_cost

    @property
    def finished_goods_cost(self) -> Money:
        if not self.stages:
            return Money.zero(self.currency)
        return self.stages[-1].total_cost


def _cost_stage(
    stage: StageCostInput,
    previous_unit_cost: Money,
    is_first: bool,
) -> StageCostResult:
    currency = previous_unit_cost.currency
    if is_first:
        transferred_in = Money.zero(currency)
    else:
        if stage.direct_materials_cost > _ZERO:
            raise MaterialsOutsideFirstStageError(stage.stage_id, stage.sequence)
        transferred_in = previous_unit_cost.multiply(stage.units_handled)

    materials = Money.of(stage.direct_materials_cost, currency)
    labor = Money.of(stage.direct_labor_cost, currency)
    overhead = Money.of(stage.overhead_cost, currency)
    rework = Money.of(stage.rework_cost, currency)
    waste_credit = Money.of(stage.waste_credit, currency)

    total = (
        transferred_in.add(materials).add(labor).add(overhead).add(rework)
        .subtract(waste_credit)
    )
    unit_cost = (
        total.divide(stage.good_units) if stage.good_units > _ZERO
        else Money.zero(currency)
    )
    return StageCostResult(
        stage_id=stage.stage_id,
        sequence=stage.sequence,
        good_units=stage.good_units,
        scrap_units=stage.scrap_units,
        transferred_in_cost=transferred_in,
        direct_materials_cost=materials,
        direct_labor_cost=labor,
        overhead_cost=overhead,
        rework_cost=rework,
        waste_credit=waste_credit,
        total_cost=total,
        unit_cost=unit_cost,
    )


@traced_engine("stage_cost_transfer", "1.0", fingerprint_fields=("stages", "currency"))
def transfer_stage_costs(
    *,
    stages: Iterable[StageCostInput],
    currency: str = DEFAULT_CURRENCY,
) -> StageCostRoute:
    """
    Cost each stage of a route in sequence order, passing unit cost forward.

    Raises:
        DuplicateStageSequenceError: If two stages share a sequence number.
        MaterialsOutsideFirstStageError: If a later stage carries materials.
        NegativeResultError: If a waste credit exceeds the rest of a stage's cost.
    """
    ordered = _order_by_sequence(stages, lambda s: s.sequence, lambda s: s.stage_id)

    results: list[StageCostResult] = []
    previous_unit_cost = Money.zero(currency)
    for index, stage in enumerate(ordered):
        result = _cost_stage(stage, previous_unit_cost, is_first=index == 0)
        results.append(result)
        previous_unit_cost = result.unit_cost

    route = StageCostRoute(stages=tuple(results), currency=currency)
    logger.info("stage_costs_transferred", extra={
        "stage_count": len(results),
        "finished_unit_cost": str(route.finished_unit_cost.amount),
        "currency": currency,
    })
    return route
