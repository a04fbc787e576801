"""
CalculateProcessCostUseCase -- Cost a manufacturing order from its records.

Responsibility:
    Pulls the itemized material, labor and overhead records of one
    manufacturing order through an injected repository, reduces them to
    three cost totals and builds the order's CostBreakdown.

Architecture position:
    Services -- orchestration over the pure kernel. The repository is a
    port (``ProcessCostingRepository``); its implementation (database,
    HTTP API, in-memory fake) lives outside this package.

Concurrency:
    The four repository queries are independent reads and are awaited
    together with ``asyncio.gather``. The first failure propagates and the
    whole calculation fails; there is no partial result, retry, timeout
    or cancellation handling here. Deadlines and retries belong to the
    repository implementation.

Failure modes:
    - Any repository exception propagates unchanged.
    - NonPositiveQuantityError if the repository reports a negative
      quantity (zero or missing is costed as one unit).
    - InvalidAmountError / NonFiniteAmountError for unusable totals.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Protocol, TypeVar, runtime_checkable

from costing_config.schema import ProcessCostingConfig
from costing_kernel.domain.cost_breakdown import CostBreakdown
from costing_kernel.domain.records import (
    DirectLaborLine,
    DirectMaterialLine,
    OverheadLine,
)
from costing_kernel.domain.values import Numeric, to_decimal
from costing_kernel.logging_config import LogContext, get_logger

logger = get_logger("services.process_cost")

RecordT = TypeVar("RecordT", DirectMaterialLine, DirectLaborLine, OverheadLine)


@runtime_checkable
class ProcessCostingRepository(Protocol):
    """Read access to the cost records of manufacturing orders.

    Implementations may return the record dataclasses or plain mappings
    (snake_case or camelCase keys). Errors are implementation-defined and
    are propagated untouched by the use case.
    """

    async def get_direct_materials(
        self, order_id: str
    ) -> Sequence[DirectMaterialLine | Mapping[str, Any]]:
        ...

    async def get_direct_labor(
        self, order_id: str
    ) -> Sequence[DirectLaborLine | Mapping[str, Any]]:
        ...

    async def get_overhead_costs(
        self, order_id: str
    ) -> Sequence[OverheadLine | Mapping[str, Any]]:
        ...

    async def get_manufacturing_order_quantity(self, order_id: str) -> Numeric | None:
        ...


@dataclass(frozen=True)
class CalculateProcessCostRequest:
    order_id: str
    currency: str | None = None
    correlation_id: str | None = None


@dataclass(frozen=True)
class CostLineCounts:
    """How many records of each kind contributed to the totals."""

    material_items: int
    labor_entries: int
    overhead_entries: int


@dataclass(frozen=True)
class ProcessCostResult:
    cost_breakdown: CostBreakdown
    details: CostLineCounts


def _normalize(lines: Sequence[Any], record_type: type[RecordT]) -> list[RecordT]:
    return [
        line if isinstance(line, record_type) else record_type.from_mapping(line)
        for line in lines
    ]


class CalculateProcessCostUseCase:
    """
    Builds the CostBreakdown of a manufacturing order.

    Contract:
        The repository is injected; the use case holds no other state and
        may be shared between concurrent calls.
    Guarantees:
        - material total = sum of material line ``total_cost``
        - labor total = sum of labor line ``total_cost``
        - overhead total = sum of overhead ``amount``
        - a reported quantity of 0 (or None) is costed as 1 unit
    """

    def __init__(
        self,
        repository: ProcessCostingRepository,
        config: ProcessCostingConfig | None = None,
    ):
        self.repository = repository
        self.config = config or ProcessCostingConfig()

    async def execute(
        self,
        request: CalculateProcessCostRequest | str,
        currency: str | None = None,
    ) -> ProcessCostResult:
        """
        Cost one manufacturing order.

        Args:
            request: A request object, or the order id itself.
            currency: Currency tag when ``request`` is a plain order id.
                Falls back to the configured default currency.
        """
        if isinstance(request, str):
            request = CalculateProcessCostRequest(order_id=request, currency=currency)
        order_id = request.order_id
        currency = request.currency or self.config.default_currency

        with LogContext.bind(order_id=order_id, correlation_id=request.correlation_id):
            logger.info("process_cost_started", extra={"currency": currency})
            try:
                result = await self._calculate(order_id, currency)
            except Exception:
                logger.error("process_cost_failed", exc_info=True)
                raise

            breakdown = result.cost_breakdown
            logger.info("process_cost_completed", extra={
                "total_cost": str(breakdown.total_cost.amount),
                "quantity": str(breakdown.quantity.value),
                "material_items": result.details.material_items,
                "labor_entries": result.details.labor_entries,
                "overhead_entries": result.details.overhead_entries,
            })
            return result

    async def _calculate(self, order_id: str, currency: str) -> ProcessCostResult:
        materials, labor, overhead, raw_quantity = await asyncio.gather(
            self.repository.get_direct_materials(order_id),
            self.repository.get_direct_labor(order_id),
            self.repository.get_overhead_costs(order_id),
            self.repository.get_manufacturing_order_quantity(order_id),
        )

        material_lines = _normalize(materials, DirectMaterialLine)
        labor_lines = _normalize(labor, DirectLaborLine)
        overhead_lines = _normalize(overhead, OverheadLine)

        material_total = sum((m.total_cost for m in material_lines), Decimal("0"))
        labor_total = sum((entry.total_cost for entry in labor_lines), Decimal("0"))
        overhead_total = sum((o.amount for o in overhead_lines), Decimal("0"))

        quantity = to_decimal(raw_quantity) if raw_quantity is not None else Decimal("0")
        if quantity == 0:
            logger.warning("order_quantity_defaulted", extra={"reported_quantity": str(raw_quantity)})
            quantity = Decimal("1")

        breakdown = CostBreakdown.create(
            material_total,
            labor_total,
            overhead_total,
            quantity,
            currency=currency,
            unit=self.config.default_unit,
        )
        return ProcessCostResult(
            cost_breakdown=breakdown,
            details=CostLineCounts(
                material_items=len(material_lines),
                labor_entries=len(labor_lines),
                overhead_entries=len(overhead_lines),
            ),
        )
