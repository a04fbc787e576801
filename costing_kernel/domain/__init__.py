"""
Pure domain layer of the process costing kernel.

Value objects (Money, Quantity, HourlyRate), entities (CostBreakdown,
ProcessStage) and the cost line records consumed by the use case.
Nothing in this package performs I/O.
"""

from costing_kernel.domain.cost_breakdown import CostBreakdown
from costing_kernel.domain.process_stage import (
    STAGE_TRANSITIONS,
    ProcessStage,
    StageStatus,
    StageTransition,
)
from costing_kernel.domain.records import (
    DirectLaborLine,
    DirectMaterialLine,
    OverheadLine,
)
from costing_kernel.domain.values import (
    DEFAULT_CURRENCY,
    DEFAULT_UNIT,
    HourlyRate,
    Money,
    Quantity,
)

__all__ = [
    "CostBreakdown",
    "DEFAULT_CURRENCY",
    "DEFAULT_UNIT",
    "DirectLaborLine",
    "DirectMaterialLine",
    "HourlyRate",
    "Money",
    "OverheadLine",
    "ProcessStage",
    "Quantity",
    "STAGE_TRANSITIONS",
    "StageStatus",
    "StageTransition",
]
