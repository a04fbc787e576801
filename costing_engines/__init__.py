"""
Module: costing_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines built on the process costing kernel.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import costing_kernel (and sibling engine modules).
    MUST NOT import costing_services or costing_config.

Invariants enforced:
    - Engines never read the clock; identical inputs give identical outputs.
    - Decimal-only arithmetic.

Audit relevance:
    Every engine invocation is traced via ``@traced_engine``
    (see ``costing_engines.tracer``), emitting COSTING_ENGINE_TRACE records.

Usage:
    from costing_engines.variance import CostVarianceCalculator
    from costing_engines.equivalent_units import EquivalentUnitsCalculator
    from costing_engines.stage_route import summarize_stages, transfer_stage_costs
"""

from costing_engines.equivalent_units import (
    CostPerEquivalentUnit,
    EquivalentUnitsCalculator,
    EquivalentUnitsInput,
    EquivalentUnitsResult,
)
from costing_engines.stage_route import (
    StageCostInput,
    StageCostResult,
    StageCostRoute,
    StageRouteSummary,
    summarize_stages,
    transfer_stage_costs,
)
from costing_engines.tracer import compute_input_fingerprint, traced_engine
from costing_engines.variance import (
    CostVarianceCalculator,
    CostVarianceReport,
    VarianceSeverity,
    VarianceThresholds,
)

__all__ = [
    "CostPerEquivalentUnit",
    "CostVarianceCalculator",
    "CostVarianceReport",
    "EquivalentUnitsCalculator",
    "EquivalentUnitsInput",
    "EquivalentUnitsResult",
    "StageCostInput",
    "StageCostResult",
    "StageCostRoute",
    "StageRouteSummary",
    "VarianceSeverity",
    "VarianceThresholds",
    "compute_input_fingerprint",
    "summarize_stages",
    "traced_engine",
    "transfer_stage_costs",
]
