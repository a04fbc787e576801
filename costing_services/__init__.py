"""
costing_services -- orchestration over the process costing kernel.

Services depend on ports (Protocols) for data access and never perform I/O
themselves.
"""

from costing_services.process_cost import (
    CalculateProcessCostRequest,
    CalculateProcessCostUseCase,
    CostLineCounts,
    ProcessCostingRepository,
    ProcessCostResult,
)

__all__ = [
    "CalculateProcessCostRequest",
    "CalculateProcessCostUseCase",
    "CostLineCounts",
    "ProcessCostResult",
    "ProcessCostingRepository",
]
