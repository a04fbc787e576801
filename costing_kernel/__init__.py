"""
Process Costing Kernel

Pure domain model for manufacturing cost allocation under process costing:
- Money, Quantity and HourlyRate value objects
- CostBreakdown (material / labor / overhead against produced units)
- ProcessStage state machine with equivalent units and WIP valuation
- Typed exceptions and structured JSON logging
"""

__version__ = "0.1.0"
