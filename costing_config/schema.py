"""
Process Costing Configuration Schema.

Defaults applied when callers omit a currency or unit, and the percentage
limits used to classify cost variances.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Self

from costing_engines.variance import VarianceThresholds
from costing_kernel.domain.values import DEFAULT_CURRENCY, DEFAULT_UNIT
from costing_kernel.logging_config import get_logger

logger = get_logger("config.schema")


@dataclass
class ProcessCostingConfig:
    """
    Configuration schema for process costing.

    Currency and unit are opaque tags; no ISO 4217 lookup is performed.
    """

    # Tag used when a caller does not name a currency
    default_currency: str = DEFAULT_CURRENCY

    # Unit of measure for produced quantities
    default_unit: str = DEFAULT_UNIT

    # Severity limits for actual vs. standard cost variance
    variance_thresholds: VarianceThresholds = field(
        default_factory=VarianceThresholds,
    )

    def __post_init__(self):
        if not self.default_currency or not self.default_currency.strip():
            raise ValueError("default_currency cannot be empty")
        if not self.default_unit or not self.default_unit.strip():
            raise ValueError("default_unit cannot be empty")

    @classmethod
    def with_defaults(cls) -> Self:
        """Create config with standard defaults."""
        logger.info("process_costing_config_created_with_defaults")
        return cls()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create config from dictionary."""
        data = dict(data)
        thresholds = data.get("variance_thresholds")
        if isinstance(thresholds, dict):
            data["variance_thresholds"] = VarianceThresholds(
                **{k: Decimal(str(v)) for k, v in thresholds.items()}
            )
        logger.info(
            "process_costing_config_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        return cls(**data)
