"""
costing_config -- single public entrypoint for process costing configuration.

Responsibility:
    Provides ``get_active_config()``, the one place that decides which
    configuration file (if any) governs a process. Sits above
    ``costing_kernel`` and ``costing_engines``; the kernel never imports
    from this package.

Resolution order:
    1. explicit ``path`` argument
    2. ``PROCESS_COSTING_CONFIG`` environment variable
    3. built-in defaults

Audit relevance:
    Every call emits a ``COSTING_CONFIG_TRACE`` log record naming the source
    and the resolved defaults.
"""

from __future__ import annotations

import os
from pathlib import Path

from costing_config.loader import load_config
from costing_config.schema import ProcessCostingConfig
from costing_kernel.logging_config import get_logger

_logger = get_logger("config")

CONFIG_ENV_VAR = "PROCESS_COSTING_CONFIG"


def get_active_config(path: Path | str | None = None) -> ProcessCostingConfig:
    """Resolve the active configuration.

    Raises:
        FileNotFoundError: If a named file does not exist.
        yaml.YAMLError: If the file is not valid YAML.
        ValueError: If the file contents fail validation.
    """
    source = path or os.environ.get(CONFIG_ENV_VAR)
    if source:
        config = load_config(source)
        source_name = str(source)
    else:
        config = ProcessCostingConfig.with_defaults()
        source_name = "defaults"

    _logger.info(
        "COSTING_CONFIG_TRACE",
        extra={
            "trace_type": "COSTING_CONFIG_TRACE",
            "source": source_name,
            "default_currency": config.default_currency,
            "default_unit": config.default_unit,
            "variance_medium_percent": str(config.variance_thresholds.medium_percent),
            "variance_high_percent": str(config.variance_thresholds.high_percent),
        },
    )
    return config


__all__ = [
    "CONFIG_ENV_VAR",
    "ProcessCostingConfig",
    "get_active_config",
    "load_config",
]
