"""
Configuration Loader (``costing_config.loader``).

Responsibility
--------------
Loads a YAML configuration file and parses it into a
``ProcessCostingConfig``. Runtime callers go through
``costing_config.get_active_config()``.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Unknown keys  -> ``TypeError`` from the dataclass constructor.
* Invalid values  -> ``ValueError`` from schema validation.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from costing_config.schema import ProcessCostingConfig

ROOT_KEY = "process_costing"


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_config(data: dict[str, Any]) -> ProcessCostingConfig:
    """Parse a config dict; the ``process_costing:`` root key is optional."""
    if ROOT_KEY in data:
        data = data[ROOT_KEY] or {}
    return ProcessCostingConfig.from_dict(data)


def load_config(path: Path | str) -> ProcessCostingConfig:
    return parse_config(load_yaml_file(Path(path)))
