"""
Records -- Itemized cost lines supplied by the data-access layer.

Responsibility:
    Immutable DTOs for the three kinds of cost record a manufacturing order
    accumulates: direct material lines, direct labor entries and overhead
    charges. The process cost use case reduces them to CostBreakdown totals.

Architecture position:
    Kernel > Domain -- pure data, zero I/O. Repository implementations may
    return these records directly or plain mappings that are normalized
    through ``from_mapping()`` (snake_case or camelCase keys).

Failure modes:
    - KeyError when a required field is missing from a mapping
    - InvalidAmountError / NonFiniteAmountError for unparseable numbers
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from costing_kernel.domain.values import to_decimal


def _pick(data: Mapping[str, Any], snake: str, camel: str, default: Any = ...) -> Any:
    if snake in data:
        return data[snake]
    if camel in data:
        return data[camel]
    if default is ...:
        raise KeyError(snake)
    return default


@dataclass(frozen=True)
class DirectMaterialLine:
    """One material issued to an order: quantity x unit cost = total cost."""

    item_id: str
    item_name: str
    quantity: Decimal
    unit_cost: Decimal
    total_cost: Decimal

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> DirectMaterialLine:
        return cls(
            item_id=str(_pick(data, "item_id", "itemId", "")),
            item_name=str(_pick(data, "item_name", "itemName", "")),
            quantity=to_decimal(_pick(data, "quantity", "quantity", 0)),
            unit_cost=to_decimal(_pick(data, "unit_cost", "unitCost", 0)),
            total_cost=to_decimal(_pick(data, "total_cost", "totalCost")),
        )


@dataclass(frozen=True)
class DirectLaborLine:
    """One labor entry: hours x hourly rate = total cost."""

    hours: Decimal
    hourly_rate: Decimal
    total_cost: Decimal

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> DirectLaborLine:
        return cls(
            hours=to_decimal(_pick(data, "hours", "hours", 0)),
            hourly_rate=to_decimal(_pick(data, "hourly_rate", "hourlyRate", 0)),
            total_cost=to_decimal(_pick(data, "total_cost", "totalCost")),
        )


@dataclass(frozen=True)
class OverheadLine:
    """An overhead charge applied to an order (utilities, depreciation, ...)."""

    type: str
    description: str
    amount: Decimal

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> OverheadLine:
        return cls(
            type=str(_pick(data, "type", "type", "")),
            description=str(_pick(data, "description", "description", "")),
            amount=to_decimal(_pick(data, "amount", "amount")),
        )
