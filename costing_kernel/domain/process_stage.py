"""
ProcessStage -- One stage of a multi-stage continuous production process.

Responsibility
--------------
Tracks units started and completed in a stage, the average completion of
units still in process, and the cost accumulated so far. Derives
equivalent units of production (EUP), cost per equivalent unit and the
value of work in process (WIP).

Architecture position
---------------------
**Kernel domain layer** -- pure entity. ZERO I/O. Built on
``costing_kernel.domain.values``.

State machine
-------------
::

    NOT_STARTED --start--> IN_PROGRESS --complete--> COMPLETED
                              |    ^
                   put_on_hold|    |resume / start
                              v    |
                             ON_HOLD

``COMPLETED`` is terminal. The table is exposed as ``STAGE_TRANSITIONS`` so
callers can inspect allowed actions without provoking errors.

Invariants enforced
-------------------
* ``sequence`` >= 1.
* ``completion_percentage`` in [0, 100].
* ``with_units_completed`` never exceeds ``units_started``.
* Derived values never divide by zero: EUP, cost per EUP and WIP fall back
  to zero when their denominator is zero.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
from typing import Any

from costing_kernel.domain.values import (
    DEFAULT_CURRENCY,
    DEFAULT_UNIT,
    Money,
    Numeric,
    Quantity,
    to_decimal,
)
from costing_kernel.exceptions import (
    CompletedExceedsStartedError,
    InvalidSequenceError,
    InvalidStageTransitionError,
    NegativeUnitsError,
    PercentageOutOfRangeError,
    UnitMismatchError,
)
from costing_kernel.logging_config import LogContext, get_logger

logger = get_logger("domain.process_stage")

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


class StageStatus(str, Enum):
    """Lifecycle status of a process stage."""

    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    ON_HOLD = "ON_HOLD"


@dataclass(frozen=True)
class StageTransition:
    """A valid status change for a stage.

    Contract: frozen, descriptive only. ``ProcessStage`` looks the action up
    and checks ``from_states`` before applying it.
    """
    action: str
    from_states: tuple[StageStatus, ...]
    to_state: StageStatus


STAGE_TRANSITIONS: dict[str, StageTransition] = {
    t.action: t
    for t in (
        StageTransition(
            "start", (StageStatus.NOT_STARTED, StageStatus.ON_HOLD), StageStatus.IN_PROGRESS
        ),
        StageTransition("complete", (StageStatus.IN_PROGRESS,), StageStatus.COMPLETED),
        StageTransition("put_on_hold", (StageStatus.IN_PROGRESS,), StageStatus.ON_HOLD),
        StageTransition("resume", (StageStatus.ON_HOLD,), StageStatus.IN_PROGRESS),
    )
}

TERMINAL_STATUSES: frozenset[StageStatus] = frozenset({StageStatus.COMPLETED})


def _units(value: Numeric, field_name: str, unit: str) -> Quantity:
    units = to_decimal(value)
    if units < _ZERO:
        raise NegativeUnitsError(field_name, str(units))
    return Quantity.of(units, unit)


def _percentage(value: Numeric) -> Decimal:
    pct = to_decimal(value)
    if pct < _ZERO or pct > _HUNDRED:
        raise PercentageOutOfRangeError(str(pct))
    return pct


@dataclass(frozen=True)
class ProcessStage:
    """
    Process stage entity.

    Contract:
        Created ``NOT_STARTED`` through ``create``; rebuilt from stored
        data through ``from_raw_data``. Every method returns a new stage.

    Guarantees:
        - ``equivalent_units`` = completed + in_progress * pct / 100
        - ``cost_per_equivalent_unit`` = accumulated_cost / equivalent_units
        - ``total_wip`` = (in_progress * pct / 100) * (accumulated_cost / started)

    Non-goals:
        - Does not know about other stages of the order
          (see ``costing_engines.stage_route``).
    """

    id: str
    name: str
    sequence: int
    status: StageStatus
    units_started: Quantity
    units_completed: Quantity
    completion_percentage: Decimal
    accumulated_cost: Money

    def __post_init__(self) -> None:
        if self.sequence < 1:
            raise InvalidSequenceError(self.sequence)
        object.__setattr__(self, "status", StageStatus(self.status))
        object.__setattr__(
            self, "completion_percentage", _percentage(self.completion_percentage)
        )
        if self.units_started.unit != self.units_completed.unit:
            raise UnitMismatchError(self.units_started.unit, self.units_completed.unit)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def create(
        cls,
        id: str,
        name: str,
        sequence: int,
        units_started: Numeric = 0,
        currency: str = DEFAULT_CURRENCY,
        unit: str = DEFAULT_UNIT,
    ) -> ProcessStage:
        """Create a new stage in ``NOT_STARTED`` with nothing completed and no cost."""
        return cls(
            id=id,
            name=name,
            sequence=sequence,
            status=StageStatus.NOT_STARTED,
            units_started=_units(units_started, "units_started", unit),
            units_completed=Quantity.zero(unit),
            completion_percentage=_ZERO,
            accumulated_cost=Money.zero(currency),
        )

    @classmethod
    def from_raw_data(cls, data: Mapping[str, Any]) -> ProcessStage:
        """
        Rebuild a stage from ``to_dict()`` output (or camelCase JSON).

        Raises:
            KeyError: If a required field is missing.
            ValueError: If ``status`` is not a known StageStatus.
            CompletedExceedsStartedError: If completed > started.
        """

        def pick(snake: str, camel: str, default: Any = ...) -> Any:
            if snake in data:
                return data[snake]
            if camel in data:
                return data[camel]
            if default is ...:
                raise KeyError(snake)
            return default

        unit = data.get("unit") or DEFAULT_UNIT
        started = _units(pick("units_started", "unitsStarted"), "units_started", unit)
        completed = _units(pick("units_completed", "unitsCompleted"), "units_completed", unit)
        if completed.value > started.value:
            raise CompletedExceedsStartedError(str(completed.value), str(started.value))
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            sequence=int(data["sequence"]),
            status=StageStatus(data.get("status", StageStatus.NOT_STARTED)),
            units_started=started,
            units_completed=completed,
            completion_percentage=_percentage(
                pick("completion_percentage", "completionPercentage", 0)
            ),
            accumulated_cost=Money.of(
                pick("accumulated_cost", "accumulatedCost", 0),
                data.get("currency") or DEFAULT_CURRENCY,
            ),
        )

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def currency(self) -> str:
        return self.accumulated_cost.currency

    @property
    def units_in_progress(self) -> Quantity:
        # Floored at zero: with_units_started may shrink started below completed.
        started, completed = self.units_started.value, self.units_completed.value
        if completed >= started:
            return Quantity.zero(self.units_started.unit)
        return Quantity.of(started - completed, self.units_started.unit)

    @property
    def wip_percentage(self) -> Decimal:
        if self.units_started.is_zero:
            return _ZERO
        return self.units_in_progress.value / self.units_started.value * _HUNDRED

    @property
    def _wip_equivalent_units(self) -> Decimal:
        return self.units_in_progress.value * self.completion_percentage / _HUNDRED

    @property
    def equivalent_units(self) -> Decimal:
        return self.units_completed.value + self._wip_equivalent_units

    @property
    def cost_per_equivalent_unit(self) -> Money:
        equivalent = self.equivalent_units
        if equivalent == _ZERO:
            return Money.zero(self.currency)
        return self.accumulated_cost.divide(equivalent)

    @property
    def total_wip(self) -> Money:
        """Cost value of the partially completed inventory in this stage."""
        if self.units_started.is_zero:
            return Money.zero(self.currency)
        cost_per_unit_started = self.accumulated_cost.amount / self.units_started.value
        return Money.of(self._wip_equivalent_units * cost_per_unit_started, self.currency)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------

    def can_transition(self, action: str) -> bool:
        transition = STAGE_TRANSITIONS.get(action)
        return transition is not None and self.status in transition.from_states

    def allowed_actions(self) -> tuple[str, ...]:
        return tuple(a for a in STAGE_TRANSITIONS if self.can_transition(a))

    def _transition(self, action: str, **changes: Any) -> ProcessStage:
        transition = STAGE_TRANSITIONS[action]
        if self.status not in transition.from_states:
            raise InvalidStageTransitionError(self.id, self.status.value, action)
        stage = replace(self, status=transition.to_state, **changes)
        with LogContext.bind(stage_id=self.id):
            logger.debug(
                "stage_transition",
                extra={
                    "action": action,
                    "from_status": self.status.value,
                    "to_status": transition.to_state.value,
                },
            )
        return stage

    def start(self) -> ProcessStage:
        return self._transition("start")

    def complete(self) -> ProcessStage:
        """Finish the stage: every started unit counts as completed."""
        return self._transition(
            "complete",
            units_completed=self.units_started,
            completion_percentage=_HUNDRED,
        )

    def put_on_hold(self) -> ProcessStage:
        return self._transition("put_on_hold")

    def resume(self) -> ProcessStage:
        return self._transition("resume")

    # ------------------------------------------------------------------
    # Immutable updates
    # ------------------------------------------------------------------

    def with_units_started(self, units: Numeric) -> ProcessStage:
        return replace(
            self, units_started=_units(units, "units_started", self.units_started.unit)
        )

    def with_units_completed(self, units: Numeric) -> ProcessStage:
        completed = _units(units, "units_completed", self.units_started.unit)
        if completed.value > self.units_started.value:
            raise CompletedExceedsStartedError(
                str(completed.value), str(self.units_started.value)
            )
        return replace(self, units_completed=completed)

    def with_completion_percentage(self, percentage: Numeric) -> ProcessStage:
        return replace(self, completion_percentage=_percentage(percentage))

    def with_accumulated_cost(self, amount: Numeric) -> ProcessStage:
        return replace(self, accumulated_cost=Money.of(amount, self.currency))

    def add_cost(self, amount: Numeric) -> ProcessStage:
        return replace(
            self,
            accumulated_cost=self.accumulated_cost.add(Money.of(amount, self.currency)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "sequence": self.sequence,
            "status": self.status.value,
            "units_started": self.units_started.value,
            "units_completed": self.units_completed.value,
            "completion_percentage": self.completion_percentage,
            "accumulated_cost": self.accumulated_cost.amount,
            "currency": self.currency,
            "unit": self.units_started.unit,
        }
