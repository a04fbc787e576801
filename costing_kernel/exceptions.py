"""
Typed Exception Hierarchy for the Process Costing Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Cost calculations fail for a small number of well-defined reasons: a bad
input amount, two values tagged with different currencies, a stage asked to
move from the wrong state. Callers must be able to react to each of these
without parsing message strings, so:

  1. Every error has a TYPED exception class (catch by type, not message)
  2. Every exception has a CODE attribute (machine-readable, API-safe)
  3. Exceptions carry structured DATA (not just a message string)

Example:
    try:
        stage = stage.complete()
    except InvalidStageTransitionError as e:
        log.warning("cannot complete", extra={"status": e.current_status})
        api_response(code=e.code, stage=e.stage_id)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from ProcessCostingError:

    ProcessCostingError (base)
    |
    +-- ValidationError                 construction-time input checks
    |   +-- InvalidAmountError
    |   +-- NonFiniteAmountError
    |   +-- ZeroRateError
    |   +-- NegativeHoursError
    |   +-- NonPositiveQuantityError
    |   +-- NegativeUnitsError
    |   +-- CompletedExceedsStartedError
    |   +-- PercentageOutOfRangeError
    |   +-- InvalidSequenceError
    |   +-- DuplicateStageSequenceError
    |   +-- MaterialsOutsideFirstStageError
    |
    +-- ConsistencyError                operation-time arithmetic checks
    |   +-- CurrencyMismatchError
    |   +-- UnitMismatchError
    |   +-- NegativeResultError
    |   +-- NegativeFactorError
    |   +-- NegativeDivisorError
    |   +-- DivisionByZeroError
    |
    +-- StateMachineError
        +-- InvalidStageTransitionError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category     | Code                      | When Raised
-------------|---------------------------|--------------------------------------------
Validation   | INVALID_AMOUNT            | Negative or unparseable amount/quantity
             | NON_FINITE_AMOUNT         | NaN or Infinity
             | ZERO_RATE                 | Hourly rate of exactly zero
             | NEGATIVE_HOURS            | Labor cost for negative hours
             | NON_POSITIVE_QUANTITY     | Cost breakdown over <= 0 units
             | NEGATIVE_UNITS            | Stage units started/completed < 0
             | COMPLETED_EXCEEDS_STARTED | Completed units > started units
             | PERCENTAGE_OUT_OF_RANGE   | Completion percentage outside [0, 100]
             | INVALID_SEQUENCE          | Stage sequence < 1
             | DUPLICATE_STAGE_SEQUENCE  | Two stages of one route share a sequence
             | MATERIALS_OUTSIDE_FIRST_STAGE | Direct materials on a later route stage
-------------|---------------------------|--------------------------------------------
Consistency  | CURRENCY_MISMATCH         | Money operation across currencies
             | UNIT_MISMATCH             | Quantity operation across units
             | NEGATIVE_RESULT           | Subtraction below zero
             | NEGATIVE_FACTOR           | Multiply/scale by a negative factor
             | NEGATIVE_DIVISOR          | Divide by a negative number
             | DIVISION_BY_ZERO          | Divide by zero
-------------|---------------------------|--------------------------------------------
State        | INVALID_STAGE_TRANSITION  | Transition from a state that forbids it

===============================================================================
DESIGN DECISIONS
===============================================================================

1. Inherit from Exception, not ValueError.
   Domain errors are catchable as a group through ProcessCostingError and
   never confused with programming errors raised by the standard library.

2. ``code`` is a class attribute.
   Codes are static per type: ``CurrencyMismatchError.code`` works without
   an instance and survives serialization.

3. Context is stored as attributes.
   The structured log formatter copies every public attribute of a raised
   exception into the log payload (``exc_<name>``).

===============================================================================
"""


class ProcessCostingError(Exception):
    """
    Base exception for all process costing errors.

    All subclasses must have a ``code`` class attribute for machine-readable
    error identification.
    """

    code: str = "PROCESS_COSTING_ERROR"


# Validation errors


class ValidationError(ProcessCostingError):
    """Base exception for construction-time validation failures."""

    code: str = "VALIDATION_ERROR"


class InvalidAmountError(ValidationError):
    """Amount or quantity is negative or not a number."""

    code: str = "INVALID_AMOUNT"

    def __init__(self, value: str, reason: str):
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid amount {value}: {reason}")


class NonFiniteAmountError(ValidationError):
    """Amount or quantity is NaN or infinite."""

    code: str = "NON_FINITE_AMOUNT"

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Amount must be a finite number, got {value}")


class ZeroRateError(ValidationError):
    """Hourly rate of zero is a configuration error, not a valid rate."""

    code: str = "ZERO_RATE"

    def __init__(self, currency: str):
        self.currency = currency
        super().__init__(f"Hourly rate cannot be zero ({currency})")


class NegativeHoursError(ValidationError):
    """Labor hours cannot be negative."""

    code: str = "NEGATIVE_HOURS"

    def __init__(self, hours: str):
        self.hours = hours
        super().__init__(f"Hours cannot be negative: {hours}")


class NonPositiveQuantityError(ValidationError):
    """A cost breakdown must cover at least some produced units."""

    code: str = "NON_POSITIVE_QUANTITY"

    def __init__(self, quantity: str):
        self.quantity = quantity
        super().__init__(f"Quantity must be positive, got {quantity}")


class NegativeUnitsError(ValidationError):
    """Stage unit counts cannot be negative."""

    code: str = "NEGATIVE_UNITS"

    def __init__(self, field_name: str, units: str):
        self.field_name = field_name
        self.units = units
        super().__init__(f"{field_name} cannot be negative: {units}")


class CompletedExceedsStartedError(ValidationError):
    """More units completed than were started in the stage."""

    code: str = "COMPLETED_EXCEEDS_STARTED"

    def __init__(self, units_completed: str, units_started: str):
        self.units_completed = units_completed
        self.units_started = units_started
        super().__init__(
            f"Completed units ({units_completed}) cannot exceed "
            f"started units ({units_started})"
        )


class PercentageOutOfRangeError(ValidationError):
    """Completion percentage must lie between 0 and 100 inclusive."""

    code: str = "PERCENTAGE_OUT_OF_RANGE"

    def __init__(self, percentage: str):
        self.percentage = percentage
        super().__init__(
            f"Completion percentage must be between 0 and 100, got {percentage}"
        )


class InvalidSequenceError(ValidationError):
    """Stage sequence numbers start at 1."""

    code: str = "INVALID_SEQUENCE"

    def __init__(self, sequence: int):
        self.sequence = sequence
        super().__init__(f"Sequence must be at least 1, got {sequence}")


class DuplicateStageSequenceError(ValidationError):
    """Two stages of the same route claim the same sequence number."""

    code: str = "DUPLICATE_STAGE_SEQUENCE"

    def __init__(self, sequence: int, stage_ids: list[str]):
        self.sequence = sequence
        self.stage_ids = stage_ids
        super().__init__(
            f"Stages {', '.join(stage_ids)} share sequence {sequence}"
        )


class MaterialsOutsideFirstStageError(ValidationError):
    """Direct materials are issued to the first stage of a route only."""

    code: str = "MATERIALS_OUTSIDE_FIRST_STAGE"

    def __init__(self, stage_id: str, sequence: int):
        self.stage_id = stage_id
        self.sequence = sequence
        super().__init__(
            f"Stage {stage_id} (sequence {sequence}) cannot carry direct materials; "
            "later stages receive them through transferred-in cost"
        )


# Consistency errors


class ConsistencyError(ProcessCostingError):
    """Base exception for arithmetic that would break a value invariant."""

    code: str = "CONSISTENCY_ERROR"


class CurrencyMismatchError(ConsistencyError):
    """Operation mixes two currencies."""

    code: str = "CURRENCY_MISMATCH"

    def __init__(self, left: str, right: str):
        self.left = left
        self.right = right
        super().__init__(f"Cannot operate on different currencies: {left} and {right}")


class UnitMismatchError(ConsistencyError):
    """Operation mixes two units of measure."""

    code: str = "UNIT_MISMATCH"

    def __init__(self, left: str, right: str):
        self.left = left
        self.right = right
        super().__init__(f"Cannot operate on different units: {left} and {right}")


class NegativeResultError(ConsistencyError):
    """Subtraction would produce a negative balance."""

    code: str = "NEGATIVE_RESULT"

    def __init__(self, minuend: str, subtrahend: str):
        self.minuend = minuend
        self.subtrahend = subtrahend
        super().__init__(
            f"Subtraction would result in negative value: {minuend} - {subtrahend}"
        )


class NegativeFactorError(ConsistencyError):
    """Multiplier is negative."""

    code: str = "NEGATIVE_FACTOR"

    def __init__(self, factor: str):
        self.factor = factor
        super().__init__(f"Cannot multiply by negative factor: {factor}")


class NegativeDivisorError(ConsistencyError):
    """Divisor is negative."""

    code: str = "NEGATIVE_DIVISOR"

    def __init__(self, divisor: str):
        self.divisor = divisor
        super().__init__(f"Cannot divide by negative divisor: {divisor}")


class DivisionByZeroError(ConsistencyError):
    """Divisor is zero."""

    code: str = "DIVISION_BY_ZERO"

    def __init__(self):
        super().__init__("Cannot divide by zero")


# State machine errors


class StateMachineError(ProcessCostingError):
    """Base exception for state machine violations."""

    code: str = "STATE_MACHINE_ERROR"


class InvalidStageTransitionError(StateMachineError):
    """A stage transition was attempted from a state that does not allow it."""

    code: str = "INVALID_STAGE_TRANSITION"

    def __init__(self, stage_id: str, current_status: str, action: str):
        self.stage_id = stage_id
        self.current_status = current_status
        self.action = action
        super().__init__(
            f"Cannot {action} stage {stage_id} from status: {current_status}"
        )
