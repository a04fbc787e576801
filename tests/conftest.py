"""
Shared fixtures for the process costing test suite.

Everything under test is pure or talks to an in-memory fake repository,
so there is no database or network setup here. Logging is reset around
every test so handlers installed by one test never leak into the next.
"""

import json
import logging
from decimal import Decimal
from io import StringIO

import pytest

from costing_kernel.domain.cost_breakdown import CostBreakdown
from costing_kernel.domain.process_stage import ProcessStage
from costing_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    reset_logging,
)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _clean_logging():
    """Reset logging state and LogContext between tests."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


@pytest.fixture
def captured_logs():
    """
    Capture costing_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            stage.start()
            logs = captured_logs()
            assert any(r["message"] == "stage_transition" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("costing_kernel")
    previous_level = root.level
    root.addHandler(handler)
    root.setLevel(logging.DEBUG)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Domain fixtures
# =============================================================================


@pytest.fixture
def standard_breakdown() -> CostBreakdown:
    """Material 5000, labor 3000, overhead 2000 over 100 units (SAR)."""
    return CostBreakdown.create(
        Decimal("5000"), Decimal("3000"), Decimal("2000"), Decimal("100")
    )


@pytest.fixture
def mixing_stage() -> ProcessStage:
    """In-progress stage: 1000 started, 400 completed, WIP 50% complete."""
    return (
        ProcessStage.create("stage-1", "Mixing", 1, units_started=1000)
        .start()
        .with_units_completed(400)
        .with_completion_percentage(50)
        .with_accumulated_cost(10000)
    )
