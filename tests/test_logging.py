"""Tests for the structured logging system (costing_kernel/logging_config.py)."""

import json
import logging
from decimal import Decimal
from io import StringIO

import pytest

from costing_kernel.domain.process_stage import ProcessStage
from costing_kernel.domain.values import Money
from costing_kernel.exceptions import CurrencyMismatchError, InvalidStageTransitionError
from costing_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
)


def _make_handler() -> tuple[logging.Handler, StringIO]:
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    return handler, stream


def _parse_log(stream: StringIO) -> dict:
    """Parse the first JSON log line from a stream."""
    line = stream.getvalue().strip().split("\n")[0]
    return json.loads(line)


def _parse_all_logs(stream: StringIO) -> list[dict]:
    """Parse all JSON log lines from a stream."""
    lines = stream.getvalue().strip().split("\n")
    return [json.loads(line) for line in lines if line]


# ---------------------------------------------------------------------------
# StructuredFormatter tests
# ---------------------------------------------------------------------------


class TestStructuredFormatter:
    """Tests for JSON log output format."""

    def test_basic_json_output(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        logger.info("hello")

        record = _parse_log(stream)
        assert record["level"] == "INFO"
        assert record["message"] == "hello"
        assert record["logger"] == "costing_kernel.test"
        assert "ts" in record

    def test_extra_fields_included(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info("costed", extra={"entries": 3, "status": "ok"})

        record = _parse_log(stream)
        assert record["entries"] == 3
        assert record["status"] == "ok"

    def test_decimal_serialized_as_string(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info("amount", extra={"total": Decimal("10000.50")})

        assert _parse_log(stream)["total"] == "10000.50"

    def test_context_fields_included(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        LogContext.set(correlation_id="abc-123", order_id="MO-001")
        get_logger("test").info("test_msg")

        record = _parse_log(stream)
        assert record["correlation_id"] == "abc-123"
        assert record["order_id"] == "MO-001"

    def test_no_context_fields_when_empty(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info("bare_message")

        record = _parse_log(stream)
        assert "correlation_id" not in record
        assert "order_id" not in record

    def test_exception_fields(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        try:
            raise ValueError("boom")
        except ValueError:
            get_logger("test").error("failed", exc_info=True)

        record = _parse_log(stream)
        assert record["exc_type"] == "ValueError"
        assert record["exc_message"] == "boom"
        assert "traceback" in record

    def test_costing_exception_code_extracted(self):
        """Costing exceptions carry a .code attribute and structured fields."""
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        try:
            Money.of(1, "SAR").add(Money.of(1, "USD"))
        except CurrencyMismatchError:
            get_logger("test").error("currency_error", exc_info=True)

        record = _parse_log(stream)
        assert record["exc_code"] == "CURRENCY_MISMATCH"
        assert record["exc_type"] == "CurrencyMismatchError"
        assert record["exc_left"] == "SAR"
        assert record["exc_right"] == "USD"

    def test_transition_error_fields(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        stage = ProcessStage.create("stage-9", "Packing", 1)
        try:
            stage.complete()
        except InvalidStageTransitionError:
            get_logger("test").error("transition_error", exc_info=True)

        record = _parse_log(stream)
        assert record["exc_code"] == "INVALID_STAGE_TRANSITION"
        assert record["exc_stage_id"] == "stage-9"
        assert record["exc_action"] == "complete"
        assert record["exc_current_status"] == "NOT_STARTED"

    def test_valid_json_every_line(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        logger.info("first")
        logger.warning("second", extra={"k": "v"})
        logger.debug("third")

        logs = _parse_all_logs(stream)
        # default level is INFO, so the debug line is dropped
        assert len(logs) == 2
        for record in logs:
            assert {"ts", "level", "logger", "message"} <= record.keys()


# ---------------------------------------------------------------------------
# LogContext tests
# ---------------------------------------------------------------------------


class TestLogContext:
    """Tests for context propagation."""

    def test_set_and_get(self):
        LogContext.set(correlation_id="x", order_id="y")
        assert LogContext.get_all() == {"correlation_id": "x", "order_id": "y"}

    def test_clear(self):
        LogContext.set(correlation_id="x")
        LogContext.clear()
        assert LogContext.get_all() == {}

    def test_bind_context_manager(self):
        LogContext.set(order_id="outer")
        with LogContext.bind(order_id="inner"):
            assert LogContext.get_all()["order_id"] == "inner"
        assert LogContext.get_all()["order_id"] == "outer"

    def test_bind_restores_none(self):
        assert "stage_id" not in LogContext.get_all()
        with LogContext.bind(stage_id="temp"):
            assert LogContext.get_all()["stage_id"] == "temp"
        assert "stage_id" not in LogContext.get_all()

    def test_all_fields(self):
        LogContext.set(correlation_id="c", order_id="o", stage_id="s")
        assert LogContext.get_all() == {"correlation_id": "c", "order_id": "o", "stage_id": "s"}

    def test_bind_unknown_field(self):
        with pytest.raises(KeyError):
            with LogContext.bind(user_id="u"):
                pass

    def test_bind_restores_on_error(self):
        with pytest.raises(RuntimeError):
            with LogContext.bind(order_id="MO-1"):
                raise RuntimeError("abort")
        assert LogContext.get_all() == {}


# ---------------------------------------------------------------------------
# configure_logging tests
# ---------------------------------------------------------------------------


class TestConfigureLogging:
    """Tests for initialization."""

    def test_idempotent(self):
        h1, _ = _make_handler()
        configure_logging(handler=h1)
        h2, _ = _make_handler()
        configure_logging(handler=h2)  # second call is no-op
        root = logging.getLogger("costing_kernel")
        assert len(root.handlers) == 1

    def test_get_logger_returns_child(self):
        assert get_logger("services.process_cost").name == "costing_kernel.services.process_cost"

    def test_stage_transition_logged_at_debug(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler, level=logging.DEBUG)
        ProcessStage.create("stage-1", "Mixing", 1).start()

        record = _parse_log(stream)
        assert record["message"] == "stage_transition"
        assert record["level"] == "DEBUG"
        assert record["logger"] == "costing_kernel.domain.process_stage"
        assert record["from_status"] == "NOT_STARTED"
        assert record["to_status"] == "IN_PROGRESS"
        assert record["action"] == "start"
        assert record["stage_id"] == "stage-1"

    def test_stage_id_not_left_in_context(self):
        ProcessStage.create("stage-1", "Mixing", 1).start()
        assert "stage_id" not in LogContext.get_all()
