"""Tests for the structured logging system (fulfillment_kernel/logging_config.py)."""

import json
import logging
from io import StringIO

import pytest

from fulfillment_engines.allocation import AllocationAction
from fulfillment_kernel.exceptions import InsufficientStockError
from fulfillment_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)


@pytest.fixture(autouse=True)
def _clean_logging():
    """Reset logging state between tests."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


def _make_handler() -> tuple[logging.Handler, StringIO]:
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    return handler, stream


def _parse_all_logs(stream: StringIO) -> list[dict]:
    lines = stream.getvalue().strip().split("\n")
    return [json.loads(line) for line in lines if line]


def _parse_log(stream: StringIO) -> dict:
    return _parse_all_logs(stream)[0]


# ---------------------------------------------------------------------------
# StructuredFormatter tests
# ---------------------------------------------------------------------------


class TestStructuredFormatter:
    def test_basic_json_output(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info("hello")

        record = _parse_log(stream)
        assert record["level"] == "INFO"
        assert record["message"] == "hello"
        assert record["logger"] == "fulfillment_kernel.test"
        assert "ts" in record

    def test_extra_fields_included(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info("allocation_applied", extra={"new_total": 5, "action": "replace"})

        record = _parse_log(stream)
        assert record["new_total"] == 5
        assert record["action"] == "replace"

    def test_enum_extra_encoded_by_value(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info("allocation_applied", extra={"action": AllocationAction.REPLACE})

        assert _parse_log(stream)["action"] == "replace"

    def test_context_fields_included(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        LogContext.set(tenant_id="acme", barcode="880")
        get_logger("test").info("msg")

        record = _parse_log(stream)
        assert record["tenant_id"] == "acme"
        assert record["barcode"] == "880"

    def test_kernel_exception_fields_extracted(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        try:
            raise InsufficientStockError("880", requested=10, available=7)
        except InsufficientStockError:
            get_logger("test").error("allocation_failed", exc_info=True)

        record = _parse_log(stream)
        assert record["exc_code"] == "INSUFFICIENT_STOCK"
        assert record["exc_type"] == "InsufficientStockError"
        assert record["exc_shortfall"] == 3
        assert record["exc_barcode"] == "880"
        assert "traceback" in record

    def test_no_context_fields_when_empty(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info("bare_message")

        record = _parse_log(stream)
        assert "correlation_id" not in record
        assert "tenant_id" not in record

    def test_debug_filtered_at_info(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        logger.info("first")
        logger.debug("second")

        assert [r["message"] for r in _parse_all_logs(stream)] == ["first"]


# ---------------------------------------------------------------------------
# LogContext tests
# ---------------------------------------------------------------------------


class TestLogContext:
    def test_set_and_clear(self):
        LogContext.set(correlation_id="x", operation="set_shipment_target")
        assert LogContext.get_all() == {
            "correlation_id": "x",
            "operation": "set_shipment_target",
        }
        LogContext.clear()
        assert LogContext.get_all() == {}

    def test_bind_restores_previous(self):
        LogContext.set(tenant_id="outer")
        with LogContext.bind(tenant_id="inner", barcode="b"):
            assert LogContext.get_all() == {"tenant_id": "inner", "barcode": "b"}
        assert LogContext.get_all() == {"tenant_id": "outer"}

    def test_bind_ignores_unknown_fields(self):
        with LogContext.bind(colour="red"):
            assert LogContext.get_all() == {}


# ---------------------------------------------------------------------------
# configure_logging tests
# ---------------------------------------------------------------------------


class TestConfigureLogging:
    def test_idempotent(self):
        h1, _ = _make_handler()
        configure_logging(handler=h1)
        h2, _ = _make_handler()
        configure_logging(handler=h2)

        handlers = logging.getLogger("fulfillment_kernel").handlers
        assert h1 in handlers
        assert h2 not in handlers

    def test_level_by_name(self):
        handler, stream = _make_handler()
        configure_logging(level="DEBUG", handler=handler)
        get_logger("deep.nested").debug("hierarchy_test")

        record = _parse_log(stream)
        assert record["logger"] == "fulfillment_kernel.deep.nested"
