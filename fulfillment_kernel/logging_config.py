"""
Structured JSON logging for the fulfillment kernel.

Every record under the ``fulfillment_kernel`` logger is written as one JSON
line.  The line carries the request context bound by the entry points
(correlation id, tenant, barcode, operation), any ``extra=`` fields the
call site passed, and, for failures, the structured attributes of the
kernel exception (``exc_code``, ``exc_shortfall``, ...).

Typical entry-point usage::

    with LogContext.bind(tenant_id=tenant_id, barcode=barcode,
                         operation="set_shipment_target"):
        logger.info("allocation_applied", extra={"new_total": 5})
"""

__all__ = [
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

import dataclasses
import json
import logging
import sys
import threading
from contextvars import ContextVar
from datetime import UTC, date, datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

_LOGGER_PREFIX = "fulfillment_kernel"

# ---------------------------------------------------------------------------
# Request context
# ---------------------------------------------------------------------------

_CONTEXT_FIELDS = ("correlation_id", "tenant_id", "barcode", "operation")

_EMPTY: Mapping[str, str] = MappingProxyType({})

_context: ContextVar[Mapping[str, str]] = ContextVar(
    "fulfillment_log_context", default=_EMPTY
)


def _merged(**fields: str | None) -> Mapping[str, str]:
    current = dict(_context.get())
    for name, value in fields.items():
        if name in _CONTEXT_FIELDS and value is not None:
            current[name] = value
    return MappingProxyType(current)


class LogContext:
    """
    Fields stamped onto every record logged by the current thread or task.

    The whole context lives in one ContextVar holding a read-only mapping,
    so ``bind`` can restore the previous context with a single token.
    Unknown field names are ignored.
    """

    @classmethod
    def set(
        cls,
        *,
        correlation_id: str | None = None,
        tenant_id: str | None = None,
        barcode: str | None = None,
        operation: str | None = None,
    ) -> None:
        _context.set(
            _merged(
                correlation_id=correlation_id,
                tenant_id=tenant_id,
                barcode=barcode,
                operation=operation,
            )
        )

    @classmethod
    def get_all(cls) -> dict[str, str]:
        return dict(_context.get())

    @classmethod
    def clear(cls) -> None:
        _context.set(_EMPTY)

    @classmethod
    def bind(cls, **fields: str | None) -> "_BoundContext":
        """Set fields for the duration of a ``with`` block."""
        return _BoundContext(fields)


class _BoundContext:
    def __init__(self, fields: dict[str, str | None]):
        self._fields = fields
        self._token = None

    def __enter__(self) -> type[LogContext]:
        self._token = _context.set(_merged(**self._fields))
        return LogContext

    def __exit__(self, *exc: Any) -> None:
        _context.reset(self._token)


# ---------------------------------------------------------------------------
# JSON formatting
# ---------------------------------------------------------------------------

_RESERVED_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "taskName"}


def _to_json(value: Any) -> Any:
    """Fallback for values ``json`` cannot encode: enums, DTOs, dates."""
    if isinstance(value, Enum):
        return value.value
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    return str(value)


def _exception_fields(exc: BaseException) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "exc_type": type(exc).__name__,
        "exc_message": str(exc),
    }
    code = getattr(exc, "code", None)
    if code is not None:
        fields["exc_code"] = code
    # Kernel exceptions keep barcode, shortfall, store name etc. as attributes.
    for name, value in vars(exc).items():
        if not name.startswith("_") and name not in ("args", "code"):
            fields[f"exc_{name}"] = value
    return fields


class StructuredFormatter(logging.Formatter):
    """Render a record as ``{"ts", "level", "logger", "message", ...}``."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **LogContext.get_all(),
        }
        for name, value in vars(record).items():
            if name not in _RESERVED_ATTRS:
                payload.setdefault(name, value)

        if record.exc_info and record.exc_info[1] is not None:
            payload.update(_exception_fields(record.exc_info[1]))
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=_to_json)


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------


def get_logger(name: str) -> logging.Logger:
    """Logger ``fulfillment_kernel.<name>``."""
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


_configured = False
_configure_lock = threading.Lock()


def configure_logging(
    *,
    level: int | str = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """
    Attach one JSON handler to the ``fulfillment_kernel`` logger.

    Only the first call has an effect until ``reset_logging`` runs, so the
    engine factory and the CLI can both call it safely.  Records do not
    propagate to the root logger.
    """
    global _configured
    with _configure_lock:
        if _configured:
            return
        _configured = True

    kernel_logger = logging.getLogger(_LOGGER_PREFIX)
    kernel_logger.setLevel(level)
    kernel_logger.propagate = False

    target = handler if handler is not None else logging.StreamHandler(stream or sys.stderr)
    target.setFormatter(StructuredFormatter())
    kernel_logger.addHandler(target)


def reset_logging() -> None:
    """Drop the configured handler so tests can configure again."""
    global _configured
    with _configure_lock:
        _configured = False
    kernel_logger = logging.getLogger(_LOGGER_PREFIX)
    kernel_logger.handlers.clear()
    kernel_logger.setLevel(logging.WARNING)
