"""
procurement_kernel.logging_config -- JSON-lines logging for purchasing decisions.

Every record is one JSON object.  Beyond the usual ``ts``/``level``/
``logger``/``message`` keys the formatter knows three procurement shapes:

* **Purchase-order records.**  ``extra={"purchase_order": po}`` is expanded
  into ``purchase_order_id``, ``po_status``, ``po_step`` and
  ``supplier_id``; the order object itself is never serialized.
* **Trace records.**  Records carrying ``trace_type`` (the
  ``PROCUREMENT_ENGINE_TRACE`` emitted by ``@traced_engine`` and the
  ``PROCUREMENT_CONFIG_TRACE`` emitted on config load) get ``kind`` set to
  ``engine_trace`` / ``config_trace``; all other records are ``event``.
* **Kernel errors.**  When a ``ProcurementKernelError`` is attached via
  ``exc_info`` the record carries ``error_code``, ``error_category``
  (``lifecycle``, ``contract``, ``payment``) and ``error_detail`` with the
  exception's structured attributes.

Order-scoped fields (``purchase_order_id``, ``supplier_id``, ``actor_id``,
``correlation_id``) live in ``LogContext`` and are stamped on every record
emitted while they are bound.
"""

from __future__ import annotations

__all__ = [
    "LogContext",
    "StructuredFormatter",
    "configure_logging",
    "get_logger",
    "reset_logging",
]

import json
import logging
import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, date, datetime
from enum import Enum
from typing import Any

from procurement_kernel.domain.purchase_order import PurchaseOrder
from procurement_kernel.exceptions import ProcurementKernelError

_LOGGER_PREFIX = "procurement_kernel"

_CONTEXT_VARS: dict[str, ContextVar[str | None]] = {
    name: ContextVar(f"procurement_log_{name}", default=None)
    for name in ("correlation_id", "purchase_order_id", "supplier_id", "actor_id")
}

_TRACE_KINDS = {
    "PROCUREMENT_ENGINE_TRACE": "engine_trace",
    "PROCUREMENT_CONFIG_TRACE": "config_trace",
}


class LogContext:
    """Order-scoped log fields, safe across threads and asyncio tasks."""

    @staticmethod
    def set(**fields: str | None) -> None:
        """Set the given fields; ``None`` values leave the current value."""
        for name, value in fields.items():
            if value is not None:
                _var(name).set(value)

    @staticmethod
    def get_all() -> dict[str, str]:
        return {
            name: value
            for name, var in _CONTEXT_VARS.items()
            if (value := var.get()) is not None
        }

    @staticmethod
    def clear() -> None:
        for var in _CONTEXT_VARS.values():
            var.set(None)

    @staticmethod
    @contextmanager
    def bind(**fields: str | None) -> Iterator[None]:
        """Set fields for the duration of a ``with`` block, then restore them."""
        tokens = [
            (_var(name), _var(name).set(value))
            for name, value in fields.items()
            if value is not None
        ]
        try:
            yield
        finally:
            for var, token in reversed(tokens):
                var.reset(token)

    @classmethod
    def for_purchase_order(
        cls,
        po: PurchaseOrder,
        actor_id: str | None = None,
    ):
        """Bind ``po``'s id and supplier (and optionally the acting user)."""
        return cls.bind(
            purchase_order_id=po.id,
            supplier_id=po.supplier_id,
            actor_id=actor_id,
        )


def _var(name: str) -> ContextVar[str | None]:
    try:
        return _CONTEXT_VARS[name]
    except KeyError:
        raise ValueError(f"Unknown log context field: {name}") from None


# ---------------------------------------------------------------------------
# Formatter
# ---------------------------------------------------------------------------

_RESERVED = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "taskName"}


def _jsonable(value: Any) -> Any:
    # Decimal amounts and anything unknown fall through to str()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def _order_fields(po: PurchaseOrder) -> dict[str, Any]:
    fields = {
        "purchase_order_id": po.id,
        "po_status": po.status,
        "po_step": po.step,
    }
    if po.supplier_id is not None:
        fields["supplier_id"] = po.supplier_id
    return fields


def _error_category(exc: ProcurementKernelError) -> str:
    """Name of the top-level kernel family, e.g. ``lifecycle`` for InvalidSubtypeError."""
    for klass in type(exc).__mro__:
        if ProcurementKernelError in klass.__bases__:
            return klass.__name__.removesuffix("Error").lower()
    return "kernel"


class StructuredFormatter(logging.Formatter):
    """Render a record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(LogContext.get_all())

        extras = {k: v for k, v in vars(record).items() if k not in _RESERVED}
        po = extras.pop("purchase_order", None)
        if isinstance(po, PurchaseOrder):
            payload.update(_order_fields(po))
        payload.update(extras)
        payload["kind"] = _TRACE_KINDS.get(extras.get("trace_type"), "event")

        if record.exc_info and record.exc_info[1] is not None:
            exc = record.exc_info[1]
            payload["exc_type"] = type(exc).__name__
            payload["exc_message"] = str(exc)
            if isinstance(exc, ProcurementKernelError):
                payload["error_code"] = exc.code
                payload["error_category"] = _error_category(exc)
                payload["error_detail"] = {
                    k: v for k, v in vars(exc).items() if not k.startswith("_")
                }
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=_jsonable)


def get_logger(name: str) -> logging.Logger:
    """Logger ``procurement_kernel.<name>``."""
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------

_configured = False
_lock = threading.Lock()


def configure_logging(
    *,
    level: int = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """Attach a JSON handler to the ``procurement_kernel`` logger once."""
    global _configured
    with _lock:
        if _configured:
            return
        _configured = True

    root = logging.getLogger(_LOGGER_PREFIX)
    root.setLevel(level)
    root.propagate = False
    h = handler or logging.StreamHandler(stream or sys.stderr)
    h.setFormatter(StructuredFormatter())
    root.addHandler(h)


def reset_logging() -> None:
    """Undo ``configure_logging``. Tests only."""
    global _configured
    with _lock:
        _configured = False
    root = logging.getLogger(_LOGGER_PREFIX)
    root.handlers.clear()
    root.setLevel(logging.WARNING)
    root.propagate = True
