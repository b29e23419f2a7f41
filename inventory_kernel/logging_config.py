"""
Structured JSON logging for the inventory kernel.

Every record under the ``inventory_kernel`` logger hierarchy is written as
one JSON object per line:

    {"ts": ..., "level": "INFO", "logger": "inventory_kernel.modules.assets.service",
     "message": "asset_registered", "actor_id": ..., "asset_code": "001.10.1.24.001"}

Request-scoped fields (actor, bulk batch, asset code, correlation and trace
ids) live in ``LogContext`` and are merged into every record emitted while
they are set.  ``extra={...}`` keys are merged after them.
"""

__all__ = [
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

import json
import logging
import os
import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

LOGGER_ROOT = "inventory_kernel"
LOG_LEVEL_ENV = "INVENTORY_LOG_LEVEL"

# ---------------------------------------------------------------------------
# Context propagation
# ---------------------------------------------------------------------------

_CONTEXT_FIELDS = (
    "correlation_id",
    "actor_id",
    "bulk_id",
    "asset_code",
    "trace_id",
)

_context_vars: dict[str, ContextVar[str | None]] = {
    name: ContextVar(f"inventory_log_{name}", default=None) for name in _CONTEXT_FIELDS
}


def _context_var(name: str) -> ContextVar[str | None]:
    try:
        return _context_vars[name]
    except KeyError:
        raise TypeError(
            f"Unknown log context field {name!r}; expected one of {_CONTEXT_FIELDS}"
        ) from None


class LogContext:
    """
    ContextVar-backed holder for request-scoped log fields.

    Safe across threads and asyncio tasks: each keeps its own values.
    Only the fields in ``_CONTEXT_FIELDS`` are accepted.
    """

    @staticmethod
    def set(**fields: str | None) -> None:
        """Set context fields.  ``None`` values leave a field unchanged."""
        for name, value in fields.items():
            var = _context_var(name)
            if value is not None:
                var.set(str(value))

    @staticmethod
    def get_all() -> dict[str, str]:
        """All fields currently set, in declaration order."""
        return {
            name: value
            for name, var in _context_vars.items()
            if (value := var.get()) is not None
        }

    @staticmethod
    def clear() -> None:
        for var in _context_vars.values():
            var.set(None)

    @staticmethod
    @contextmanager
    def bind(**fields: str | None) -> Iterator[type["LogContext"]]:
        """Set fields for the duration of a ``with`` block, then restore them."""
        tokens = []
        for name, value in fields.items():
            var = _context_var(name)
            if value is not None:
                tokens.append((var, var.set(str(value))))
        try:
            yield LogContext
        finally:
            for var, token in reversed(tokens):
                var.reset(token)


# ---------------------------------------------------------------------------
# JSON Formatter
# ---------------------------------------------------------------------------

# Attributes every LogRecord carries; anything else came from ``extra``.
_RECORD_ATTRIBUTES: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "taskName"}


def _json_default(obj: Any) -> Any:
    if isinstance(obj, (UUID, Decimal)):
        return str(obj)
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, (set, frozenset)):
        return sorted(obj, key=str)
    return str(obj)


class StructuredFormatter(logging.Formatter):
    """
    Formats each log record as a single JSON line.

    Key precedence: envelope, then ``LogContext``, then ``extra`` keys.  A
    later source never overwrites an earlier one.  Exceptions contribute
    ``exc_type``, ``exc_message``, ``exc_code`` and one ``exc_<attr>`` per
    public attribute of the exception.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in LogContext.get_all().items():
            payload.setdefault(key, value)
        for key, value in vars(record).items():
            if key not in _RECORD_ATTRIBUTES:
                payload.setdefault(key, value)
        if record.exc_info and record.exc_info[1] is not None:
            payload.update(self._exception_fields(record.exc_info[1]))
            payload["traceback"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=_json_default)

    @staticmethod
    def _exception_fields(exc: BaseException) -> dict[str, Any]:
        fields: dict[str, Any] = {
            "exc_type": type(exc).__name__,
            "exc_message": str(exc),
        }
        code = getattr(exc, "code", None)
        if code is not None:
            fields["exc_code"] = code
        for name, value in vars(exc).items():
            if not name.startswith("_") and name != "code":
                fields[f"exc_{name}"] = value
        return fields


# ---------------------------------------------------------------------------
# Logger factory
# ---------------------------------------------------------------------------


def get_logger(name: str) -> logging.Logger:
    """Logger ``inventory_kernel.<name>``."""
    return logging.getLogger(f"{LOGGER_ROOT}.{name}")


# ---------------------------------------------------------------------------
# Initialization
# ---------------------------------------------------------------------------

_configured = False
_configure_lock = threading.Lock()


def _resolve_level(level: int | str | None) -> int:
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "INFO")
    if isinstance(level, str):
        levels = logging.getLevelNamesMapping()
        if level.upper() not in levels:
            raise ValueError(f"Unknown log level {level!r}")
        return levels[level.upper()]
    return level


def configure_logging(
    *,
    level: int | str | None = None,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """
    Attach a JSON handler to the ``inventory_kernel`` hierarchy.

    Only the first call has an effect until ``reset_logging()``.  Without
    an explicit ``level`` the ``INVENTORY_LOG_LEVEL`` environment variable
    is used, defaulting to INFO.  Records do not propagate to the root
    logger.
    """
    global _configured
    resolved = _resolve_level(level)
    with _configure_lock:
        if _configured:
            return
        _configured = True

    target = handler if handler is not None else logging.StreamHandler(stream or sys.stderr)
    target.setFormatter(StructuredFormatter())

    root = logging.getLogger(LOGGER_ROOT)
    root.setLevel(resolved)
    root.propagate = False
    root.addHandler(target)


def reset_logging() -> None:
    """Drop handlers and forget configuration. FOR TESTING ONLY."""
    global _configured
    with _configure_lock:
        _configured = False
    root = logging.getLogger(LOGGER_ROOT)
    root.handlers.clear()
    root.setLevel(logging.WARNING)
