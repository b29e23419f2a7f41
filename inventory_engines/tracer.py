"""
inventory_engines.tracer -- INVENTORY_ENGINE_TRACE records for engine calls.

Responsibility:
    ``@traced_engine`` wraps a pure engine entry point and, after each
    call, logs one INVENTORY_ENGINE_TRACE record naming the engine, its
    version, how long the call took, and a short fingerprint of the
    inputs it was asked to compute over.  Two calls with equal inputs
    share a fingerprint, which makes repeated allocations and
    recomputed depreciation easy to spot in the log stream.

Architecture position:
    Engines -- logging is the only side effect; arguments are read,
    never modified.  Uses the stdlib logger directly so engines stay free
    of kernel imports; the logger sits under ``inventory_kernel`` and is
    handled by ``configure_logging()``.

Fingerprint rules:
    - Only the named parameters take part, whether passed positionally or
      by keyword.  A parameter that was not supplied counts as null.
    - Mappings are key-order independent, sets are sorted, sequences keep
      their order, dataclasses contribute their fields.
    - SHA-256 over the canonical JSON, first 16 hex characters.
"""

from __future__ import annotations

import dataclasses
import functools
import hashlib
import inspect
import json
import logging
import time
from collections.abc import Callable, Mapping
from typing import Any

TRACE_TYPE = "INVENTORY_ENGINE_TRACE"

_logger = logging.getLogger("inventory_kernel.engines.tracer")


def _plain(value: Any) -> Any:
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return _plain(dataclasses.asdict(value))
    if isinstance(value, Mapping):
        return {str(key): _plain(item) for key, item in value.items()}
    if isinstance(value, (set, frozenset)):
        return sorted(str(_plain(item)) for item in value)
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return str(value)


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    arguments: Mapping[str, Any],
) -> str:
    """Short, deterministic hash of ``arguments`` restricted to ``fingerprint_fields``."""
    selected = [[name, _plain(arguments.get(name))] for name in fingerprint_fields]
    canonical = json.dumps(selected, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable:
    """
    Decorator emitting INVENTORY_ENGINE_TRACE after every successful call.

    Args:
        engine_name: Engine identifier, e.g. ``"sequence"``.
        engine_version: Version of the engine's rules, e.g. ``"1.0"``.
        fingerprint_fields: Parameter names hashed into ``input_fingerprint``.
            Empty means no fingerprint (an empty string is logged).
    """

    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)

        def fingerprint(args: tuple, kwargs: dict) -> str:
            if not fingerprint_fields:
                return ""
            try:
                arguments = signature.bind(*args, **kwargs).arguments
            except TypeError:
                # the call below raises the real error
                arguments = kwargs
            return compute_input_fingerprint(fingerprint_fields, arguments)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            input_fingerprint = fingerprint(args, kwargs)
            started = time.perf_counter()
            result = func(*args, **kwargs)
            elapsed = time.perf_counter() - started

            _logger.info(TRACE_TYPE, extra={
                "trace_type": TRACE_TYPE,
                "engine_name": engine_name,
                "engine_version": engine_version,
                "input_fingerprint": input_fingerprint,
                "duration_ms": round(elapsed * 1000, 3),
                "function": func.__qualname__,
            })
            return result

        return wrapper

    return decorator
