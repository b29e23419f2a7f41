"""
Module: inventory_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines.  This is the canonical import surface for the
    modules layer.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import inventory_kernel exceptions and logging.
    MUST NOT import inventory_modules.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()`` or ``date.today()``.
      Evaluation dates are explicit parameters supplied by services.
    - Decimal-only arithmetic for currency amounts.
    - Determinism: identical inputs always produce identical outputs.

Audit relevance:
    Engine invocations are traced via ``@traced_engine`` (see
    ``inventory_engines.tracer``), emitting INVENTORY_ENGINE_TRACE records.
"""

from inventory_engines.codes import (
    AssetCodeBuilder,
    AssetCodeParts,
    base_code_of,
    pad_segment,
)
from inventory_engines.depreciation import (
    DepreciationEngine,
    DepreciationInput,
    DepreciationResult,
    economic_life_months,
    months_between,
    round_currency,
)
from inventory_engines.sequence import (
    SequenceAllocator,
    SequenceRange,
    parse_sequence,
    split_code,
)
from inventory_engines.tracer import traced_engine

__all__ = [
    # Sequence
    "SequenceAllocator",
    "SequenceRange",
    "parse_sequence",
    "split_code",
    # Depreciation
    "DepreciationEngine",
    "DepreciationInput",
    "DepreciationResult",
    "economic_life_months",
    "months_between",
    "round_currency",
    # Codes
    "AssetCodeBuilder",
    "AssetCodeParts",
    "base_code_of",
    "pad_segment",
    # Tracing
    "traced_engine",
]
