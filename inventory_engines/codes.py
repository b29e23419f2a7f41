"""
Module: inventory_engines.codes
Responsibility:
    Compose structured asset codes ``LOCATION.CATEGORY.SOURCE.YY.SEQUENCE``
    from their parts and a sequence produced by ``SequenceAllocator``, and
    derive per-unit display codes for bulk batches (``BASE-NNN``).

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Consumes the integer sequences of ``inventory_engines.sequence``.

Invariants enforced:
    - A built code always has exactly five dot segments and its last
      segment round-trips through ``parse_sequence``.
    - ``build_bulk_codes(base, n)`` has length ``n`` and starts with ``base``.
    - Bulk child suffixes are the absolute 1-based bulk position, so unit
      2 of a batch is ``BASE-002`` whoever regenerates it.

Failure modes:
    - InvalidArgumentError for empty or dotted segments, negative sequence
      or year, non-positive widths or counts.
"""

from __future__ import annotations

from dataclasses import dataclass

from inventory_kernel.exceptions import InvalidArgumentError
from inventory_kernel.logging_config import get_logger
from inventory_engines.sequence import CODE_SEGMENT_SEPARATOR, split_code
from inventory_engines.tracer import traced_engine

logger = get_logger("engines.codes")

DEFAULT_SEQUENCE_WIDTH = 3
DEFAULT_SUFFIX_WIDTH = 3
BULK_SUFFIX_SEPARATOR = "-"


def _require_segment(name: str, value: object) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgumentError(name, value, "must be a non-empty string")
    value = value.strip()
    if CODE_SEGMENT_SEPARATOR in value:
        raise InvalidArgumentError(
            name, value, f"must not contain {CODE_SEGMENT_SEPARATOR!r}"
        )
    return value


def _require_non_negative(name: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidArgumentError(name, value, "must be an integer >= 0")
    return value


def _require_positive(name: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidArgumentError(name, value, "must be a positive integer")
    return value


def pad_segment(value: str, width: int) -> str:
    """Left-pad a numeric-looking code segment with zeros to ``width``."""
    value = _require_segment("segment", value)
    return value.zfill(_require_positive("width", width))


def base_code_of(code: str) -> str:
    """
    The base code of a bulk child code (``BASE-002 -> BASE``).

    Codes without a numeric ``-NNN`` suffix are returned unchanged.
    """
    head, separator, suffix = code.rpartition(BULK_SUFFIX_SEPARATOR)
    if separator and head and suffix.isascii() and suffix.isdigit():
        return head
    return code


@dataclass(frozen=True)
class AssetCodeParts:
    """The five segments of a structured asset code."""

    location_code: str
    category_code: str
    source_code: str
    year_code: str
    sequence: int

    @classmethod
    def parse(cls, code: str) -> AssetCodeParts | None:
        """Split a structured code; ``None`` for codes outside the grammar."""
        segments = split_code(code)
        if segments is None:
            return None
        location, category, source, year, sequence = segments
        return cls(location, category, source, year, int(sequence))

    @property
    def scope_prefix(self) -> str:
        return CODE_SEGMENT_SEPARATOR.join(
            (self.location_code, self.category_code, self.source_code, self.year_code)
        ) + CODE_SEGMENT_SEPARATOR


class AssetCodeBuilder:
    """
    Stateless builder of structured asset codes.

    Contract:
        ``build_code`` renders exactly what it is given; zero-padding of
        location and category codes is the caller's choice (see
        ``pad_segment``).
    """

    def __init__(self, suffix_width: int = DEFAULT_SUFFIX_WIDTH):
        self._suffix_width = _require_positive("suffix_width", suffix_width)

    @staticmethod
    def year_code(year: int) -> str:
        """Two-digit year segment (``2024 -> "24"``, ``2005 -> "05"``)."""
        return f"{_require_non_negative('year', year) % 100:02d}"

    def scope_prefix(
        self,
        location_code: str,
        category_code: str,
        source_code: str,
        year: int,
    ) -> str:
        """
        Allocation scope key: the first four segments plus a trailing dot.

        Every code built for the same parts starts with this prefix.
        """
        return CODE_SEGMENT_SEPARATOR.join(
            (
                _require_segment("location_code", location_code),
                _require_segment("category_code", category_code),
                _require_segment("source_code", source_code),
                self.year_code(year),
            )
        ) + CODE_SEGMENT_SEPARATOR

    @traced_engine(
        "asset_code",
        "1.0",
        fingerprint_fields=("location_code", "category_code", "source_code", "year", "sequence"),
    )
    def build_code(
        self,
        location_code: str,
        category_code: str,
        source_code: str,
        year: int,
        sequence: int,
        sequence_width: int = DEFAULT_SEQUENCE_WIDTH,
    ) -> str:
        """
        Render ``LOCATION.CATEGORY.SOURCE.YY.SEQUENCE``.

        Preconditions:
            - All code segments are non-empty and free of dots.
            - ``sequence >= 0``, ``year >= 0``, ``sequence_width >= 1``.
        Postconditions:
            - ``YY`` is ``year % 100`` padded to 2 digits.
            - ``SEQUENCE`` is padded to ``sequence_width`` digits; wider
              sequences are rendered in full, never truncated.

        Raises:
            InvalidArgumentError: On any violated precondition.
        """
        prefix = self.scope_prefix(location_code, category_code, source_code, year)
        sequence = _require_non_negative("sequence", sequence)
        width = _require_positive("sequence_width", sequence_width)
        return f"{prefix}{sequence:0{width}d}"

    def bulk_child_code(self, base_code: str, bulk_sequence: int) -> str:
        """
        Display code of one unit of a bulk batch.

        The parent (bulk sequence 1) keeps ``base_code``; unit ``n`` gets
        ``base_code-NNN`` with ``NNN`` the zero-padded bulk sequence.
        """
        if not isinstance(base_code, str) or not base_code.strip():
            raise InvalidArgumentError("base_code", base_code, "must be a non-empty string")
        position = _require_positive("bulk_sequence", bulk_sequence)
        if position == 1:
            return base_code
        return f"{base_code}{BULK_SUFFIX_SEPARATOR}{position:0{self._suffix_width}d}"

    def build_bulk_codes(self, base_code: str, count: int) -> list[str]:
        """
        Codes for every unit of a bulk batch, parent first.

        Postconditions:
            ``len(result) == count`` and ``result[0] == base_code``.

        Raises:
            InvalidArgumentError: If ``count <= 0`` or ``base_code`` is empty.
        """
        count = _require_positive("count", count)
        codes = [self.bulk_child_code(base_code, position) for position in range(1, count + 1)]
        logger.debug(
            "bulk_codes_built",
            extra={"base_code": base_code, "count": count},
        )
        return codes
