"""
Module: inventory_engines.sequence
Responsibility:
    Derive the sequence numbers already in use within one allocation scope
    from the scope's existing asset codes, and allocate the next sequence
    or a contiguous block of sequences for bulk creation.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import inventory_kernel exceptions/logging.

Invariants enforced:
    - No gap-filling: allocation always advances past the highest sequence
      ever observed in the scope, so numbers freed by deletions are never
      reused and sequences are monotonically non-decreasing over the life
      of a scope.
    - One grammar: a code carries a sequence only if it has exactly five
      dot-separated segments and the last one is a non-negative integer
      written in ASCII digits.
    - Bulk ranges are contiguous: ``end - start + 1 == count``.

Failure modes:
    - InvalidArgumentError when a range is requested with ``count <= 0``.
    - Malformed or foreign codes are NOT errors; they are skipped.

Concurrency:
    The allocator is a pure function over a snapshot.  Two callers working
    from the same stale snapshot compute the same value.  The caller must
    serialize read-allocate-write per scope (see
    ``inventory_modules.assets.service``).

Usage:
    from inventory_engines.sequence import SequenceAllocator

    allocator = SequenceAllocator()
    allocator.next_sequence(["001.10.1.24.001", "001.10.1.24.002"])  # 3
    allocator.next_sequence_range(["001.10.1.24.002"], 3)
    # SequenceRange(start=3, end=5)
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from inventory_kernel.exceptions import InvalidArgumentError
from inventory_kernel.logging_config import get_logger
from inventory_engines.tracer import traced_engine

logger = get_logger("engines.sequence")

CODE_SEGMENT_SEPARATOR = "."
CODE_SEGMENT_COUNT = 5


def split_code(code: object) -> tuple[str, ...] | None:
    """
    The five segments of a structured asset code, or ``None``.

    This is the single code grammar: exactly five dot-separated segments,
    the last one ASCII digits.  Leading segments are not inspected.
    """
    if not isinstance(code, str):
        return None
    segments = tuple(code.split(CODE_SEGMENT_SEPARATOR))
    if len(segments) != CODE_SEGMENT_COUNT:
        return None
    last = segments[-1]
    if not last or not (last.isascii() and last.isdigit()):
        return None
    return segments


def parse_sequence(code: object) -> int | None:
    """
    Extract the sequence number from a structured asset code.

    Preconditions:
        None -- any object is accepted.
    Postconditions:
        Returns the integer value of the fifth segment when ``code`` is a
        string of exactly five dot-separated segments whose last segment
        is ASCII digits.  Returns ``None`` for everything else, including
        bulk child codes (``BASE-002``) and legacy codes.
    """
    segments = split_code(code)
    if segments is None:
        return None
    return int(segments[-1])


@dataclass(frozen=True)
class SequenceRange:
    """
    An inclusive, contiguous block of sequence numbers.

    Guarantees:
        - 1 <= start <= end.
        - ``count == end - start + 1``.
    """

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 1:
            raise InvalidArgumentError("start", self.start, "must be >= 1")
        if self.end < self.start:
            raise InvalidArgumentError("end", self.end, "must be >= start")

    @property
    def count(self) -> int:
        return self.end - self.start + 1

    def __iter__(self) -> Iterator[int]:
        return iter(range(self.start, self.end + 1))

    def __len__(self) -> int:
        return self.count


class SequenceAllocator:
    """
    Stateless allocator of sequence numbers within one scope.

    Contract:
        Takes the scope's existing codes as an opaque snapshot and returns
        the next free sequence (single) or a contiguous block (bulk).
    Guarantees:
        - ``next_sequence(codes) == max(valid sequences) + 1``, or 1 when
          the snapshot has no valid sequences.
        - ``next_sequence_range(codes, 1).start == next_sequence(codes)``.
        - Output depends only on the maximum valid sequence; ordering and
          duplicates in the snapshot are irrelevant.
    Non-goals:
        - Does not lock, persist, or reserve anything.  Reservation happens
          when the caller commits the new codes.
        - Does not fill gaps left by deleted assets.
    """

    def sequence_set(self, existing_codes: Iterable[str]) -> frozenset[int]:
        """Return the set of sequences present in ``existing_codes``."""
        sequences: set[int] = set()
        skipped = 0
        for code in existing_codes:
            value = parse_sequence(code)
            if value is None:
                skipped += 1
            else:
                sequences.add(value)
        if skipped:
            logger.debug(
                "sequence_codes_skipped",
                extra={"skipped": skipped, "parsed": len(sequences)},
            )
        return frozenset(sequences)

    def highest_sequence(self, existing_codes: Iterable[str]) -> int:
        """Highest sequence in the snapshot, or 0 when there is none."""
        return max(self.sequence_set(existing_codes), default=0)

    @traced_engine("sequence", "1.0", fingerprint_fields=("existing_codes",))
    def next_sequence(self, existing_codes: Iterable[str]) -> int:
        """
        Next sequence for a single new asset.

        Postconditions:
            Returns ``max(valid sequences) + 1``, or 1 if none are valid.
        """
        value = self.highest_sequence(existing_codes) + 1
        logger.debug("sequence_allocated", extra={"sequence": value})
        return value

    @traced_engine("sequence", "1.0", fingerprint_fields=("existing_codes", "count"))
    def next_sequence_range(
        self,
        existing_codes: Iterable[str],
        count: int,
    ) -> SequenceRange:
        """
        Contiguous block of ``count`` sequences for a bulk creation.

        Preconditions:
            ``count`` is a positive int.
        Postconditions:
            ``start = max(valid sequences) + 1`` (or 1), ``end = start + count - 1``.

        Raises:
            InvalidArgumentError: If ``count`` is not a positive integer.
        """
        if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
            raise InvalidArgumentError("count", count, "must be a positive integer")

        start = self.highest_sequence(existing_codes) + 1
        allocation = SequenceRange(start=start, end=start + count - 1)
        logger.debug(
            "sequence_range_allocated",
            extra={"start": allocation.start, "end": allocation.end, "count": count},
        )
        return allocation
