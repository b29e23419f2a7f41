"""
Module: inventory_engines.depreciation
Responsibility:
    Straight-line depreciation of an asset at an evaluation date: months
    elapsed, accumulated depreciation, remaining book value and remaining
    economic life.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import inventory_kernel exceptions/logging.

Invariants enforced:
    - Purity: no clock access.  ``now`` is always an explicit argument.
    - Decimal-only arithmetic for all currency amounts; floats rejected.
    - Elapsed months are clamped to ``[0, economic_life_months]``, so
      ``0 <= accumulated_depreciation <= cost`` and ``book_value >= 0``.
    - Currency outputs are rounded to 2 places with ROUND_HALF_UP.

Failure modes:
    - InvalidArgumentError when an input is negative, not a Decimal/int,
      or the acquisition date is missing.
    - An economic life of 0 is NOT an error: no depreciation is taken.

Usage:
    from datetime import date
    from decimal import Decimal
    from inventory_engines.depreciation import DepreciationEngine, DepreciationInput

    engine = DepreciationEngine()
    result = engine.compute(
        DepreciationInput(
            cost=Decimal("12000000"),
            economic_life_months=48,
            acquisition_date=date(2023, 1, 10),
        ),
        now=date(2024, 1, 5),
    )
    result.accumulated_depreciation  # Decimal("3000000.00")
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from inventory_kernel.exceptions import InvalidArgumentError
from inventory_kernel.logging_config import get_logger
from inventory_engines.tracer import traced_engine

logger = get_logger("engines.depreciation")

CENT = Decimal("0.01")
ZERO = Decimal("0")
MONTHS_PER_YEAR = 12


def round_currency(amount: Decimal) -> Decimal:
    """Round to 2 decimal places, halves away from zero."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def months_between(start: date, end: date) -> int:
    """
    Whole calendar months from ``start`` to ``end``.

    Day of month is ignored: 2024-01-31 to 2024-02-01 is one month.
    Negative when ``end`` falls in an earlier month than ``start``.
    """
    return (end.year - start.year) * MONTHS_PER_YEAR + (end.month - start.month)


def economic_life_months(years: int, months: int = 0) -> int:
    """Total economic life in months from a years + months pair."""
    if years < 0:
        raise InvalidArgumentError("years", years, "must be >= 0")
    if months < 0:
        raise InvalidArgumentError("months", months, "must be >= 0")
    return years * MONTHS_PER_YEAR + months


def _to_decimal(name: str, value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, str)) and not isinstance(value, bool):
        try:
            return Decimal(value)
        except InvalidOperation:
            raise InvalidArgumentError(name, value, "is not a number") from None
    raise InvalidArgumentError(name, value, "must be a Decimal, int or numeric string")


def _to_date(name: str, value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            raise InvalidArgumentError(name, value, "is not an ISO date") from None
    raise InvalidArgumentError(name, value, "must be a date")


def _record_amount(name: str, value: Any) -> Decimal:
    # JSON-decoded records carry floats; their shortest repr is the stored value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidArgumentError(name, value, "must be a finite amount")
        return Decimal(repr(value))
    return _to_decimal(name, value)


def _record_months(name: str, value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    months = _record_amount(name, value)
    if not months.is_finite() or months != months.to_integral_value():
        raise InvalidArgumentError(name, value, "must be a whole number of months")
    return int(months)


@dataclass(frozen=True)
class DepreciationInput:
    """
    Authoritative depreciation inputs of one asset.

    Contract:
        Frozen dataclass; construction normalises and validates.
    Guarantees:
        - ``cost`` is a ``Decimal`` >= 0.
        - ``economic_life_months`` is an int >= 0.
        - ``acquisition_date`` is a ``date`` (datetimes are truncated).
    """

    cost: Decimal
    economic_life_months: int
    acquisition_date: date

    def __post_init__(self) -> None:
        cost = _to_decimal("cost", self.cost)
        if not cost.is_finite() or cost < ZERO:
            raise InvalidArgumentError("cost", self.cost, "must be a finite amount >= 0")
        life = self.economic_life_months
        if isinstance(life, bool) or not isinstance(life, int) or life < 0:
            raise InvalidArgumentError(
                "economic_life_months", life, "must be an integer >= 0"
            )
        object.__setattr__(self, "cost", cost)
        object.__setattr__(
            self, "acquisition_date", _to_date("acquisition_date", self.acquisition_date)
        )

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> DepreciationInput:
        """
        Build from a stored asset record.

        Accepts the stored column names (``harga_perolehan``,
        ``umur_ekonomis_bulan``, ``tanggal_perolehan``) as well as the
        English attribute names (``cost``, ``economic_life_months``,
        ``acquisition_date``).  Values decoded from JSON are accepted:
        float or string amounts, and whole-number months written as
        ``"60"``, ``"60.0"`` or ``60.0``.

        Raises:
            InvalidArgumentError: For missing, non-numeric or fractional values.
        """

        def pick(*keys: str) -> Any:
            for key in keys:
                if key in record and record[key] is not None:
                    return record[key]
            raise InvalidArgumentError(keys[0], None, "is required")

        return cls(
            cost=_record_amount("cost", pick("harga_perolehan", "cost")),
            economic_life_months=_record_months(
                "economic_life_months", pick("umur_ekonomis_bulan", "economic_life_months"),
            ),
            acquisition_date=pick("tanggal_perolehan", "acquisition_date"),
        )


@dataclass(frozen=True)
class DepreciationResult:
    """
    Straight-line depreciation as of one evaluation date.

    Guarantees:
        - ``0 <= accumulated_depreciation <= cost``.
        - ``book_value == round2(max(0, cost - accumulated_depreciation))``.
        - ``elapsed_months + remaining_months == economic_life_months``.
    Non-goals:
        - Not authoritative state.  Stored copies are display caches and
          must be recomputed from ``DepreciationInput``.
    """

    as_of: date
    cost: Decimal
    economic_life_months: int
    monthly_depreciation: Decimal
    accumulated_depreciation: Decimal
    book_value: Decimal
    elapsed_months: int
    remaining_months: int

    @property
    def is_fully_depreciated(self) -> bool:
        return self.economic_life_months > 0 and self.remaining_months == 0


class DepreciationEngine:
    """
    Pure straight-line depreciation calculator.

    Contract:
        ``compute`` is deterministic given its arguments; calling it twice
        with the same input and ``now`` yields equal results.
    Non-goals:
        - Salvage values, conventions (mid-month, half-year) and
          accelerated methods.
    """

    @traced_engine("depreciation", "1.0", fingerprint_fields=("depreciation_input", "now"))
    def compute(self, depreciation_input: DepreciationInput, now: date) -> DepreciationResult:
        """
        Depreciation of ``depreciation_input`` as of ``now``.

        Postconditions:
            - elapsed = clamp(months_between(acquisition, now), 0, life).
            - life == 0: no depreciation, book value == cost.
            - otherwise accumulated = round2(cost * elapsed / life).
        """
        as_of = _to_date("now", now)
        cost = depreciation_input.cost
        life = depreciation_input.economic_life_months

        elapsed = months_between(depreciation_input.acquisition_date, as_of)
        elapsed = min(max(elapsed, 0), life)

        if life == 0:
            monthly = ZERO
            accumulated = round_currency(ZERO)
            book_value = round_currency(cost)
        else:
            monthly = cost / life
            # cost * elapsed / life keeps full-life accumulation exact
            accumulated = round_currency(cost * elapsed / life)
            book_value = round_currency(max(ZERO, cost - accumulated))

        return DepreciationResult(
            as_of=as_of,
            cost=cost,
            economic_life_months=life,
            monthly_depreciation=round_currency(monthly),
            accumulated_depreciation=accumulated,
            book_value=book_value,
            elapsed_months=elapsed,
            remaining_months=life - elapsed,
        )

    def schedule(
        self,
        depreciation_input: DepreciationInput,
        through: date,
    ) -> tuple[DepreciationResult, ...]:
        """
        Month-by-month snapshots from the acquisition month through ``through``.

        One result per calendar month, evaluated on the first of that month.
        Snapshots stop once the asset is fully depreciated.  Empty when
        ``through`` precedes the acquisition month.
        """
        through = _to_date("through", through)
        acquired = depreciation_input.acquisition_date
        span = months_between(acquired, through)
        if span < 0:
            return ()

        life = depreciation_input.economic_life_months
        last = min(span, life) if life > 0 else span
        results: list[DepreciationResult] = []
        for offset in range(last + 1):
            month_index = acquired.month - 1 + offset
            as_of = date(
                acquired.year + month_index // MONTHS_PER_YEAR,
                month_index % MONTHS_PER_YEAR + 1,
                1,
            )
            results.append(self.compute(depreciation_input, as_of))

        logger.debug(
            "depreciation_schedule_built",
            extra={"periods": len(results), "through": through.isoformat()},
        )
        return tuple(results)
