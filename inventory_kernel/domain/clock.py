"""
Clock -- injectable source of "now".

Responsibility:
    Depreciation and acquisition-date validation depend on the current
    date.  Services take a Clock in their constructor instead of calling
    ``date.today()``, so stored book values can be reproduced for any day
    and tests can move time forward month by month.

Architecture position:
    Kernel > Domain -- zero I/O except ``SystemClock``, the one sanctioned
    time boundary.  Engines never see a Clock; they receive dates.
"""

from abc import ABC, abstractmethod
from datetime import UTC, date, datetime, time, timedelta


class Clock(ABC):
    """
    Abstract clock interface.

    Guarantees:
        - ``now()`` is timezone-aware.
        - ``today()`` is the UTC calendar date of ``now()``.
    """

    @abstractmethod
    def now(self) -> datetime:
        ...

    def today(self) -> date:
        return self.now().astimezone(UTC).date()


class SystemClock(Clock):
    """Wall-clock time in UTC."""

    def now(self) -> datetime:
        return datetime.now(UTC)


class DeterministicClock(Clock):
    """
    Clock that only moves when told to.

    Defaults to 2024-01-01 12:00 UTC.  ``advance_months`` keeps the day of
    month where possible and clamps it to the end of shorter months
    (31 Jan + 1 month = 29 Feb 2024).
    """

    DEFAULT_TIME = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)

    def __init__(self, fixed_time: datetime | None = None):
        self._current = fixed_time or self.DEFAULT_TIME

    @classmethod
    def on(cls, day: date) -> "DeterministicClock":
        """Clock fixed at noon UTC on ``day``."""
        return cls(datetime.combine(day, time(12, 0), tzinfo=UTC))

    def now(self) -> datetime:
        return self._current

    def set_time(self, when: datetime) -> None:
        self._current = when

    def advance(self, seconds: int = 1) -> None:
        self._current += timedelta(seconds=seconds)

    def advance_days(self, days: int) -> None:
        self._current += timedelta(days=days)

    def advance_months(self, months: int) -> None:
        index = self._current.year * 12 + self._current.month - 1 + months
        year, month = divmod(index, 12)
        month += 1
        next_month = date(year + month // 12, month % 12 + 1, 1)
        last_day = (next_month - timedelta(days=1)).day
        self._current = self._current.replace(
            year=year, month=month, day=min(self._current.day, last_day),
        )
