"""Clock adapters."""

from datetime import datetime, tzinfo
from zoneinfo import ZoneInfo

from app.ports.clock import ClockPort


class SystemClock(ClockPort):
    """Wall-clock time in the configured statistics timezone."""

    def __init__(self, tz_name: str) -> None:
        self._tz = ZoneInfo(tz_name)

    @property
    def tz(self) -> tzinfo:
        return self._tz

    def now(self) -> datetime:
        return datetime.now(self._tz)


class FixedClock(ClockPort):
    """
    Clock pinned to a single instant.

    Used by tests so "this year", streaks and the 30-day window are
    deterministic.
    """

    def __init__(self, instant: datetime) -> None:
        if instant.tzinfo is None:
            raise ValueError("FixedClock needs an aware datetime")
        self._instant = instant

    @property
    def tz(self) -> tzinfo:
        return self._instant.tzinfo

    def now(self) -> datetime:
        return self._instant
