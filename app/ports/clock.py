"""Clock port: the single source of "now" for date-dependent computations."""

from abc import ABC, abstractmethod
from datetime import datetime, tzinfo


class ClockPort(ABC):
    @property
    @abstractmethod
    def tz(self) -> tzinfo:
        """Timezone calendar days are evaluated in."""
        ...

    @abstractmethod
    def now(self) -> datetime:
        """Current time as an aware datetime in `tz`."""
        ...
