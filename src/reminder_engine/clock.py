"""Injectable time source for date-dependent logic."""

from datetime import datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    """Anything that can report the current local time."""

    def now(self) -> datetime: ...


class SystemClock:
    """Clock backed by the system's local time."""

    def now(self) -> datetime:
        return datetime.now()


class FixedClock:
    """Clock frozen at a given instant, for deterministic tests."""

    def __init__(self, instant: datetime) -> None:
        self._instant = instant

    def now(self) -> datetime:
        return self._instant

    def advance(self, **kwargs: float) -> None:
        """Move the clock forward by a ``timedelta(**kwargs)``."""
        self._instant = self._instant + timedelta(**kwargs)


def start_of_day(dt: datetime) -> datetime:
    """Midnight at the beginning of ``dt``'s day."""
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)
