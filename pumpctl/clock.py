"""A battery-backed real-time clock with whole-second resolution."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta

MIN_YEAR = 2000
MAX_YEAR = 2099


def format_datetime(dt: datetime) -> str:
    """Return ``dt`` as ``DD/MM HH:MM:SS``."""
    return f"{dt.day:02d}/{dt.month:02d} {dt.hour:02d}:{dt.minute:02d}:{dt.second:02d}"


class RealTimeClock:
    """A clock that keeps its own time on top of a running time source."""

    def __init__(self, time_source: Callable[[], datetime] = datetime.now) -> None:
        self._time_source = time_source
        self._offset = timedelta(0)
        self.lost_power = True

    def begin(self) -> None:
        """Start the clock; after a power loss it is set from the time source."""
        if self.lost_power:
            self.set_datetime(self._time_source())

    def now(self) -> datetime:
        """Return the current clock time, to the second."""
        return (self._time_source() + self._offset).replace(microsecond=0)

    def set_datetime(self, dt: datetime) -> None:
        """Set the clock to ``dt``."""
        if not MIN_YEAR <= dt.year <= MAX_YEAR:
            raise ValueError(f"year {dt.year} outside {MIN_YEAR}-{MAX_YEAR}")
        self._offset = dt.replace(microsecond=0) - self._time_source()
        self.lost_power = False

    def formatted(self) -> str:
        """Return the current time as ``DD/MM HH:MM:SS``."""
        return format_datetime(self.now())