"""
Clock Model - wall-clock instant to hand rotation.

Rotation is degrees per unit of time: 360 / 60 = 6 for seconds and
minutes, 360 / 12 = 30 for hours. Angles are absolute, measured
clockwise from 12 o'clock.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .host import TimeService


@dataclass(frozen=True)
class HandAngles:
    """Absolute hand rotations in degrees, each in [0, 360)."""
    hour: float
    minute: float
    second: float


def angles_at(instant: datetime, tz: Optional[tzinfo] = None) -> HandAngles:
    """
    Hand angles for an instant.

    Args:
        instant: Wall-clock time. Only millisecond resolution is used.
        tz: Zone to read the instant in. Aware instants are converted;
            naive instants are taken as already local.
    """
    if tz is not None and instant.tzinfo is not None:
        instant = instant.astimezone(tz)

    seconds = instant.second + (instant.microsecond // 1000) / 1000.0
    minute = instant.minute
    hour12 = instant.hour % 12

    return HandAngles(
        hour=hour12 * 30.0 + minute / 2.0,
        minute=minute * 6.0,
        second=seconds * 6.0,
    )


class WatchClock:
    """Current time in the current zone. The zone changes only on host broadcast."""

    def __init__(self, time_service: "TimeService"):
        self._time = time_service
        self.tz: tzinfo = time_service.current_time_zone()

    def refresh_time_zone(self) -> tzinfo:
        """Re-read the host's zone. Idempotent."""
        self.tz = self._time.current_time_zone()
        return self.tz

    def now(self) -> datetime:
        """Current instant, millisecond resolution, in the current zone."""
        millis = self._time.now_millis()
        whole, ms = divmod(millis, 1000)
        return datetime.fromtimestamp(whole, tz=self.tz) + timedelta(milliseconds=ms)

    def angles(self) -> HandAngles:
        return angles_at(self.now())
