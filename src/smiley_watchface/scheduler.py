"""
Frame Scheduler - when the next frame is drawn.

| Mode        | Idle                         | Animation playing      |
|-------------|------------------------------|------------------------|
| Interactive | next frame right after draw  | next frame after 50 ms |
| Ambient     | host time tick only          | suppressed, as idle    |
| Not visible | nothing; pending dropped     |                        |

Single-threaded and cooperative: at most one invalidation is pending and
a new request supersedes it. A fire that lands while a draw is running
is folded into that draw instead of queueing another.
"""

import logging
from contextlib import contextmanager
from typing import Callable, Optional, TYPE_CHECKING

from .display.design import TIMING
from .display.modes import DisplayMode

if TYPE_CHECKING:
    from .host import Timer


logger = logging.getLogger(__name__)


def next_frame_delay(
    mode: DisplayMode,
    visible: bool,
    playing: bool,
    frame_delay_ms: int = TIMING.FRAME_DELAY_MS,
) -> Optional[int]:
    """Delay before the next self-scheduled frame, or None to wait for the host."""
    if not visible or mode.is_ambient:
        return None
    if playing:
        return frame_delay_ms
    return TIMING.IMMEDIATE_MS


class FrameScheduler:
    """Holds the single pending invalidation token."""

    def __init__(self, timer: "Timer", on_frame: Callable[[], None]):
        self._timer = timer
        self._on_frame = on_frame
        self._token: Optional[int] = None
        self._drawing = False
        self.coalesced = 0

    @property
    def pending(self) -> bool:
        return self._token is not None

    @property
    def is_drawing(self) -> bool:
        return self._drawing

    def request(self, delay_ms: int) -> None:
        """Schedule the next frame, replacing any pending one."""
        self.cancel()
        self._token = self._timer.post_delayed(delay_ms, self._fire)

    def cancel(self) -> None:
        if self._token is not None:
            self._timer.cancel(self._token)
            self._token = None

    @contextmanager
    def drawing(self):
        """Mark a draw in progress."""
        self._drawing = True
        try:
            yield
        finally:
            self._drawing = False

    def _fire(self) -> None:
        self._token = None
        if self._drawing:
            self.coalesced += 1
            logger.debug("Frame timer fired during draw; coalesced (%d)", self.coalesced)
            return
        self._on_frame()
