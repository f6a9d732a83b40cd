"""
Tap/Animation Driver - touch-down toggles the eye-rotation cycle.

The host distinguishes a touch-down (TOUCH) from a completed tap (TAP).
The cycle toggles on touch-down, so a held touch does not re-trigger.
Phase advancement belongs to the renderer, which keeps the phase and
the frame it draws in step.
"""

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Tuple

from .assets import Background
from .design import TIMING


logger = logging.getLogger(__name__)


# Counters wrap like a 32-bit signed int would overflow, but stay non-negative
_COUNTER_LIMIT = 2 ** 31

# Background per phase window while playing
PHASE_FRAMES: Tuple[Background, ...] = (
    Background.BG1, Background.BG2, Background.BG3, Background.BG4,
)


class TapType(IntEnum):
    """Host tap kinds."""
    TOUCH = 0
    TOUCH_CANCEL = 1
    TAP = 2


@dataclass(frozen=True)
class TapEvent:
    kind: TapType
    x: int
    y: int
    time: int  # Host event time, ms


@dataclass
class TapCounters:
    """Tap totals shown on the overlay, plus where the last touch landed."""
    touch: int = 0
    touch_cancel: int = 0
    tap: int = 0
    last_x: int = 0
    last_y: int = 0

    def bump(self, name: str) -> int:
        value = (getattr(self, name) + 1) % _COUNTER_LIMIT
        setattr(self, name, value)
        return value


@dataclass
class AnimationState:
    """
    Idle, or Playing with a phase in [0, cycle).

    The phase survives Idle until the next interactive idle draw resets
    it, and survives ambient mode untouched.
    """
    playing: bool = False
    phase: int = 0

    @property
    def is_idle(self) -> bool:
        return not self.playing

    def start(self) -> None:
        self.playing = True
        self.phase = 0

    def stop(self) -> None:
        self.playing = False

    def frame(self, window: int = TIMING.PHASE_WINDOW) -> Background:
        """Background for the current phase (bg0 when idle)."""
        if not self.playing:
            return Background.BG0
        index = min(self.phase // window, len(PHASE_FRAMES) - 1)
        return PHASE_FRAMES[index]

    def step(
        self,
        step: int = TIMING.PHASE_STEP,
        cycle: int = TIMING.PHASE_CYCLE,
    ) -> Background:
        """
        Draw-time advance while playing.

        Returns the frame to draw for the current phase, then moves the
        phase on by `step`. Reaching the end of the cycle returns to Idle,
        so the next draw shows bg0.
        """
        if self.phase >= cycle:
            self.playing = False
            return Background.BG0

        window = cycle // len(PHASE_FRAMES)
        background = self.frame(window)
        self.phase += step
        if self.phase >= cycle:
            self.playing = False
        return background

    def reset(self) -> None:
        """Interactive idle draw."""
        self.playing = False
        self.phase = 0


class TapDriver:
    """
    Counts taps and arms/disarms the animation.

    `armed` is the latched toggle: each TOUCH flips it. It reads the
    animation itself, so a cycle that runs to completion disarms too and
    the next TOUCH starts a fresh cycle.
    """

    def __init__(self, animation: AnimationState = None):
        self.counters = TapCounters()
        self.animation = animation if animation is not None else AnimationState()

    @property
    def armed(self) -> bool:
        return self.animation.playing

    def on_tap(self, event: TapEvent) -> None:
        self.counters.last_x = event.x
        self.counters.last_y = event.y
        kind = TapType(event.kind)

        if kind is TapType.TOUCH:
            self.counters.bump("touch")
            if self.armed:
                self.animation.stop()
            else:
                self.animation.start()
            logger.debug("TOUCH at (%d, %d): animation %s",
                         event.x, event.y, "armed" if self.armed else "disarmed")
        elif kind is TapType.TOUCH_CANCEL:
            self.counters.bump("touch_cancel")
            logger.debug("TOUCH_CANCEL at (%d, %d)", event.x, event.y)
        elif kind is TapType.TAP:
            self.counters.bump("tap")
            logger.debug("TAP at (%d, %d)", event.x, event.y)
