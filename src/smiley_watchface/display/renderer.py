"""
Renderer - composes one frame of the watch face.

Fixed Z-order:
    overlay text -> background -> hour, minute, second hands -> center cap
    -> peek card occlusion (ambient only)

Hands are drawn pointing at 12 o'clock and rotated into place. The
rotations are absolute per hand and applied as differences to the
cumulative canvas transform.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..clock import HandAngles, angles_at
from ..scheduler import next_frame_delay
from .animation import AnimationState, TapCounters
from .assets import AssetSet, Background
from .canvas import Canvas
from .design import COLORS, STROKES, TIMING
from .geometry import HandLengths, Rect, Surface
from .modes import DisplayMode
from .paint import Paint, PaintProfile, make_text_paint


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextOverlay:
    """Where and how the tap totals are drawn. Offsets stay 0 until the shape is known."""
    x_offset: float = 0.0
    y_offset: float = 0.0
    spacing: float = 0.0
    paint: Paint = make_text_paint()


@dataclass(frozen=True)
class FrameResult:
    """What a draw did, and when it wants the next one."""
    background: Background
    angles: HandAngles
    second_hand: bool
    next_frame_delay_ms: Optional[int]


class WatchFaceRenderer:
    """Draws frames. Holds no state of its own beyond animation cadence."""

    def __init__(
        self,
        frame_step: int = TIMING.PHASE_STEP,
        frame_delay_ms: int = TIMING.FRAME_DELAY_MS,
        cycle: int = TIMING.PHASE_CYCLE,
    ):
        self.frame_step = frame_step
        self.frame_delay_ms = frame_delay_ms
        self.cycle = cycle

    def render(
        self,
        canvas: Canvas,
        surface: Surface,
        hands: HandLengths,
        instant: datetime,
        mode: DisplayMode,
        animation: AnimationState,
        assets: AssetSet,
        paints: PaintProfile,
        counters: TapCounters,
        peek_bounds: Rect = Rect(),
        overlay: TextOverlay = TextOverlay(),
        visible: bool = True,
    ) -> FrameResult:
        """Draw one frame. Advances the animation when interactive and playing."""
        if not mode.is_ambient and visible:
            self._draw_overlay_text(canvas, counters, overlay)

        background = self._draw_background(canvas, mode, animation, assets, paints)

        angles = angles_at(instant)
        second_hand = not mode.is_ambient
        self._draw_hands(canvas, surface, hands, angles, paints, second_hand)

        if mode.is_ambient:
            # Backing rectangle keeps the notification card legible
            canvas.draw_rect(peek_bounds, paints.background)

        delay = next_frame_delay(mode, visible, animation.playing, self.frame_delay_ms)
        return FrameResult(
            background=background,
            angles=angles,
            second_hand=second_hand,
            next_frame_delay_ms=delay,
        )

    def _draw_overlay_text(self, canvas: Canvas, counters: TapCounters, overlay: TextOverlay) -> None:
        canvas.draw_text(
            f"TAP: {counters.tap}",
            overlay.x_offset,
            overlay.y_offset,
            overlay.paint,
        )
        canvas.draw_text(
            f"CANCEL: {counters.touch_cancel}",
            overlay.x_offset,
            overlay.y_offset + overlay.spacing,
            overlay.paint,
        )

    def _draw_background(
        self,
        canvas: Canvas,
        mode: DisplayMode,
        animation: AnimationState,
        assets: AssetSet,
        paints: PaintProfile,
    ) -> Background:
        if mode.suppresses_bitmaps:
            canvas.fill(COLORS.BLACK)
            return Background.BLACK

        if mode.is_ambient:
            gray = assets.bitmap(Background.GRAY)
            if gray is None:
                # Gray frame is only built when the device allows it
                canvas.fill(COLORS.BLACK)
                return Background.BLACK
            canvas.draw_bitmap(gray, 0, 0, paints.background)
            return Background.GRAY

        if animation.playing:
            background = animation.step(self.frame_step, self.cycle)
            logger.debug("Animation phase %d -> %s", animation.phase, background.name)
        else:
            animation.reset()
            background = Background.BG0

        canvas.draw_bitmap(assets.bitmap(background), 0, 0, paints.background)
        return background

    def _draw_hands(
        self,
        canvas: Canvas,
        surface: Surface,
        hands: HandLengths,
        angles: HandAngles,
        paints: PaintProfile,
        second_hand: bool,
    ) -> None:
        cx, cy = surface.center_x, surface.center_y
        gap = STROKES.CENTER_GAP_AND_CIRCLE_RADIUS

        canvas.save()
        try:
            canvas.rotate(angles.hour, cx, cy)
            canvas.draw_line(cx, cy - gap, cx, cy - hands.hour, paints.hour)

            canvas.rotate(angles.minute - angles.hour, cx, cy)
            canvas.draw_line(cx, cy - gap, cx, cy - hands.minute, paints.minute)

            # Only interactive mode shows seconds; ambient updates once a minute
            if second_hand:
                canvas.rotate(angles.second - angles.minute, cx, cy)
                canvas.draw_line(cx, cy - gap, cx, cy - hands.second, paints.second)

            canvas.draw_circle(cx, cy, gap, paints.tick)
        finally:
            canvas.restore()
