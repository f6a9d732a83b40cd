"""
Watch Face Engine - the lifecycle callback surface the host drives.

The host delivers every event on one logical thread: visibility,
surface size, ambient changes, time ticks, taps, interruption filter
changes and draws. Handlers run to completion. State is split across
single-owner components:

- WatchClock: current time and zone
- DisplayModeState: rendering regime and its paint profile
- AssetSet: background frames
- TapDriver: tap totals and the eye-rotation animation
- FrameScheduler: the one pending invalidation

Each handler mutates its component and asks the host to redraw; the
next on_draw() sees the change.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Union

from .clock import WatchClock
from .config import WatchFaceConfig, get_watch_face_config
from .display.animation import TapDriver, TapEvent, TapType
from .display.assets import AssetSet
from .display.canvas import Canvas
from .display.design import (
    INTERACTIVE_TEXT_SIZE, INTERACTIVE_TEXT_SIZE_ROUND,
    INTERACTIVE_X_OFFSET, INTERACTIVE_X_OFFSET_ROUND,
    INTERACTIVE_Y_OFFSET, INTERACTIVE_Y_OFFSET_ROUND,
)
from .display.geometry import HandLengths, Rect, Surface
from .display.modes import DisplayMode, DisplayModeState, InterruptionFilter
from .display.paint import make_text_paint
from .display.renderer import FrameResult, TextOverlay, WatchFaceRenderer
from .errors import ConfigError, SurfaceInvalid
from .host import ResourceService, Subscription, TimeService, Timer
from .scheduler import FrameScheduler


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WatchFaceStyle:
    """How the host should treat this face."""
    peek_mode: str = "short"                      # Notification cards peek a little
    background_visibility: str = "interruptive"   # Card background only for interruptive notifications
    show_system_ui_time: bool = False             # The face draws its own time
    accepts_tap_events: bool = True


class WatchFaceEngine:
    """Analog smiley watch face with a tap-triggered eye rotation."""

    def __init__(
        self,
        resources: ResourceService,
        time_service: TimeService,
        timer: Timer,
        invalidate_callback: Optional[Callable[[], None]] = None,
        config: Optional[WatchFaceConfig] = None,
    ):
        self.config = config or get_watch_face_config()
        valid, error = self.config.validate()
        if not valid:
            raise ConfigError(error)
        self._resources = resources
        self._time = time_service
        self._invalidate_callback = invalidate_callback

        self.clock = WatchClock(time_service)
        self.display_mode = DisplayModeState(self.config.hands)
        self.assets = AssetSet(resources)
        self.taps = TapDriver()
        self.renderer = WatchFaceRenderer(
            frame_step=self.config.animation.frame_step,
            frame_delay_ms=self.config.animation.frame_delay_ms,
        )
        self.scheduler = FrameScheduler(timer, self.invalidate)

        self.style: Optional[WatchFaceStyle] = None
        self.surface: Optional[Surface] = None
        self.hand_lengths: Optional[HandLengths] = None
        self.is_round = False
        self.peek_card_bounds = Rect()
        self.text_overlay = TextOverlay(paint=make_text_paint(color=self.config.text_color))
        self.visible = False
        self.last_frame: Optional[FrameResult] = None
        self.invalidation_count = 0

        self._time_zone_subscription: Optional[Subscription] = None

    # === Lifecycle ===

    def on_create(self, surface: Optional[Surface] = None) -> WatchFaceStyle:
        """
        Load backgrounds and publish the face style.

        Raises:
            AssetLoadFailure: a frame is missing; the face cannot start.
        """
        logger.debug("on_create")
        self.assets.load()

        spacing = self._resources.get_dimension(INTERACTIVE_TEXT_SIZE)
        self.text_overlay = TextOverlay(
            x_offset=self.text_overlay.x_offset,
            y_offset=self.text_overlay.y_offset,
            spacing=spacing,
            paint=self.text_overlay.paint,
        )
        self.clock.refresh_time_zone()
        self.style = WatchFaceStyle()

        if surface is not None:
            self.is_round = surface.is_round
            self.on_surface_changed(surface.width, surface.height)
        return self.style

    def on_destroy(self) -> None:
        logger.debug("on_destroy")
        try:
            self.scheduler.cancel()
        finally:
            self._unregister_time_zone_receiver()

    def on_surface_changed(self, width: int, height: int, format: int = 0) -> None:
        """Recompute center and hand lengths and rescale the backgrounds."""
        surface = Surface(width, height, self.is_round)
        try:
            self.assets.resize(surface, self.display_mode.low_bit, self.display_mode.burn_in)
        except SurfaceInvalid as e:
            # Keep prior frames; draws are no-ops until a valid surface arrives
            logger.warning("Ignoring surface change: %s", e)
            self.surface = None
            self.hand_lengths = None
            return

        self.surface = surface
        self.hand_lengths = HandLengths.for_surface(surface)
        logger.debug("on_surface_changed: %dx%d scale=%.3f", width, height, self.assets.scale)

    def on_visibility_changed(self, visible: bool) -> None:
        self.visible = bool(visible)
        logger.debug("on_visibility_changed: %s", self.visible)
        if self.visible:
            self._register_time_zone_receiver()
            # Zone may have changed while we weren't visible
            self.clock.refresh_time_zone()
            self.invalidate()
        else:
            try:
                self.scheduler.cancel()
            finally:
                self._unregister_time_zone_receiver()

    def on_properties_changed(self, low_bit: bool = False, burn_in: bool = False) -> None:
        self.display_mode.on_properties_change(low_bit, burn_in)
        if self.surface is not None:
            # Gray frame depends on these flags
            self.assets.resize(self.surface, self.display_mode.low_bit, self.display_mode.burn_in)

    def on_ambient_mode_changed(self, ambient: bool) -> None:
        self.display_mode.on_ambient_change(ambient)
        self.scheduler.cancel()
        self.invalidate()

    def on_interruption_filter_changed(self, interruption_filter: Union[int, InterruptionFilter]) -> None:
        # Dim display in mute mode
        if self.display_mode.on_interruption(interruption_filter):
            self.invalidate()

    def on_apply_shape(self, is_round: bool) -> None:
        """Load offsets and text size for round or square screens."""
        logger.debug("on_apply_shape: %s", "round" if is_round else "square")
        self.is_round = bool(is_round)
        res = self._resources
        x_offset = res.get_shape_specific_dimension(INTERACTIVE_X_OFFSET_ROUND, INTERACTIVE_X_OFFSET, self.is_round)
        y_offset = res.get_shape_specific_dimension(INTERACTIVE_Y_OFFSET_ROUND, INTERACTIVE_Y_OFFSET, self.is_round)
        text_size = res.get_shape_specific_dimension(INTERACTIVE_TEXT_SIZE_ROUND, INTERACTIVE_TEXT_SIZE, self.is_round)

        self.text_overlay = TextOverlay(
            x_offset=x_offset,
            y_offset=y_offset,
            spacing=self.text_overlay.spacing,
            paint=self.text_overlay.paint.with_changes(text_size=text_size),
        )
        if self.surface is not None:
            self.surface = Surface(self.surface.width, self.surface.height, self.is_round)

    def on_peek_card_position_update(self, rect: Union[Rect, Sequence[float]]) -> None:
        if not isinstance(rect, Rect):
            rect = Rect(*rect)
        self.peek_card_bounds = rect

    def on_time_tick(self) -> None:
        self.invalidate()

    def on_tap(self, kind: Union[int, TapType], x: int, y: int, time: int) -> None:
        self.taps.on_tap(TapEvent(TapType(kind), x, y, time))
        self.invalidate()

    def on_draw(self, canvas: Canvas, bounds: Optional[Rect] = None) -> Optional[FrameResult]:
        """
        Draw one frame and schedule the next.

        Returns None without drawing while there is no valid surface.
        Canvas failures propagate to the host.
        """
        if self.surface is None or self.hand_lengths is None or not self.assets.is_loaded:
            logger.debug("on_draw skipped: no valid surface")
            return None

        with self.scheduler.drawing():
            result = self.renderer.render(
                canvas,
                self.surface,
                self.hand_lengths,
                self.clock.now(),
                self.display_mode.mode,
                self.taps.animation,
                self.assets,
                self.display_mode.paint_profile,
                self.taps.counters,
                peek_bounds=self.peek_card_bounds,
                overlay=self.text_overlay,
                visible=self.visible,
            )

        if result.next_frame_delay_ms is not None:
            self.scheduler.request(result.next_frame_delay_ms)
        self.last_frame = result
        return result

    # === Helpers ===

    @property
    def mode(self) -> DisplayMode:
        return self.display_mode.mode

    def invalidate(self) -> None:
        """Ask the host for a redraw."""
        self.invalidation_count += 1
        if self._invalidate_callback is not None:
            self._invalidate_callback()

    def _on_time_zone_changed(self) -> None:
        self.clock.refresh_time_zone()
        self.invalidate()

    def _register_time_zone_receiver(self) -> None:
        if self._time_zone_subscription is not None:
            return
        self._time_zone_subscription = self._time.subscribe_time_zone_change(self._on_time_zone_changed)

    def _unregister_time_zone_receiver(self) -> None:
        subscription, self._time_zone_subscription = self._time_zone_subscription, None
        if subscription is not None:
            subscription.cancel()
