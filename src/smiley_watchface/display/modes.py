"""
Display Mode - the current rendering regime.

The host reports three independent facts: ambient on/off, and the
device's low-bit and burn-in properties. They collapse into one
DisplayMode tag so impossible combinations never reach the renderer.
The interruption filter adds a Muted overlay on top.
"""

import logging
from enum import Enum, IntEnum
from typing import Callable, Optional, Union, TYPE_CHECKING

from .paint import PaintProfile, derive_paint_profile

if TYPE_CHECKING:
    from ..config import HandStyleConfig


logger = logging.getLogger(__name__)


class DisplayMode(Enum):
    """Rendering regimes."""
    INTERACTIVE = "interactive"          # Full color, anti-alias, shadows, second hand
    AMBIENT_NORMAL = "ambient_normal"    # Gray background, no second hand
    AMBIENT_LOW_BIT = "ambient_low_bit"  # Black background, no anti-alias
    AMBIENT_BURN_IN = "ambient_burn_in"  # Black background, no large bright areas
    MUTED = "muted"                      # Interactive with dimmed hands

    @property
    def is_ambient(self) -> bool:
        return self in (
            DisplayMode.AMBIENT_NORMAL,
            DisplayMode.AMBIENT_LOW_BIT,
            DisplayMode.AMBIENT_BURN_IN,
        )

    @property
    def suppresses_bitmaps(self) -> bool:
        """Low-bit and burn-in screens get a solid black background."""
        return self in (DisplayMode.AMBIENT_LOW_BIT, DisplayMode.AMBIENT_BURN_IN)


class InterruptionFilter(IntEnum):
    """Host interruption filter values."""
    ALL = 1
    PRIORITY = 2
    NONE = 3        # Do not disturb
    ALARMS = 4
    UNKNOWN = 0


def select_mode(ambient: bool, low_bit: bool, burn_in: bool) -> DisplayMode:
    """Base regime from the host's flags. Low-bit wins when both are set."""
    if not ambient:
        return DisplayMode.INTERACTIVE
    if low_bit:
        return DisplayMode.AMBIENT_LOW_BIT
    if burn_in:
        return DisplayMode.AMBIENT_BURN_IN
    return DisplayMode.AMBIENT_NORMAL


class DisplayModeState:
    """
    Owner of the display regime.

    Every transition republishes the PaintProfile (to `listener`, when
    set). Transitions are total and idempotent.
    """

    def __init__(
        self,
        hands: Optional["HandStyleConfig"] = None,
        listener: Optional[Callable[[PaintProfile], None]] = None,
    ):
        self._hands = hands
        self._listener = listener
        self.ambient = False
        self.low_bit = False
        self.burn_in = False
        self.muted = False
        self._profile = derive_paint_profile(False, False, hands)

    @property
    def base_mode(self) -> DisplayMode:
        """Regime without the mute overlay."""
        return select_mode(self.ambient, self.low_bit, self.burn_in)

    @property
    def mode(self) -> DisplayMode:
        base = self.base_mode
        if self.muted and base is DisplayMode.INTERACTIVE:
            return DisplayMode.MUTED
        return base

    @property
    def is_ambient(self) -> bool:
        return self.ambient

    @property
    def paint_profile(self) -> PaintProfile:
        return self._profile

    def on_ambient_change(self, ambient: bool) -> PaintProfile:
        """Enter or leave ambient; the ambient sub-mode comes from the last known flags."""
        self.ambient = bool(ambient)
        logger.debug("Ambient mode changed: %s -> %s", self.ambient, self.mode.value)
        return self._publish()

    def on_properties_change(self, low_bit: bool, burn_in: bool) -> PaintProfile:
        """Update device flags; re-selects the ambient sub-mode when in ambient."""
        self.low_bit = bool(low_bit)
        self.burn_in = bool(burn_in)
        logger.debug("Properties changed: low_bit=%s burn_in=%s", self.low_bit, self.burn_in)
        return self._publish()

    def on_interruption(self, interruption_filter: Union[int, InterruptionFilter]) -> bool:
        """Toggle the mute overlay. Returns True only when mute state changed."""
        in_mute_mode = int(interruption_filter) == InterruptionFilter.NONE
        if in_mute_mode == self.muted:
            return False
        self.muted = in_mute_mode
        logger.debug("Mute mode: %s", self.muted)
        self._publish()
        return True

    def _publish(self) -> PaintProfile:
        self._profile = derive_paint_profile(self.ambient, self.muted, self._hands)
        if self._listener is not None:
            self._listener(self._profile)
        return self._profile
