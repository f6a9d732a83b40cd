"""
Design System - the watch face's visual language.

Colors, stroke widths, hand geometry, animation timing and the
shape-specific text dimensions, in one place so every component draws
from the same tokens.
"""

from dataclasses import dataclass
from typing import Tuple


RGB = Tuple[int, int, int]


# === Color Palette ===

@dataclass(frozen=True)
class Colors:
    """Watch face palette."""

    WHITE: RGB = (255, 255, 255)
    BLACK: RGB = (0, 0, 0)
    BLUE: RGB = (0, 0, 255)
    RED: RGB = (255, 0, 0)

    # Hands
    HAND: RGB = (255, 255, 255)            # Hour, minute, ticks
    HAND_HIGHLIGHT: RGB = (0, 0, 255)      # Second hand
    HAND_SHADOW: RGB = (255, 255, 255)

    # Overlay text (tap totals)
    SCREEN_TEXT: RGB = (255, 0, 0)


COLORS = Colors()


# === Strokes and geometry ===

@dataclass(frozen=True)
class Strokes:
    """Stroke widths in output pixels."""

    HOUR: float = 5.0
    MINUTE: float = 3.0
    SECOND_TICK: float = 2.0

    # Hands start this far from the center; also the cap radius
    CENTER_GAP_AND_CIRCLE_RADIUS: float = 4.0

    SHADOW_RADIUS: int = 6


STROKES = Strokes()


@dataclass(frozen=True)
class HandRatios:
    """Hand lengths as a fraction of center_x."""

    HOUR: float = 0.5
    MINUTE: float = 0.75
    SECOND: float = 0.875


HAND_RATIOS = HandRatios()


# === Alpha ===

@dataclass(frozen=True)
class Alpha:
    """Hand alpha (0-255). Mute mode dims hands as a do-not-disturb cue."""

    OPAQUE: int = 255
    MUTED_HOUR: int = 100
    MUTED_MINUTE: int = 100
    MUTED_SECOND: int = 80


ALPHA = Alpha()


# === Timing ===

@dataclass(frozen=True)
class Timing:
    """Eye-rotation animation timing."""

    PHASE_STEP: int = 5            # Phase units per rendered frame
    PHASE_CYCLE: int = 200         # Phase at which the cycle ends
    PHASE_WINDOW: int = 50         # Phase units per background frame
    FRAME_DELAY_MS: int = 50       # Delay between animation frames
    IMMEDIATE_MS: int = 0          # Interactive idle: redraw right away


TIMING = Timing()


# === Typography ===

@dataclass(frozen=True)
class Typography:
    """
    Overlay text fonts.

    File names, not paths: Pillow looks them up in the system font
    directories. Where DejaVu is not installed the canvas falls back to
    Pillow's built-in font at the same size.
    """

    FONT_PATH: str = "DejaVuSans.ttf"
    FONT_BOLD_PATH: str = "DejaVuSans-Bold.ttf"


TYPOGRAPHY = Typography()


# === Dimensions ===
# Resource ids the host resolves to pixels. Round screens get their own values.

INTERACTIVE_X_OFFSET = "interactive_x_offset"
INTERACTIVE_X_OFFSET_ROUND = "interactive_x_offset_round"
INTERACTIVE_Y_OFFSET = "interactive_y_offset"
INTERACTIVE_Y_OFFSET_ROUND = "interactive_y_offset_round"
INTERACTIVE_TEXT_SIZE = "interactive_text_size"
INTERACTIVE_TEXT_SIZE_ROUND = "interactive_text_size_round"

DEFAULT_DIMENSIONS = {
    INTERACTIVE_X_OFFSET: 15.0,
    INTERACTIVE_X_OFFSET_ROUND: 40.0,
    INTERACTIVE_Y_OFFSET: 60.0,
    INTERACTIVE_Y_OFFSET_ROUND: 70.0,
    INTERACTIVE_TEXT_SIZE: 20.0,
    INTERACTIVE_TEXT_SIZE_ROUND: 24.0,
}


def with_alpha(color: RGB, alpha: int) -> Tuple[int, int, int, int]:
    """RGBA tuple from an RGB color and an alpha (clamped to 0-255)."""
    alpha = max(0, min(255, int(alpha)))
    return (color[0], color[1], color[2], alpha)
