"""
Paint - drawing styles for hands, cap, background and overlay text.

A PaintProfile is a pure function of the display regime: interactive
paints are colored, anti-aliased and shadowed; ambient paints are plain
white with no anti-aliasing or shadow. Mute mode lowers hand alpha on
top of either.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Tuple, TYPE_CHECKING

from .design import ALPHA, COLORS, STROKES, RGB, with_alpha

if TYPE_CHECKING:
    from ..config import HandStyleConfig


class PaintStyle(Enum):
    FILL = "fill"
    STROKE = "stroke"


class StrokeCap(Enum):
    BUTT = "butt"
    ROUND = "round"


class Typeface(Enum):
    DEFAULT = "default"
    SANS_SERIF_BOLD = "sans_serif_bold"


@dataclass(frozen=True)
class Shadow:
    """Drop shadow layer drawn under a shape."""
    radius: float
    color: RGB
    dx: float = 0.0
    dy: float = 0.0


@dataclass(frozen=True)
class Paint:
    """Immutable paint handle."""
    color: RGB = COLORS.BLACK
    stroke_width: float = 0.0
    anti_alias: bool = False
    stroke_cap: StrokeCap = StrokeCap.BUTT
    style: PaintStyle = PaintStyle.FILL
    shadow: Optional[Shadow] = None
    alpha: int = ALPHA.OPAQUE
    typeface: Typeface = Typeface.DEFAULT
    text_size: Optional[float] = None

    @property
    def rgba(self) -> Tuple[int, int, int, int]:
        return with_alpha(self.color, self.alpha)

    def with_changes(self, **changes) -> "Paint":
        return replace(self, **changes)


def make_paint(
    color: RGB,
    stroke_width: float = 0.0,
    anti_alias: bool = False,
    stroke_cap: StrokeCap = StrokeCap.BUTT,
    style: PaintStyle = PaintStyle.FILL,
    shadow: Optional[Shadow] = None,
    alpha: int = ALPHA.OPAQUE,
    typeface: Typeface = Typeface.DEFAULT,
    text_size: Optional[float] = None,
) -> Paint:
    """Paint factory."""
    return Paint(
        color=color,
        stroke_width=stroke_width,
        anti_alias=anti_alias,
        stroke_cap=stroke_cap,
        style=style,
        shadow=shadow,
        alpha=max(0, min(255, int(alpha))),
        typeface=typeface,
        text_size=text_size,
    )


@dataclass(frozen=True)
class PaintProfile:
    """Every paint the renderer needs for one display regime."""
    hour: Paint
    minute: Paint
    second: Paint
    tick: Paint          # Center cap
    background: Paint


BACKGROUND_PAINT = make_paint(COLORS.BLACK)


def derive_paint_profile(
    ambient: bool,
    muted: bool,
    hands: Optional["HandStyleConfig"] = None,
) -> PaintProfile:
    """Paints for a regime. Same inputs always give an equal profile."""
    if hands is None:
        from ..config import HandStyleConfig
        hands = HandStyleConfig()

    if ambient:
        hour_color = minute_color = second_color = tick_color = COLORS.WHITE
        shadow = None
    else:
        hour_color = hands.hour_hand_color
        minute_color = hands.minute_hand_color
        second_color = hands.second_hand_color
        tick_color = hands.hour_hand_color
        shadow = Shadow(radius=hands.shadow_radius, color=hands.shadow_color)

    anti_alias = not ambient

    return PaintProfile(
        hour=make_paint(
            hour_color, STROKES.HOUR, anti_alias, StrokeCap.ROUND, shadow=shadow,
            alpha=ALPHA.MUTED_HOUR if muted else ALPHA.OPAQUE,
        ),
        minute=make_paint(
            minute_color, STROKES.MINUTE, anti_alias, StrokeCap.ROUND, shadow=shadow,
            alpha=ALPHA.MUTED_MINUTE if muted else ALPHA.OPAQUE,
        ),
        second=make_paint(
            second_color, STROKES.SECOND_TICK, anti_alias, StrokeCap.ROUND, shadow=shadow,
            alpha=ALPHA.MUTED_SECOND if muted else ALPHA.OPAQUE,
        ),
        tick=make_paint(
            tick_color, STROKES.SECOND_TICK, anti_alias, style=PaintStyle.STROKE, shadow=shadow,
        ),
        background=BACKGROUND_PAINT,
    )


def make_text_paint(text_size: Optional[float] = None, color: RGB = COLORS.SCREEN_TEXT) -> Paint:
    """Overlay text paint: bold sans-serif, anti-aliased."""
    return make_paint(color, anti_alias=True, typeface=Typeface.SANS_SERIF_BOLD, text_size=text_size)
