"""
Display - everything that decides what a frame looks like.

Display mode and paints, background assets, the tap-triggered eye
animation, the canvas primitives and the renderer that composes them.
"""

from .design import COLORS, STROKES, HAND_RATIOS, ALPHA, TIMING, TYPOGRAPHY
from .geometry import Rect, Surface, HandLengths
from .modes import DisplayMode, DisplayModeState, InterruptionFilter, select_mode
from .paint import (
    Paint, PaintProfile, PaintStyle, StrokeCap, Shadow, Typeface,
    make_paint, make_text_paint, derive_paint_profile,
)
from .assets import AssetSet, Background, FRAME_IDS
from .animation import AnimationState, TapCounters, TapDriver, TapEvent, TapType
from .canvas import Canvas, PilCanvas
from .renderer import FrameResult, TextOverlay, WatchFaceRenderer

__all__ = [
    "COLORS", "STROKES", "HAND_RATIOS", "ALPHA", "TIMING", "TYPOGRAPHY",
    "Rect", "Surface", "HandLengths",
    "DisplayMode", "DisplayModeState", "InterruptionFilter", "select_mode",
    "Paint", "PaintProfile", "PaintStyle", "StrokeCap", "Shadow", "Typeface",
    "make_paint", "make_text_paint", "derive_paint_profile",
    "AssetSet", "Background", "FRAME_IDS",
    "AnimationState", "TapCounters", "TapDriver", "TapEvent", "TapType",
    "Canvas", "PilCanvas",
    "FrameResult", "TextOverlay", "WatchFaceRenderer",
]
