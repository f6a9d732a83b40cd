"""
Shared test fixtures for the smiley watch face test suite.

Frames are small in-memory PIL images, one solid color each, so tests
can tell which background a draw used. The recording canvas captures
draw commands instead of pixels.
"""

import pytest
from datetime import datetime, timezone

from PIL import Image

from smiley_watchface.config import WatchFaceConfig
from smiley_watchface.display.assets import FRAME_IDS
from smiley_watchface.display.canvas import Canvas
from smiley_watchface.engine import WatchFaceEngine
from smiley_watchface.host import ManualTimer, PilResourceService, SystemTimeService


# ---------------------------------------------------------------------------
# Frames
# ---------------------------------------------------------------------------

FRAME_SIZE = 400

# One color per frame: smiley1 (bg0) .. smiley5 (bg4)
FRAME_COLORS = {
    "smiley1": (200, 180, 0),
    "smiley2": (0, 160, 0),
    "smiley3": (0, 0, 200),
    "smiley4": (160, 0, 160),
    "smiley5": (0, 160, 160),
}


def make_frames(size: int = FRAME_SIZE):
    """
    Solid-color frames keyed by resource id.

    Plain function (not a fixture) for inline use with other sizes.
    Importable as:

        from conftest import make_frames
    """
    return {rid: Image.new("RGB", (size, size), FRAME_COLORS[rid]) for rid in FRAME_IDS}


@pytest.fixture
def frames():
    return make_frames()


# ---------------------------------------------------------------------------
# Host services
# ---------------------------------------------------------------------------

# 2024-01-01 10:08:30.000 UTC
FIXED_EPOCH = datetime(2024, 1, 1, 10, 8, 30, tzinfo=timezone.utc).timestamp()


@pytest.fixture
def resources(frames):
    """Resource service serving the in-memory frames and default dimensions."""
    return PilResourceService(bitmaps=frames)


@pytest.fixture
def time_service():
    """Time service frozen at FIXED_EPOCH, in UTC."""
    return SystemTimeService(clock=lambda: FIXED_EPOCH, zone=timezone.utc)


@pytest.fixture
def timer():
    return ManualTimer()


# ---------------------------------------------------------------------------
# Canvas
# ---------------------------------------------------------------------------

class RecordingCanvas(Canvas):
    """Canvas that records every call as a tuple: (name, *args)."""

    def __init__(self):
        self.calls = []
        self.depth = 0

    def fill(self, color):
        self.calls.append(("fill", color))

    def draw_bitmap(self, bitmap, x, y, paint):
        self.calls.append(("draw_bitmap", bitmap, x, y, paint))

    def draw_line(self, x1, y1, x2, y2, paint):
        self.calls.append(("draw_line", x1, y1, x2, y2, paint))

    def draw_circle(self, x, y, radius, paint):
        self.calls.append(("draw_circle", x, y, radius, paint))

    def draw_rect(self, rect, paint):
        self.calls.append(("draw_rect", rect, paint))

    def draw_text(self, text, x, y, paint):
        self.calls.append(("draw_text", text, x, y, paint))

    def save(self):
        self.depth += 1
        self.calls.append(("save",))

    def rotate(self, degrees, px, py):
        self.calls.append(("rotate", degrees, px, py))

    def restore(self):
        self.depth -= 1
        self.calls.append(("restore",))

    # Queries

    def names(self):
        return [call[0] for call in self.calls]

    def of(self, name):
        return [call for call in self.calls if call[0] == name]

    def bitmap_colors(self):
        """Top-left pixel of every blitted bitmap, in draw order."""
        return [call[1].getpixel((0, 0)) for call in self.of("draw_bitmap")]


@pytest.fixture
def canvas():
    return RecordingCanvas()


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

def make_engine(resources, time_service, timer, config=None, **kwargs):
    """Engine wired to test services. Does not call on_create()."""
    return WatchFaceEngine(
        resources,
        time_service,
        timer,
        config=config if config is not None else WatchFaceConfig(),
        **kwargs,
    )


@pytest.fixture
def engine(resources, time_service, timer):
    """Engine created, sized 320x320 and visible: ready to draw interactively."""
    eng = make_engine(resources, time_service, timer)
    eng.on_create()
    eng.on_surface_changed(320, 320)
    eng.on_visibility_changed(True)
    return eng
