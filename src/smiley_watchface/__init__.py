"""
Smiley Watch Face - an analog watch face with rolling eyes

Hour, minute and second hands over a smiley background. Touch the
screen and the eyes roll once around. Ambient, low-bit, burn-in and
do-not-disturb regimes each get their own look.
"""

__version__ = "0.1.0"

from .clock import HandAngles, WatchClock, angles_at
from .config import (
    WatchFaceConfig,
    HandStyleConfig,
    AnimationConfig,
    ConfigManager,
    get_config_manager,
    get_watch_face_config,
)
from .engine import WatchFaceEngine, WatchFaceStyle
from .errors import (
    WatchFaceError,
    AssetLoadFailure,
    SurfaceInvalid,
    DrawPrimitiveFailure,
    ConfigError,
    ErrorType,
)
from .host import (
    TimeService,
    SystemTimeService,
    Subscription,
    Timer,
    ManualTimer,
    ResourceService,
    PilResourceService,
)
from .scheduler import FrameScheduler, next_frame_delay

__all__ = [
    "HandAngles",
    "WatchClock",
    "angles_at",
    "WatchFaceConfig",
    "HandStyleConfig",
    "AnimationConfig",
    "ConfigManager",
    "get_config_manager",
    "get_watch_face_config",
    "WatchFaceEngine",
    "WatchFaceStyle",
    "WatchFaceError",
    "AssetLoadFailure",
    "SurfaceInvalid",
    "DrawPrimitiveFailure",
    "ConfigError",
    "ErrorType",
    "TimeService",
    "SystemTimeService",
    "Subscription",
    "Timer",
    "ManualTimer",
    "ResourceService",
    "PilResourceService",
    "FrameScheduler",
    "next_frame_delay",
]
