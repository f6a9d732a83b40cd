"""
Host services - what the watch face consumes from its host.

- TimeService: current time, current zone, zone-change subscription
- Timer: delayed callbacks with cancellable tokens
- ResourceService: bitmap loading/scaling/desaturation and dimensions

Each has one concrete implementation here: the system clock, a manual
timer the host (or a test) advances explicitly, and a Pillow-backed
resource service reading PNG frames from a directory.
"""

import logging
import time
from abc import ABC, abstractmethod
from datetime import datetime, tzinfo
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Tuple, Union

from PIL import Image, ImageEnhance

from .display.design import DEFAULT_DIMENSIONS
from .errors import AssetLoadFailure


logger = logging.getLogger(__name__)


# === Time ===

class Subscription:
    """Cancel token for a subscription. cancel() is idempotent."""

    def __init__(self, cancel_fn: Callable[[], None]):
        self._cancel_fn: Optional[Callable[[], None]] = cancel_fn

    @property
    def active(self) -> bool:
        return self._cancel_fn is not None

    def cancel(self) -> None:
        fn, self._cancel_fn = self._cancel_fn, None
        if fn is not None:
            fn()


class TimeService(ABC):
    """Wall clock and time zone provided by the host."""

    @abstractmethod
    def now_millis(self) -> int:
        """Milliseconds since the epoch."""

    @abstractmethod
    def current_time_zone(self) -> tzinfo:
        """The host's current zone."""

    @abstractmethod
    def subscribe_time_zone_change(self, handler: Callable[[], None]) -> Subscription:
        """Call handler whenever the host's zone changes."""


class SystemTimeService(TimeService):
    """
    System clock. The zone is the local zone unless one is given.

    Hosts that learn about zone changes call set_time_zone(), which
    broadcasts to subscribers.
    """

    def __init__(self, clock: Callable[[], float] = time.time, zone: Optional[tzinfo] = None):
        self._clock = clock
        self._zone = zone
        self._handlers: List[Callable[[], None]] = []

    def now_millis(self) -> int:
        return int(self._clock() * 1000)

    def current_time_zone(self) -> tzinfo:
        if self._zone is not None:
            return self._zone
        return datetime.now().astimezone().tzinfo

    def subscribe_time_zone_change(self, handler: Callable[[], None]) -> Subscription:
        self._handlers.append(handler)

        def _remove():
            if handler in self._handlers:
                self._handlers.remove(handler)

        return Subscription(_remove)

    @property
    def subscriber_count(self) -> int:
        return len(self._handlers)

    def set_time_zone(self, zone: Optional[tzinfo]) -> None:
        """Change zone and broadcast to subscribers."""
        self._zone = zone
        for handler in list(self._handlers):
            handler()


# === Timer ===

class Timer(ABC):
    """Delayed callbacks on the watch face's single logical thread."""

    @abstractmethod
    def post_delayed(self, delay_ms: int, callback: Callable[[], None]) -> int:
        """Schedule callback after delay_ms. Returns a token for cancel()."""

    @abstractmethod
    def cancel(self, token: int) -> bool:
        """Cancel a pending callback. Returns False if it already ran or was cancelled."""


class ManualTimer(Timer):
    """
    Timer driven by explicit advance() calls.

    Callbacks run in due order on the caller's thread. A zero-delay
    callback posted while advance() is firing runs on the next advance(),
    so a draw that immediately reschedules itself cannot spin forever.
    """

    def __init__(self):
        self.now_ms: int = 0
        self._next_token: int = 1
        # token -> (due_ms, callback)
        self._pending: Dict[int, Tuple[int, Callable[[], None]]] = {}
        self._deferred: set = set()
        self._firing = False

    def post_delayed(self, delay_ms: int, callback: Callable[[], None]) -> int:
        token = self._next_token
        self._next_token += 1
        delay_ms = max(0, int(delay_ms))
        self._pending[token] = (self.now_ms + delay_ms, callback)
        if self._firing and delay_ms == 0:
            self._deferred.add(token)
        return token

    def cancel(self, token: int) -> bool:
        self._deferred.discard(token)
        return self._pending.pop(token, None) is not None

    @property
    def pending(self) -> int:
        return len(self._pending)

    def next_due(self) -> Optional[int]:
        """Milliseconds until the earliest pending callback, or None."""
        if not self._pending:
            return None
        return min(due for due, _ in self._pending.values()) - self.now_ms

    def advance(self, ms: int = 0) -> int:
        """Move time forward by ms, firing due callbacks. Returns number fired."""
        target = self.now_ms + max(0, int(ms))
        fired = 0
        self._firing = True
        self._deferred.clear()
        try:
            while True:
                due_tokens = [
                    (due, token) for token, (due, _) in self._pending.items()
                    if due <= target and token not in self._deferred
                ]
                if not due_tokens:
                    break
                due, token = min(due_tokens)
                _, callback = self._pending.pop(token)
                self.now_ms = max(self.now_ms, due)
                callback()
                fired += 1
        finally:
            self._firing = False
            self._deferred.clear()
        self.now_ms = target
        return fired


# === Resources ===

class ResourceService(ABC):
    """Bitmaps and dimensions provided by the host."""

    @abstractmethod
    def load_bitmap(self, resource_id: str) -> Image.Image:
        """Decode a bitmap. Raises AssetLoadFailure when unavailable."""

    @abstractmethod
    def scale_bitmap(self, bitmap: Image.Image, width: int, height: int, bilinear: bool = True) -> Image.Image:
        """Return a scaled copy."""

    @abstractmethod
    def desaturate(self, bitmap: Image.Image) -> Image.Image:
        """Return a zero-saturation copy."""

    @abstractmethod
    def get_dimension(self, dimen_id: str) -> float:
        """Dimension in pixels."""

    def get_shape_specific_dimension(self, round_id: str, square_id: str, is_round: bool) -> float:
        return self.get_dimension(round_id if is_round else square_id)


class PilResourceService(ResourceService):
    """
    Pillow-backed resources.

    Bitmaps come from `<asset_dir>/<resource_id>.png`, or from an
    in-memory mapping when one is given (preloaded frames, tests).
    """

    def __init__(
        self,
        asset_dir: Optional[Union[str, Path]] = None,
        bitmaps: Optional[Mapping[str, Image.Image]] = None,
        dimensions: Optional[Mapping[str, float]] = None,
    ):
        self.asset_dir = Path(asset_dir) if asset_dir is not None else None
        self._bitmaps = dict(bitmaps or {})
        self._dimensions = dict(DEFAULT_DIMENSIONS)
        if dimensions:
            self._dimensions.update(dimensions)

    def load_bitmap(self, resource_id: str) -> Image.Image:
        if resource_id in self._bitmaps:
            return self._bitmaps[resource_id].copy()

        if self.asset_dir is None:
            raise AssetLoadFailure(resource_id, "no asset directory")

        path = self.asset_dir / f"{resource_id}.png"
        try:
            with Image.open(path) as image:
                bitmap = image.convert("RGB")
        except (OSError, ValueError) as e:
            raise AssetLoadFailure(resource_id, e) from e
        logger.debug("Loaded %s (%dx%d)", path, bitmap.width, bitmap.height)
        return bitmap

    def scale_bitmap(self, bitmap: Image.Image, width: int, height: int, bilinear: bool = True) -> Image.Image:
        resample = Image.Resampling.BILINEAR if bilinear else Image.Resampling.NEAREST
        return bitmap.resize((width, height), resample)

    def desaturate(self, bitmap: Image.Image) -> Image.Image:
        return ImageEnhance.Color(bitmap).enhance(0.0)

    def get_dimension(self, dimen_id: str) -> float:
        try:
            return self._dimensions[dimen_id]
        except KeyError:
            raise KeyError(f"unknown dimension '{dimen_id}'") from None
