"""
Asset Set - the five smiley background frames and the gray ambient frame.

Source frames are kept as loaded; every resize scales from the sources,
so resizing twice to the same surface gives the same frames.
"""

import logging
from enum import Enum
from typing import List, Optional, Tuple, TYPE_CHECKING

from PIL import Image

from ..errors import AssetLoadFailure, SurfaceInvalid
from .geometry import Surface

if TYPE_CHECKING:
    from ..host import ResourceService


logger = logging.getLogger(__name__)


FRAME_IDS: Tuple[str, ...] = ("smiley1", "smiley2", "smiley3", "smiley4", "smiley5")


class Background(Enum):
    """What a draw put behind the hands."""
    BG0 = 0
    BG1 = 1
    BG2 = 2
    BG3 = 3
    BG4 = 4
    GRAY = "gray"
    BLACK = "black"


class AssetSet:
    """Background frames bg0..bg4 plus gray_bg0, sized to the surface."""

    def __init__(self, resources: "ResourceService"):
        self._resources = resources
        self._sources: List[Image.Image] = []
        self._frames: List[Image.Image] = []
        self.gray_bg0: Optional[Image.Image] = None
        self.scale: float = 1.0
        self._sized_for: Optional[Tuple[int, int, bool, bool]] = None

    @property
    def is_loaded(self) -> bool:
        return len(self._frames) == len(FRAME_IDS)

    @property
    def frames(self) -> List[Image.Image]:
        return list(self._frames)

    def load(self) -> None:
        """Load every frame. Fails as a whole: no partial set is kept."""
        loaded = []
        for resource_id in FRAME_IDS:
            try:
                bitmap = self._resources.load_bitmap(resource_id)
            except AssetLoadFailure:
                raise
            except (OSError, ValueError) as e:
                raise AssetLoadFailure(resource_id, e) from e
            if bitmap is None:
                raise AssetLoadFailure(resource_id, "resource service returned nothing")
            loaded.append(bitmap)

        self._sources = loaded
        self._frames = list(loaded)
        self.gray_bg0 = None
        self._sized_for = None
        logger.debug("Loaded %d background frames", len(loaded))

    def resize(self, surface: Surface, low_bit: bool = False, burn_in: bool = False) -> float:
        """
        Scale every frame so bg0 is as wide as the surface.

        gray_bg0 is rebuilt from the scaled bg0 only when neither low-bit
        nor burn-in is active; otherwise it is dropped.

        Raises:
            SurfaceInvalid: non-positive surface; prior frames are kept.
            AssetLoadFailure: load() has not succeeded.
        """
        if not surface.is_valid:
            raise SurfaceInvalid(surface.width, surface.height)
        if not self._sources:
            raise AssetLoadFailure(FRAME_IDS[0], "frames not loaded")

        key = (surface.width, surface.height, bool(low_bit), bool(burn_in))
        if key == self._sized_for:
            return self.scale

        scale = surface.width / float(self._sources[0].width)
        logger.debug("Scaling backgrounds: %d -> %d (scale %.3f)",
                     self._sources[0].width, surface.width, scale)

        scaled = []
        for source in self._sources:
            width = int(round(source.width * scale))
            height = int(round(source.height * scale))
            scaled.append(self._resources.scale_bitmap(source, width, height, True))

        self._frames = scaled
        self.scale = scale
        if not low_bit and not burn_in:
            self.gray_bg0 = self._resources.desaturate(scaled[0])
        else:
            self.gray_bg0 = None
        self._sized_for = key
        return scale

    def bitmap(self, background: Background) -> Optional[Image.Image]:
        """Bitmap for a background, or None for BLACK (and GRAY when not built)."""
        if background is Background.BLACK:
            return None
        if background is Background.GRAY:
            return self.gray_bg0
        return self._frames[background.value]
