"""Surface, rectangles and hand geometry."""

from dataclasses import dataclass

from .design import HAND_RATIOS


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle, right/bottom exclusive."""
    left: float = 0
    top: float = 0
    right: float = 0
    bottom: float = 0

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


@dataclass(frozen=True)
class Surface:
    """The drawable surface reported by the host."""
    width: int
    height: int
    is_round: bool = False

    @property
    def is_valid(self) -> bool:
        return self.width > 0 and self.height > 0

    @property
    def center_x(self) -> float:
        return self.width / 2.0

    @property
    def center_y(self) -> float:
        return self.height / 2.0

    @property
    def bounds(self) -> Rect:
        return Rect(0, 0, self.width, self.height)


@dataclass(frozen=True)
class HandLengths:
    """Hand lengths in pixels. Computed once per surface change."""
    hour: float
    minute: float
    second: float

    @classmethod
    def for_surface(cls, surface: Surface) -> "HandLengths":
        cx = surface.center_x
        return cls(
            hour=cx * HAND_RATIOS.HOUR,
            minute=cx * HAND_RATIOS.MINUTE,
            second=cx * HAND_RATIOS.SECOND,
        )
