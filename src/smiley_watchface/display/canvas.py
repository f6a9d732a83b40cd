"""
Canvas - the drawing primitives the renderer uses.

Canvas is the host-facing interface. PilCanvas draws into a PIL image
and keeps a save/rotate/restore transform stack, so hands can be drawn
straight up and rotated into place the way a device canvas does it.
"""

import math
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Callable, Dict, List, Optional, Tuple

from PIL import Image, ImageDraw, ImageFilter, ImageFont

from ..errors import DrawPrimitiveFailure
from .design import TYPOGRAPHY, RGB, with_alpha
from .geometry import Rect
from .paint import Paint, PaintStyle, StrokeCap, Typeface


# Affine transform (a, b, c, d, e, f): x' = a*x + b*y + c, y' = d*x + e*y + f
Matrix = Tuple[float, float, float, float, float, float]
IDENTITY: Matrix = (1.0, 0.0, 0.0, 0.0, 1.0, 0.0)

DrawFn = Callable[[ImageDraw.ImageDraw, tuple, float, float], None]


class Canvas(ABC):
    """Drawing primitives consumed by the renderer."""

    @abstractmethod
    def fill(self, color: RGB) -> None:
        """Fill the whole surface."""

    @abstractmethod
    def draw_bitmap(self, bitmap: Image.Image, x: float, y: float, paint: Paint) -> None:
        pass

    @abstractmethod
    def draw_line(self, x1: float, y1: float, x2: float, y2: float, paint: Paint) -> None:
        pass

    @abstractmethod
    def draw_circle(self, x: float, y: float, radius: float, paint: Paint) -> None:
        pass

    @abstractmethod
    def draw_rect(self, rect: Rect, paint: Paint) -> None:
        pass

    @abstractmethod
    def draw_text(self, text: str, x: float, y: float, paint: Paint) -> None:
        """Draw text with (x, y) on the left end of the baseline."""

    @abstractmethod
    def save(self) -> None:
        """Push the current transform."""

    @abstractmethod
    def rotate(self, degrees: float, px: float, py: float) -> None:
        """Rotate clockwise about (px, py), composed with the current transform."""

    @abstractmethod
    def restore(self) -> None:
        """Pop back to the last saved transform."""


def rotation(degrees: float, px: float, py: float) -> Matrix:
    """Clockwise rotation about (px, py) in screen coordinates (y down)."""
    rad = math.radians(degrees)
    cos, sin = math.cos(rad), math.sin(rad)
    return (
        cos, -sin, px - px * cos + py * sin,
        sin, cos, py - px * sin - py * cos,
    )


def compose(outer: Matrix, inner: Matrix) -> Matrix:
    """Transform that applies `inner` first, then `outer`."""
    a1, b1, c1, d1, e1, f1 = outer
    a2, b2, c2, d2, e2, f2 = inner
    return (
        a1 * a2 + b1 * d2, a1 * b2 + b1 * e2, a1 * c2 + b1 * f2 + c1,
        d1 * a2 + e1 * d2, d1 * b2 + e1 * e2, d1 * c2 + e1 * f2 + f1,
    )


def apply(matrix: Matrix, x: float, y: float) -> Tuple[float, float]:
    a, b, c, d, e, f = matrix
    return a * x + b * y + c, d * x + e * y + f


class PilCanvas(Canvas):
    """
    Canvas over a PIL image.

    Translucent paints and shadows are drawn on a transparent layer and
    composited. Pillow's ImageDraw does not anti-alias, so the paint's
    anti_alias flag has no effect here.
    """

    def __init__(self, image: Image.Image):
        self.image = image
        self._matrix: Matrix = IDENTITY
        self._stack: List[Matrix] = []
        self._fonts: Dict[Tuple[Typeface, int], ImageFont.ImageFont] = {}

    @classmethod
    def create(cls, width: int, height: int, mode: str = "RGB") -> "PilCanvas":
        return cls(Image.new(mode, (width, height), (0, 0, 0)))

    @property
    def matrix(self) -> Matrix:
        return self._matrix

    # === Transform ===

    def save(self) -> None:
        self._stack.append(self._matrix)

    def rotate(self, degrees: float, px: float, py: float) -> None:
        self._matrix = compose(self._matrix, rotation(degrees, px, py))

    def restore(self) -> None:
        if not self._stack:
            raise DrawPrimitiveFailure("restore", ValueError("restore without matching save"))
        self._matrix = self._stack.pop()

    def _map(self, x: float, y: float) -> Tuple[float, float]:
        return apply(self._matrix, x, y)

    # === Primitives ===

    def fill(self, color: RGB) -> None:
        with self._guard("fill"):
            fill = with_alpha(color, 255) if self.image.mode == "RGBA" else tuple(color)
            self.image.paste(fill, (0, 0, self.image.width, self.image.height))

    def draw_bitmap(self, bitmap: Image.Image, x: float, y: float, paint: Paint) -> None:
        with self._guard("draw_bitmap"):
            px, py = self._map(x, y)
            box = (int(round(px)), int(round(py)))
            if bitmap.mode == "RGBA":
                self.image.paste(bitmap, box, bitmap)
            else:
                self.image.paste(bitmap.convert(self.image.mode), box)

    def draw_line(self, x1: float, y1: float, x2: float, y2: float, paint: Paint) -> None:
        p1 = self._map(x1, y1)
        p2 = self._map(x2, y2)
        width = max(1, int(round(paint.stroke_width)))

        def _line(draw: ImageDraw.ImageDraw, fill: tuple, dx: float, dy: float) -> None:
            a = (p1[0] + dx, p1[1] + dy)
            b = (p2[0] + dx, p2[1] + dy)
            draw.line([a, b], fill=fill, width=width)
            if paint.stroke_cap is StrokeCap.ROUND:
                r = width / 2.0
                for cx, cy in (a, b):
                    draw.ellipse([cx - r, cy - r, cx + r, cy + r], fill=fill)

        with self._guard("draw_line"):
            self._paint(paint, _line)

    def draw_circle(self, x: float, y: float, radius: float, paint: Paint) -> None:
        cx, cy = self._map(x, y)
        width = max(1, int(round(paint.stroke_width)))

        def _circle(draw: ImageDraw.ImageDraw, fill: tuple, dx: float, dy: float) -> None:
            box = [cx + dx - radius, cy + dy - radius, cx + dx + radius, cy + dy + radius]
            if paint.style is PaintStyle.STROKE:
                draw.ellipse(box, outline=fill, width=width)
            else:
                draw.ellipse(box, fill=fill)

        with self._guard("draw_circle"):
            self._paint(paint, _circle)

    def draw_rect(self, rect: Rect, paint: Paint) -> None:
        if rect.is_empty:
            return
        corners = [
            self._map(rect.left, rect.top),
            self._map(rect.right, rect.top),
            self._map(rect.right, rect.bottom),
            self._map(rect.left, rect.bottom),
        ]

        def _rect(draw: ImageDraw.ImageDraw, fill: tuple, dx: float, dy: float) -> None:
            draw.polygon([(x + dx, y + dy) for x, y in corners], fill=fill)

        with self._guard("draw_rect"):
            self._paint(paint, _rect)

    def draw_text(self, text: str, x: float, y: float, paint: Paint) -> None:
        px, py = self._map(x, y)
        font = self._font(paint.typeface, paint.text_size)
        anchor = "ls" if isinstance(font, ImageFont.FreeTypeFont) else None

        def _text(draw: ImageDraw.ImageDraw, fill: tuple, dx: float, dy: float) -> None:
            draw.text((px + dx, py + dy), text, fill=fill, font=font, anchor=anchor)

        with self._guard("draw_text"):
            self._paint(paint, _text)

    # === Helpers ===

    def _font(self, typeface: Typeface, size: Optional[float]) -> ImageFont.ImageFont:
        """Cached overlay font (loading from disk on every draw is slow)."""
        px = int(round(size or 12))
        key = (typeface, px)
        if key not in self._fonts:
            path = TYPOGRAPHY.FONT_BOLD_PATH if typeface is Typeface.SANS_SERIF_BOLD else TYPOGRAPHY.FONT_PATH
            try:
                self._fonts[key] = ImageFont.truetype(path, px)
            except OSError:
                self._fonts[key] = ImageFont.load_default(px)
        return self._fonts[key]

    def _paint(self, paint: Paint, draw_fn: DrawFn) -> None:
        """Draw a shape with the paint's shadow and alpha."""
        if paint.shadow is not None and paint.shadow.radius > 0:
            layer = Image.new("RGBA", self.image.size, (0, 0, 0, 0))
            draw_fn(ImageDraw.Draw(layer), with_alpha(paint.shadow.color, paint.alpha),
                    paint.shadow.dx, paint.shadow.dy)
            self._composite(layer.filter(ImageFilter.GaussianBlur(paint.shadow.radius / 2.0)))

        if paint.alpha >= 255:
            fill = paint.rgba if self.image.mode == "RGBA" else tuple(paint.color)
            draw_fn(ImageDraw.Draw(self.image), fill, 0.0, 0.0)
        else:
            layer = Image.new("RGBA", self.image.size, (0, 0, 0, 0))
            draw_fn(ImageDraw.Draw(layer), paint.rgba, 0.0, 0.0)
            self._composite(layer)

    def _composite(self, layer: Image.Image) -> None:
        if self.image.mode == "RGBA":
            self.image.alpha_composite(layer)
        else:
            self.image.paste(layer, (0, 0), layer)

    @contextmanager
    def _guard(self, primitive: str):
        try:
            yield
        except DrawPrimitiveFailure:
            raise
        except (OSError, ValueError, TypeError) as e:
            raise DrawPrimitiveFailure(primitive, e) from e
