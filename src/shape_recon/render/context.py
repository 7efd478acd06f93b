"""Vector-style drawing context rendered with Pillow.

Paths are built in user space through an affine transform stack
(``scale``/``translate``/``rotate`` compose like a canvas API: each call
applies in the current local coordinates).  ``fill`` rasterizes the pending
path with the current color on a transparent overlay and alpha-composites it
onto the image, so translucent shapes blend exactly once.
"""

from __future__ import annotations

import math
from typing import List, Optional, Tuple

import numpy as np
from PIL import Image, ImageDraw

from shape_recon.data import Color

Point = Tuple[float, float]

_ELLIPSE_SEGMENTS = 64


class DrawingContext:
    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("Drawing context dimensions must be positive.")
        self.width = width
        self.height = height
        self._image = Image.new("RGBA", (width, height), (0, 0, 0, 0))
        self._matrix = np.identity(3)
        self._stack: List[np.ndarray] = []
        self._paths: List[List[Point]] = []
        self._current: Optional[List[Point]] = None
        self._color = Color(0, 0, 0, 255)

    # -- transform stack -------------------------------------------------

    def push(self) -> None:
        self._stack.append(self._matrix.copy())

    def pop(self) -> None:
        self._matrix = self._stack.pop()

    def translate(self, dx: float, dy: float) -> None:
        self._apply(np.array([[1.0, 0.0, dx], [0.0, 1.0, dy], [0.0, 0.0, 1.0]]))

    def scale(self, sx: float, sy: Optional[float] = None) -> None:
        sy = sx if sy is None else sy
        self._apply(np.array([[sx, 0.0, 0.0], [0.0, sy, 0.0], [0.0, 0.0, 1.0]]))

    def rotate(self, angle: float) -> None:
        """Rotate by ``angle`` radians."""

        cos, sin = math.cos(angle), math.sin(angle)
        self._apply(np.array([[cos, -sin, 0.0], [sin, cos, 0.0], [0.0, 0.0, 1.0]]))

    def _apply(self, op: np.ndarray) -> None:
        self._matrix = self._matrix @ op

    def transform_point(self, x: float, y: float) -> Point:
        px, py, _ = self._matrix @ np.array([x, y, 1.0])
        return float(px), float(py)

    # -- paths -----------------------------------------------------------

    def new_sub_path(self) -> None:
        self._current = None

    def move_to(self, x: float, y: float) -> None:
        self._current = [self.transform_point(x, y)]
        self._paths.append(self._current)

    def line_to(self, x: float, y: float) -> None:
        if self._current is None:
            self.move_to(x, y)
            return
        self._current.append(self.transform_point(x, y))

    def close_path(self) -> None:
        self._current = None

    def draw_rectangle(self, x: float, y: float, w: float, h: float) -> None:
        self.new_sub_path()
        self.move_to(x, y)
        self.line_to(x + w, y)
        self.line_to(x + w, y + h)
        self.line_to(x, y + h)
        self.close_path()

    def draw_ellipse(self, x: float, y: float, rx: float, ry: float) -> None:
        self.new_sub_path()
        for i in range(_ELLIPSE_SEGMENTS):
            theta = 2.0 * math.pi * i / _ELLIPSE_SEGMENTS
            px = x + rx * math.cos(theta)
            py = y + ry * math.sin(theta)
            if i == 0:
                self.move_to(px, py)
            else:
                self.line_to(px, py)
        self.close_path()

    # -- painting --------------------------------------------------------

    def set_color(self, color: Color) -> None:
        self._color = color

    def clear(self) -> None:
        """Fill the whole image with the current color, replacing its content."""

        self._image = Image.new("RGBA", (self.width, self.height), self._color.rgba())

    def fill(self) -> None:
        """Paint the pending path with the current color and clear the path."""

        paths = [path for path in self._paths if len(path) >= 3]
        self._paths = []
        self._current = None
        if not paths or self._color.a == 0:
            return
        overlay = Image.new("RGBA", (self.width, self.height), (0, 0, 0, 0))
        draw = ImageDraw.Draw(overlay)
        for path in paths:
            draw.polygon(path, fill=self._color.rgba())
        self._image = Image.alpha_composite(self._image, overlay)

    def image(self) -> Image.Image:
        return self._image.copy()

    def to_array(self) -> np.ndarray:
        """Snapshot the image as an ``(H, W, 4)`` uint8 array."""

        return np.array(self._image, dtype=np.uint8)
