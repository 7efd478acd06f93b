"""Triangle primitive."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import List

import numpy as np

from shape_recon.data import Scanline
from shape_recon.shapes.base import Shape, clamp, jitter, rasterize_polygon

_MIN_DEGREES = 15.0
_MARGIN = 16


@dataclass(frozen=True)
class Triangle(Shape):
    width: int
    height: int
    x1: int
    y1: int
    x2: int
    y2: int
    x3: int
    y3: int

    @classmethod
    def random(cls, width: int, height: int, rng: np.random.Generator) -> "Triangle":
        x1 = int(rng.integers(width))
        y1 = int(rng.integers(height))
        triangle = cls(
            width=width,
            height=height,
            x1=x1,
            y1=y1,
            x2=x1 + int(rng.integers(31)) - 15,
            y2=y1 + int(rng.integers(31)) - 15,
            x3=x1 + int(rng.integers(31)) - 15,
            y3=y1 + int(rng.integers(31)) - 15,
        )
        return triangle.mutate(rng)

    def points(self):
        return [(self.x1, self.y1), (self.x2, self.y2), (self.x3, self.y3)]

    def rasterize(self) -> List[Scanline]:
        return rasterize_polygon(self.points(), self.width, self.height)

    def render(self, dc) -> None:
        dc.new_sub_path()
        dc.move_to(self.x1, self.y1)
        dc.line_to(self.x2, self.y2)
        dc.line_to(self.x3, self.y3)
        dc.close_path()

    def svg(self, attrs: str) -> str:
        return (
            f'<polygon {attrs} points="{self.x1},{self.y1} '
            f'{self.x2},{self.y2} {self.x3},{self.y3}" />'
        )

    def mutate(self, rng: np.random.Generator) -> "Triangle":
        w, h = self.width, self.height
        while True:
            index = int(rng.integers(3)) + 1
            x = getattr(self, f"x{index}") + jitter(rng, 16)
            y = getattr(self, f"y{index}") + jitter(rng, 16)
            candidate = replace(
                self,
                **{
                    f"x{index}": clamp(x, -_MARGIN, w - 1 + _MARGIN),
                    f"y{index}": clamp(y, -_MARGIN, h - 1 + _MARGIN),
                },
            )
            if candidate.is_valid():
                return candidate

    def is_valid(self) -> bool:
        """Reject slivers: every interior angle must exceed 15 degrees."""

        pts = self.points()
        for i in range(3):
            ox, oy = pts[i]
            ax, ay = pts[(i + 1) % 3]
            bx, by = pts[(i + 2) % 3]
            ux, uy = ax - ox, ay - oy
            vx, vy = bx - ox, by - oy
            norm = math.hypot(ux, uy) * math.hypot(vx, vy)
            if norm == 0:
                return False
            cosine = max(-1.0, min(1.0, (ux * vx + uy * vy) / norm))
            if math.degrees(math.acos(cosine)) <= _MIN_DEGREES:
                return False
        return True
