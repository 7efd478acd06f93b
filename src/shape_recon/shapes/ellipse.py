"""Ellipse and circle primitives."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import List

import numpy as np

from shape_recon.data import Scanline
from shape_recon.shapes.base import Shape, clamp, jitter


@dataclass(frozen=True)
class Ellipse(Shape):
    """Axis-aligned ellipse. With ``circle`` set, both radii move together."""

    width: int
    height: int
    x: int
    y: int
    rx: int
    ry: int
    circle: bool = False

    @classmethod
    def random(cls, width: int, height: int, rng: np.random.Generator) -> "Ellipse":
        rx = int(rng.integers(32)) + 1
        ry = int(rng.integers(32)) + 1
        return cls(width, height, int(rng.integers(width)), int(rng.integers(height)), rx, ry)

    def rasterize(self) -> List[Scanline]:
        w, h = self.width, self.height
        aspect = self.rx / self.ry
        lines: List[Scanline] = []
        for dy in range(self.ry):
            y1 = self.y - dy
            y2 = self.y + dy
            top_inside = 0 <= y1 < h
            bottom_inside = 0 <= y2 < h and dy > 0
            if not (top_inside or bottom_inside):
                continue
            s = int(math.sqrt(self.ry * self.ry - dy * dy) * aspect)
            x1 = max(0, self.x - s)
            x2 = min(w - 1, self.x + s)
            if x1 > x2:
                continue
            if top_inside:
                lines.append(Scanline(y1, x1, x2))
            if bottom_inside:
                lines.append(Scanline(y2, x1, x2))
        return lines

    def render(self, dc) -> None:
        dc.draw_ellipse(self.x, self.y, self.rx, self.ry)

    def svg(self, attrs: str) -> str:
        return f'<ellipse {attrs} cx="{self.x}" cy="{self.y}" rx="{self.rx}" ry="{self.ry}" />'

    def mutate(self, rng: np.random.Generator) -> "Ellipse":
        w, h = self.width, self.height
        choice = int(rng.integers(3))
        if choice == 0:
            return replace(
                self,
                x=clamp(self.x + jitter(rng, 16), 0, w - 1),
                y=clamp(self.y + jitter(rng, 16), 0, h - 1),
            )
        if choice == 1:
            rx = clamp(self.rx + jitter(rng, 16), 1, max(1, w - 1))
            return replace(self, rx=rx, ry=rx if self.circle else self.ry)
        ry = clamp(self.ry + jitter(rng, 16), 1, max(1, h - 1))
        return replace(self, ry=ry, rx=ry if self.circle else self.rx)


@dataclass(frozen=True)
class Circle(Ellipse):
    circle: bool = True

    @classmethod
    def random(cls, width: int, height: int, rng: np.random.Generator) -> "Circle":
        radius = int(rng.integers(32)) + 1
        return cls(width, height, int(rng.integers(width)), int(rng.integers(height)), radius, radius)
