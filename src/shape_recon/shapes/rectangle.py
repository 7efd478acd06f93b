"""Axis-aligned and rotated rectangle primitives."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import List

import numpy as np

from shape_recon.data import Scanline
from shape_recon.shapes.base import Shape, clamp, jitter, rasterize_polygon

_MAX_ASPECT = 5.0


@dataclass(frozen=True)
class Rectangle(Shape):
    """Rectangle spanning two corners, both inclusive."""

    width: int
    height: int
    x1: int
    y1: int
    x2: int
    y2: int

    @classmethod
    def random(cls, width: int, height: int, rng: np.random.Generator) -> "Rectangle":
        x1 = int(rng.integers(width))
        y1 = int(rng.integers(height))
        x2 = clamp(x1 + int(rng.integers(32)) + 1, 0, width - 1)
        y2 = clamp(y1 + int(rng.integers(32)) + 1, 0, height - 1)
        return cls(width, height, x1, y1, x2, y2)

    def bounds(self):
        return (
            min(self.x1, self.x2),
            min(self.y1, self.y2),
            max(self.x1, self.x2),
            max(self.y1, self.y2),
        )

    def rasterize(self) -> List[Scanline]:
        x1, y1, x2, y2 = self.bounds()
        x1, x2 = max(x1, 0), min(x2, self.width - 1)
        y1, y2 = max(y1, 0), min(y2, self.height - 1)
        if x1 > x2:
            return []
        return [Scanline(y, x1, x2) for y in range(y1, y2 + 1)]

    def render(self, dc) -> None:
        x1, y1, x2, y2 = self.bounds()
        dc.draw_rectangle(x1, y1, x2 - x1 + 1, y2 - y1 + 1)

    def svg(self, attrs: str) -> str:
        x1, y1, x2, y2 = self.bounds()
        return f'<rect {attrs} x="{x1}" y="{y1}" width="{x2 - x1 + 1}" height="{y2 - y1 + 1}" />'

    def mutate(self, rng: np.random.Generator) -> "Rectangle":
        w, h = self.width, self.height
        if rng.integers(2) == 0:
            return replace(
                self,
                x1=clamp(self.x1 + jitter(rng, 16), 0, w - 1),
                y1=clamp(self.y1 + jitter(rng, 16), 0, h - 1),
            )
        return replace(
            self,
            x2=clamp(self.x2 + jitter(rng, 16), 0, w - 1),
            y2=clamp(self.y2 + jitter(rng, 16), 0, h - 1),
        )


@dataclass(frozen=True)
class RotatedRectangle(Shape):
    """Rectangle of size ``sx`` x ``sy`` centered on ``(x, y)``, rotated by ``angle`` degrees."""

    width: int
    height: int
    x: int
    y: int
    sx: int
    sy: int
    angle: int

    @classmethod
    def random(cls, width: int, height: int, rng: np.random.Generator) -> "RotatedRectangle":
        rect = cls(
            width=width,
            height=height,
            x=int(rng.integers(width)),
            y=int(rng.integers(height)),
            sx=int(rng.integers(32)) + 1,
            sy=int(rng.integers(32)) + 1,
            angle=int(rng.integers(360)),
        )
        return rect.mutate(rng)

    def corners(self):
        radians = math.radians(self.angle)
        cos, sin = math.cos(radians), math.sin(radians)
        hx, hy = self.sx / 2.0, self.sy / 2.0
        corners = []
        for dx, dy in ((-hx, -hy), (hx, -hy), (hx, hy), (-hx, hy)):
            corners.append((self.x + dx * cos - dy * sin, self.y + dx * sin + dy * cos))
        return corners

    def rasterize(self) -> List[Scanline]:
        return rasterize_polygon(self.corners(), self.width, self.height)

    def render(self, dc) -> None:
        dc.push()
        dc.translate(self.x, self.y)
        dc.rotate(math.radians(self.angle))
        dc.scale(self.sx, self.sy)
        dc.draw_rectangle(-0.5, -0.5, 1, 1)
        dc.pop()

    def svg(self, attrs: str) -> str:
        return (
            f'<g transform="translate({self.x} {self.y}) rotate({self.angle}) '
            f'scale({self.sx} {self.sy})"><rect {attrs} x="-0.5" y="-0.5" width="1" height="1" /></g>'
        )

    def mutate(self, rng: np.random.Generator) -> "RotatedRectangle":
        w, h = self.width, self.height
        while True:
            choice = int(rng.integers(3))
            if choice == 0:
                candidate = replace(
                    self,
                    x=clamp(self.x + jitter(rng, 16), 0, w - 1),
                    y=clamp(self.y + jitter(rng, 16), 0, h - 1),
                )
            elif choice == 1:
                candidate = replace(
                    self,
                    sx=clamp(self.sx + jitter(rng, 16), 1, max(1, w - 1)),
                    sy=clamp(self.sy + jitter(rng, 16), 1, max(1, h - 1)),
                )
            else:
                candidate = replace(self, angle=self.angle + jitter(rng, 32))
            if candidate.is_valid():
                return candidate

    def is_valid(self) -> bool:
        return max(self.sx, self.sy) / min(self.sx, self.sy) <= _MAX_ASPECT
