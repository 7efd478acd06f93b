"""Shape capability contract and shared rasterization helpers."""

from __future__ import annotations

import abc
import math
from typing import TYPE_CHECKING, List, Sequence, Tuple

import numpy as np

from shape_recon.data import Scanline

if TYPE_CHECKING:
    from shape_recon.render.context import DrawingContext

Point = Tuple[float, float]


class Shape(abc.ABC):
    """A geometric primitive that can be scored, drawn and exported.

    Implementations are immutable: ``mutate`` returns a new instance so a
    scored candidate never changes underneath its cached energy.
    """

    width: int
    height: int

    @classmethod
    @abc.abstractmethod
    def random(cls, width: int, height: int, rng: np.random.Generator) -> "Shape":
        """Create a randomly placed instance on a ``width`` x ``height`` canvas."""

    @abc.abstractmethod
    def rasterize(self) -> List[Scanline]:
        """Return the clipped footprint, at most one span per row."""

    @abc.abstractmethod
    def render(self, dc: "DrawingContext") -> None:
        """Append this shape's path to ``dc``. The caller sets the color and fills."""

    @abc.abstractmethod
    def svg(self, attrs: str) -> str:
        """Return the SVG fragment for this shape using pre-formatted fill attributes."""

    @abc.abstractmethod
    def mutate(self, rng: np.random.Generator) -> "Shape":
        """Return a perturbed copy."""


def clamp(value: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, value))


def jitter(rng: np.random.Generator, amount: float) -> int:
    """Integer offset drawn from a normal distribution scaled by ``amount``."""

    return int(rng.normal() * amount)


def rasterize_polygon(points: Sequence[Point], width: int, height: int) -> List[Scanline]:
    """Scan-convert a convex polygon into one clipped span per row."""

    if len(points) < 3:
        return []
    ys = [p[1] for p in points]
    y_start = max(0, int(math.ceil(min(ys))))
    y_end = min(height - 1, int(math.floor(max(ys))))
    edges = list(zip(points, list(points[1:]) + [points[0]]))

    lines: List[Scanline] = []
    for y in range(y_start, y_end + 1):
        xs: List[float] = []
        for (x0, y0), (x1, y1) in edges:
            if y0 == y1:
                if y0 == y:
                    xs.extend((x0, x1))
                continue
            if min(y0, y1) <= y <= max(y0, y1):
                xs.append(x0 + (y - y0) * (x1 - x0) / (y1 - y0))
        if not xs:
            continue
        x1 = max(0, int(round(min(xs))))
        x2 = min(width - 1, int(round(max(xs))))
        if x1 <= x2:
            lines.append(Scanline(y, x1, x2))
    return lines
