"""Core data structures used throughout the pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Tuple

if TYPE_CHECKING:
    from shape_recon.shapes.base import Shape


@dataclass(frozen=True)
class Color:
    """8-bit RGBA color. ``a`` is the compositing alpha of a shape."""

    r: int = 0
    g: int = 0
    b: int = 0
    a: int = 0

    def rgba(self) -> Tuple[int, int, int, int]:
        return (self.r, self.g, self.b, self.a)

    def hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"


@dataclass(frozen=True)
class Scanline:
    """Horizontal pixel span on row ``y`` covering ``x1..x2`` inclusive."""

    y: int
    x1: int
    x2: int

    @property
    def length(self) -> int:
        return self.x2 - self.x1 + 1


@dataclass(frozen=True)
class AcceptedShape:
    """A committed shape, in acceptance order."""

    shape: "Shape"
    alpha: int
    color: Color
    score: float
    svg: str
