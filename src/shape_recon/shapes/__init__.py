"""
Shape kinds available to the optimizer.

Every kind implements the ``Shape`` contract (rasterize, render, svg, mutate)
plus a ``random`` constructor.  ``random_shape`` picks a kind by name, or a
uniformly random kind for ``"any"``::

    from shape_recon.shapes import random_shape
    shape = random_shape("any", 256, 192, rng)
"""

from typing import Dict, Type

import numpy as np

from shape_recon.shapes.base import Shape, rasterize_polygon  # noqa: F401
from shape_recon.shapes.ellipse import Circle, Ellipse
from shape_recon.shapes.rectangle import Rectangle, RotatedRectangle
from shape_recon.shapes.triangle import Triangle

ANY = "any"

SHAPE_KINDS: Dict[str, Type[Shape]] = {
    "triangle": Triangle,
    "rectangle": Rectangle,
    "ellipse": Ellipse,
    "circle": Circle,
    "rotated_rectangle": RotatedRectangle,
}


def resolve_kind(name: str) -> str:
    """Normalize a kind name, raising for unknown kinds."""

    key = name.lower()
    if key != ANY and key not in SHAPE_KINDS:
        raise ValueError(f"Unknown shape kind '{name}'. Available: {ANY}, {', '.join(SHAPE_KINDS)}")
    return key


def random_shape(kind: str, width: int, height: int, rng: np.random.Generator) -> Shape:
    """Create a random shape of ``kind``, or of a random kind for ``"any"``."""

    key = resolve_kind(kind)
    if key == ANY:
        kinds = list(SHAPE_KINDS.values())
        shape_cls = kinds[int(rng.integers(len(kinds)))]
    else:
        shape_cls = SHAPE_KINDS[key]
    return shape_cls.random(width, height, rng)
