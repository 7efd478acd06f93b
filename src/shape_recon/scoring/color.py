"""Least-squares color fitting for a shape footprint."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from shape_recon.compositor.blend import footprint_indices
from shape_recon.data import Color, Scanline


def compute_color(
    target: np.ndarray,
    current: np.ndarray,
    lines: Sequence[Scanline],
    alpha: int,
) -> Color:
    """Solve the overlay color that best maps ``current`` onto ``target``.

    Compositing ``o`` at opacity ``a`` gives ``a*o + (1-a)*c``. Minimizing the
    squared error against ``t`` over the footprint yields the per-channel mean
    of ``(a*c - c + t) / a``, clamped to [0, 255].

    An empty footprint returns the zero color (alpha 0).
    """

    if not 1 <= alpha <= 255:
        raise ValueError(f"Alpha must be in [1, 255], got {alpha}.")
    ys, xs = footprint_indices(lines)
    if ys.size == 0:
        return Color()

    a = alpha / 255.0
    t = target[ys, xs, :3].astype(np.float64)
    c = current[ys, xs, :3].astype(np.float64)
    solved = ((a * c - c + t) / a).mean(axis=0)
    r, g, b = (int(value) for value in np.clip(np.rint(solved), 0, 255))
    return Color(r, g, b, int(alpha))
