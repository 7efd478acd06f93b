"""Whole-image and incremental difference metrics.

Scores are the root-mean-square error over all four channels of every pixel,
normalized to [0, 1] by dividing by 255.  Incremental updates work on the
exact integer sum of squared errors, so a score derived from it matches a
full recompute bit for bit.
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from shape_recon.compositor.blend import footprint_indices
from shape_recon.data import Scanline


def _check_shapes(*buffers: np.ndarray) -> None:
    first = buffers[0]
    if first.ndim != 3 or first.shape[-1] != 4:
        raise ValueError("Buffers must be HxWx4 RGBA arrays.")
    for other in buffers[1:]:
        if other.shape != first.shape:
            raise ValueError("Target and canvas shapes must match.")


def _sum_squares(target: np.ndarray, canvas: np.ndarray) -> int:
    diff = target.astype(np.int64) - canvas.astype(np.int64)
    return int(np.sum(diff * diff))


def score_from_squared_error(total: int, width: int, height: int) -> float:
    return math.sqrt(total / (width * height * 4)) / 255.0


def squared_error_full(target: np.ndarray, current: np.ndarray) -> int:
    _check_shapes(target, current)
    return _sum_squares(target, current)


def squared_error_partial(
    target: np.ndarray,
    before: np.ndarray,
    after: np.ndarray,
    total: int,
    lines: Sequence[Scanline],
) -> int:
    """Adjust ``total`` by the footprint's removed and added squared error."""

    ys, xs = footprint_indices(lines)
    if not ys.size:
        return total
    t = target[ys, xs]
    return total - _sum_squares(t, before[ys, xs]) + _sum_squares(t, after[ys, xs])


def check_drift(target: np.ndarray, after: np.ndarray, score: float, tolerance: float) -> None:
    full = difference_full(target, after)
    drift = abs(full - score)
    if drift > tolerance:
        raise ValueError(f"Partial difference drifted (max diff {drift}).")


def difference_full(target: np.ndarray, current: np.ndarray) -> float:
    """Compute the score of ``current`` against ``target`` from scratch."""

    height, width = target.shape[:2]
    return score_from_squared_error(squared_error_full(target, current), width, height)


def difference_partial(
    target: np.ndarray,
    before: np.ndarray,
    after: np.ndarray,
    score: float,
    lines: Sequence[Scanline],
    sanity_check: bool = False,
    tolerance: float = 1e-6,
) -> float:
    """Update ``score`` for ``after``, which differs from ``before`` only on ``lines``.

    Only the footprint pixels are read. The squared-error total behind
    ``score`` is an integer, so it is recovered by rounding. If sanity_check
    is True, the result is compared against a full recompute of ``after``.
    """

    height, width = target.shape[:2]
    total = int(round((score * 255.0) ** 2 * width * height * 4))
    total = squared_error_partial(target, before, after, total, lines)
    result = score_from_squared_error(max(total, 0), width, height)

    if sanity_check:
        check_drift(target, after, result, tolerance)
    return result
