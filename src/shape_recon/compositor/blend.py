"""Alpha compositing of solid colors over scanline footprints.

Buffers are ``uint8`` RGBA arrays of shape ``(H, W, 4)``. Every operation
touches only the pixels of the footprint, so its cost follows the shape's
area rather than the canvas size.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Sequence, Tuple

import numpy as np

from shape_recon.data import Color, Scanline


def uniform_buffer(width: int, height: int, color: Color) -> np.ndarray:
    """Create a buffer filled with a single color."""

    if width <= 0 or height <= 0:
        raise ValueError("Buffer dimensions must be positive.")
    buffer = np.empty((height, width, 4), dtype=np.uint8)
    buffer[...] = color.rgba()
    return buffer


def footprint_indices(lines: Sequence[Scanline]) -> Tuple[np.ndarray, np.ndarray]:
    """Return row and column index arrays covering every pixel of the spans."""

    if not lines:
        empty = np.empty(0, dtype=np.intp)
        return empty, empty
    lengths = np.fromiter((line.length for line in lines), dtype=np.intp, count=len(lines))
    starts = np.fromiter((line.x1 for line in lines), dtype=np.intp, count=len(lines))
    rows = np.fromiter((line.y for line in lines), dtype=np.intp, count=len(lines))
    ys = np.repeat(rows, lengths)
    # offset of each pixel within its own span
    offsets = np.arange(int(lengths.sum()), dtype=np.intp) - np.repeat(np.cumsum(lengths) - lengths, lengths)
    xs = np.repeat(starts, lengths) + offsets
    return ys, xs


def blend_pixels(pixels: np.ndarray, color: Color) -> np.ndarray:
    """Composite ``color`` over ``pixels`` (N x 4, uint8) with straight alpha."""

    if color.a == 0:
        return pixels.copy()
    a = color.a / 255.0
    src = np.array([color.r, color.g, color.b, 255], dtype=np.float64)
    dst = pixels.astype(np.float64)
    out = dst * (1.0 - a) + src * a
    return np.clip(np.rint(out), 0, 255).astype(np.uint8)


def composite_lines(buffer: np.ndarray, color: Color, lines: Sequence[Scanline]) -> np.ndarray:
    """Composite ``color`` onto ``buffer`` in place over the given spans."""

    ys, xs = footprint_indices(lines)
    if ys.size:
        buffer[ys, xs] = blend_pixels(buffer[ys, xs], color)
    return buffer


def copy_lines(dst: np.ndarray, src: np.ndarray, lines: Sequence[Scanline]) -> np.ndarray:
    """Copy the footprint pixels from ``src`` into ``dst``."""

    ys, xs = footprint_indices(lines)
    if ys.size:
        dst[ys, xs] = src[ys, xs]
    return dst


@contextmanager
def trial_footprint(scratch: np.ndarray, current: np.ndarray, lines: Sequence[Scanline]) -> Iterator[np.ndarray]:
    """Lend ``scratch`` for a trial composite over ``lines``.

    ``scratch`` must equal ``current`` outside any footprint in flight. The
    footprint is seeded from ``current`` on entry and restored on exit, so a
    rejected trial never leaves pixels behind.
    """

    copy_lines(scratch, current, lines)
    try:
        yield scratch
    finally:
        copy_lines(scratch, current, lines)
