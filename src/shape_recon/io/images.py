"""Image conversion utilities."""

from __future__ import annotations

from typing import Union

import numpy as np
from PIL import Image

from shape_recon.data import Color


def to_rgba_buffer(image: Union[Image.Image, np.ndarray]) -> np.ndarray:
    """Convert a PIL image or array to a contiguous ``(H, W, 4)`` uint8 buffer."""

    if isinstance(image, Image.Image):
        return np.array(image.convert("RGBA"), dtype=np.uint8)

    data = np.asarray(image)
    if data.ndim != 3 or data.shape[-1] not in (3, 4):
        raise ValueError("Image array must be HxWx3 or HxWx4.")
    if data.shape[0] == 0 or data.shape[1] == 0:
        raise ValueError("Image must not be empty.")
    if data.dtype != np.uint8:
        data = np.clip(data, 0, 255).astype(np.uint8)
    if data.shape[-1] == 3:
        alpha = np.full(data.shape[:2] + (1,), 255, dtype=np.uint8)
        data = np.concatenate([data, alpha], axis=-1)
    return np.ascontiguousarray(data).copy()


def buffer_to_image(buffer: np.ndarray) -> Image.Image:
    """Wrap an RGBA buffer as a PIL image (copied)."""

    return Image.fromarray(np.ascontiguousarray(buffer, dtype=np.uint8))


def average_color(buffer: np.ndarray) -> Color:
    """Mean RGB of a buffer as an opaque color."""

    r, g, b = (int(v) for v in np.rint(buffer[..., :3].reshape(-1, 3).mean(axis=0)))
    return Color(r, g, b, 255)
