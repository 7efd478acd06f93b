"""Conversions between Pillow images and RGBA pixel buffers."""

from shape_recon.io.images import (
    average_color,
    buffer_to_image,
    to_rgba_buffer,
)

__all__ = ["average_color", "buffer_to_image", "to_rgba_buffer"]
