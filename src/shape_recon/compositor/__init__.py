"""Scanline compositing utilities."""

from shape_recon.compositor.blend import (
    blend_pixels,
    composite_lines,
    copy_lines,
    footprint_indices,
    trial_footprint,
    uniform_buffer,
)

__all__ = [
    "blend_pixels",
    "composite_lines",
    "copy_lines",
    "footprint_indices",
    "trial_footprint",
    "uniform_buffer",
]
