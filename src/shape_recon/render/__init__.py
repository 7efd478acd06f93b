"""Output-resolution drawing context."""

from shape_recon.render.context import DrawingContext

__all__ = ["DrawingContext"]
