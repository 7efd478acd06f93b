"""Color solving and image difference scoring."""

from shape_recon.scoring.color import compute_color
from shape_recon.scoring.difference import (
    check_drift,
    difference_full,
    difference_partial,
    score_from_squared_error,
    squared_error_full,
    squared_error_partial,
)

__all__ = [
    "check_drift",
    "compute_color",
    "difference_full",
    "difference_partial",
    "score_from_squared_error",
    "squared_error_full",
    "squared_error_partial",
]
