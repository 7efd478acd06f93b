"""Approximate images with a sequence of composited geometric shapes."""

from shape_recon.config import Config, SearchConfig, load_config, preset_config
from shape_recon.data import AcceptedShape, Color, Scanline
from shape_recon.model import Model
from shape_recon.scheduler import RunControl, run_steps

__all__ = [
    "AcceptedShape",
    "Color",
    "Config",
    "Model",
    "RunControl",
    "Scanline",
    "SearchConfig",
    "load_config",
    "preset_config",
    "run_steps",
]
