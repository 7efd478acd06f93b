"""Configuration loading and presets."""

from shape_recon.config.schema import (
    Config,
    SearchConfig,
    load_config,
    preset_config,
)

__all__ = [
    "Config",
    "SearchConfig",
    "load_config",
    "preset_config",
]
