"""Configuration schema and loading utilities."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from shape_recon.data import Color
from shape_recon.shapes import resolve_kind


@dataclass(frozen=True)
class SearchConfig:
    """Budgets for the per-step candidate search."""

    name: str = "balanced"
    random_draws: int = 100
    climb_iterations: int = 100
    restarts: int = 10
    refine_iterations: int = 1000
    use_annealing: bool = False
    anneal_max_temp: float = 0.1
    anneal_min_temp: float = 0.00001
    anneal_steps: int = 25000

    def __post_init__(self) -> None:
        for name in ("random_draws", "restarts"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be at least 1.")
        for name in ("climb_iterations", "refine_iterations", "anneal_steps"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative.")
        if self.anneal_min_temp <= 0.0 or self.anneal_max_temp <= 0.0:
            raise ValueError("Annealing temperatures must be positive.")


@dataclass(frozen=True)
class Config:
    """Top-level configuration for shape reconstruction."""

    search: SearchConfig = field(default_factory=SearchConfig)
    output_size: int = 1024
    background: Optional[Color] = None
    shape_kind: str = "any"
    alpha: int = 128
    seed: Optional[int] = None
    frame_score_delta: float = 0.0
    max_shapes: int = 100
    enable_profiling: bool = False
    enable_diagnostics: bool = False
    profile_output: Optional[Path] = None
    validation_full_score_every: int = 0
    validation_tolerance: float = 1e-6

    def __post_init__(self) -> None:
        if self.output_size <= 0:
            raise ValueError("output_size must be positive.")
        if not 0 <= self.alpha <= 255:
            raise ValueError("alpha must be in [0, 255] (0 picks a random alpha per candidate).")
        if self.max_shapes < 0:
            raise ValueError("max_shapes must not be negative.")
        resolve_kind(self.shape_kind)


_PRESETS: Dict[str, SearchConfig] = {
    "fast": SearchConfig(
        name="fast",
        random_draws=50,
        climb_iterations=50,
        restarts=4,
        refine_iterations=300,
    ),
    "balanced": SearchConfig(name="balanced"),
    "high_quality": SearchConfig(
        name="high_quality",
        random_draws=200,
        climb_iterations=200,
        restarts=16,
        refine_iterations=2000,
    ),
}


def preset_config(name: str) -> SearchConfig:
    """Return a search preset by name."""

    key = name.lower()
    if key not in _PRESETS:
        raise ValueError(f"Unknown preset '{name}'. Available: {', '.join(_PRESETS)}")
    return _PRESETS[key]


def _merge_dict(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge overrides into base without mutating either input."""

    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge_dict(merged[key], value)
        else:
            merged[key] = value
    return merged


def _parse_color(value: Any) -> Optional[Color]:
    """Accept ``None``, ``"#rrggbb"`` or an ``[r, g, b(, a)]`` list."""

    if value is None:
        return None
    if isinstance(value, str):
        text = value.lstrip("#")
        if len(text) != 6:
            raise ValueError(f"Invalid color '{value}'.")
        return Color(int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16), 255)
    channels: Tuple[int, ...] = tuple(int(v) for v in value)
    if len(channels) == 3:
        channels = channels + (255,)
    if len(channels) != 4 or any(not 0 <= v <= 255 for v in channels):
        raise ValueError(f"Invalid color {value!r}.")
    return Color(*channels)


def load_config(path: Optional[Path], preset_name: str = "balanced") -> Config:
    """Load configuration from JSON and apply preset defaults."""

    base: Dict[str, Any] = {
        "preset": preset_name,
        "search": {},
        "output_size": 1024,
        "background": None,
        "shape_kind": "any",
        "alpha": 128,
        "seed": None,
        "frame_score_delta": 0.0,
        "max_shapes": 100,
        "enable_profiling": False,
        "enable_diagnostics": False,
        "profile_output": None,
        "validation_full_score_every": 0,
        "validation_tolerance": 1e-6,
    }

    if path:
        raw = json.loads(Path(path).read_text())
        merged = _merge_dict(base, raw)
    else:
        merged = base

    preset = preset_config(merged["preset"])
    overrides = merged.get("search") or {}
    search = SearchConfig(
        name=preset.name,
        random_draws=int(overrides.get("random_draws", preset.random_draws)),
        climb_iterations=int(overrides.get("climb_iterations", preset.climb_iterations)),
        restarts=int(overrides.get("restarts", preset.restarts)),
        refine_iterations=int(overrides.get("refine_iterations", preset.refine_iterations)),
        use_annealing=bool(overrides.get("use_annealing", preset.use_annealing)),
        anneal_max_temp=float(overrides.get("anneal_max_temp", preset.anneal_max_temp)),
        anneal_min_temp=float(overrides.get("anneal_min_temp", preset.anneal_min_temp)),
        anneal_steps=int(overrides.get("anneal_steps", preset.anneal_steps)),
    )

    return Config(
        search=search,
        output_size=int(merged["output_size"]),
        background=_parse_color(merged.get("background")),
        shape_kind=str(merged["shape_kind"]),
        alpha=int(merged["alpha"]),
        seed=int(merged["seed"]) if merged.get("seed") is not None else None,
        frame_score_delta=float(merged["frame_score_delta"]),
        max_shapes=int(merged["max_shapes"]),
        enable_profiling=bool(merged["enable_profiling"]),
        enable_diagnostics=bool(merged["enable_diagnostics"]),
        profile_output=Path(merged["profile_output"]) if merged.get("profile_output") else None,
        validation_full_score_every=int(merged["validation_full_score_every"]),
        validation_tolerance=float(merged["validation_tolerance"]),
    )
