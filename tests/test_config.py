"""Tests for configuration presets and JSON loading."""

import json

import pytest

from shape_recon.config import Config, SearchConfig, load_config, preset_config
from shape_recon.data import Color


class TestPresets:
    def test_balanced_is_default_pipeline(self):
        search = preset_config("balanced")
        assert (search.random_draws, search.climb_iterations, search.restarts) == (100, 100, 10)
        assert search.refine_iterations == 1000
        assert not search.use_annealing

    def test_case_insensitive(self):
        assert preset_config("FAST").name == "fast"

    def test_unknown_preset(self):
        with pytest.raises(ValueError, match="Available"):
            preset_config("ultra")


class TestValidation:
    @pytest.mark.parametrize(
        "kwargs",
        [{"alpha": 300}, {"output_size": 0}, {"shape_kind": "hexagon"}, {"max_shapes": -1}],
    )
    def test_config_rejects(self, kwargs):
        with pytest.raises(ValueError):
            Config(**kwargs)

    @pytest.mark.parametrize(
        "kwargs",
        [{"random_draws": 0}, {"restarts": 0}, {"refine_iterations": -1}, {"anneal_min_temp": 0.0}],
    )
    def test_search_rejects(self, kwargs):
        with pytest.raises(ValueError):
            SearchConfig(**kwargs)


class TestLoadConfig:
    def test_defaults(self):
        config = load_config(None)
        assert config.search == preset_config("balanced")
        assert config.output_size == 1024
        assert config.background is None
        assert config.shape_kind == "any"
        assert config.alpha == 128

    def test_json_overrides(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(
            json.dumps(
                {
                    "preset": "fast",
                    "search": {"restarts": 3, "use_annealing": True},
                    "background": "#ff8000",
                    "shape_kind": "triangle",
                    "seed": 7,
                    "profile_output": str(tmp_path / "profile.json"),
                }
            )
        )
        config = load_config(path, "balanced")
        assert config.search.name == "fast"
        assert config.search.restarts == 3
        assert config.search.random_draws == preset_config("fast").random_draws
        assert config.search.use_annealing
        assert config.background == Color(255, 128, 0, 255)
        assert config.shape_kind == "triangle"
        assert config.seed == 7
        assert config.profile_output == tmp_path / "profile.json"

    def test_background_as_list(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"background": [1, 2, 3]}))
        assert load_config(path).background == Color(1, 2, 3, 255)

    def test_bad_background(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"background": "#abc"}))
        with pytest.raises(ValueError):
            load_config(path)
