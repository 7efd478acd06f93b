"""Tests for the color solver and difference metrics."""

import numpy as np
import pytest

from shape_recon.compositor import composite_lines, uniform_buffer
from shape_recon.data import Color, Scanline
from shape_recon.scoring import (
    compute_color,
    difference_full,
    difference_partial,
    squared_error_full,
    squared_error_partial,
)
from shape_recon.shapes import Rectangle


def _pixel(rgb):
    return np.array([[list(rgb) + [255]]], dtype=np.uint8)


class TestComputeColor:
    def test_single_pixel_closed_form(self):
        target = _pixel((150, 124, 90))
        current = _pixel((100, 100, 100))
        color = compute_color(target, current, [Scanline(0, 0, 0)], 200)
        # c + (t - c) / a with a = 200/255
        assert color == Color(164, 131, 87, 200)

    def test_opaque_alpha_averages_target(self):
        target = np.array([[[10, 20, 30, 255], [30, 40, 50, 255]]], dtype=np.uint8)
        current = np.zeros_like(target)
        color = compute_color(target, current, [Scanline(0, 0, 1)], 255)
        assert color == Color(20, 30, 40, 255)

    def test_clamps_channels(self):
        target = _pixel((255, 0, 255))
        current = _pixel((0, 255, 0))
        color = compute_color(target, current, [Scanline(0, 0, 0)], 64)
        assert color == Color(255, 0, 255, 64)

    def test_empty_footprint_returns_zero_color(self):
        target = _pixel((1, 2, 3))
        assert compute_color(target, target.copy(), [], 128) == Color()

    def test_rejects_zero_alpha(self):
        target = _pixel((1, 2, 3))
        with pytest.raises(ValueError):
            compute_color(target, target.copy(), [Scanline(0, 0, 0)], 0)


class TestDifferenceFull:
    def test_identical_is_zero(self):
        buffer = uniform_buffer(5, 4, Color(12, 34, 56, 255))
        assert difference_full(buffer, buffer.copy()) == 0.0

    def test_maximal_difference_is_one(self):
        target = np.zeros((3, 3, 4), dtype=np.uint8)
        current = np.full((3, 3, 4), 255, dtype=np.uint8)
        assert difference_full(target, current) == pytest.approx(1.0)

    def test_counts_all_four_channels(self):
        target = uniform_buffer(2, 2, Color(0, 0, 0, 255))
        current = uniform_buffer(2, 2, Color(255, 0, 0, 255))
        assert difference_full(target, current) == pytest.approx(0.5)

    def test_shape_mismatch(self):
        with pytest.raises(ValueError):
            difference_full(np.zeros((2, 2, 4), np.uint8), np.zeros((2, 3, 4), np.uint8))

    def test_requires_rgba(self):
        with pytest.raises(ValueError):
            difference_full(np.zeros((2, 2, 3), np.uint8), np.zeros((2, 2, 3), np.uint8))


class TestDifferencePartial:
    def test_matches_full_recompute(self):
        rng = np.random.default_rng(3)
        target = rng.integers(0, 256, size=(24, 32, 4), dtype=np.uint8)
        current = uniform_buffer(32, 24, Color(128, 128, 128, 255))
        score = difference_full(target, current)
        for _ in range(100):
            lines = Rectangle.random(32, 24, rng).rasterize()
            color = Color(*(int(v) for v in rng.integers(0, 256, 3)), int(rng.integers(1, 256)))
            before = current.copy()
            composite_lines(current, color, lines)
            score = difference_partial(target, before, current, score, lines)
            assert score == pytest.approx(difference_full(target, current), abs=1e-9)

    def test_empty_footprint_keeps_score(self):
        target = uniform_buffer(4, 4, Color(0, 0, 0, 255))
        current = uniform_buffer(4, 4, Color(255, 255, 255, 255))
        score = difference_full(target, current)
        assert difference_partial(target, current, current.copy(), score, []) == pytest.approx(score)

    def test_sanity_check_detects_drift(self):
        target = uniform_buffer(4, 4, Color(0, 0, 0, 255))
        before = uniform_buffer(4, 4, Color(255, 255, 255, 255))
        after = before.copy()
        lines = [Scanline(0, 0, 3)]
        composite_lines(after, Color(0, 0, 0, 255), lines)
        score = difference_full(target, before)
        assert difference_partial(target, before, after, score, lines, sanity_check=True) == pytest.approx(
            difference_full(target, after)
        )
        with pytest.raises(ValueError):
            difference_partial(target, before, after, score * 0.5, lines, sanity_check=True)

    def test_reaching_target_exactly_scores_zero(self):
        target = uniform_buffer(2, 2, Color(255, 0, 0, 255))
        before = uniform_buffer(2, 2, Color(255, 255, 255, 255))
        after = before.copy()
        lines = [Scanline(0, 0, 1), Scanline(1, 0, 1)]
        composite_lines(after, Color(255, 0, 0, 255), lines)
        score = difference_partial(target, before, after, difference_full(target, before), lines)
        assert score == 0.0
        assert difference_full(target, after) == 0.0


class TestSquaredError:
    def test_partial_tracks_full_exactly(self):
        rng = np.random.default_rng(11)
        target = rng.integers(0, 256, size=(16, 20, 4), dtype=np.uint8)
        current = uniform_buffer(20, 16, Color(255, 255, 255, 255))
        total = squared_error_full(target, current)
        for _ in range(50):
            lines = Rectangle.random(20, 16, rng).rasterize()
            color = Color(*(int(v) for v in rng.integers(0, 256, 3)), int(rng.integers(1, 256)))
            before = current.copy()
            composite_lines(current, color, lines)
            total = squared_error_partial(target, before, current, total, lines)
            assert total == squared_error_full(target, current)

    def test_returns_python_int(self):
        target = uniform_buffer(3, 3, Color(0, 0, 0, 255))
        current = uniform_buffer(3, 3, Color(255, 255, 255, 255))
        total = squared_error_full(target, current)
        assert isinstance(total, int)
        assert total == 3 * 3 * 3 * 255 * 255
