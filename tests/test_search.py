"""Tests for candidate states and the search strategies."""

import math
from dataclasses import dataclass, field

import numpy as np
import pytest

from shape_recon.config import SearchConfig
from shape_recon.data import Color
from shape_recon.model import Model
from shape_recon.refinement import (
    State,
    anneal,
    best_hill_climb_state,
    best_random_state,
    estimate_temperature,
    hill_climb,
)
from shape_recon.shapes import Rectangle, Triangle


@dataclass(frozen=True)
class CountingRectangle(Rectangle):
    calls: list = field(default_factory=list, compare=False, repr=False)

    def rasterize(self):
        self.calls.append(1)
        return super().rasterize()


@pytest.fixture
def target():
    rng = np.random.default_rng(5)
    image = np.zeros((20, 24, 3), dtype=np.uint8)
    image[:, 12:] = 255
    image[5:12, 3:9] = rng.integers(0, 256, 3, dtype=np.uint8)
    return image


@pytest.fixture
def model(target):
    return Model(
        target,
        background=Color(128, 128, 128, 255),
        size=48,
        kind="any",
        alpha=128,
        rng=np.random.default_rng(42),
    )


@pytest.fixture
def rng():
    return np.random.default_rng(7)


class TestState:
    def test_energy_is_cached(self, model):
        shape = CountingRectangle(model.width, model.height, 0, 0, 5, 5)
        state = State(model, model.buffer, shape, 128)
        assert not state.evaluated
        first = state.energy()
        second = state.energy()
        assert first == second
        assert len(shape.calls) == 1
        assert state.evaluated

    def test_energy_matches_model(self, model):
        shape = Rectangle(model.width, model.height, 12, 0, 23, 19)
        state = State(model, model.buffer, shape, 128)
        assert state.energy() == model.energy(shape, 128, model.buffer)
        assert state.energy() < model.score

    def test_color_is_solved(self, model):
        shape = Rectangle(model.width, model.height, 12, 0, 23, 19)
        state = State(model, model.buffer, shape, 255)
        assert state.color() == Color(255, 255, 255, 255)

    def test_evaluation_leaves_canvas_untouched(self, model):
        before = model.current.copy()
        State(model, model.buffer, Rectangle(model.width, model.height, 0, 0, 10, 10), 200).energy()
        assert np.array_equal(model.current, before)
        assert np.array_equal(model.buffer, before)

    def test_mutate_produces_fresh_state(self, model, rng):
        state = State(model, model.buffer, Rectangle(model.width, model.height, 2, 2, 8, 8), 90)
        energy = state.energy()
        child = state.mutate(rng)
        assert child is not state
        assert child.alpha == 90
        assert not child.evaluated
        assert state.energy() == energy

    def test_empty_footprint_is_worst(self, model):
        shape = Triangle(model.width, model.height, -16, -16, -10, -16, -16, -10)
        assert math.isinf(State(model, model.buffer, shape, 128).energy())

    def test_private_scratch_buffer_scores_the_same(self, model):
        shape = Rectangle(model.width, model.height, 3, 4, 15, 9)
        shared = State(model, model.buffer, shape, 128).energy()
        private = State(model, model.new_scratch_buffer(), shape, 128).energy()
        assert shared == private


class TestRandomSearch:
    def test_returns_lowest_energy_draw(self, model):
        best = best_random_state(model, model.buffer, "rectangle", 30, np.random.default_rng(11))
        replay = np.random.default_rng(11)
        draws = [model.random_state(model.buffer, "rectangle", replay) for _ in range(30)]
        energies = [draw.energy() for draw in draws]
        assert best.shape == draws[int(np.argmin(energies))].shape
        assert best.energy() == min(energies)

    def test_first_wins_ties(self, model, monkeypatch):
        shape = Rectangle(model.width, model.height, 0, 0, 4, 4)
        states = [State(model, model.buffer, shape, 128) for _ in range(5)]
        pool = iter(states)
        monkeypatch.setattr(model, "random_state", lambda buffer, kind, rng: next(pool))
        assert best_random_state(model, model.buffer, "any", 5, np.random.default_rng(0)) is states[0]

    def test_random_alpha_when_unset(self, target):
        model = Model(target, alpha=0, rng=np.random.default_rng(1))
        alphas = {model.random_state(model.buffer, "any", model.rng).alpha for _ in range(50)}
        assert len(alphas) > 1
        assert all(1 <= alpha <= 255 for alpha in alphas)

    def test_needs_a_draw(self, model, rng):
        with pytest.raises(ValueError):
            best_random_state(model, model.buffer, "any", 0, rng)


class TestHillClimb:
    @pytest.mark.parametrize("iterations", [0, 1, 10, 50])
    def test_never_regresses(self, model, rng, iterations):
        state = model.random_state(model.buffer, "any", rng)
        climbed = hill_climb(state, iterations, rng)
        assert climbed.energy() <= state.energy()

    def test_zero_iterations_keeps_state(self, model, rng):
        state = model.random_state(model.buffer, "triangle", rng)
        assert hill_climb(state, 0, rng) is state

    def test_negative_budget(self, model, rng):
        state = model.random_state(model.buffer, "triangle", rng)
        with pytest.raises(ValueError):
            hill_climb(state, -1, rng)


class TestAnneal:
    def test_returns_best_seen(self, model, rng):
        state = model.random_state(model.buffer, "ellipse", rng)
        result = anneal(state, 0.1, 0.0001, 200, rng)
        assert result.energy() <= state.energy()

    def test_zero_steps_keeps_state(self, model, rng):
        state = model.random_state(model.buffer, "ellipse", rng)
        assert anneal(state, 0.1, 0.0001, 0, rng) is state

    def test_rejects_bad_temperatures(self, model, rng):
        state = model.random_state(model.buffer, "ellipse", rng)
        with pytest.raises(ValueError):
            anneal(state, 0.0, 0.0001, 10, rng)

    def test_estimate_temperature(self, model, rng):
        state = model.random_state(model.buffer, "rectangle", rng)
        assert estimate_temperature(state, 20, rng) >= 0.0


class TestBestHillClimb:
    def test_returns_evaluated_state(self, model, rng):
        state = best_hill_climb_state(model, model.buffer, "rectangle", 10, 10, 3, rng)
        assert state.evaluated
        assert math.isfinite(state.energy())

    def test_needs_a_restart(self, model, rng):
        with pytest.raises(ValueError):
            best_hill_climb_state(model, model.buffer, "rectangle", 10, 10, 0, rng)

    def test_search_step_with_annealing(self, target):
        search = SearchConfig(
            random_draws=5,
            climb_iterations=5,
            restarts=2,
            refine_iterations=10,
            use_annealing=True,
            anneal_steps=20,
        )
        model = Model(target, search=search, rng=np.random.default_rng(3))
        assert math.isfinite(model.search_step().energy())
