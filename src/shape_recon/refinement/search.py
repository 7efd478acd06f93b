"""Stochastic search over candidate states.

Random search samples fresh shapes, hill climbing keeps strictly improving
mutations, and annealing also accepts worsening moves with a probability that
shrinks as the temperature decays.  All randomness comes from the generator
passed in.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np

from shape_recon.refinement.state import State

if TYPE_CHECKING:
    from shape_recon.model import Model


def best_random_state(
    model: "Model",
    buffer: np.ndarray,
    kind: str,
    n: int,
    rng: np.random.Generator,
) -> State:
    """Draw ``n`` random states and return the lowest-energy one (first wins ties)."""

    if n < 1:
        raise ValueError("Random search needs at least one draw.")
    best = model.random_state(buffer, kind, rng)
    best_energy = best.energy()
    for _ in range(n - 1):
        state = model.random_state(buffer, kind, rng)
        energy = state.energy()
        if energy < best_energy:
            best, best_energy = state, energy
    return best


def hill_climb(state: State, iterations: int, rng: np.random.Generator) -> State:
    """Replace ``state`` by a mutation whenever it is strictly better."""

    if iterations < 0:
        raise ValueError("Iteration budget must not be negative.")
    energy = state.energy()
    for _ in range(iterations):
        candidate = state.mutate(rng)
        candidate_energy = candidate.energy()
        if candidate_energy < energy:
            state, energy = candidate, candidate_energy
    return state


def anneal(
    state: State,
    max_temp: float,
    min_temp: float,
    steps: int,
    rng: np.random.Generator,
) -> State:
    """Simulated annealing with exponential cooling; returns the best state seen."""

    if max_temp <= 0.0 or min_temp <= 0.0:
        raise ValueError("Annealing temperatures must be positive.")
    if steps < 0:
        raise ValueError("Step budget must not be negative.")
    factor = -math.log(max_temp / min_temp)
    energy = state.energy()
    best, best_energy = state, energy
    for step in range(steps):
        temperature = max_temp * math.exp(factor * step / steps)
        candidate = state.mutate(rng)
        candidate_energy = candidate.energy()
        if candidate_energy < energy:
            accept = True
        elif math.isinf(candidate_energy):
            accept = False
        else:
            accept = rng.random() < math.exp((energy - candidate_energy) / temperature)
        if accept:
            state, energy = candidate, candidate_energy
            if energy < best_energy:
                best, best_energy = state, energy
    return best


def estimate_temperature(state: State, iterations: int, rng: np.random.Generator) -> float:
    """Mean absolute energy change of random mutations, a starting temperature guess."""

    if iterations < 1:
        raise ValueError("Need at least one sample to estimate a temperature.")
    energy = state.energy()
    total = 0.0
    samples = 0
    for _ in range(iterations):
        candidate = state.mutate(rng)
        candidate_energy = candidate.energy()
        if math.isinf(candidate_energy):
            continue
        if math.isinf(energy):
            state, energy = candidate, candidate_energy
            continue
        total += abs(candidate_energy - energy)
        samples += 1
        state, energy = candidate, candidate_energy
    return total / samples if samples else 0.0


def best_hill_climb_state(
    model: "Model",
    buffer: np.ndarray,
    kind: str,
    n: int,
    age: int,
    m: int,
    rng: np.random.Generator,
) -> State:
    """Best of ``m`` independent random-search + hill-climb runs."""

    if m < 1:
        raise ValueError("Need at least one restart.")
    best = None
    best_energy = math.inf
    for _ in range(m):
        state = best_random_state(model, buffer, kind, n, rng)
        state = hill_climb(state, age, rng)
        energy = state.energy()
        if best is None or energy < best_energy:
            best, best_energy = state, energy
    return best
