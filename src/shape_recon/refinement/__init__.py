"""Candidate states and local search strategies."""

from shape_recon.refinement.search import (
    anneal,
    best_hill_climb_state,
    best_random_state,
    estimate_temperature,
    hill_climb,
)
from shape_recon.refinement.state import State

__all__ = [
    "State",
    "anneal",
    "best_hill_climb_state",
    "best_random_state",
    "estimate_temperature",
    "hill_climb",
]
