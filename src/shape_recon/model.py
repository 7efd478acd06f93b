"""Model owning the target, the evolving canvas and the accepted shapes."""

from __future__ import annotations

import math
import threading
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
from PIL import Image

from shape_recon.compositor import composite_lines, trial_footprint, uniform_buffer
from shape_recon.config.schema import Config, SearchConfig
from shape_recon.data import AcceptedShape, Color, Scanline
from shape_recon.io import average_color, to_rgba_buffer
from shape_recon.refinement import State, anneal, best_hill_climb_state, best_random_state, hill_climb
from shape_recon.render import DrawingContext
from shape_recon.scoring import (
    check_drift,
    compute_color,
    score_from_squared_error,
    squared_error_full,
    squared_error_partial,
)
from shape_recon.shapes import random_shape, resolve_kind
from shape_recon.shapes.base import Shape

_SVG_HEADER = '<svg xmlns="http://www.w3.org/2000/svg" version="1.1" width="{w}" height="{h}">'


class Model:
    """Greedy shape-by-shape approximation of a target image.

    ``current`` always equals the background with every accepted shape
    composited in order.  ``buffer`` is the scratch canvas lent to candidate
    evaluation; it equals ``current`` whenever no trial is in flight.
    """

    def __init__(
        self,
        target: Union[Image.Image, np.ndarray],
        background: Optional[Color] = None,
        size: int = 1024,
        kind: str = "any",
        alpha: int = 128,
        search: Optional[SearchConfig] = None,
        rng: Optional[np.random.Generator] = None,
        validation_full_score_every: int = 0,
        validation_tolerance: float = 1e-6,
    ) -> None:
        if size <= 0:
            raise ValueError("Output size must be positive.")
        if not 0 <= alpha <= 255:
            raise ValueError("Alpha must be in [0, 255].")

        self.target = to_rgba_buffer(target)
        self.height, self.width = self.target.shape[:2]
        self.background = background if background is not None else average_color(self.target)
        self.size = size
        self.kind = resolve_kind(kind)
        self.alpha = alpha
        self.search = search or SearchConfig()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.validation_full_score_every = validation_full_score_every
        self.validation_tolerance = validation_tolerance

        self.current = uniform_buffer(self.width, self.height, self.background)
        self.buffer = self.current.copy()
        self.squared_error = squared_error_full(self.target, self.current)
        self.score = self.score_of(self.squared_error)
        self.shapes: List[AcceptedShape] = []
        self.context = self.new_context()
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, target: Union[Image.Image, np.ndarray], config: Config) -> "Model":
        return cls(
            target,
            background=config.background,
            size=config.output_size,
            kind=config.shape_kind,
            alpha=config.alpha,
            search=config.search,
            rng=np.random.default_rng(config.seed),
            validation_full_score_every=config.validation_full_score_every,
            validation_tolerance=config.validation_tolerance,
        )

    # -- output geometry -------------------------------------------------

    def size_and_scale(self) -> Tuple[int, int, float]:
        """Output dimensions with the longer side at ``size``, and the scale factor."""

        aspect = self.width / self.height
        if aspect >= 1:
            w = self.size
            h = int(self.size / aspect)
            scale = self.size / self.width
        else:
            w = int(self.size * aspect)
            h = self.size
            scale = self.size / self.height
        return max(1, w), max(1, h), scale

    def new_context(self) -> DrawingContext:
        w, h, scale = self.size_and_scale()
        dc = DrawingContext(w, h)
        dc.scale(scale, scale)
        dc.translate(0.5, 0.5)
        dc.set_color(self.background)
        dc.clear()
        return dc

    # -- outputs ---------------------------------------------------------

    def frames(self, score_delta: float) -> List[np.ndarray]:
        """Replay history, keeping a snapshot whenever the score improved by ``score_delta``."""

        dc = self.new_context()
        result = [dc.to_array()]
        previous = 10.0
        for record in self.shapes:
            dc.set_color(record.color)
            record.shape.render(dc)
            dc.fill()
            if previous - record.score >= score_delta:
                previous = record.score
                result.append(dc.to_array())
        return result

    def svg(self) -> str:
        w, h, scale = self.size_and_scale()
        lines = [
            _SVG_HEADER.format(w=w, h=h),
            f'<rect x="0" y="0" width="{w}" height="{h}" fill="{self.background.hex()}" />',
            f'<g transform="scale({scale:f}) translate(0.5 0.5)">',
        ]
        lines.extend(record.svg for record in self.shapes)
        lines.append("</g>")
        lines.append("</svg>")
        return "\n".join(lines)

    # -- scoring ---------------------------------------------------------

    def compute_color(self, lines: Sequence[Scanline], alpha: int) -> Color:
        return compute_color(self.target, self.current, lines, alpha)

    def score_of(self, squared_error: int) -> float:
        return score_from_squared_error(squared_error, self.width, self.height)

    def compute_squared_error(
        self,
        lines: Sequence[Scanline],
        color: Color,
        buffer: np.ndarray,
        sanity_check: bool = False,
    ) -> int:
        """Squared-error total of ``current`` with ``color`` composited over ``lines``."""

        with trial_footprint(buffer, self.current, lines) as scratch:
            composite_lines(scratch, color, lines)
            total = squared_error_partial(self.target, self.current, scratch, self.squared_error, lines)
            if sanity_check:
                check_drift(self.target, scratch, self.score_of(total), self.validation_tolerance)
            return total

    def compute_score(
        self,
        lines: Sequence[Scanline],
        color: Color,
        buffer: np.ndarray,
        sanity_check: bool = False,
    ) -> float:
        """Score of ``current`` with ``color`` composited over ``lines``, trialled on ``buffer``."""

        return self.score_of(self.compute_squared_error(lines, color, buffer, sanity_check))

    def evaluate(self, shape: Shape, alpha: int, buffer: np.ndarray) -> Tuple[Color, float]:
        """Color and energy of a candidate. Empty footprints score ``inf``."""

        lines = shape.rasterize()
        color = self.compute_color(lines, alpha)
        if color.a == 0:
            return color, math.inf
        return color, self.compute_score(lines, color, buffer)

    def energy(self, shape: Shape, alpha: int, buffer: np.ndarray) -> float:
        return self.evaluate(shape, alpha, buffer)[1]

    def new_scratch_buffer(self) -> np.ndarray:
        """Private scratch canvas for a concurrent evaluator."""

        return self.current.copy()

    # -- search ----------------------------------------------------------

    def random_state(self, buffer: np.ndarray, kind: str, rng: np.random.Generator) -> State:
        alpha = self.alpha if self.alpha else int(rng.integers(1, 256))
        shape = random_shape(kind, self.width, self.height, rng)
        return State(self, buffer, shape, alpha)

    def best_random_state(self, buffer: np.ndarray, kind: str, n: int) -> State:
        return best_random_state(self, buffer, kind, n, self.rng)

    def best_hill_climb_state(self, buffer: np.ndarray, kind: str, n: int, age: int, m: int) -> State:
        return best_hill_climb_state(self, buffer, kind, n, age, m, self.rng)

    def search_step(self) -> State:
        """Run the configured search pipeline and return the refined candidate."""

        search = self.search
        state = self.best_hill_climb_state(
            self.buffer,
            self.kind,
            search.random_draws,
            search.climb_iterations,
            search.restarts,
        )
        if search.use_annealing:
            state = anneal(
                state,
                search.anneal_max_temp,
                search.anneal_min_temp,
                search.anneal_steps,
                self.rng,
            )
        return hill_climb(state, search.refine_iterations, self.rng)

    def accepts(self, state: State) -> bool:
        """Whether committing ``state`` keeps the score from rising."""

        return state.energy() <= self.score

    def commit(self, state: State) -> Optional[AcceptedShape]:
        if not self.accepts(state):
            return None
        return self.add(state.shape, state.alpha)

    def step(self) -> Optional[AcceptedShape]:
        """Search for one shape and commit it if it does not worsen the score."""

        return self.commit(self.search_step())

    # -- commit ----------------------------------------------------------

    def add(self, shape: Shape, alpha: int) -> AcceptedShape:
        """Composite ``shape`` permanently and append it to the history."""

        with self._lock:
            lines = shape.rasterize()
            color = self.compute_color(lines, alpha)
            sanity_check = (
                self.validation_full_score_every > 0
                and (len(self.shapes) + 1) % self.validation_full_score_every == 0
            )
            squared_error = self.compute_squared_error(lines, color, self.buffer, sanity_check=sanity_check)
            score = self.score_of(squared_error)
            if not math.isfinite(score):
                raise ValueError("Score became non-finite.")
            composite_lines(self.current, color, lines)
            composite_lines(self.buffer, color, lines)

            attrs = f'fill="{color.hex()}" fill-opacity="{color.a / 255:f}"'
            record = AcceptedShape(shape=shape, alpha=alpha, color=color, score=score, svg=shape.svg(attrs))
            self.squared_error = squared_error
            self.score = score
            self.shapes.append(record)

            self.context.set_color(color)
            shape.render(self.context)
            self.context.fill()
            return record
