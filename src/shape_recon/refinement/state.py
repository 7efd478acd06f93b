"""A candidate shape bound to a model and a scratch buffer."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import numpy as np

from shape_recon.data import Color
from shape_recon.shapes.base import Shape

if TYPE_CHECKING:
    from shape_recon.model import Model


class State:
    """Shape + alpha candidate with lazily evaluated color and energy.

    Evaluation happens once per instance; ``mutate`` returns a fresh,
    unevaluated state instead of changing this one.

    ``buffer`` is lent to every trial and must equal ``model.current`` at
    rest.  States evaluated concurrently must each hold their own buffer from
    ``Model.new_scratch_buffer()``.
    """

    __slots__ = ("model", "buffer", "shape", "alpha", "_color", "_energy")

    def __init__(self, model: "Model", buffer: np.ndarray, shape: Shape, alpha: int) -> None:
        self.model = model
        self.buffer = buffer
        self.shape = shape
        self.alpha = alpha
        self._color: Optional[Color] = None
        self._energy: Optional[float] = None

    @property
    def evaluated(self) -> bool:
        return self._energy is not None

    def energy(self) -> float:
        """Whole-image score after compositing this candidate; lower is better."""

        if self._energy is None:
            self._color, self._energy = self.model.evaluate(self.shape, self.alpha, self.buffer)
        return self._energy

    def color(self) -> Color:
        self.energy()
        return self._color

    def mutate(self, rng: np.random.Generator) -> "State":
        return State(self.model, self.buffer, self.shape.mutate(rng), self.alpha)

    def __repr__(self) -> str:
        energy = f"{self._energy:.6f}" if self._energy is not None else "unevaluated"
        return f"State({self.shape!r}, alpha={self.alpha}, energy={energy})"
