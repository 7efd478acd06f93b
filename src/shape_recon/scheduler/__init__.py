"""Step runner interface."""

from shape_recon.scheduler.control import RunControl
from shape_recon.scheduler.optimizer import run_steps

__all__ = ["RunControl", "run_steps"]
