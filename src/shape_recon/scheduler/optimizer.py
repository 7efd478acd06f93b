"""Greedy step loop: search, refine and commit one shape at a time."""

from __future__ import annotations

from typing import Callable, Dict, Optional, Union

from shape_recon.config.schema import Config
from shape_recon.diagnostics import DiagnosticsTracker, Timer
from shape_recon.model import Model
from shape_recon.scheduler.control import RunControl

StatusCallback = Callable[[Dict[str, Union[float, str, int]]], None]


def run_steps(
    model: Model,
    config: Config,
    control: RunControl | None = None,
    status_callback: StatusCallback | None = None,
    tracker: Optional[DiagnosticsTracker] = None,
) -> Dict[str, object]:
    """Call ``model.step`` until ``config.max_shapes`` shapes are committed.

    Stops early when the control requests it or when a step finds no shape
    that keeps the score from rising.
    """

    if tracker is None:
        tracker = DiagnosticsTracker(
            enable_profiling=config.enable_profiling,
            enable_diagnostics=config.enable_diagnostics,
            profile_output=config.profile_output,
        )

    step = 0
    while len(model.shapes) < config.max_shapes:
        if control:
            if control.should_stop():
                break
            if not control.wait_if_paused():
                break

        step += 1
        with Timer() as search_timer:
            state = model.search_step()
        with Timer() as commit_timer:
            record = model.commit(state)
        if record is None:
            print(f"Step {step} | No improving shape found, stopping")
            break

        total_s = search_timer.elapsed + commit_timer.elapsed
        tracker.track_step(
            step=step,
            shapes=len(model.shapes),
            search_s=search_timer.elapsed,
            commit_s=commit_timer.elapsed,
            total_s=total_s,
            score=model.score,
        )
        message = f"Shape {len(model.shapes)} | Score {model.score:.6f}"
        if status_callback:
            status_callback(
                {
                    "shapes": len(model.shapes),
                    "score": model.score,
                    "iteration_ms": total_s * 1000.0,
                    "message": message,
                }
            )
        if config.enable_profiling or config.enable_diagnostics:
            print(
                f"{message} | "
                f"t(search/commit/total) "
                f"{search_timer.elapsed*1000:.2f}/"
                f"{commit_timer.elapsed*1000:.2f}/"
                f"{total_s*1000:.2f} ms"
            )
        else:
            print(message)

    tracker.export()
    return {
        "shapes": len(model.shapes),
        "score": model.score,
        "svg": model.svg(),
    }
