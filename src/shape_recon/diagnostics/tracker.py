"""Profiling and diagnostics tracking for the step loop."""

from __future__ import annotations

import csv
import json
import time
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import List, Optional


@dataclass
class TimingRecord:
    """Timing metrics for a single committed step."""

    step: int
    shapes: int
    search_ms: float
    commit_ms: float
    total_ms: float
    score: float


@dataclass
class DiagnosticsTracker:
    """Collects per-step timings and scores."""

    enable_profiling: bool = False
    enable_diagnostics: bool = False
    profile_output: Optional[Path] = None
    records: List[TimingRecord] = field(default_factory=list)

    def track_step(
        self,
        step: int,
        shapes: int,
        search_s: float,
        commit_s: float,
        total_s: float,
        score: float,
    ) -> None:
        if not (self.enable_profiling or self.enable_diagnostics):
            return
        self.records.append(
            TimingRecord(
                step=step,
                shapes=shapes,
                search_ms=search_s * 1000.0,
                commit_ms=commit_s * 1000.0,
                total_ms=total_s * 1000.0,
                score=score,
            )
        )

    def export(self) -> None:
        """Export timing records to JSON and CSV if configured."""

        if not self.records or not self.profile_output:
            return

        self.profile_output.parent.mkdir(parents=True, exist_ok=True)
        payload = [asdict(record) for record in self.records]
        self.profile_output.write_text(json.dumps(payload, indent=2))

        csv_path = self.profile_output.with_suffix(".csv")
        with csv_path.open("w", newline="") as handle:
            writer = csv.DictWriter(handle, fieldnames=list(payload[0].keys()))
            writer.writeheader()
            writer.writerows(payload)


class Timer:
    """Simple context timer for profiling blocks."""

    def __init__(self) -> None:
        self.start = 0.0
        self.elapsed = 0.0

    def __enter__(self) -> "Timer":
        self.start = time.perf_counter()
        return self

    def __exit__(self, *_exc: object) -> None:
        self.elapsed = time.perf_counter() - self.start
