"""Profiling and diagnostics."""

from shape_recon.diagnostics.tracker import DiagnosticsTracker, Timer, TimingRecord

__all__ = ["DiagnosticsTracker", "Timer", "TimingRecord"]
