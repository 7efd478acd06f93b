"""Execution control for a caller-managed step loop."""

from __future__ import annotations

import threading
import time


class RunControl:
    """Thread-safe pause/stop control, checked between model steps."""

    def __init__(self, poll_interval: float = 0.1) -> None:
        self._pause = threading.Event()
        self._stop = threading.Event()
        self.poll_interval = poll_interval

    def pause(self) -> None:
        self._pause.set()

    def resume(self) -> None:
        self._pause.clear()

    def stop(self) -> None:
        self._stop.set()

    @property
    def paused(self) -> bool:
        return self._pause.is_set()

    def should_stop(self) -> bool:
        return self._stop.is_set()

    def wait_if_paused(self) -> bool:
        """Block while paused. Returns False if a stop arrived meanwhile."""

        while self._pause.is_set() and not self._stop.is_set():
            time.sleep(self.poll_interval)
        return not self._stop.is_set()
