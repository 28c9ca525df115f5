"""Stopwatch that accumulates elapsed time across start/stop cycles."""

from __future__ import annotations

import math
import time
from typing import Callable


class Timer:
    """Accumulating stopwatch; it starts running when created."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._start_time = 0.0
        self._elapsed = 0.0
        self._running = False
        self.clear()
        self.start()

    def start(self) -> None:
        self._start_time = self._clock()
        self._running = True

    def clear(self) -> None:
        """Forget the accumulated time and stop."""
        self._elapsed = 0.0
        self._running = False

    def stop(self) -> "Timer":
        if self._running:
            self._elapsed += self._clock() - self._start_time
        self._running = False
        return self

    def ms(self) -> float:
        """Accumulated time in whole milliseconds; a running timer keeps running."""
        if self._running:
            self.stop()
            self.start()
        return float(math.trunc(self._elapsed * 1000))