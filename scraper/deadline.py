"""Request-wide wall-clock ceiling from which per-stage budgets are derived."""

from __future__ import annotations

import time
from typing import Callable


class Deadline:
    """Monotonic deadline; stages ask it for min(stage budget, time left)."""

    def __init__(self, total_ms: int, clock: Callable[[], float] = time.monotonic) -> None:
        self.total_ms = total_ms
        self._clock = clock
        self._start = clock()

    def elapsed_ms(self) -> float:
        return (self._clock() - self._start) * 1000

    def remaining_ms(self) -> float:
        return max(0.0, self.total_ms - self.elapsed_ms())

    def expired(self) -> bool:
        return self.remaining_ms() <= 0

    def budget_for(self, stage_ms: int) -> int:
        """Budget for the next stage in ms; at least 1 so Playwright never waits forever."""
        return max(1, int(min(stage_ms, self.remaining_ms())))
