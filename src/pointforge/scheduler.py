from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from .constants import AUTO_GENERATION_INTERVAL

logger = logging.getLogger(__name__)


class TickScheduler:
    """Turns arbitrary frame deltas into fixed-interval ticks.

    A host calls ``update(dt)`` every frame; the callback fires once per
    whole ``interval`` accumulated. Catch-up after a long frame is capped
    at ``max_catch_up`` ticks, and any excess time is dropped.
    """

    def __init__(
        self,
        callback: Callable[[float], None],
        interval: float = AUTO_GENERATION_INTERVAL,
        max_catch_up: int = 5,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.callback = callback
        self.interval = interval
        self.max_catch_up = max(1, max_catch_up)
        self._accumulator = 0.0
        self._running = False
        self.ticks = 0

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._accumulator = 0.0
        logger.debug("TickScheduler started (interval=%.3fs)", self.interval)

    def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        logger.debug("TickScheduler stopped after %d ticks", self.ticks)

    def update(self, dt: float) -> int:
        """Accumulate ``dt`` seconds and fire due ticks. Returns the number fired."""
        if not self._running or dt <= 0:
            return 0
        self._accumulator += dt
        fired = 0
        while self._accumulator >= self.interval and fired < self.max_catch_up:
            self._accumulator -= self.interval
            self.ticks += 1
            fired += 1
            self.callback(self.interval)
        if self._accumulator >= self.interval:
            logger.debug("Dropping %.3fs of backlog", self._accumulator)
            self._accumulator = 0.0
        return fired

    def run(self, max_ticks: Optional[int] = None, sleep: Callable[[float], None] = time.sleep) -> None:
        """Blocking headless loop; stops via ``stop()`` or after ``max_ticks`` ticks."""
        self.start()
        last = time.perf_counter()
        while self._running:
            sleep(self.interval)
            now = time.perf_counter()
            self.update(max(now - last, self.interval))
            last = now
            if max_ticks is not None and self.ticks >= max_ticks:
                self.stop()
