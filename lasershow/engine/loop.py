"""Fixed timestep show loop."""
from __future__ import annotations

import time
from typing import Callable, Optional


class FixedTimestepLoop:
    """Runs a deterministic fixed update loop with variable rendering.

    ``max_duration`` bounds the amount of simulated time, which lets the
    headless mode stop on its own.
    """

    def __init__(
        self,
        update: Callable[[float], None],
        render: Callable[[float], None],
        process_events: Callable[[], None],
        fixed_hz: float = 60.0,
        max_frame_time: float = 0.25,
        max_duration: Optional[float] = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.update = update
        self.render = render
        self.process_events = process_events
        self.fixed_dt = 1.0 / fixed_hz
        self.max_frame_time = max_frame_time
        self.max_duration = max_duration
        self.simulated = 0.0
        self._clock = clock
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def stop(self) -> None:
        self._running = False

    def _duration_exhausted(self) -> bool:
        return self.max_duration is not None and self.simulated >= self.max_duration

    def run(self) -> None:
        self._running = True
        accumulator = 0.0
        last_time = self._clock()
        while self._running:
            now = self._clock()
            frame_time = now - last_time
            last_time = now
            if frame_time > self.max_frame_time:
                frame_time = self.max_frame_time
            accumulator += frame_time
            self.process_events()
            while accumulator >= self.fixed_dt and self._running:
                self.update(self.fixed_dt)
                self.simulated += self.fixed_dt
                accumulator -= self.fixed_dt
                if self._duration_exhausted():
                    self._running = False
            alpha = accumulator / self.fixed_dt if self.fixed_dt > 0 else 0.0
            self.render(alpha)


__all__ = ["FixedTimestepLoop"]
