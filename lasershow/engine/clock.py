"""Frame clock feeding delta and elapsed time to the behavior host."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass
class FrameClock:
    """Accumulates simulated time one tick at a time."""

    elapsed: float = 0.0
    frame: int = 0
    last_delta: float = 0.0

    def advance(self, dt: float) -> float:
        """Advance by ``dt`` seconds and return the new elapsed time."""

        dt = max(0.0, dt)
        self.last_delta = dt
        self.elapsed += dt
        self.frame += 1
        return self.elapsed

    def reset(self) -> None:
        self.elapsed = 0.0
        self.frame = 0
        self.last_delta = 0.0


__all__ = ["FrameClock"]
