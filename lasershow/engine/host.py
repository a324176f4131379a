"""Behavior host: owns the active behavior list and ticks it every frame."""
from __future__ import annotations

from typing import Iterable, Optional

from lasershow.behaviors.base import Behavior
from lasershow.engine.clock import FrameClock
from lasershow.engine.logger import GameLogger
from lasershow.render.beam import Beam
from lasershow.world.context import ShowContext


class BehaviorHost:
    """Keeps the scene holding exactly the beams of the active behaviors."""

    def __init__(self, context: ShowContext, logger: GameLogger, clock: Optional[FrameClock] = None) -> None:
        self.context = context
        self.logger = logger
        self.clock = clock or FrameClock()
        self._active: list[Behavior] = []

    @property
    def active(self) -> tuple[Behavior, ...]:
        return tuple(self._active)

    def behavior_ids(self) -> list[str]:
        return [behavior.id for behavior in self._active]

    def beam_count(self) -> int:
        return sum(len(behavior.beams) for behavior in self._active)

    def _owned_beams(self) -> list[Beam]:
        owned: list[Beam] = []
        for behavior in self._active:
            owned.extend(behavior.beams)
        return owned

    def sweep_orphans(self) -> int:
        """Drop scene beams that no active behavior owns; return how many."""

        owned = self._owned_beams()
        orphans = [
            beam
            for beam in self.context.scene.beams()
            if not any(beam is candidate for candidate in owned)
        ]
        for beam in orphans:
            self.context.scene.remove(beam)
        if orphans:
            self.logger.channel("behaviors").warning("Removed %d orphaned beams", len(orphans))
        return len(orphans)

    def add_behavior(self, behavior: Behavior) -> None:
        self.sweep_orphans()
        self._active.append(behavior)
        behavior.init(self.context)
        self.logger.channel("behaviors").info(
            "Added behavior %s (%d beams)", behavior.id, len(behavior.beams)
        )

    def remove_behavior(self, behavior_id: str) -> bool:
        for index, behavior in enumerate(self._active):
            if behavior.id == behavior_id:
                behavior.cleanup(self.context)
                del self._active[index]
                self.logger.channel("behaviors").info("Removed behavior %s", behavior_id)
                return True
        return False

    def clear_behaviors(self) -> None:
        for behavior in self._active:
            behavior.cleanup(self.context)
        self._active.clear()

    def replace_all_behaviors(self, behaviors: Iterable[Behavior]) -> None:
        self.clear_behaviors()
        for behavior in behaviors:
            self.add_behavior(behavior)

    def tick(self, dt: float, elapsed: float) -> None:
        log = self.logger.channel("behaviors")
        for behavior in list(self._active):
            try:
                behavior.update(dt, elapsed, self.context)
            except Exception:
                log.exception("Behavior %s failed to update", behavior.id)

    def step(self, dt: float) -> None:
        """Advance the host clock by ``dt`` and tick every behavior."""

        self.tick(dt, self.clock.advance(dt))
        beams = self.logger.channel("beams")
        if beams.enabled:
            beams.debug("Frame %d: %d beams", self.clock.frame, self.beam_count())


__all__ = ["BehaviorHost"]
