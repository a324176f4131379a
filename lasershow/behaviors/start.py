"""Always-on baseline: four beams from the screen corners to the model."""
from __future__ import annotations

from lasershow.behaviors.base import Behavior, BehaviorKind, model_focus, screen_corners
from lasershow.world.context import ShowContext


class StartBehavior(Behavior):
    kind = BehaviorKind.START
    default_overrides = {"laserColor": 0x0000FF}

    def on_init(self, context: ShowContext) -> None:
        for _ in range(4):
            self.spawn_beam(context)
        self._aim(context)

    def update(self, dt: float, elapsed: float, context: ShowContext) -> None:
        self._aim(context)

    def _aim(self, context: ShowContext) -> None:
        focus = model_focus(context)
        for beam, corner in zip(self.beams, screen_corners(context)):
            beam.set_tint(self.params.color, 1.0)
            beam.set_path([corner, focus])


__all__ = ["StartBehavior"]
