"""Jumping, pulsing, bouncing beams aimed at a fixed point."""
from __future__ import annotations

from typing import Any, Mapping, Optional

from pygame.math import Vector3

from lasershow.behaviors.base import (
    Behavior,
    BehaviorKind,
    StillnessTracker,
    camera_pose,
    pulse_brightness,
)
from lasershow.math.bounce import compute_bounce_path
from lasershow.math.vectors import direction_between, random_point_on_sphere
from lasershow.world.context import ShowContext


class DefaultBehavior(Behavior):
    """Beams start on a sphere around the orbit focus and aim at the world origin.

    Whenever the camera has been still for ``STILLNESS_LIMIT`` seconds every
    origin is re-randomized. Brightness pulses with a shared sine wave.
    """

    kind = BehaviorKind.DEFAULT

    def __init__(self, config: Optional[Mapping[str, Any]] = None, behavior_id: Optional[str] = None) -> None:
        super().__init__(config, behavior_id)
        self.origins: list[Vector3] = []
        self.targets: list[Vector3] = []
        self.directions: list[Vector3] = []
        self.stillness = StillnessTracker(self.params.stillness_limit)
        self.brightness = self.params.min_brightness
        self.jumps = 0

    @property
    def pulse_frequency(self) -> float:
        return self.params.base_pulse_frequency

    def on_init(self, context: ShowContext) -> None:
        for _ in range(self.params.laser_count):
            self.spawn_beam(context)
        self._retarget(context)
        self.stillness.reset(camera_pose(context))

    def on_cleanup(self) -> None:
        self.origins.clear()
        self.targets.clear()
        self.directions.clear()

    def pick_target(self, context: ShowContext, index: int) -> Vector3:
        return Vector3()

    def _retarget(self, context: ShowContext) -> None:
        center = Vector3(context.controls_target)
        self.origins = []
        self.targets = []
        self.directions = []
        for index in range(len(self.beams)):
            origin = random_point_on_sphere(center, self.params.origin_sphere_radius, context.rng)
            target = self.pick_target(context, index)
            self.origins.append(origin)
            self.targets.append(target)
            self.directions.append(direction_between(origin, target))

    def jump(self, context: ShowContext) -> None:
        self._retarget(context)
        self.jumps += 1

    def update(self, dt: float, elapsed: float, context: ShowContext) -> None:
        if not self.beams:
            return
        if self.stillness.step(dt, camera_pose(context)):
            self.jump(context)

        self.brightness = pulse_brightness(
            elapsed,
            self.pulse_frequency,
            self.params.min_brightness,
            self.params.max_brightness,
        )
        for beam, origin, direction in zip(self.beams, self.origins, self.directions):
            beam.set_tint(self.params.color, self.brightness)
            beam.set_path(
                compute_bounce_path(
                    origin,
                    direction,
                    self.params.max_bounces,
                    self.params.max_length,
                    context.raycast,
                )
            )


__all__ = ["DefaultBehavior"]
