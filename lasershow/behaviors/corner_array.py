"""Eight framing beams that fan out into an 8x8 array on the model surface."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from pygame.math import Vector3

from lasershow.behaviors.base import Behavior, BehaviorKind, model_focus, screen_corners
from lasershow.math.bounce import nearest_hit
from lasershow.math.vectors import (
    direction_between,
    ease_in_out_cubic,
    point_reflection,
    tangent_frame,
)
from lasershow.render.beam import Beam
from lasershow.world.context import ShowContext

START_SLIDE_DISTANCE = 2.0


@dataclass
class SurfaceAnchor:
    """Where one framing beam lands and the plane its array spreads over."""

    point: Vector3
    normal: Vector3
    tangent1: Vector3
    tangent2: Vector3
    from_hit: bool = True


def fallback_anchor(focus: Vector3) -> SurfaceAnchor:
    return SurfaceAnchor(
        point=Vector3(focus),
        normal=Vector3(0.0, 1.0, 0.0),
        tangent1=Vector3(1.0, 0.0, 0.0),
        tangent2=Vector3(0.0, 0.0, 1.0),
        from_hit=False,
    )


def grid_offset(index: int, count: int, spread: float, anchor: SurfaceAnchor) -> Vector3:
    """Offset of array member ``index`` on a ``ceil(sqrt(count))`` square grid."""

    size = max(1, math.ceil(math.sqrt(count)))
    row, col = divmod(index, size)
    if size > 1:
        u = (col / (size - 1)) * 2.0 - 1.0
        v = (row / (size - 1)) * 2.0 - 1.0
    else:
        u = v = 0.0
    return anchor.tangent1 * (u * spread) + anchor.tangent2 * (v * spread)


class CornerArrayBehavior(Behavior):
    """Static framing beams for a while, then an eased spread into arrays.

    Four origins sit on the near-plane corners of the camera and four more on
    their reflections through the model center. Each lands on the model once
    at init; during the spread phase every origin is replaced by
    ``LASERS_PER_CORNER`` beams laid out on the surface tangent plane.
    """

    kind = BehaviorKind.CORNER_ARRAY
    default_overrides = {"laserColor": 0x0000FF}

    def __init__(self, config: Optional[Mapping[str, Any]] = None, behavior_id: Optional[str] = None) -> None:
        super().__init__(config, behavior_id)
        self.static_duration = max(0.0, float(self.config.get("STATIC_DURATION", 1.0)))
        self.spread_duration = max(0.0, float(self.config.get("SPREAD_DURATION", 3.0)))
        self.lasers_per_corner = max(1, int(self.config.get("LASERS_PER_CORNER", 8)))
        self.spread_distance = float(self.config.get("SPREAD_DISTANCE", 3.0))
        self.anchors: list[SurfaceAnchor] = []
        self.primary: list[Beam] = []
        self.arrays: list[list[Beam]] = []
        self.start_time: Optional[float] = None
        self._anchor_model: Any = None
        self.progress = 0.0

    @property
    def phase(self) -> str:
        if not self.arrays:
            return "static"
        return "expanded" if self.progress >= 1.0 else "spreading"

    @staticmethod
    def origins_for(context: ShowContext) -> list[Vector3]:
        corners = screen_corners(context)
        focus = model_focus(context)
        return corners + [point_reflection(corner, focus) for corner in corners]

    def on_init(self, context: ShowContext) -> None:
        origins = self.origins_for(context)
        self.anchors = self._find_anchors(context, origins)
        self.primary = [self.spawn_beam(context) for _ in origins]
        self._aim_primary(context, origins)

    def on_cleanup(self) -> None:
        self.anchors = []
        self.primary = []
        self.arrays = []
        self.start_time = None
        self.progress = 0.0
        self._anchor_model = None

    def _find_anchors(self, context: ShowContext, origins: list[Vector3]) -> list[SurfaceAnchor]:
        self._anchor_model = context.model
        focus = model_focus(context)
        anchors = []
        for origin in origins:
            hit = nearest_hit(context.raycast(origin, direction_between(origin, focus)))
            if hit is None:
                anchors.append(fallback_anchor(focus))
                continue
            normal = hit.world_normal()
            tangent1, tangent2 = tangent_frame(normal)
            anchors.append(SurfaceAnchor(Vector3(hit.point), normal, tangent1, tangent2))
        return anchors

    def _aim_primary(self, context: ShowContext, origins: list[Vector3]) -> None:
        focus = model_focus(context)
        for beam, origin in zip(self.primary, origins):
            beam.set_tint(self.params.color, 1.0)
            beam.set_path([origin, focus])

    def _expand(self, context: ShowContext) -> None:
        for beam in self.primary:
            self.retire_beam(context, beam)
        self.primary = []
        self.arrays = [
            [self.spawn_beam(context) for _ in range(self.lasers_per_corner)]
            for _ in self.anchors
        ]

    def update(self, dt: float, elapsed: float, context: ShowContext) -> None:
        if not self.initialized:
            return
        if self.start_time is None:
            self.start_time = elapsed
        timeline = elapsed - self.start_time
        origins = self.origins_for(context)

        # Re-land when the model is swapped or arrives after init.
        if context.model is not self._anchor_model:
            self.anchors = self._find_anchors(context, origins)

        if timeline < self.static_duration:
            self._aim_primary(context, origins)
            return

        if not self.arrays:
            self._expand(context)
        if self.spread_duration > 0.0:
            self.progress = min(1.0, (timeline - self.static_duration) / self.spread_duration)
        else:
            self.progress = 1.0
        eased = ease_in_out_cubic(self.progress)
        spread = self.spread_distance * eased

        for origin, anchor, group in zip(origins, self.anchors, self.arrays):
            start = origin + direction_between(origin, anchor.point) * (START_SLIDE_DISTANCE * eased)
            for index, beam in enumerate(group):
                beam.set_tint(self.params.color, 1.0)
                beam.set_path([start, anchor.point + grid_offset(index, len(group), spread, anchor)])


__all__ = [
    "START_SLIDE_DISTANCE",
    "SurfaceAnchor",
    "fallback_anchor",
    "grid_offset",
    "CornerArrayBehavior",
]
