"""Default mechanics, aimed at random faces of the target model."""
from __future__ import annotations

from typing import Any, Mapping, Optional

from pygame.math import Vector3

from lasershow.behaviors.base import BehaviorKind
from lasershow.behaviors.default import DefaultBehavior
from lasershow.world.context import ShowContext
from lasershow.world.mesh import MeshFace

# Stand-in face used until a model is available.
FALLBACK_FACE = MeshFace(
    center=Vector3(),
    normal=Vector3(0.0, 1.0, 0.0),
    vertices=(Vector3(), Vector3(), Vector3()),
)


class WireframeBehavior(DefaultBehavior):
    kind = BehaviorKind.WIREFRAME
    default_overrides = {"laserColor": 0x00FF00, "STILLNESS_LIMIT": 0.5}

    def __init__(self, config: Optional[Mapping[str, Any]] = None, behavior_id: Optional[str] = None) -> None:
        super().__init__(config, behavior_id)
        self.target_faces: list[MeshFace] = []

    def _retarget(self, context: ShowContext) -> None:
        self.target_faces = []
        super()._retarget(context)

    def pick_target(self, context: ShowContext, index: int) -> Vector3:
        face = context.random_face() or FALLBACK_FACE
        self.target_faces.append(face)
        return Vector3(face.center)

    def on_cleanup(self) -> None:
        super().on_cleanup()
        self.target_faces.clear()


__all__ = ["FALLBACK_FACE", "WireframeBehavior"]
