"""Dependency-injected context handed to every behavior."""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Optional

from pygame.math import Vector3

from lasershow.math.bounce import RaycastHit
from lasershow.render.camera import ViewCamera
from lasershow.world.mesh import MeshFace, TargetModel
from lasershow.world.scene import HelperOverlay, SceneRoot


@dataclass
class ShowContext:
    """Scene, camera, target model and controls focus for one show.

    ``model`` and ``camera`` may be ``None`` while assets are still loading
    and may be swapped at any time; behaviors query them every frame instead
    of caching them.
    """

    scene: SceneRoot = field(default_factory=SceneRoot)
    camera: Optional[ViewCamera] = None
    model: Optional[TargetModel] = None
    controls_target: Vector3 = field(default_factory=Vector3)
    helpers: Optional[HelperOverlay] = None
    rng: random.Random = field(default_factory=random.Random)

    def raycast(self, origin: Vector3, direction: Vector3) -> list[RaycastHit]:
        if self.model is None:
            return []
        return self.model.raycast(origin, direction)

    def model_vertices(self) -> list[Vector3]:
        if self.model is None:
            return []
        return self.model.world_vertices()

    def model_faces(self) -> list[MeshFace]:
        if self.model is None:
            return []
        return self.model.faces()

    def model_center(self) -> Optional[Vector3]:
        if self.model is None:
            return None
        return self.model.center

    def random_face(self) -> Optional[MeshFace]:
        faces = self.model_faces()
        if not faces:
            return None
        return self.rng.choice(faces)


__all__ = ["ShowContext"]
