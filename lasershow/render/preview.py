"""Software preview of the show drawn with pygame.draw."""
from __future__ import annotations

from typing import Optional, Sequence

import pygame
from pygame.math import Vector3

from lasershow.render.beam import Beam
from lasershow.render.camera import ViewCamera
from lasershow.world.context import ShowContext
from lasershow.world.mesh import TargetModel

BACKGROUND = (4, 4, 10)
MODEL_COLOR = (70, 90, 110)
GRID_COLOR = (28, 34, 46)
AXIS_COLORS = ((200, 60, 60), (60, 200, 60), (60, 90, 220))
GRID_EXTENT = 10
GRID_STEP = 2


class ShowPreview:
    """Projects beams, the model wireframe and optional helpers onto a surface."""

    def __init__(self, surface: pygame.Surface) -> None:
        self.surface = surface

    @property
    def size(self) -> tuple[int, int]:
        return self.surface.get_size()

    def _segment(self, camera: ViewCamera, a: Vector3, b: Vector3, color, width: int = 1) -> bool:
        start, start_ok = camera.project(a, self.size)
        end, end_ok = camera.project(b, self.size)
        if not (start_ok and end_ok):
            return False
        if width > 1:
            pygame.draw.line(self.surface, color, (start.x, start.y), (end.x, end.y), width)
        else:
            pygame.draw.aaline(self.surface, color, (start.x, start.y), (end.x, end.y))
        return True

    def draw_helpers(self, camera: ViewCamera) -> None:
        for offset in range(-GRID_EXTENT, GRID_EXTENT + 1, GRID_STEP):
            self._segment(camera, Vector3(offset, 0, -GRID_EXTENT), Vector3(offset, 0, GRID_EXTENT), GRID_COLOR)
            self._segment(camera, Vector3(-GRID_EXTENT, 0, offset), Vector3(GRID_EXTENT, 0, offset), GRID_COLOR)
        for axis, color in zip((Vector3(1, 0, 0), Vector3(0, 1, 0), Vector3(0, 0, 1)), AXIS_COLORS):
            self._segment(camera, Vector3(), axis * 2.0, color, 2)

    def draw_model(self, camera: ViewCamera, model: TargetModel) -> None:
        vertices = model.world_vertices()
        for a, b in model.mesh.edges():
            self._segment(camera, vertices[a], vertices[b], MODEL_COLOR)

    def draw_beams(self, camera: ViewCamera, beams: Sequence[Beam]) -> int:
        drawn = 0
        for beam in beams:
            if not beam.visible:
                continue
            color = beam.rgb()
            for a, b in zip(beam.path, beam.path[1:]):
                if self._segment(camera, a, b, color, 2):
                    drawn += 1
        return drawn

    def draw(self, context: ShowContext, camera: Optional[ViewCamera] = None) -> int:
        """Draw one frame; returns the number of beam segments on screen."""

        self.surface.fill(BACKGROUND)
        camera = camera or context.camera
        if camera is None:
            return 0
        if context.helpers is not None and context.helpers.visible:
            self.draw_helpers(camera)
        if context.model is not None:
            self.draw_model(camera, context.model)
        return self.draw_beams(camera, list(context.scene.beams()))


__all__ = ["ShowPreview"]
