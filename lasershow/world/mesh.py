"""Target mesh geometry and ray intersection."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence

from pygame.math import Vector3

from lasershow.math.bounce import RaycastHit

_PARALLEL_EPSILON = 1e-9
_MIN_HIT_DISTANCE = 1e-7


@dataclass(frozen=True)
class MeshFace:
    """A triangle of the target model in world space."""

    center: Vector3
    normal: Vector3
    vertices: tuple[Vector3, Vector3, Vector3]


class TriangleMesh:
    """Indexed triangle soup in model space."""

    def __init__(
        self,
        vertices: Sequence[Sequence[float]],
        triangles: Sequence[tuple[int, int, int]],
    ) -> None:
        self.vertices = [Vector3(*vertex) for vertex in vertices]
        self.triangles = [tuple(int(i) for i in triangle) for triangle in triangles]
        for triangle in self.triangles:
            if len(triangle) != 3 or any(i < 0 or i >= len(self.vertices) for i in triangle):
                raise ValueError(f"Invalid triangle indices: {triangle}")

    @classmethod
    def box(cls, width: float = 2.0, height: float = 2.0, depth: float = 2.0) -> "TriangleMesh":
        hx, hy, hz = width / 2.0, height / 2.0, depth / 2.0
        vertices = [
            (-hx, -hy, -hz),
            (hx, -hy, -hz),
            (hx, hy, -hz),
            (-hx, hy, -hz),
            (-hx, -hy, hz),
            (hx, -hy, hz),
            (hx, hy, hz),
            (-hx, hy, hz),
        ]
        # Counter-clockwise winding seen from outside.
        triangles = [
            (0, 2, 1), (0, 3, 2),
            (4, 5, 6), (4, 6, 7),
            (0, 4, 7), (0, 7, 3),
            (1, 2, 6), (1, 6, 5),
            (0, 1, 5), (0, 5, 4),
            (3, 7, 6), (3, 6, 2),
        ]
        return cls(vertices, triangles)

    def edges(self) -> list[tuple[int, int]]:
        seen: set[tuple[int, int]] = set()
        for a, b, c in self.triangles:
            for start, end in ((a, b), (b, c), (c, a)):
                seen.add((min(start, end), max(start, end)))
        return sorted(seen)

    def local_normal(self, index: int) -> Vector3:
        a, b, c = (self.vertices[i] for i in self.triangles[index])
        normal = (b - a).cross(c - a)
        if normal.length_squared() < 1e-18:
            return Vector3(0.0, 1.0, 0.0)
        return normal.normalize()


class TargetModel:
    """A mesh placed in the world by position, yaw (degrees) and uniform scale."""

    def __init__(
        self,
        mesh: TriangleMesh,
        position: Optional[Vector3] = None,
        yaw: float = 0.0,
        scale: float = 1.0,
        name: str = "model",
    ) -> None:
        self.mesh = mesh
        self.name = name
        self._position = Vector3(position) if position is not None else Vector3()
        self._yaw = float(yaw)
        self._scale = float(scale)
        self._world_vertices: Optional[list[Vector3]] = None
        self._bounds: Optional[tuple[Vector3, float]] = None

    @property
    def position(self) -> Vector3:
        return Vector3(self._position)

    @position.setter
    def position(self, value: Vector3) -> None:
        self._position = Vector3(value)
        self._invalidate()

    @property
    def yaw(self) -> float:
        return self._yaw

    @yaw.setter
    def yaw(self, value: float) -> None:
        self._yaw = float(value)
        self._invalidate()

    @property
    def scale(self) -> float:
        return self._scale

    @scale.setter
    def scale(self, value: float) -> None:
        self._scale = float(value)
        self._invalidate()

    def _invalidate(self) -> None:
        self._world_vertices = None
        self._bounds = None

    def transform_point(self, point: Vector3) -> Vector3:
        return self._position + (Vector3(point) * self._scale).rotate_y(self._yaw)

    def transform_direction(self, direction: Vector3) -> Vector3:
        return Vector3(direction).rotate_y(self._yaw)

    def world_vertices(self) -> list[Vector3]:
        if self._world_vertices is None:
            self._world_vertices = [self.transform_point(v) for v in self.mesh.vertices]
        return [Vector3(v) for v in self._world_vertices]

    @property
    def center(self) -> Vector3:
        return Vector3(self._world_bounds()[0])

    def _world_bounds(self) -> tuple[Vector3, float]:
        if self._bounds is None:
            vertices = self.world_vertices()
            if not vertices:
                self._bounds = (Vector3(self._position), 0.0)
            else:
                center = sum(vertices, Vector3()) / len(vertices)
                radius = max(center.distance_to(v) for v in vertices)
                self._bounds = (center, radius)
        return self._bounds

    def faces(self) -> list[MeshFace]:
        vertices = self.world_vertices()
        faces: list[MeshFace] = []
        for index, (a, b, c) in enumerate(self.mesh.triangles):
            corners = (vertices[a], vertices[b], vertices[c])
            faces.append(
                MeshFace(
                    center=(corners[0] + corners[1] + corners[2]) / 3.0,
                    normal=self.transform_direction(self.mesh.local_normal(index)),
                    vertices=corners,
                )
            )
        return faces

    def _misses_bounds(self, origin: Vector3, direction: Vector3) -> bool:
        center, radius = self._world_bounds()
        to_center = center - origin
        along = to_center.dot(direction)
        closest_sq = to_center.length_squared() - along * along
        if closest_sq > radius * radius + 1e-6:
            return True
        return along < 0.0 and to_center.length_squared() > radius * radius

    def raycast(self, origin: Vector3, direction: Vector3) -> list[RaycastHit]:
        """Return every triangle hit along the ray, nearest first."""

        origin = Vector3(origin)
        if direction.length_squared() < 1e-18:
            return []
        direction = Vector3(direction).normalize()
        if self._misses_bounds(origin, direction):
            return []

        vertices = self.world_vertices()
        hits: list[RaycastHit] = []
        for index, (a, b, c) in enumerate(self.mesh.triangles):
            distance = _intersect_triangle(origin, direction, vertices[a], vertices[b], vertices[c])
            if distance is None:
                continue
            hits.append(
                RaycastHit(
                    point=origin + direction * distance,
                    face_normal=self.mesh.local_normal(index),
                    hit_object=self,
                    distance=distance,
                )
            )
        hits.sort(key=lambda hit: hit.distance)
        return hits


def _intersect_triangle(
    origin: Vector3, direction: Vector3, v0: Vector3, v1: Vector3, v2: Vector3
) -> Optional[float]:
    """Moller-Trumbore ray/triangle test returning the hit distance."""

    edge1 = v1 - v0
    edge2 = v2 - v0
    h = direction.cross(edge2)
    a = edge1.dot(h)
    if abs(a) < _PARALLEL_EPSILON:
        return None
    f = 1.0 / a
    s = origin - v0
    u = f * s.dot(h)
    if u < 0.0 or u > 1.0:
        return None
    q = s.cross(edge1)
    v = f * direction.dot(q)
    if v < 0.0 or u + v > 1.0:
        return None
    t = f * edge2.dot(q)
    if t <= _MIN_HIT_DISTANCE or not math.isfinite(t):
        return None
    return t


__all__ = ["MeshFace", "TriangleMesh", "TargetModel"]
