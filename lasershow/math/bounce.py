"""Ray-bounce path solver."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

from pygame.math import Vector3

from lasershow.math.vectors import reflect

EPSILON = 0.001


@dataclass
class RaycastHit:
    """One surface intersection reported by a raycast oracle.

    ``face_normal`` is expressed in the hit object's local space, the way a
    scene graph reports it. ``world_normal`` applies the object's world
    transform when the object exposes ``transform_direction``.
    """

    point: Vector3
    face_normal: Vector3
    hit_object: Any = None
    distance: float = 0.0

    def world_normal(self) -> Vector3:
        normal = Vector3(self.face_normal)
        transform = getattr(self.hit_object, "transform_direction", None)
        if callable(transform):
            normal = Vector3(transform(normal))
        return normal.normalize()


Raycast = Callable[[Vector3, Vector3], Sequence[RaycastHit]]


def nearest_hit(hits: Sequence[RaycastHit]) -> Optional[RaycastHit]:
    """Pick the closest hit without trusting the oracle's ordering."""

    if not hits:
        return None
    return min(hits, key=lambda hit: hit.distance)


def compute_bounce_path(
    origin: Vector3,
    direction: Vector3,
    bounce_limit: int,
    max_length: float,
    raycast: Raycast,
) -> list[Vector3]:
    """Trace a beam through up to ``bounce_limit`` reflections.

    The returned polyline always holds at least two points and always ends
    in a drawn segment of ``max_length``, never on a bare hit point.
    """

    current_origin = Vector3(origin)
    current_direction = Vector3(direction).normalize()
    points = [Vector3(origin)]
    bounce_limit = max(0, int(bounce_limit))

    if bounce_limit == 0:
        points.append(current_origin + current_direction * max_length)
        return points

    for bounce in range(bounce_limit):
        hit = nearest_hit(raycast(current_origin, current_direction))
        if hit is None:
            points.append(current_origin + current_direction * max_length)
            break

        impact = Vector3(hit.point)
        points.append(impact)

        normal = hit.world_normal()
        if current_direction.dot(normal) > 0.0:
            normal = -normal

        current_direction = reflect(current_direction, normal)
        current_origin = impact + current_direction * EPSILON

        if bounce == bounce_limit - 1:
            points.append(current_origin + current_direction * max_length)

    return points


__all__ = ["EPSILON", "RaycastHit", "Raycast", "nearest_hit", "compute_bounce_path"]
