"""Perspective view camera used for projection and frustum corners."""
from __future__ import annotations

from dataclasses import dataclass
from math import acos, degrees, radians, tan
from typing import Optional

from pygame.math import Vector3

from lasershow.math.vectors import WORLD_UP


def _angle_between(a: Vector3, b: Vector3) -> float:
    lengths = a.length() * b.length()
    if lengths <= 0.0:
        return 0.0
    cosine = max(-1.0, min(1.0, a.dot(b) / lengths))
    return degrees(acos(cosine))


@dataclass
class CameraPose:
    """Snapshot of where the camera sits and which way it looks."""

    position: Vector3
    forward: Vector3
    up: Vector3

    def position_delta(self, other: "CameraPose") -> float:
        return self.position.distance_to(other.position)

    def orientation_delta(self, other: "CameraPose") -> float:
        """Largest angle (degrees) between the two poses' forward or up axes."""

        return max(_angle_between(self.forward, other.forward), _angle_between(self.up, other.up))


class ViewCamera:
    """Look-at perspective camera with OpenGL-style normalised device coordinates."""

    def __init__(
        self,
        fov_deg: float = 60.0,
        aspect: float = 16 / 9,
        position: Optional[Vector3] = None,
        target: Optional[Vector3] = None,
        near: float = 0.1,
        far: float = 1000.0,
    ) -> None:
        self.fov = fov_deg
        self.aspect = aspect
        self.position = Vector3(position) if position is not None else Vector3(0.0, 0.0, 10.0)
        self.target = Vector3(target) if target is not None else Vector3()
        self.world_up = Vector3(WORLD_UP)
        self.near_plane = near
        self.far_plane = far

    @property
    def basis(self) -> tuple[Vector3, Vector3, Vector3]:
        """Return ``(forward, right, up)`` unit vectors."""

        forward = self.target - self.position
        if forward.length_squared() < 1e-12:
            forward = Vector3(0.0, 0.0, -1.0)
        forward = forward.normalize()
        right = forward.cross(self.world_up)
        if right.length_squared() < 1e-12:
            # Looking straight along the up axis; pick any perpendicular.
            right = forward.cross(Vector3(0.0, 0.0, 1.0))
        right = right.normalize()
        up = right.cross(forward).normalize()
        return forward, right, up

    def pose(self) -> CameraPose:
        forward, _, up = self.basis
        return CameraPose(Vector3(self.position), forward, up)

    def look_at(self, target: Vector3) -> None:
        self.target = Vector3(target)

    def _tan_half_fov(self) -> float:
        value = tan(radians(self.fov) / 2.0)
        if value <= 0.0:
            value = tan(radians(max(1e-3, self.fov)) / 2.0)
        return value

    def _depth_from_ndc(self, ndc_z: float) -> float:
        near, far = self.near_plane, self.far_plane
        ndc_z = max(-1.0, min(1.0, ndc_z))
        return (2.0 * far * near) / ((far + near) - ndc_z * (far - near))

    def unproject(self, ndc_x: float, ndc_y: float, ndc_z: float = -1.0) -> Vector3:
        """Map a normalised device coordinate back into world space."""

        forward, right, up = self.basis
        depth = self._depth_from_ndc(ndc_z)
        half_height = depth * self._tan_half_fov()
        half_width = half_height * self.aspect
        return (
            self.position
            + forward * depth
            + right * (ndc_x * half_width)
            + up * (ndc_y * half_height)
        )

    def near_corners(self) -> list[Vector3]:
        """Top-left, top-right, bottom-left, bottom-right of the near plane."""

        return [self.unproject(x, y, -1.0) for x, y in ((-1.0, 1.0), (1.0, 1.0), (-1.0, -1.0), (1.0, -1.0))]

    def project(self, point: Vector3, screen_size: tuple[int, int]) -> tuple[Vector3, bool]:
        forward, right, up = self.basis
        rel = point - self.position
        depth = rel.dot(forward)
        if depth <= self.near_plane:
            return Vector3(), False
        x = rel.dot(right)
        y = rel.dot(up)
        f = 1.0 / self._tan_half_fov()
        ndc_x = (x * f / self.aspect) / depth
        ndc_y = (y * f) / depth
        screen_x = (ndc_x * 0.5 + 0.5) * screen_size[0]
        screen_y = (-ndc_y * 0.5 + 0.5) * screen_size[1]
        return Vector3(screen_x, screen_y, depth), True


__all__ = ["CameraPose", "ViewCamera"]
