"""Vector helpers shared by the bounce solver and the behaviors."""
from __future__ import annotations

import math
import random
from typing import Union

from pygame.math import Vector3


WORLD_UP = Vector3(0.0, 1.0, 0.0)
WORLD_RIGHT = Vector3(1.0, 0.0, 0.0)
WORLD_FORWARD = Vector3(0.0, 0.0, 1.0)


def reflect(direction: Vector3, normal: Vector3) -> Vector3:
    """Mirror ``direction`` across the plane described by ``normal``."""

    n = normal.normalize()
    return direction - n * (2.0 * direction.dot(n))


def random_point_on_sphere(
    center: Vector3, radius: float, rng: random.Random | None = None
) -> Vector3:
    """Uniformly sample a point on the sphere surface around ``center``."""

    rng = rng or random
    point = Vector3(rng.gauss(0.0, 1.0), rng.gauss(0.0, 1.0), rng.gauss(0.0, 1.0))
    if point.length_squared() < 1e-12:
        point = Vector3(1.0, 0.0, 0.0)
    return Vector3(center) + point.normalize() * radius


def point_reflection(point: Vector3, center: Vector3) -> Vector3:
    """Reflect ``point`` through ``center`` (``2 * center - point``)."""

    return Vector3(center) - (Vector3(point) - Vector3(center))


def tangent_frame(normal: Vector3) -> tuple[Vector3, Vector3]:
    """Return two unit tangents spanning the plane orthogonal to ``normal``."""

    n = normal.normalize()
    reference = WORLD_UP if abs(n.y) < 0.9 else WORLD_RIGHT
    tangent1 = n.cross(reference).normalize()
    tangent2 = n.cross(tangent1).normalize()
    return tangent1, tangent2


def ease_in_out_cubic(t: float) -> float:
    t = max(0.0, min(1.0, t))
    if t < 0.5:
        return 4.0 * t * t * t
    return 1.0 - math.pow(-2.0 * t + 2.0, 3) / 2.0


def direction_between(start: Vector3, end: Vector3, fallback: Vector3 = WORLD_FORWARD) -> Vector3:
    """Unit vector from ``start`` to ``end``; ``fallback`` when they coincide."""

    delta = Vector3(end) - Vector3(start)
    if delta.length_squared() < 1e-12:
        return Vector3(fallback)
    return delta.normalize()


def parse_color(value: Union[int, str]) -> int:
    """Accept ``0xff0000``, ``"0xff0000"``, ``"#ff0000"`` or ``"ff0000"``."""

    if isinstance(value, bool):
        raise ValueError(f"Invalid color value: {value!r}")
    if isinstance(value, int):
        if value < 0:
            raise ValueError(f"Invalid color value: {value!r}")
        return value & 0xFFFFFF
    if isinstance(value, float) and value.is_integer() and value >= 0:
        return int(value) & 0xFFFFFF
    if isinstance(value, str):
        text = value.strip().lower()
        if text.startswith("#"):
            text = text[1:]
        elif text.startswith("0x"):
            text = text[2:]
        try:
            return int(text, 16) & 0xFFFFFF
        except ValueError:
            raise ValueError(f"Invalid color value: {value!r}") from None
    raise ValueError(f"Invalid color value: {value!r}")


def scale_color(color: int, brightness: float) -> tuple[int, int, int]:
    """Multiply an 0xRRGGBB color by ``brightness`` and clamp each channel."""

    brightness = max(0.0, brightness)
    channels = ((color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF)
    return tuple(min(255, int(round(channel * brightness))) for channel in channels)


__all__ = [
    "WORLD_UP",
    "WORLD_RIGHT",
    "WORLD_FORWARD",
    "reflect",
    "random_point_on_sphere",
    "point_reflection",
    "tangent_frame",
    "ease_in_out_cubic",
    "direction_between",
    "parse_color",
    "scale_color",
]
