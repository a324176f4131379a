"""Drawable beam primitive."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from pygame.math import Vector3

from lasershow.math.vectors import scale_color


@dataclass(eq=False)
class Beam:
    """One light polyline with a base color and a brightness scalar."""

    color: int = 0xFF0000
    brightness: float = 1.0
    path: list[Vector3] = field(default_factory=lambda: [Vector3(), Vector3(0.0, 0.0, 1.0)])
    visible: bool = True

    def set_path(self, points: Iterable[Vector3]) -> None:
        path = [Vector3(point) for point in points]
        if len(path) < 2:
            raise ValueError("A beam path needs at least two points")
        self.path = path

    def set_tint(self, color: int, brightness: float) -> None:
        self.color = color
        self.brightness = brightness

    def rgb(self) -> tuple[int, int, int]:
        """Brightness-scaled color for renderers."""

        return scale_color(self.color, self.brightness)


__all__ = ["Beam"]
