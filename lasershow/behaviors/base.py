"""Behavior base class, parameters and shared per-frame mechanics."""
from __future__ import annotations

import abc
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from pygame.math import Vector3

from lasershow.math.vectors import parse_color
from lasershow.render.beam import Beam
from lasershow.render.camera import CameraPose
from lasershow.world.context import ShowContext

BEHAVIOR_TYPE_KEY = "behaviorType"

CAMERA_POSITION_THRESHOLD = 0.1
CAMERA_ROTATION_THRESHOLD = 15.0  # degrees

# Used when no camera is available yet.
FALLBACK_CORNERS = (
    (-10.0, 10.0, -10.0),
    (10.0, 10.0, -10.0),
    (-10.0, -10.0, -10.0),
    (10.0, -10.0, -10.0),
)


class UnknownBehaviorError(KeyError):
    """Raised when a config names a behavior type that does not exist."""


class BehaviorKind(str, Enum):
    DEFAULT = "default"
    WIREFRAME = "wireframe"
    CORNER_ARRAY = "corner_array"
    START = "start"

    @classmethod
    def parse(cls, value: Optional[str]) -> "BehaviorKind":
        if value is None or value == "":
            return cls.DEFAULT
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower().replace("-", "_")
        text = _KIND_ALIASES.get(text, text)
        try:
            return cls(text)
        except ValueError:
            raise UnknownBehaviorError(value) from None


_KIND_ALIASES = {"array_1": "corner_array"}


def behavior_kind_of(config: Mapping[str, Any]) -> BehaviorKind:
    """Kind a config was produced for; untagged configs are ``default``."""

    return BehaviorKind.parse(config.get(BEHAVIOR_TYPE_KEY))


@dataclass(frozen=True)
class BeamParameters:
    """Typed view over the flat config keys shared by the beam behaviors."""

    color: int = 0xFF0000
    laser_count: int = 4
    max_bounces: int = 3
    origin_sphere_radius: float = 10.0
    stillness_limit: float = 0.08333333333333333
    base_pulse_frequency: float = 0.5
    pulse_frequency_sensitivity: float = 5.0
    min_brightness: float = 0.3
    max_brightness: float = 2.5
    max_length: float = 20.0

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "BeamParameters":
        defaults = cls()
        return cls(
            color=parse_color(config.get("laserColor", defaults.color)),
            laser_count=max(1, int(config.get("laserCount", defaults.laser_count))),
            max_bounces=max(0, int(config.get("MAX_BOUNCES", defaults.max_bounces))),
            origin_sphere_radius=float(config.get("ORIGIN_SPHERE_RADIUS", defaults.origin_sphere_radius)),
            stillness_limit=float(config.get("STILLNESS_LIMIT", defaults.stillness_limit)),
            base_pulse_frequency=float(config.get("BASE_PULSE_FREQUENCY", defaults.base_pulse_frequency)),
            pulse_frequency_sensitivity=float(
                config.get("PULSE_FREQUENCY_SENSITIVITY", defaults.pulse_frequency_sensitivity)
            ),
            min_brightness=float(config.get("MIN_BRIGHTNESS", defaults.min_brightness)),
            max_brightness=float(config.get("MAX_BRIGHTNESS", defaults.max_brightness)),
            max_length=max(1e-3, float(config.get("MAX_LENGTH", defaults.max_length))),
        )


def pulse_brightness(elapsed: float, frequency: float, low: float, high: float) -> float:
    """Map ``sin(2*pi*elapsed*frequency)`` from [-1, 1] onto [low, high]."""

    intensity = (math.sin(elapsed * frequency * math.pi * 2.0) + 1.0) / 2.0
    return low + intensity * (high - low)


@dataclass
class StillnessTracker:
    """Counts how long the camera has stayed put and signals jumps.

    Movement is measured against the pose recorded at the last significant
    move, so slow drift eventually crosses a threshold too. A missing camera
    counts as a still one.
    """

    limit: float
    position_threshold: float = CAMERA_POSITION_THRESHOLD
    rotation_threshold: float = CAMERA_ROTATION_THRESHOLD
    timer: float = 0.0
    baseline: Optional[CameraPose] = None

    def reset(self, pose: Optional[CameraPose]) -> None:
        self.baseline = pose
        self.timer = 0.0

    def step(self, dt: float, pose: Optional[CameraPose]) -> bool:
        if pose is not None:
            if self.baseline is None:
                self.reset(pose)
                return False
            moved = (
                pose.position_delta(self.baseline) > self.position_threshold
                or pose.orientation_delta(self.baseline) > self.rotation_threshold
            )
            if moved:
                self.reset(pose)
                return False
        self.timer += dt
        if self.timer >= self.limit:
            self.timer = 0.0
            return True
        return False


def camera_pose(context: ShowContext) -> Optional[CameraPose]:
    return context.camera.pose() if context.camera is not None else None


def screen_corners(context: ShowContext) -> list[Vector3]:
    """World positions of the four near-plane corners of the view."""

    if context.camera is None:
        return [Vector3(corner) for corner in FALLBACK_CORNERS]
    return context.camera.near_corners()


def model_focus(context: ShowContext) -> Vector3:
    center = context.model_center()
    return center if center is not None else Vector3()


class Behavior(abc.ABC):
    """An animated rule that owns its beams from ``init`` to ``cleanup``."""

    kind: BehaviorKind = BehaviorKind.DEFAULT
    default_overrides: Mapping[str, Any] = {}

    def __init__(self, config: Optional[Mapping[str, Any]] = None, behavior_id: Optional[str] = None) -> None:
        merged = dict(self.default_overrides)
        merged.update(config or {})
        merged.pop(BEHAVIOR_TYPE_KEY, None)
        self.config: dict[str, Any] = merged
        self.params = BeamParameters.from_config(merged)
        self.id = behavior_id or self.kind.value
        self.beams: list[Beam] = []
        self.initialized = False

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id!r} beams={len(self.beams)}>"

    def init(self, context: ShowContext) -> None:
        if self.beams:
            self.cleanup(context)
        self.on_init(context)
        self.initialized = True

    @abc.abstractmethod
    def on_init(self, context: ShowContext) -> None:
        """Create beams and pick initial origins and targets."""

    @abc.abstractmethod
    def update(self, dt: float, elapsed: float, context: ShowContext) -> None:
        """Advance one frame."""

    def cleanup(self, context: ShowContext) -> None:
        for beam in self.beams:
            context.scene.remove(beam)
        self.beams.clear()
        self.initialized = False
        self.on_cleanup()

    def on_cleanup(self) -> None:
        pass

    def spawn_beam(self, context: ShowContext, color: Optional[int] = None) -> Beam:
        beam = Beam(color=self.params.color if color is None else color, brightness=1.0)
        context.scene.add(beam)
        self.beams.append(beam)
        return beam

    def retire_beam(self, context: ShowContext, beam: Beam) -> None:
        context.scene.remove(beam)
        self.beams = [owned for owned in self.beams if owned is not beam]


__all__ = [
    "BEHAVIOR_TYPE_KEY",
    "CAMERA_POSITION_THRESHOLD",
    "CAMERA_ROTATION_THRESHOLD",
    "FALLBACK_CORNERS",
    "UnknownBehaviorError",
    "BehaviorKind",
    "behavior_kind_of",
    "BeamParameters",
    "pulse_brightness",
    "StillnessTracker",
    "camera_pose",
    "screen_corners",
    "model_focus",
    "Behavior",
]
