"""Built-in behavior configs, the startup fallback and quick-test presets."""
from __future__ import annotations

import copy
from typing import Any, Dict

COLORS: Dict[str, int] = {
    "red": 0xFF0000,
    "green": 0x00FF00,
    "blue": 0x0000FF,
    "cyan": 0x00FFFF,
    "magenta": 0xFF00FF,
    "yellow": 0xFFFF00,
    "white": 0xFFFFFF,
    "orange": 0xFF8000,
    "purple": 0x8000FF,
    "pink": 0xFF0080,
    "lime": 0x80FF00,
    "teal": 0x008080,
    "navy": 0x000080,
    "gold": 0xFFD700,
    "silver": 0xC0C0C0,
}

_CLASSIC = {
    "laserCount": 4,
    "MAX_BOUNCES": 3,
    "ORIGIN_SPHERE_RADIUS": 10,
    "STILLNESS_LIMIT": 0.083,
    "BASE_PULSE_FREQUENCY": 0.5,
    "MIN_BRIGHTNESS": 0.3,
    "MAX_BRIGHTNESS": 2.5,
    "MAX_LENGTH": 20,
}


def _classic(color: int, **overrides: Any) -> Dict[str, Any]:
    config = dict(_CLASSIC)
    config["laserColor"] = color
    config.update(overrides)
    config["behaviorType"] = "default"
    return config


BUILTIN_BEHAVIORS: Dict[str, Dict[str, Any]] = {
    "red_default": _classic(COLORS["red"]),
    "green_lasers": _classic(COLORS["green"]),
    "blue_bounce": _classic(COLORS["blue"], MAX_BOUNCES=5),
    "yellow_wide": _classic(COLORS["yellow"], ORIGIN_SPHERE_RADIUS=15),
    # Origins never jump.
    "static_red": _classic(COLORS["red"], ORIGIN_SPHERE_RADIUS=15, STILLNESS_LIMIT=1e9),
    "start": {"laserColor": COLORS["blue"], "behaviorType": "start"},
    "corner_array": {
        "laserColor": COLORS["blue"],
        "STATIC_DURATION": 1.0,
        "SPREAD_DURATION": 3.0,
        "LASERS_PER_CORNER": 8,
        "SPREAD_DISTANCE": 3.0,
        "behaviorType": "corner_array",
    },
    "wireframe": {
        "laserColor": COLORS["green"],
        "MAX_BOUNCES": 3,
        "ORIGIN_SPHERE_RADIUS": 10,
        "STILLNESS_LIMIT": 0.5,
        "BASE_PULSE_FREQUENCY": 0.5,
        "MIN_BRIGHTNESS": 0.3,
        "MAX_BRIGHTNESS": 2.5,
        "MAX_LENGTH": 20,
        "behaviorType": "wireframe",
    },
    # Older saves refer to the corner array by this name.
    "array_1": {"laserColor": COLORS["blue"], "behaviorType": "array_1"},
}

FALLBACK_NAME = "red_default"
FALLBACK_CONFIG: Dict[str, Any] = _classic(COLORS["red"])

QUICK_TESTS: Dict[str, Dict[str, Any]] = {
    "fast": {"STILLNESS_LIMIT": 0.05},
    "slow": {"STILLNESS_LIMIT": 0.3},
    "ultra_fast": {"STILLNESS_LIMIT": 0.025},
    "rainbow": {"laserColor": COLORS["cyan"], "MAX_BOUNCES": 7},
    "fire": {"laserColor": COLORS["orange"], "MAX_BRIGHTNESS": 3.0},
    "ice": {"laserColor": COLORS["cyan"], "MIN_BRIGHTNESS": 0.8},
    "bouncy": {"MAX_BOUNCES": 10, "laserColor": COLORS["green"]},
    "no_bounce": {"MAX_BOUNCES": 1, "laserColor": COLORS["red"]},
    "wide": {"ORIGIN_SPHERE_RADIUS": 25, "laserColor": COLORS["purple"]},
    "tight": {"ORIGIN_SPHERE_RADIUS": 3, "laserColor": COLORS["yellow"]},
    "pulse_fast": {"BASE_PULSE_FREQUENCY": 2.0, "laserColor": COLORS["magenta"]},
    "pulse_slow": {"BASE_PULSE_FREQUENCY": 0.1, "laserColor": COLORS["blue"]},
    "bright": {"MAX_BRIGHTNESS": 4.0, "MIN_BRIGHTNESS": 1.0, "laserColor": COLORS["white"]},
    "chaos": {
        "MAX_BOUNCES": 8,
        "ORIGIN_SPHERE_RADIUS": 20,
        "BASE_PULSE_FREQUENCY": 1.5,
        "laserColor": COLORS["pink"],
        "STILLNESS_LIMIT": 0.06,
    },
    "zen": {
        "MAX_BOUNCES": 2,
        "ORIGIN_SPHERE_RADIUS": 8,
        "BASE_PULSE_FREQUENCY": 0.3,
        "laserColor": COLORS["teal"],
        "STILLNESS_LIMIT": 0.4,
        "MIN_BRIGHTNESS": 0.5,
        "MAX_BRIGHTNESS": 1.5,
    },
}


def builtin_behaviors() -> Dict[str, Dict[str, Any]]:
    """Deep copy of :data:`BUILTIN_BEHAVIORS` safe to hand to a store."""

    return copy.deepcopy(BUILTIN_BEHAVIORS)


def color_name(value: int) -> str:
    for name, color in COLORS.items():
        if color == value:
            return name
    return "custom"


__all__ = [
    "COLORS",
    "BUILTIN_BEHAVIORS",
    "FALLBACK_NAME",
    "FALLBACK_CONFIG",
    "QUICK_TESTS",
    "builtin_behaviors",
    "color_name",
]
