"""Quick-test workbench for trying default-behavior configs before saving."""
from __future__ import annotations

import copy
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence

from lasershow.behaviors.default import DefaultBehavior
from lasershow.behaviors.presets import COLORS, QUICK_TESTS, color_name
from lasershow.control.console import LaserConsole
from lasershow.engine.host import BehaviorHost
from lasershow.math.vectors import parse_color

# Short option name -> config key. The config key itself is accepted too.
OPTION_ALIASES = {
    "color": "laserColor",
    "bounces": "MAX_BOUNCES",
    "radius": "ORIGIN_SPHERE_RADIUS",
    "speed": "STILLNESS_LIMIT",
    "pulse": "BASE_PULSE_FREQUENCY",
    "min_bright": "MIN_BRIGHTNESS",
    "minBright": "MIN_BRIGHTNESS",
    "max_bright": "MAX_BRIGHTNESS",
    "maxBright": "MAX_BRIGHTNESS",
    "length": "MAX_LENGTH",
}

CREATE_DEFAULTS = {
    "laserColor": COLORS["red"],
    "MAX_BOUNCES": 3,
    "ORIGIN_SPHERE_RADIUS": 10,
    "STILLNESS_LIMIT": 0.083,
    "BASE_PULSE_FREQUENCY": 0.5,
    "MIN_BRIGHTNESS": 0.3,
    "MAX_BRIGHTNESS": 2.5,
    "MAX_LENGTH": 20,
}


@dataclass(frozen=True)
class ConfigDifference:
    key: str
    first: Any
    second: Any


class BeamFactory:
    """Holds unsaved test configs and applies them to the host on demand."""

    def __init__(self, console: LaserConsole, host: BehaviorHost) -> None:
        self.console = console
        self.host = host
        self.tests: Dict[str, Dict[str, Any]] = {}
        self.active_test: Optional[str] = None
        self._log = console.logger.channel("presets")

    def test(self, config: Mapping[str, Any], name: str = "test") -> DefaultBehavior:
        """Apply ``config`` as the only active behavior without persisting it."""

        self.tests[name] = copy.deepcopy(dict(config))
        behavior = DefaultBehavior(self.tests[name], behavior_id=name)
        self.host.replace_all_behaviors([behavior])
        self.active_test = name
        self._log.info("Test %s applied", name)
        return behavior

    def quick_test(self, preset: str) -> Optional[DefaultBehavior]:
        config = QUICK_TESTS.get(preset)
        if config is None:
            self._log.warning("Unknown preset %s. Available: %s", preset, ", ".join(QUICK_TESTS))
            return None
        return self.test(config, preset)

    def create(self, **options: Any) -> DefaultBehavior:
        name = str(options.pop("name", "custom"))
        config = dict(CREATE_DEFAULTS)
        for option, value in options.items():
            config[OPTION_ALIASES.get(option, option)] = value
        if isinstance(config["laserColor"], str) and config["laserColor"].lower() in COLORS:
            config["laserColor"] = COLORS[config["laserColor"].lower()]
        return self.test(config, name)

    def load(self, name: str) -> bool:
        """Activate a saved behavior through the console."""

        loaded = self.console.load_behavior(name)
        if loaded:
            self._log.info("Loaded behavior %s", name)
        return loaded

    def test_sequence(self, entries: Sequence[Any]) -> Optional[List[str]]:
        """Register several configs for side-by-side trials without applying any.

        Each entry is either ``{"config": ..., "name": ...}`` or a bare config;
        unnamed entries are stored as ``seq_<index>``.
        """

        if isinstance(entries, (str, bytes, Mapping)) or not isinstance(entries, Sequence):
            self._log.warning("test_sequence needs a list of configs")
            return None
        names: List[str] = []
        for index, entry in enumerate(entries):
            if not isinstance(entry, Mapping):
                self._log.warning("Skipping sequence entry %d: not a mapping", index)
                continue
            config = entry.get("config", entry)
            if not isinstance(config, Mapping):
                self._log.warning("Skipping sequence entry %d: config is not a mapping", index)
                continue
            name = str(entry.get("name") or f"seq_{index}")
            self.tests[name] = copy.deepcopy(dict(config))
            names.append(name)
        self._log.info("Sequence ready: %s", ", ".join(names))
        return names

    def save(self, test_name: Optional[str] = None, save_name: Optional[str] = None) -> bool:
        name = test_name or self.active_test
        if not name or name not in self.tests:
            self._log.warning("No test configuration found: %s. Available: %s", name, ", ".join(self.tests))
            return False
        return self.console.save_behavior(save_name or name, self.tests[name], "default")

    def list_tests(self) -> List[str]:
        return list(self.tests.keys())

    def compare(self, first: str, second: str) -> Optional[List[ConfigDifference]]:
        """Keys whose values differ between two tests, ``None`` if either is unknown."""

        a = self.tests.get(first)
        b = self.tests.get(second)
        if a is None or b is None:
            self._log.warning("One or both configurations not found: %s, %s", first, second)
            return None
        keys = list(a) + [key for key in b if key not in a]
        return [ConfigDifference(key, a.get(key), b.get(key)) for key in keys if a.get(key) != b.get(key)]

    def clear_tests(self) -> None:
        self.tests.clear()
        self.active_test = None

    def export(self) -> Dict[str, Any]:
        return {
            "tests": copy.deepcopy(self.tests),
            "activeTest": self.active_test,
            "exported": datetime.now(timezone.utc).isoformat(),
        }

    def import_tests(self, data: Mapping[str, Any]) -> bool:
        tests = data.get("tests") if isinstance(data, Mapping) else None
        if not isinstance(tests, Mapping) or not all(isinstance(v, Mapping) for v in tests.values()):
            self._log.warning("Import failed: no 'tests' mapping")
            return False
        self.tests = {str(name): copy.deepcopy(dict(config)) for name, config in tests.items()}
        active = data.get("activeTest")
        self.active_test = active if active in self.tests else None
        return True

    @staticmethod
    def color_name(value: Any) -> str:
        try:
            return color_name(parse_color(value))
        except ValueError:
            return "custom"


__all__ = ["OPTION_ALIASES", "CREATE_DEFAULTS", "ConfigDifference", "BeamFactory"]
