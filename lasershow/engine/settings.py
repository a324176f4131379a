"""Runtime settings loaded from settings.json."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict


@dataclass
class ShowSettings:
    """Top-level knobs for the show process."""

    namespace: str = "laser"
    store_path: Path = field(default_factory=lambda: Path("laser_store.json"))
    sim_hz: float = 60.0
    max_fps: int = 120
    resolution: tuple[int, int] = (1280, 720)
    headless: bool = False
    run_seconds: float = 0.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ShowSettings":
        defaults = cls()
        resolution = data.get("resolution", defaults.resolution)
        try:
            width, height = (int(value) for value in resolution)
        except (TypeError, ValueError):
            width, height = defaults.resolution
        return cls(
            namespace=str(data.get("namespace", defaults.namespace)),
            store_path=Path(data.get("storePath", defaults.store_path)),
            sim_hz=float(data.get("simHz", defaults.sim_hz)),
            max_fps=int(data.get("maxFps", defaults.max_fps)),
            resolution=(width, height),
            headless=bool(data.get("headless", defaults.headless)),
            run_seconds=max(0.0, float(data.get("runSeconds", defaults.run_seconds))),
        )

    @classmethod
    def from_settings(cls, settings_path: Path) -> "ShowSettings":
        if not settings_path.exists():
            return cls()
        try:
            data = json.loads(settings_path.read_text())
        except json.JSONDecodeError:
            return cls()
        if not isinstance(data, dict):
            return cls()
        return cls.from_dict(data)


__all__ = ["ShowSettings"]
