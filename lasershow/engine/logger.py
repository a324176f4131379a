"""Show logging split into switchable channels.

Each subsystem writes to its own channel so a noisy one can be silenced from
``settings.json`` without touching the rest:

``beams``
    per-frame beam counts from the host (off by default, very chatty)
``behaviors``
    behaviors added, removed or failing to update
``presets``
    loads, saves, startup resolution and the quick-test workbench
``store``
    persistence failures and pointer changes
``loop``
    main loop start, stop and run summary
"""
from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

DEFAULT_CHANNELS = {
    "beams": False,
    "behaviors": True,
    "presets": True,
    "store": True,
    "loop": False,
}


def _channel_overrides(raw: Any) -> Dict[str, bool]:
    if not isinstance(raw, dict):
        return {}
    return {str(name): bool(enabled) for name, enabled in raw.items()}


@dataclass
class LoggerConfig:
    """Log level plus the on/off state of every show channel.

    ``logChannels`` in the settings file only needs to name the channels it
    changes; the rest keep their :data:`DEFAULT_CHANNELS` state.
    """

    level: int = logging.INFO
    channels: Dict[str, bool] = field(default_factory=DEFAULT_CHANNELS.copy)

    @classmethod
    def from_settings(cls, settings_path: Path) -> "LoggerConfig":
        try:
            data = json.loads(settings_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            return cls()
        if not isinstance(data, dict):
            return cls()
        level_name = str(data.get("logLevel", "INFO")).upper()
        level = getattr(logging, level_name, logging.INFO)
        if not isinstance(level, int):
            level = logging.INFO
        channels = DEFAULT_CHANNELS.copy()
        channels.update(_channel_overrides(data.get("logChannels")))
        return cls(level=level, channels=channels)


class ChannelLogger:
    """One show channel; records are dropped while the channel is switched off.

    The host checks :attr:`enabled` before building per-frame ``beams``
    messages so a disabled channel costs nothing in the frame loop.
    """

    def __init__(self, name: str, logger: logging.Logger, enabled: bool) -> None:
        self._logger = logger
        self._enabled = enabled
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self._enabled = value

    def debug(self, msg: str, *args, **kwargs) -> None:
        if self._enabled:
            self._logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs) -> None:
        if self._enabled:
            self._logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs) -> None:
        if self._enabled:
            self._logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs) -> None:
        if self._enabled:
            self._logger.error(msg, *args, **kwargs)

    def exception(self, msg: str, *args, **kwargs) -> None:
        if self._enabled:
            self._logger.exception(msg, *args, **kwargs)


class GameLogger:
    """Owns the ``lasershow.*`` stdlib loggers and hands out one channel per subsystem."""

    def __init__(self, config: LoggerConfig) -> None:
        logging.basicConfig(
            level=config.level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            stream=sys.stdout,
        )
        self._root = logging.getLogger("lasershow")
        self._root.setLevel(config.level)
        self._channels: Dict[str, ChannelLogger] = {}
        for name, enabled in (config.channels or {}).items():
            self._channels[name] = ChannelLogger(
                name,
                logging.getLogger(f"lasershow.{name}"),
                enabled,
            )

    def channel(self, name: str) -> ChannelLogger:
        if name not in self._channels:
            # Unknown channels start disabled until explicitly enabled.
            self._channels[name] = ChannelLogger(
                name,
                logging.getLogger(f"lasershow.{name}"),
                False,
            )
        return self._channels[name]

    def set_enabled(self, name: str, enabled: bool) -> None:
        self.channel(name).enabled = enabled

    def channels(self) -> Iterable[str]:
        return self._channels.keys()


def quiet_logger() -> GameLogger:
    """Logger with every channel disabled, used by tools and tests."""

    channels = {name: False for name in DEFAULT_CHANNELS}
    return GameLogger(LoggerConfig(level=logging.CRITICAL, channels=channels))


def init_logger(settings_path: Optional[Path] = None) -> GameLogger:
    """Initialise a logger from settings.json."""

    settings_path = settings_path or Path("settings.json")
    config = LoggerConfig.from_settings(settings_path)
    return GameLogger(config)


__all__ = [
    "DEFAULT_CHANNELS",
    "GameLogger",
    "LoggerConfig",
    "ChannelLogger",
    "init_logger",
    "quiet_logger",
]
