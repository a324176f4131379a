"""Operation surface a command line or console front end drives."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence

from lasershow.behaviors.base import BEHAVIOR_TYPE_KEY, BeamParameters
from lasershow.behaviors.registry import is_known_kind, known_kinds
from lasershow.engine.host import BehaviorHost
from lasershow.engine.logger import GameLogger
from lasershow.storage.config_store import (
    KIND_BEHAVIOR,
    POINTER_KINDS,
    ConfigurationStore,
    PointerRecord,
)
from lasershow.storage.resolver import ShowResolver
from lasershow.world.context import ShowContext


@dataclass(frozen=True)
class ShowStatus:
    active: tuple[str, ...]
    beam_count: int
    default: Optional[PointerRecord]
    scene_default: Optional[PointerRecord]
    helpers_visible: Optional[bool]
    saved_behaviors: int
    saved_banks: int


class LaserConsole:
    def __init__(
        self,
        store: ConfigurationStore,
        resolver: ShowResolver,
        host: BehaviorHost,
        context: ShowContext,
        logger: GameLogger,
    ) -> None:
        self.store = store
        self.resolver = resolver
        self.host = host
        self.context = context
        self.logger = logger
        self._log = logger.channel("presets")

    # ------------------------------------------------------------ behaviors
    def save_behavior(self, name: str, config: Mapping[str, Any], behavior_type: Optional[str] = None) -> bool:
        kind = behavior_type or config.get(BEHAVIOR_TYPE_KEY) or "default"
        if not is_known_kind(kind):
            self._log.warning("Unknown behavior type %s; expected one of %s", kind, ", ".join(known_kinds()))
            return False
        try:
            BeamParameters.from_config(config)
        except (ValueError, TypeError) as exc:
            self._log.warning("Rejected behavior %s: %s", name, exc)
            return False
        return self.store.save_behavior(name, config, kind)

    def load_behavior(self, name: str) -> bool:
        return self.resolver.load_behavior(name)

    def delete_behavior(self, name: str) -> bool:
        return self.store.delete_behavior(name)

    def list_behaviors(self) -> List[str]:
        return self.store.list_behaviors()

    # ---------------------------------------------------------------- banks
    def save_bank(self, name: str, behavior_names: Sequence[str]) -> bool:
        return self.store.save_bank(name, behavior_names)

    def load_bank(self, name: str) -> bool:
        return self.resolver.load_bank(name)

    def delete_bank(self, name: str) -> bool:
        return self.store.delete_bank(name)

    def list_banks(self) -> List[str]:
        return self.store.list_banks()

    # ------------------------------------------------------------- pointers
    def set_default(self, kind: str, name: str) -> bool:
        if kind not in POINTER_KINDS:
            self._log.warning("Default kind must be one of %s, got %s", ", ".join(POINTER_KINDS), kind)
            return False
        exists = self.store.has_behavior(name) if kind == KIND_BEHAVIOR else self.store.load_bank(name) is not None
        if not exists:
            self._log.warning("Cannot set default: %s %s not found", kind, name)
            return False
        return self.store.set_default(kind, name)

    def get_default(self) -> Optional[PointerRecord]:
        return self.store.get_default()

    def clear_default(self) -> bool:
        return self.store.clear_default()

    def get_scene_default(self) -> Optional[PointerRecord]:
        return self.store.get_scene_default()

    def clear_scene_default(self) -> bool:
        return self.store.clear_scene_default()

    def clear_all(self) -> None:
        self.resolver.clear_all()

    # -------------------------------------------------------------- helpers
    def set_helpers(self, visible: bool) -> bool:
        visible = bool(visible)
        if self.context.helpers is not None:
            self.context.helpers.set_visible(visible)
        return self.store.set_helper_visibility(visible)

    def toggle_helpers(self) -> bool:
        if self.context.helpers is not None:
            current = self.context.helpers.visible
        else:
            current = bool(self.store.get_helper_visibility())
        self.set_helpers(not current)
        return not current

    # --------------------------------------------------------------- status
    def status(self) -> ShowStatus:
        return ShowStatus(
            active=tuple(self.host.behavior_ids()),
            beam_count=self.host.beam_count(),
            default=self.store.get_default(),
            scene_default=self.store.get_scene_default(),
            helpers_visible=self.store.get_helper_visibility(),
            saved_behaviors=len(self.store.list_behaviors()),
            saved_banks=len(self.store.list_banks()),
        )

    def export_json(self) -> Optional[str]:
        return self.store.export_json()

    def import_json(self, text: str) -> bool:
        return self.store.import_json(text)


__all__ = ["ShowStatus", "LaserConsole"]
