"""Pick the configuration to activate at startup and on explicit loads."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional

from lasershow.behaviors.base import Behavior, UnknownBehaviorError
from lasershow.behaviors.presets import FALLBACK_CONFIG, FALLBACK_NAME
from lasershow.behaviors.registry import create_behavior
from lasershow.engine.host import BehaviorHost
from lasershow.engine.logger import GameLogger
from lasershow.storage.config_store import (
    KIND_BANK,
    KIND_BEHAVIOR,
    TIER_DEFAULT,
    TIER_SCENE_DEFAULT,
    ConfigurationStore,
    PointerRecord,
)
from lasershow.world.context import ShowContext

TIER_FALLBACK = "fallback"


@dataclass(frozen=True)
class ResolvedConfiguration:
    """What startup resolution activated and which tier it came from."""

    tier: str
    kind: str
    name: str
    behaviors: tuple[str, ...]


class ShowResolver:
    """Walks scene-default, then default, then the built-in fallback."""

    def __init__(
        self,
        store: ConfigurationStore,
        host: BehaviorHost,
        context: ShowContext,
        logger: GameLogger,
        fallback: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.store = store
        self.host = host
        self.context = context
        self.logger = logger
        self.fallback: Dict[str, Any] = dict(fallback if fallback is not None else FALLBACK_CONFIG)
        self._log = logger.channel("presets")

    # ------------------------------------------------------------ building
    def build_behavior(self, name: str) -> Optional[Behavior]:
        """Instantiate a stored behavior, ``None`` when missing, of unknown type or malformed."""

        config = self.store.load_behavior(name)
        if config is None:
            return None
        try:
            return create_behavior(config, behavior_id=name)
        except UnknownBehaviorError as exc:
            self._log.warning("Behavior %s has unknown type %s", name, exc)
            return None
        except (ValueError, TypeError) as exc:
            self._log.warning("Behavior %s has invalid parameters: %s", name, exc)
            return None

    def build_bank(self, name: str) -> Optional[List[Behavior]]:
        """Instantiate every usable member of a bank, ``None`` when the bank is missing.

        Members that no longer exist are skipped with a warning; the result
        may be empty when nothing in the bank is usable.
        """

        members = self.store.load_bank(name)
        if members is None:
            return None
        behaviors: List[Behavior] = []
        for member in members:
            behavior = self.build_behavior(member)
            if behavior is None:
                self._log.warning("Bank %s: skipping missing behavior %s", name, member)
                continue
            behaviors.append(behavior)
        return behaviors

    def _missing(self, pointer: PointerRecord) -> bool:
        if pointer.kind == KIND_BEHAVIOR:
            return self.store.is_missing_behavior(pointer.name)
        return self.store.is_missing_bank(pointer.name)

    def _build(self, pointer: PointerRecord) -> List[Behavior]:
        if pointer.kind == KIND_BEHAVIOR:
            behavior = self.build_behavior(pointer.name)
            return [behavior] if behavior is not None else []
        return self.build_bank(pointer.name) or []

    def _activate(self, behaviors: List[Behavior]) -> bool:
        """Swap ``behaviors`` in; on failure put the previous set back."""

        previous = list(self.host.active)
        try:
            self.host.replace_all_behaviors(behaviors)
        except Exception:
            self._log.exception("Failed to activate %s", [behavior.id for behavior in behaviors])
            self.host.clear_behaviors()
            try:
                self.host.replace_all_behaviors(previous)
            except Exception:
                self._log.exception("Could not restore %s", [behavior.id for behavior in previous])
                self.host.clear_behaviors()
            return False
        return True

    def apply_helpers(self) -> Optional[bool]:
        visible = self.store.get_helper_visibility()
        if visible is not None and self.context.helpers is not None:
            self.context.helpers.set_visible(visible)
        return visible

    # ------------------------------------------------------------- startup
    def resolve_startup(self) -> ResolvedConfiguration:
        tiers: tuple[tuple[str, Callable[[], Optional[PointerRecord]], Callable[[], bool]], ...] = (
            (TIER_SCENE_DEFAULT, self.store.get_scene_default, self.store.clear_scene_default),
            (TIER_DEFAULT, self.store.get_default, self.store.clear_default),
        )
        resolved: Optional[ResolvedConfiguration] = None
        for tier, get_pointer, clear_pointer in tiers:
            pointer = get_pointer()
            if pointer is None:
                continue
            if self._missing(pointer):
                self._log.warning("%s points at missing %s %s; clearing it", tier, pointer.kind, pointer.name)
                clear_pointer()
                continue
            behaviors = self._build(pointer)
            if not behaviors:
                self._log.warning("%s %s %s has nothing usable", tier, pointer.kind, pointer.name)
                continue
            if not self._activate(behaviors):
                continue
            resolved = ResolvedConfiguration(
                tier, pointer.kind, pointer.name, tuple(behavior.id for behavior in behaviors)
            )
            break

        if resolved is None:
            behavior = create_behavior(self.fallback, behavior_id=FALLBACK_NAME)
            self.host.replace_all_behaviors([behavior])
            resolved = ResolvedConfiguration(TIER_FALLBACK, KIND_BEHAVIOR, FALLBACK_NAME, (behavior.id,))

        self.apply_helpers()
        self._log.info("Startup resolved to %s %s from %s", resolved.kind, resolved.name, resolved.tier)
        return resolved

    # --------------------------------------------------------------- loads
    def load_behavior(self, name: str) -> bool:
        behavior = self.build_behavior(name)
        if behavior is None:
            return False
        if not self._activate([behavior]):
            return False
        self.store.set_scene_default(KIND_BEHAVIOR, name)
        self.apply_helpers()
        self._log.info("Loaded behavior %s", name)
        return True

    def load_bank(self, name: str) -> bool:
        behaviors = self.build_bank(name)
        if not behaviors:
            if behaviors is not None:
                self._log.warning("Bank %s has no usable behaviors", name)
            return False
        if not self._activate(behaviors):
            return False
        self.store.set_scene_default(KIND_BANK, name)
        self.apply_helpers()
        self._log.info("Loaded bank %s with %d behaviors", name, len(behaviors))
        return True

    def clear_all(self) -> None:
        self.host.clear_behaviors()
        self.store.clear_scene_default()
        self.store.clear_helper_visibility()
        self._log.info("Cleared active behaviors, scene default and helper flag")


__all__ = ["TIER_FALLBACK", "ResolvedConfiguration", "ShowResolver"]
