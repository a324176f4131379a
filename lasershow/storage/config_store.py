"""Named behavior configs, banks, default pointers and the helper flag."""
from __future__ import annotations

import copy
import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence

from lasershow.behaviors.base import BEHAVIOR_TYPE_KEY
from lasershow.engine.logger import GameLogger, quiet_logger
from lasershow.storage.kv import KeyValueStore, StorageError

KIND_BEHAVIOR = "behavior"
KIND_BANK = "bank"
POINTER_KINDS = (KIND_BEHAVIOR, KIND_BANK)

TIER_DEFAULT = "default"
TIER_SCENE_DEFAULT = "scene_default"


@dataclass(frozen=True)
class PointerRecord:
    """Which saved behavior or bank a default tier points at."""

    kind: str
    name: str

    def to_dict(self) -> Dict[str, str]:
        return {"kind": self.kind, "name": self.name}


def _valid_name(name: Any) -> bool:
    return isinstance(name, str) and bool(name.strip())


class ConfigurationStore:
    """Namespaced persistence for behavior configs on a string key-value backend.

    Behaviors and banks each live in one JSON object under
    ``<ns>_saved_behaviors`` and ``<ns>_saved_banks``. The two pointer tiers
    use three parallel keys each: ``<ns>_<tier>_behavior``,
    ``<ns>_<tier>_bank`` and the discriminator ``<ns>_<tier>_type``.

    ``builtins`` is a read-only layer consulted after the saved table. Backend
    failures are logged on the ``store`` channel and reported as ``False`` or
    ``None``; nothing here raises on I/O problems.
    """

    def __init__(
        self,
        backend: KeyValueStore,
        namespace: str = "laser",
        builtins: Optional[Mapping[str, Mapping[str, Any]]] = None,
        logger: Optional[GameLogger] = None,
    ) -> None:
        self.backend = backend
        self.namespace = namespace
        self._builtins: Dict[str, Dict[str, Any]] = copy.deepcopy(dict(builtins or {}))
        self.logger = logger or quiet_logger()
        self._log = self.logger.channel("store")

    # ------------------------------------------------------------------ keys
    def key(self, suffix: str) -> str:
        return f"{self.namespace}_{suffix}"

    @property
    def behaviors_key(self) -> str:
        return self.key("saved_behaviors")

    @property
    def banks_key(self) -> str:
        return self.key("saved_banks")

    @property
    def helpers_key(self) -> str:
        return self.key("scene_default_helpers")

    def _pointer_key(self, tier: str, slot: str) -> str:
        return self.key(f"{tier}_{slot}")

    # ---------------------------------------------------------------- tables
    def _read_table(self, key: str) -> Dict[str, Any]:
        raw = self.backend.get(key)
        if raw is None:
            return {}
        table = json.loads(raw)
        if not isinstance(table, dict):
            raise ValueError(f"{key} does not hold a JSON object")
        return table

    def _write_table(self, key: str, table: Mapping[str, Any]) -> None:
        self.backend.set(key, json.dumps(table))

    def _saved_behaviors(self) -> Dict[str, Any]:
        return self._read_table(self.behaviors_key)

    def _saved_banks(self) -> Dict[str, Any]:
        return self._read_table(self.banks_key)

    # ------------------------------------------------------------- behaviors
    def save_behavior(self, name: str, config: Mapping[str, Any], behavior_type: Optional[str] = None) -> bool:
        if not _valid_name(name):
            self._log.warning("Refusing to save a behavior without a name")
            return False
        stored = copy.deepcopy(dict(config))
        stored[BEHAVIOR_TYPE_KEY] = behavior_type or stored.get(BEHAVIOR_TYPE_KEY) or "default"
        try:
            table = self._saved_behaviors()
            table[name] = stored
            self._write_table(self.behaviors_key, table)
        except (StorageError, ValueError, TypeError) as exc:
            self._log.error("Could not save behavior %s: %s", name, exc)
            return False
        self._log.info("Saved behavior %s (%s)", name, stored[BEHAVIOR_TYPE_KEY])
        return True

    def load_behavior(self, name: str) -> Optional[Dict[str, Any]]:
        try:
            table = self._saved_behaviors()
        except (StorageError, ValueError) as exc:
            self._log.error("Could not read saved behaviors: %s", exc)
            table = {}
        config = table.get(name)
        if not isinstance(config, dict):
            config = self._builtins.get(name)
        if config is None:
            self._log.warning("Behavior %s not found", name)
            return None
        return copy.deepcopy(config)

    def has_behavior(self, name: str) -> bool:
        if name in self._builtins:
            return True
        try:
            return name in self._saved_behaviors()
        except (StorageError, ValueError) as exc:
            self._log.error("Could not read saved behaviors: %s", exc)
            return False

    def is_missing_behavior(self, name: str) -> bool:
        """True only when the saved table was read and holds no such name."""

        if name in self._builtins:
            return False
        try:
            return name not in self._saved_behaviors()
        except (StorageError, ValueError) as exc:
            self._log.error("Could not read saved behaviors: %s", exc)
            return False

    def delete_behavior(self, name: str) -> bool:
        try:
            table = self._saved_behaviors()
            if name not in table:
                if name in self._builtins:
                    self._log.warning("Built-in behavior %s cannot be deleted", name)
                else:
                    self._log.warning("Behavior %s not found", name)
                return False
            del table[name]
            self._write_table(self.behaviors_key, table)
        except (StorageError, ValueError) as exc:
            self._log.error("Could not delete behavior %s: %s", name, exc)
            return False
        self._log.info("Deleted behavior %s", name)
        return True

    def list_behaviors(self) -> List[str]:
        names = list(self._builtins.keys())
        try:
            saved = self._saved_behaviors()
        except (StorageError, ValueError) as exc:
            self._log.error("Could not read saved behaviors: %s", exc)
            saved = {}
        names.extend(name for name in saved if name not in self._builtins)
        return names

    # ----------------------------------------------------------------- banks
    def save_bank(self, name: str, behavior_names: Sequence[str]) -> bool:
        if not _valid_name(name):
            self._log.warning("Refusing to save a bank without a name")
            return False
        members = list(behavior_names or [])
        if not members:
            self._log.warning("Cannot save bank %s: no behaviors given", name)
            return False
        missing = [member for member in members if not self.has_behavior(member)]
        if missing:
            self._log.warning("Cannot save bank %s. Missing behaviors: %s", name, ", ".join(map(str, missing)))
            return False
        try:
            table = self._saved_banks()
            table[name] = members
            self._write_table(self.banks_key, table)
        except (StorageError, ValueError) as exc:
            self._log.error("Could not save bank %s: %s", name, exc)
            return False
        self._log.info("Saved bank %s: [%s]", name, ", ".join(members))
        return True

    def load_bank(self, name: str) -> Optional[List[str]]:
        try:
            members = self._saved_banks().get(name)
        except (StorageError, ValueError) as exc:
            self._log.error("Could not read saved banks: %s", exc)
            return None
        if not isinstance(members, list):
            self._log.warning("Bank %s not found", name)
            return None
        return [str(member) for member in members]

    def is_missing_bank(self, name: str) -> bool:
        try:
            return not isinstance(self._saved_banks().get(name), list)
        except (StorageError, ValueError) as exc:
            self._log.error("Could not read saved banks: %s", exc)
            return False

    def delete_bank(self, name: str) -> bool:
        try:
            table = self._saved_banks()
            if name not in table:
                self._log.warning("Bank %s not found", name)
                return False
            del table[name]
            self._write_table(self.banks_key, table)
        except (StorageError, ValueError) as exc:
            self._log.error("Could not delete bank %s: %s", name, exc)
            return False
        self._log.info("Deleted bank %s", name)
        return True

    def list_banks(self) -> List[str]:
        try:
            return list(self._saved_banks().keys())
        except (StorageError, ValueError) as exc:
            self._log.error("Could not read saved banks: %s", exc)
            return []

    # -------------------------------------------------------------- pointers
    def _set_pointer(self, tier: str, kind: str, name: str) -> bool:
        if kind not in POINTER_KINDS:
            raise ValueError(f"Pointer kind must be one of {POINTER_KINDS}, got {kind!r}")
        other = KIND_BANK if kind == KIND_BEHAVIOR else KIND_BEHAVIOR
        try:
            self.backend.set(self._pointer_key(tier, kind), name)
            self.backend.remove(self._pointer_key(tier, other))
            self.backend.set(self._pointer_key(tier, "type"), kind)
        except StorageError as exc:
            self._log.error("Could not set %s pointer to %s %s: %s", tier, kind, name, exc)
            return False
        self._log.debug("Set %s pointer to %s %s", tier, kind, name)
        return True

    def _get_pointer(self, tier: str) -> Optional[PointerRecord]:
        try:
            kind = self.backend.get(self._pointer_key(tier, "type"))
            if kind not in POINTER_KINDS:
                return None
            name = self.backend.get(self._pointer_key(tier, kind))
        except StorageError as exc:
            self._log.error("Could not read %s pointer: %s", tier, exc)
            return None
        if not name:
            return None
        return PointerRecord(kind, name)

    def _clear_pointer(self, tier: str) -> bool:
        try:
            for slot in (KIND_BEHAVIOR, KIND_BANK, "type"):
                self.backend.remove(self._pointer_key(tier, slot))
        except StorageError as exc:
            self._log.error("Could not clear %s pointer: %s", tier, exc)
            return False
        self._log.debug("Cleared %s pointer", tier)
        return True

    def set_default(self, kind: str, name: str) -> bool:
        return self._set_pointer(TIER_DEFAULT, kind, name)

    def get_default(self) -> Optional[PointerRecord]:
        return self._get_pointer(TIER_DEFAULT)

    def clear_default(self) -> bool:
        return self._clear_pointer(TIER_DEFAULT)

    def set_scene_default(self, kind: str, name: str) -> bool:
        return self._set_pointer(TIER_SCENE_DEFAULT, kind, name)

    def get_scene_default(self) -> Optional[PointerRecord]:
        return self._get_pointer(TIER_SCENE_DEFAULT)

    def clear_scene_default(self) -> bool:
        return self._clear_pointer(TIER_SCENE_DEFAULT)

    # ----------------------------------------------------------- helper flag
    def set_helper_visibility(self, visible: bool) -> bool:
        try:
            self.backend.set(self.helpers_key, "true" if visible else "false")
        except StorageError as exc:
            self._log.error("Could not store helper visibility: %s", exc)
            return False
        return True

    def get_helper_visibility(self) -> Optional[bool]:
        try:
            raw = self.backend.get(self.helpers_key)
        except StorageError as exc:
            self._log.error("Could not read helper visibility: %s", exc)
            return None
        if raw == "true":
            return True
        if raw == "false":
            return False
        return None

    def clear_helper_visibility(self) -> bool:
        try:
            self.backend.remove(self.helpers_key)
        except StorageError as exc:
            self._log.error("Could not clear helper visibility: %s", exc)
            return False
        return True

    # ---------------------------------------------------------- export/import
    def export_data(self) -> Optional[Dict[str, Any]]:
        try:
            behaviors = self._saved_behaviors()
            banks = self._saved_banks()
        except (StorageError, ValueError) as exc:
            self._log.error("Export failed: %s", exc)
            return None
        return {
            "behaviors": behaviors,
            "banks": banks,
            "exported": datetime.now(timezone.utc).isoformat(),
        }

    def import_data(self, data: Mapping[str, Any]) -> bool:
        if not isinstance(data, Mapping):
            self._log.error("Import failed: expected a mapping, got %s", type(data).__name__)
            return False
        behaviors = data.get("behaviors")
        banks = data.get("banks")
        if behaviors is not None and not (
            isinstance(behaviors, Mapping) and all(isinstance(v, Mapping) for v in behaviors.values())
        ):
            self._log.error("Import failed: 'behaviors' must map names to configs")
            return False
        if banks is not None and not (
            isinstance(banks, Mapping) and all(isinstance(v, list) for v in banks.values())
        ):
            self._log.error("Import failed: 'banks' must map names to lists of behavior names")
            return False
        try:
            if behaviors is not None:
                self._write_table(self.behaviors_key, copy.deepcopy(dict(behaviors)))
            if banks is not None:
                self._write_table(self.banks_key, copy.deepcopy(dict(banks)))
        except (StorageError, TypeError, ValueError) as exc:
            self._log.error("Import failed: %s", exc)
            return False
        self._log.info(
            "Imported %d behaviors and %d banks",
            len(behaviors or {}),
            len(banks or {}),
        )
        return True

    def export_json(self, indent: int = 2) -> Optional[str]:
        data = self.export_data()
        if data is None:
            return None
        return json.dumps(data, indent=indent)

    def import_json(self, text: str) -> bool:
        try:
            data = json.loads(text)
        except (TypeError, ValueError) as exc:
            self._log.error("Import failed: %s", exc)
            return False
        return self.import_data(data)


__all__ = [
    "KIND_BEHAVIOR",
    "KIND_BANK",
    "POINTER_KINDS",
    "TIER_DEFAULT",
    "TIER_SCENE_DEFAULT",
    "PointerRecord",
    "ConfigurationStore",
]
