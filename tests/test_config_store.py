"""Tests for configuration persistence on the key-value backends."""
from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Optional

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from lasershow.behaviors.presets import builtin_behaviors
from lasershow.engine.logger import quiet_logger
from lasershow.storage.config_store import ConfigurationStore, PointerRecord
from lasershow.storage.kv import JsonFileStore, MemoryStore, StorageError


def _store(backend=None, with_builtins: bool = True) -> ConfigurationStore:
    return ConfigurationStore(
        backend if backend is not None else MemoryStore(),
        namespace="laser",
        builtins=builtin_behaviors() if with_builtins else None,
        logger=quiet_logger(),
    )


class _FailingBackend:
    """Backend whose every operation fails like an unavailable storage area."""

    def get(self, key: str) -> Optional[str]:
        raise StorageError("storage unavailable")

    def set(self, key: str, value: str) -> None:
        raise StorageError("storage unavailable")

    def remove(self, key: str) -> None:
        raise StorageError("storage unavailable")

    def keys(self) -> list[str]:
        raise StorageError("storage unavailable")


def test_saved_config_round_trips_with_type_tag() -> None:
    store = _store()
    config = {"laserColor": 0x0080FF, "MAX_BOUNCES": 5}
    assert store.save_behavior("my_blue", config) is True
    loaded = store.load_behavior("my_blue")
    assert loaded.pop("behaviorType") == "default"
    assert loaded == config
    assert "behaviorType" not in config


def test_explicit_and_embedded_type_tags() -> None:
    store = _store()
    store.save_behavior("wire", {"laserColor": 0x00FF00}, "wireframe")
    store.save_behavior("tagged", {"behaviorType": "start"})
    assert store.load_behavior("wire")["behaviorType"] == "wireframe"
    assert store.load_behavior("tagged")["behaviorType"] == "start"


def test_resave_overwrites_and_loads_are_copies() -> None:
    store = _store()
    store.save_behavior("mine", {"MAX_BOUNCES": 1})
    store.save_behavior("mine", {"MAX_BOUNCES": 2})
    loaded = store.load_behavior("mine")
    assert loaded["MAX_BOUNCES"] == 2
    loaded["MAX_BOUNCES"] = 99
    assert store.load_behavior("mine")["MAX_BOUNCES"] == 2


def test_missing_names_return_none_or_false() -> None:
    store = _store()
    assert store.load_behavior("ghost") is None
    assert store.load_bank("ghost") is None
    assert store.delete_behavior("ghost") is False
    assert store.delete_bank("ghost") is False
    assert store.save_behavior("", {}) is False


def test_builtins_load_but_cannot_be_deleted() -> None:
    store = _store()
    assert store.load_behavior("red_default")["laserColor"] == 0xFF0000
    assert store.delete_behavior("red_default") is False
    store.save_behavior("red_default", {"laserColor": 0x110000})
    assert store.load_behavior("red_default")["laserColor"] == 0x110000
    assert store.delete_behavior("red_default") is True
    assert store.load_behavior("red_default")["laserColor"] == 0xFF0000


def test_list_behaviors_puts_builtins_first_without_duplicates() -> None:
    store = _store()
    store.save_behavior("my_blue", {})
    store.save_behavior("red_default", {})
    names = store.list_behaviors()
    assert names[: len(builtin_behaviors())] == list(builtin_behaviors())
    assert names.count("red_default") == 1
    assert names[-1] == "my_blue"


def test_bank_with_unsaved_member_is_rejected() -> None:
    store = _store()
    store.save_behavior("one", {})
    store.save_behavior("two", {})
    assert store.save_bank("mix", ["one", "two", "ghost"]) is False
    assert store.load_bank("mix") is None
    assert store.list_banks() == []

    assert store.save_bank("mix", ["one", "two"]) is True
    assert store.load_bank("mix") == ["one", "two"]


def test_bank_rules() -> None:
    store = _store()
    assert store.save_bank("empty", []) is False
    assert store.save_bank("classics", ["red_default", "green_lasers"]) is True
    assert store.list_banks() == ["classics"]
    assert store.delete_bank("classics") is True
    assert store.list_banks() == []


def test_pointer_tiers_keep_one_kind_each() -> None:
    backend = MemoryStore()
    store = _store(backend)
    assert store.get_default() is None

    store.set_default("behavior", "red_default")
    assert store.get_default() == PointerRecord("behavior", "red_default")
    assert backend.get("laser_default_type") == "behavior"

    store.set_default("bank", "mix")
    assert store.get_default() == PointerRecord("bank", "mix")
    assert backend.get("laser_default_behavior") is None
    assert backend.get("laser_default_bank") == "mix"

    store.set_scene_default("behavior", "my_blue")
    assert store.get_scene_default() == PointerRecord("behavior", "my_blue")
    assert store.get_default() == PointerRecord("bank", "mix")

    store.clear_default()
    assert store.get_default() is None
    assert not any(key.startswith("laser_default_") for key in backend.keys())
    store.clear_scene_default()
    assert store.get_scene_default() is None


def test_pointer_rejects_unknown_kind() -> None:
    with pytest.raises(ValueError):
        _store().set_default("preset", "x")


def test_helper_flag_is_stored_as_text() -> None:
    backend = MemoryStore()
    store = _store(backend)
    assert store.get_helper_visibility() is None
    store.set_helper_visibility(True)
    assert backend.get("laser_scene_default_helpers") == "true"
    assert store.get_helper_visibility() is True
    store.set_helper_visibility(False)
    assert store.get_helper_visibility() is False
    store.clear_helper_visibility()
    assert store.get_helper_visibility() is None


def test_namespace_prefixes_every_key() -> None:
    backend = MemoryStore()
    store = ConfigurationStore(backend, namespace="club", logger=quiet_logger())
    store.save_behavior("a", {})
    store.set_scene_default("behavior", "a")
    store.set_helper_visibility(True)
    assert all(key.startswith("club_") for key in backend.keys())


def test_quota_exceeded_is_reported_not_raised() -> None:
    store = _store(MemoryStore(quota_bytes=80))
    assert store.save_behavior("huge", {"notes": "x" * 200}) is False
    assert store.load_behavior("huge") is None
    assert store.save_behavior("tiny", {}) is True


def test_unavailable_backend_never_raises() -> None:
    store = _store(_FailingBackend())
    assert store.save_behavior("a", {}) is False
    assert store.load_behavior("a") is None
    assert store.load_behavior("red_default") is not None
    assert store.list_behaviors() == list(builtin_behaviors())
    assert store.list_banks() == []
    assert store.save_bank("b", ["red_default"]) is False
    assert store.set_default("behavior", "red_default") is False
    assert store.get_default() is None
    assert store.get_scene_default() is None
    assert store.clear_scene_default() is False
    assert store.get_helper_visibility() is None
    assert store.set_helper_visibility(True) is False
    assert store.export_data() is None
    assert store.import_data({"behaviors": {}}) is False


def test_corrupt_table_is_treated_as_unreadable() -> None:
    backend = MemoryStore({"laser_saved_behaviors": "{not json"})
    store = _store(backend)
    assert store.load_behavior("anything") is None
    assert store.save_behavior("anything", {}) is False
    assert backend.get("laser_saved_behaviors") == "{not json"


def test_missing_checks_separate_absent_from_unreadable() -> None:
    store = _store()
    store.save_behavior("mine", {})
    store.save_bank("pair", ["mine", "red_default"])
    assert store.is_missing_behavior("ghost") is True
    assert store.is_missing_behavior("mine") is False
    assert store.is_missing_behavior("red_default") is False
    assert store.is_missing_bank("ghost") is True
    assert store.is_missing_bank("pair") is False

    broken = _store(MemoryStore({"laser_saved_behaviors": "[1", "laser_saved_banks": "[1"}))
    assert broken.is_missing_behavior("ghost") is False
    assert broken.is_missing_bank("ghost") is False


def test_export_import_round_trip() -> None:
    source = _store()
    source.save_behavior("my_blue", {"laserColor": 0x0080FF, "MAX_BOUNCES": 5})
    source.save_behavior("wire", {}, "wireframe")
    source.save_bank("mix", ["my_blue", "red_default"])
    exported = source.export_data()
    assert set(exported) == {"behaviors", "banks", "exported"}

    target = _store()
    assert target.import_json(json.dumps(exported)) is True
    again = target.export_data()
    assert again["behaviors"] == exported["behaviors"]
    assert again["banks"] == exported["banks"]
    assert target.load_bank("mix") == ["my_blue", "red_default"]


def test_import_rejects_malformed_payloads() -> None:
    store = _store()
    store.save_behavior("keep", {})
    assert store.import_json("{broken") is False
    assert store.import_data({"behaviors": ["not", "a", "mapping"]}) is False
    assert store.import_data({"banks": {"mix": "not a list"}}) is False
    assert store.load_behavior("keep") is not None


def test_json_file_store_persists_between_instances(tmp_path: Path) -> None:
    path = tmp_path / "store" / "laser.json"
    store = _store(JsonFileStore(path))
    store.save_behavior("my_blue", {"laserColor": 0x0080FF})
    store.set_scene_default("behavior", "my_blue")

    reopened = _store(JsonFileStore(path))
    assert reopened.load_behavior("my_blue")["laserColor"] == 0x0080FF
    assert reopened.get_scene_default() == PointerRecord("behavior", "my_blue")
    assert [entry.name for entry in path.parent.iterdir()] == ["laser.json"]


def test_json_file_store_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "laser.json"
    path.write_text("[1, 2")
    backend = JsonFileStore(path)
    with pytest.raises(StorageError):
        backend.get("laser_saved_behaviors")

    store = _store(backend)
    assert store.get_scene_default() is None
    assert store.save_behavior("a", {}) is False
    assert path.read_text() == "[1, 2"


def test_memory_store_basics() -> None:
    backend = MemoryStore()
    backend.set("a", "1")
    assert backend.get("a") == "1"
    backend.remove("a")
    backend.remove("a")
    assert backend.get("a") is None
    with pytest.raises(StorageError):
        backend.set("a", 1)  # type: ignore[arg-type]
