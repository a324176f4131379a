"""String key-value backends behind the configuration store."""
from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Dict, Iterable, Optional, Protocol


class StorageError(RuntimeError):
    """Raised when a backend cannot read or persist a value."""


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...

    def keys(self) -> Iterable[str]:
        ...


def _payload_size(data: Dict[str, str]) -> int:
    return sum(len(key.encode("utf-8")) + len(value.encode("utf-8")) for key, value in data.items())


class MemoryStore:
    """In-process store, optionally bounded by ``quota_bytes`` like browser storage."""

    def __init__(self, initial: Optional[Dict[str, str]] = None, quota_bytes: Optional[int] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})
        self.quota_bytes = quota_bytes

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise StorageError(f"Values must be strings, got {type(value).__name__}")
        if self.quota_bytes is not None:
            candidate = dict(self._data)
            candidate[key] = value
            if _payload_size(candidate) > self.quota_bytes:
                raise StorageError(f"Quota of {self.quota_bytes} bytes exceeded writing {key!r}")
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data.keys())

    def __len__(self) -> int:
        return len(self._data)


class JsonFileStore:
    """All keys in one JSON object on disk, rewritten atomically on change.

    A missing file reads as empty. An unreadable or corrupt file raises
    :class:`StorageError` and is left untouched.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._cache: Optional[Dict[str, str]] = None

    def _load(self) -> Dict[str, str]:
        if self._cache is not None:
            return self._cache
        if not self.path.exists():
            self._cache = {}
            return self._cache
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as exc:
            raise StorageError(f"Cannot read {self.path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise StorageError(f"Corrupt store file {self.path}: {exc}") from exc
        if not isinstance(raw, dict):
            raise StorageError(f"Store file {self.path} does not hold a JSON object")
        self._cache = {str(key): str(value) for key, value in raw.items()}
        return self._cache

    def _write(self, data: Dict[str, str]) -> None:
        directory = self.path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=directory)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(data, handle, indent=2, sort_keys=True)
                os.replace(tmp_name, self.path)
            except BaseException:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass
                raise
        except OSError as exc:
            raise StorageError(f"Cannot write {self.path}: {exc}") from exc

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise StorageError(f"Values must be strings, got {type(value).__name__}")
        data = dict(self._load())
        data[key] = value
        self._write(data)
        self._cache = data

    def remove(self, key: str) -> None:
        data = dict(self._load())
        if key not in data:
            return
        del data[key]
        self._write(data)
        self._cache = data

    def keys(self) -> list[str]:
        return list(self._load().keys())


__all__ = ["StorageError", "KeyValueStore", "MemoryStore", "JsonFileStore"]
