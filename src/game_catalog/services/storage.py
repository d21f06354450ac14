"""Key-value storage backends for the catalog cache.

Every backend speaks plain strings, the way browser local storage does, and
signals an unavailable store by raising ``OSError``.
"""

import json
import os
from pathlib import Path
from typing import Protocol

import structlog

log = structlog.stdlib.get_logger()


class StorageQuotaExceededError(OSError):
    """Raised when a write would push the store past its quota."""


class StorageUnavailableError(OSError):
    """Raised by a store that has been disabled."""


class KeyValueStore(Protocol):
    """String-keyed persistent storage."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryKeyValueStore:
    """In-process store with an optional byte quota.

    Useful for tests and for running without a writable cache directory.
    """

    def __init__(self, quota_bytes: int | None = None, enabled: bool = True) -> None:
        self._data: dict[str, str] = {}
        self.quota_bytes = quota_bytes
        self.enabled = enabled

    def get(self, key: str) -> str | None:
        self._check_enabled()
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._check_enabled()
        if self.quota_bytes is not None:
            others = sum(len(k) + len(v) for k, v in self._data.items() if k != key)
            if others + len(key) + len(value) > self.quota_bytes:
                raise StorageQuotaExceededError(f"Storage quota of {self.quota_bytes} bytes exceeded")
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._check_enabled()
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data.keys())

    def _check_enabled(self) -> None:
        if not self.enabled:
            raise StorageUnavailableError("Storage is disabled")


class JsonFileKeyValueStore:
    """Store backed by a single JSON object file.

    Writes go to a temporary file that is then moved over the original, so a
    crash mid-write never leaves a truncated store behind.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        log.debug("File key-value store initialized", path=str(path))

    def get(self, key: str) -> str | None:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)

    def _read_all(self) -> dict[str, object]:
        if not self.path.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            text = f.read()
        try:
            data = json.loads(text) if text.strip() else {}
        except json.JSONDecodeError as e:
            raise OSError(f"Corrupt store file {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise OSError(f"Corrupt store file {self.path}: expected a JSON object")
        return data

    def _write_all(self, data: dict[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
            os.replace(temp_path, self.path)
        except OSError:
            if temp_path.exists():
                temp_path.unlink(missing_ok=True)
            raise
