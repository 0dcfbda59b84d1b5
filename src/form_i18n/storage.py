"""
Durable key-value storage used by the translation store.

The store keeps its whole collection as one string value under one key,
the way a browser keeps it in localStorage. Anything offering get/set of
string values can back it.
"""
from __future__ import annotations

import json
import logging
import os
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional, Union

from form_i18n.config import StoreConfig

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when the storage substrate cannot be read or written."""
    pass


class KeyValueStorage(ABC):
    """String key -> string value storage."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the value stored under `key`, or None if there is none."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store `value` under `key`. Raises StorageError on failure."""


class MemoryStorage(KeyValueStorage):
    """Process-local storage. Useful for tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStorage(KeyValueStorage):
    """
    Storage backed by one JSON object file: {key: value, ...}.

    Writes go to a temporary file that replaces the target, so a crash
    mid-write leaves the previous contents in place.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self._lock = threading.RLock()

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as fp:
                data = json.load(fp)
        except OSError as e:
            raise StorageError(f"Cannot read {self.path}: {e}")
        except ValueError as e:
            raise StorageError(f"Storage file {self.path} is not valid JSON: {e}")
        if not isinstance(data, dict):
            raise StorageError(f"Storage file {self.path} does not hold a JSON object")
        return data

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        with self._lock:
            try:
                data = self._read_all()
            except StorageError as e:
                # an unreadable file cannot be merged into; start over
                logger.warning("Replacing unreadable storage file: %s", e)
                data = {}
            data[key] = value
            tmp_path = self.path.with_name(self.path.name + ".tmp")
            try:
                os.makedirs(self.path.parent, exist_ok=True)
                with open(tmp_path, "w", encoding="utf-8") as fp:
                    json.dump(data, fp, ensure_ascii=False, indent=2)
                os.replace(tmp_path, self.path)
            except OSError as e:
                raise StorageError(f"Cannot write {self.path}: {e}")


def storage_for(config: StoreConfig) -> KeyValueStorage:
    """File storage at config.storage_path, or in-memory storage when it is unset."""
    if config.storage_path:
        return JsonFileStorage(config.storage_path)
    return MemoryStorage()
