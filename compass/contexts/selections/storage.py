"""
Durable key-value storage backends for selection records.

The selection store only needs get/set/remove by key. A missing key is a normal first
run and returns None. Backends signal unavailability with OSError (unwritable path,
disk full) or ValueError (corrupt file); the selection store decides how to degrade.
"""

import json
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from compass.utils.atomic_write import write_text_atomic

load_dotenv()
SELECTIONS_PATH = Path(os.getenv("SELECTIONS_PATH", "outs/selections.json"))


class KeyValueStorage(ABC):
    """Minimal durable storage interface (JSON-serializable values)."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[Any]:
        """Stored value for key, or None if nothing was stored."""

    @abstractmethod
    def set_item(self, key: str, value: Any) -> None:
        """Store value under key, replacing any previous value."""

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete key; no-op if absent."""


class InMemoryStorage(KeyValueStorage):
    """Session-only storage (also the fallback when durable storage fails)."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = dict(initial or {})

    def get_item(self, key: str) -> Optional[Any]:
        value = self._data.get(key)
        # Hand out copies so callers can't mutate stored records in place
        return json.loads(json.dumps(value)) if value is not None else None

    def set_item(self, key: str, value: Any) -> None:
        self._data[key] = json.loads(json.dumps(value))

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self):
        return list(self._data.keys())


class JsonFileStorage(KeyValueStorage):
    """
    Key-value storage backed by a single JSON file.

    Every write replaces the whole file atomically (temp file in the same directory,
    then move), so readers never see a partially written record.

    Example:
        storage = JsonFileStorage(Path("outs/selections.json"))
        storage.set_item("selected_personas", {"banking-operations": ["banking-coo"]})
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else SELECTIONS_PATH

    def _read_all(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}

        text = self.path.read_text(encoding="utf-8")
        if not text.strip():
            return {}

        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError(f"Selection file {self.path} does not contain a JSON object")
        return data

    def _write_all(self, data: Dict[str, Any]) -> None:
        write_text_atomic(self.path, json.dumps(data, indent=2, sort_keys=True) + "\n", suffix=".json")

    def get_item(self, key: str) -> Optional[Any]:
        return self._read_all().get(key)

    def set_item(self, key: str, value: Any) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove_item(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)

    def __repr__(self) -> str:
        return f"JsonFileStorage({self.path})"
