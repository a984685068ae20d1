"""Durable key-value storage backed by a JSON file."""

import json
from dataclasses import dataclass
from pathlib import Path

from photo_album.services.cache import KeyValueStorage


@dataclass
class JsonFileStorage(KeyValueStorage):
    """String key-value store persisted as a single JSON object file.

    Read and write errors propagate so callers can decide how to degrade.
    """

    path: Path

    def get_item(self, key: str) -> str | None:
        """Return the stored value for a key, if present."""
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        """Store a value under a key."""
        items = self._read()
        items[key] = value
        self._write(items)

    def remove_item(self, key: str) -> None:
        """Remove a key if present."""
        items = self._read()
        if items.pop(key, None) is not None:
            self._write(items)

    def _read(self) -> dict[str, object]:
        if not self.path.exists():
            return {}
        with open(self.path, encoding="utf-8") as handle:
            items = json.load(handle)
        if not isinstance(items, dict):
            raise ValueError(f"Storage file {self.path} does not hold a JSON object")
        return items

    def _write(self, items: dict[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        with open(tmp_path, "w", encoding="utf-8") as handle:
            json.dump(items, handle)
        tmp_path.replace(self.path)
