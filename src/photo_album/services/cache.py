"""Stale-while-revalidate cache with durable persistence."""

import json
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

DEFAULT_STORAGE_KEY = "photoAlbumCache"
ALL_PHOTOS_KEY = "photos_all"

_logger = logging.getLogger(__name__)


def page_key(page: int) -> str:
    """Return the cache key for one page of photos."""
    return f"photos_page_{page}"


class KeyValueStorage(Protocol):
    """Durable string key-value storage."""

    def get_item(self, key: str) -> str | None:
        """Return the stored value for a key, if present."""

    def set_item(self, key: str, value: str) -> None:
        """Store a value under a key."""

    def remove_item(self, key: str) -> None:
        """Remove a key if present."""


@dataclass(frozen=True)
class CachedValue:
    """A cache hit; stale values are still usable."""

    data: object
    is_stale: bool


@dataclass
class _CacheEntry:
    data: object
    stale_at: float
    expiry: float

    def to_dict(self) -> dict[str, object]:
        return {"data": self.data, "staleAt": self.stale_at, "expiry": self.expiry}

    @classmethod
    def from_dict(cls, payload: dict[str, object]) -> "_CacheEntry":
        return cls(
            data=payload["data"],
            stale_at=float(payload["staleAt"]),
            expiry=float(payload["expiry"]),
        )


class PhotoCache:
    """Key-value cache where entries go stale after one TTL and expire after two.

    Every mutation writes the full snapshot to ``storage`` under
    ``storage_key``. Storage failures are logged and the cache keeps working
    from memory.
    """

    def __init__(
        self,
        storage: KeyValueStorage | None = None,
        ttl_seconds: float = 300,
        storage_key: str = DEFAULT_STORAGE_KEY,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.storage = storage
        self.ttl_seconds = ttl_seconds
        self.storage_key = storage_key
        self._clock = clock
        self._entries: dict[str, _CacheEntry] = {}
        self._load()

    @property
    def size(self) -> int:
        """Number of entries held in memory."""
        return len(self._entries)

    def get(self, key: str) -> CachedValue | None:
        """Return a cached value, evicting it once fully expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        now = self._clock()
        if now > entry.expiry:
            del self._entries[key]
            self._save()
            return None
        return CachedValue(data=entry.data, is_stale=now > entry.stale_at)

    def set(self, key: str, data: object) -> None:
        """Store a value, replacing any previous entry for the key."""
        now = self._clock()
        self._entries[key] = _CacheEntry(
            data=data,
            stale_at=now + self.ttl_seconds,
            expiry=now + self.ttl_seconds * 2,
        )
        self._save()

    def remove(self, key: str) -> None:
        """Drop a single key."""
        self._entries.pop(key, None)
        self._save()

    def clear(self) -> None:
        """Drop every entry and the persisted snapshot."""
        self._entries.clear()
        if self.storage is None:
            return
        try:
            self.storage.remove_item(self.storage_key)
        except (OSError, ValueError) as exc:
            _logger.warning("Failed to clear cache storage: %s", exc)

    def _load(self) -> None:
        if self.storage is None:
            return
        try:
            raw = self.storage.get_item(self.storage_key)
            snapshot = json.loads(raw) if raw else {}
        except (OSError, ValueError) as exc:
            _logger.warning("Failed to load cache from storage: %s", exc)
            return
        if not isinstance(snapshot, dict):
            _logger.warning("Ignoring cache snapshot that is not a JSON object")
            return
        for key, payload in snapshot.items():
            try:
                self._entries[key] = _CacheEntry.from_dict(payload)
            except (ValueError, TypeError, KeyError) as exc:
                _logger.warning("Skipping malformed cache entry %s: %s", key, exc)

    def _save(self) -> None:
        if self.storage is None:
            return
        try:
            snapshot = {key: entry.to_dict() for key, entry in self._entries.items()}
            self.storage.set_item(self.storage_key, json.dumps(snapshot))
        except (OSError, ValueError, TypeError) as exc:
            _logger.warning("Failed to save cache to storage: %s", exc)
