"""Cache backends for scraped documents."""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

_logger = logging.getLogger(__name__)


class Cache(Protocol):
    """Key-value cache for text documents with a fixed TTL."""

    ttl_seconds: int

    def get(self, key: str) -> str | None:
        """Return a cached value if present and not expired."""

    def set(self, key: str, value: str) -> None:
        """Store a value under the key."""


@dataclass
class _CacheEntry:
    value: str
    stored_at: float


@dataclass
class InMemoryCache(Cache):
    """In-memory cache, mainly for tests."""

    ttl_seconds: int
    clock: Callable[[], float] = time.time
    _entries: dict[str, _CacheEntry] = field(default_factory=dict)

    def get(self, key: str) -> str | None:
        """Return a cached value if it hasn't expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self.clock() - entry.stored_at > self.ttl_seconds:
            self._entries.pop(key, None)
            return None
        return entry.value

    def set(self, key: str, value: str) -> None:
        """Store a cached value."""
        self._entries[key] = _CacheEntry(value=value, stored_at=self.clock())


@dataclass
class DiskCache(Cache):
    """File-per-key cache; freshness comes from the file modification time.

    I/O errors never escape: a failed read is a miss and a failed write is
    logged and dropped.
    """

    directory: Path
    ttl_seconds: int

    def get(self, key: str) -> str | None:
        """Return the file contents if the file is younger than the TTL."""
        path = self.directory / key
        try:
            age = time.time() - path.stat().st_mtime
            if age > self.ttl_seconds:
                return None
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            _logger.warning("Cache read failed for %s: %s", path, exc)
            return None

    def set(self, key: str, value: str) -> None:
        """Write the value to its file, creating the directory if needed."""
        path = self.directory / key
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            path.write_text(value, encoding="utf-8")
        except OSError as exc:
            _logger.warning("Cache write failed for %s: %s", path, exc)
