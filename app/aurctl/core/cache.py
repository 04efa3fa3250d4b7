"""Search result cache.

Stores the candidates found for a query in one JSON file, keyed by the
query string. Entries older than the TTL are ignored and pruned on the
next write. An unreadable or corrupt file behaves like an empty cache.
"""

import json
import logging
import os
import tempfile
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

from aurctl.models.package import PackageCandidate

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600


class SearchCache:
    """Time-limited cache of source lookups persisted as JSON.

    Example:
        >>> cache = SearchCache(get_search_cache_path())
        >>> cache.set("firefox", candidates)
        >>> cache.get("firefox")
    """

    def __init__(
        self,
        path: Path,
        ttl: int = DEFAULT_TTL_SECONDS,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the cache.

        Args:
            path: JSON file backing the cache.
            ttl: Entry lifetime in seconds.
            clock: Wall clock in seconds (injectable for tests).
        """
        self.path = path
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, dict[str, Any]] = self._load()

    def get(self, key: str) -> list[PackageCandidate] | None:
        """Return cached candidates for ``key`` if the entry is still fresh."""
        entry = self._entries.get(key)
        if entry is None or self._is_expired(entry):
            return None

        try:
            return [PackageCandidate.from_dict(item) for item in entry["candidates"]]
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Ignoring malformed cache entry for %r: %s", key, e)
            return None

    def set(self, key: str, candidates: list[PackageCandidate]) -> None:
        """Store candidates for ``key`` and persist the cache.

        Raises:
            OSError: If the cache file cannot be written.
        """
        self.clear_expired()
        self._entries[key] = {
            "timestamp": int(self._clock()),
            "candidates": [candidate.to_dict() for candidate in candidates],
        }
        self._save()

    def clear_expired(self) -> int:
        """Drop expired entries from memory.

        Returns:
            Number of entries removed.
        """
        expired = [key for key, entry in self._entries.items() if self._is_expired(entry)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def clear(self) -> None:
        """Remove every entry and delete the cache file."""
        self._entries = {}
        self.path.unlink(missing_ok=True)

    def __len__(self) -> int:
        return len(self._entries)

    def _is_expired(self, entry: dict[str, Any]) -> bool:
        timestamp = entry.get("timestamp")
        if not isinstance(timestamp, int | float):
            return True
        return self._clock() - timestamp >= self.ttl

    def _load(self) -> dict[str, dict[str, Any]]:
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning("Search cache %s is unreadable, starting empty: %s", self.path, e)
            return {}

        if not isinstance(data, dict):
            logger.warning("Search cache %s has unexpected format, starting empty", self.path)
            return {}
        return {key: entry for key, entry in data.items() if isinstance(entry, dict)}

    def _save(self) -> None:
        """Write the cache atomically via a temporary file."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path: str | None = None
        try:
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=".search_cache_",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_path = tmp.name
                json.dump(self._entries, tmp)
            os.replace(tmp_path, self.path)
            tmp_path = None
        finally:
            if tmp_path is not None:
                Path(tmp_path).unlink(missing_ok=True)
