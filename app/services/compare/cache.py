"""Bounded FIFO memoization of comparison results."""

from __future__ import annotations

import hashlib
import logging
from typing import Optional, Protocol

from app.config.settings import settings
from app.services.compare.schema import ComparisonResult

logger = logging.getLogger(__name__)


def comparison_cache_key(github_username: str, project1: str, project2: str) -> str:
    """SHA-256 of ``user-project1-project2``; names are not case-folded."""
    raw = f"{github_username}-{project1}-{project2}"
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


class ComparisonCache(Protocol):
    """Storage interface for memoized comparison results."""

    def get(self, key: str) -> Optional[ComparisonResult]: ...

    def put(self, key: str, value: ComparisonResult) -> None: ...

    def size(self) -> int: ...


class InMemoryComparisonCache:
    """Process-local cache evicting the oldest insertion once over capacity.

    Reads never change eviction order. Overwriting an existing key keeps
    its original insertion position. No locking: concurrent writers for
    the same key simply overwrite each other.
    """

    def __init__(self, capacity: int | None = None) -> None:
        self._capacity = capacity or settings.COMPARISON_CACHE_CAPACITY
        self._entries: dict[str, ComparisonResult] = {}
        self._insertions = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def insertions(self) -> int:
        """Total number of puts since creation."""
        return self._insertions

    def get(self, key: str) -> Optional[ComparisonResult]:
        return self._entries.get(key)

    def put(self, key: str, value: ComparisonResult) -> None:
        self._entries[key] = value
        self._insertions += 1

        if len(self._entries) > self._capacity:
            oldest = next(iter(self._entries))
            del self._entries[oldest]
            logger.debug(f"Evicted oldest comparison cache entry {oldest[:12]}")

    def size(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries
