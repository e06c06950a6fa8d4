"""
Bounded least-recently-used cache with per-entry expiry.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar


T = TypeVar("T")

DEFAULT_MAX_SIZE = 100
DEFAULT_MAX_AGE_MS = 5 * 60 * 1000


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class _CacheEntry(Generic[T]):
    value: T
    inserted_at_ms: int


class LRUCache(Generic[T]):
    """
    Entries are kept in recency order, least recently used first.

    Expired entries are dropped lazily when read; a full cache evicts its
    least recently used entry whatever its age.
    """

    def __init__(
        self,
        max_size: int = DEFAULT_MAX_SIZE,
        max_age_ms: int = DEFAULT_MAX_AGE_MS,
        clock: Callable[[], int] | None = None,
    ):
        self.max_size = max(1, int(max_size))
        self.max_age_ms = max_age_ms
        self._clock = clock or _now_ms
        self._entries: OrderedDict[str, _CacheEntry[T]] = OrderedDict()

    def get(self, key: str) -> T | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.inserted_at_ms > self.max_age_ms:
            del self._entries[key]
            return None
        self._entries.move_to_end(key)
        return entry.value

    def set(self, key: str, value: T) -> None:
        if key in self._entries:
            del self._entries[key]
        elif len(self._entries) >= self.max_size:
            self._entries.popitem(last=False)
        self._entries[key] = _CacheEntry(value=value, inserted_at_ms=self._clock())

    def clear(self) -> None:
        self._entries.clear()

    @property
    def size(self) -> int:
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
