"""Small least-recently-used cache of path lookups."""

from __future__ import annotations

from collections import OrderedDict
from typing import Any, Hashable

MAX_CACHE_SIZE = 5


class LRUCache:
    """Mapping that keeps at most `capacity` entries, dropping the oldest."""

    def __init__(self, capacity: int = MAX_CACHE_SIZE) -> None:
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._entries: OrderedDict[Hashable, Any] = OrderedDict()

    def get(self, key):
        """Return the cached value and mark it most recently used."""
        value = self._entries[key]
        self._entries.move_to_end(key)
        return value

    def put(self, key, value) -> None:
        """Store a value, evicting the least recently used entry if full."""
        self._entries.pop(key, None)
        self._entries[key] = value
        if len(self._entries) > self.capacity:
            self._entries.popitem(last=False)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key) -> bool:
        return key in self._entries