"""Small TTL cache used for read-mostly listings."""
from __future__ import annotations

from typing import Callable, Generic, Hashable, Optional, TypeVar

from cachetools import TTLCache

T = TypeVar("T")


class SimpleTTLCache(Generic[T]):
    def __init__(self, ttl: int, maxsize: int = 128) -> None:
        self._entries: TTLCache[Hashable, T] = TTLCache(maxsize=maxsize, ttl=ttl)

    def get(self, key: Hashable) -> Optional[T]:
        return self._entries.get(key)

    def get_or_load(self, key: Hashable, loader: Callable[[], T]) -> T:
        """Return the cached value for ``key``, calling ``loader`` on a miss."""
        cached = self._entries.get(key)
        if cached is not None:
            return cached
        value = loader()
        self._entries[key] = value
        return value

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
