"""In-memory implementation of CacheStorage.

Entries live in process-local dictionaries and disappear with the process.
Used by the test suite and for single-process development
(``STORAGE_BACKEND=memory``).
"""

import dataclasses
import time

from offline_cache.entities import CachedResponse


class MemoryCacheStore:
    """Dictionary-backed store satisfying the CacheStore protocol."""

    def __init__(self, name: str) -> None:
        self._name = name
        self._entries: dict[str, CachedResponse] = {}

    @property
    def name(self) -> str:
        return self._name

    async def match(self, key: str) -> CachedResponse | None:
        return self._entries.get(key)

    async def put(self, key: str, response: CachedResponse) -> None:
        self._entries[key] = dataclasses.replace(response, stored_at=time.time())

    async def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    async def keys(self) -> list[str]:
        return list(self._entries)

    async def count(self) -> int:
        return len(self._entries)


class MemoryCacheStorage:
    """Collection of MemoryCacheStore instances keyed by namespace name.

    Satisfies the CacheStorage protocol. Opening the same name twice returns
    the same store object.
    """

    def __init__(self) -> None:
        self._stores: dict[str, MemoryCacheStore] = {}

    async def open(self, name: str) -> MemoryCacheStore:
        return self._stores.setdefault(name, MemoryCacheStore(name))

    async def delete(self, name: str) -> bool:
        return self._stores.pop(name, None) is not None

    async def names(self) -> list[str]:
        return list(self._stores)

    async def health_check(self) -> bool:
        return True

    async def close(self) -> None:
        return None
