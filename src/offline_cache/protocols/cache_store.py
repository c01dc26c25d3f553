"""Cache storage protocols.

Defines the capability the cache engine needs from persistent storage:
open a named store, get/put/delete entries keyed by request identity,
and enumerate store names.

Implementations can include:
- Redis (default, persistent)
- In-process memory (tests, single-process development)
- Any other key-value backend
"""

from typing import Protocol, runtime_checkable

from offline_cache.entities import CachedResponse


@runtime_checkable
class CacheStore(Protocol):
    """Protocol for a single named cache store (one namespace).

    Any type that implements these methods satisfies the protocol,
    no explicit inheritance needed.

    Example:
        ```python
        store: CacheStore = await storage.open("offline-cache-static-v1.0.2")
        await store.put(request.key, response)
        cached = await store.match(request.key)
        ```
    """

    @property
    def name(self) -> str:
        """Return the namespace name this store is bound to."""
        ...

    async def match(self, key: str) -> CachedResponse | None:
        """Look up an entry.

        Args:
            key: Request identity (``RequestDescriptor.key``)

        Returns:
            The stored response, or None on a cache miss
        """
        ...

    async def put(self, key: str, response: CachedResponse) -> None:
        """Store (or overwrite) an entry. Last write wins.

        Args:
            key: Request identity
            response: Response snapshot to store
        """
        ...

    async def delete(self, key: str) -> bool:
        """Delete an entry.

        Returns:
            True if deleted, False if it did not exist
        """
        ...

    async def keys(self) -> list[str]:
        """List all entry keys in this store."""
        ...

    async def count(self) -> int:
        """Count entries in this store."""
        ...


@runtime_checkable
class CacheStorage(Protocol):
    """Protocol for the collection of named stores."""

    async def open(self, name: str) -> CacheStore:
        """Open a store, creating it if absent.

        Args:
            name: Namespace name

        Returns:
            A handle to the store
        """
        ...

    async def delete(self, name: str) -> bool:
        """Delete a store and every entry in it.

        Returns:
            True if the store existed, False otherwise
        """
        ...

    async def names(self) -> list[str]:
        """Enumerate existing store names."""
        ...

    async def health_check(self) -> bool:
        """Check if the storage backend is accessible."""
        ...

    async def close(self) -> None:
        """Release connections held by the backend."""
        ...
