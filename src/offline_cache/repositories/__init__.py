"""Repository layer for data access.

This layer abstracts external dependencies (Redis, the network) behind
protocol-based interfaces. This enables:
- Easy swapping of implementations (Redis → memory, real network → mock transport)
- Unit testing without a Redis server or network access
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from offline_cache.protocols import CacheStorage, CacheStore, Fetcher

from .httpx_fetcher import HttpxFetcher
from .memory_repository import MemoryCacheStorage, MemoryCacheStore
from .redis_repository import RedisCacheStorage, RedisCacheStore

__all__ = [
    "CacheStorage",
    "CacheStore",
    "Fetcher",
    "HttpxFetcher",
    "MemoryCacheStorage",
    "MemoryCacheStore",
    "RedisCacheStorage",
    "RedisCacheStore",
]
