"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (Redis → memory, httpx → mock transport)
- Unit testing with fake implementations
- Clear separation of concerns

Usage:
    ```python
    from offline_cache.protocols import CacheStorage, Fetcher

    storage: CacheStorage = RedisCacheStorage.create()   # works
    storage: CacheStorage = MemoryCacheStorage()         # also works
    ```
"""

from .cache_store import CacheStorage, CacheStore
from .network import Fetcher, ReachabilityProbe

__all__ = [
    "CacheStorage",
    "CacheStore",
    "Fetcher",
    "ReachabilityProbe",
]
