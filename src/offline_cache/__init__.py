"""Offline Cache - Offline-first caching proxy with per-request cache strategies.

This package provides a layered architecture for offline caching:

Layers:
    - protocols: Interface contracts (CacheStorage, CacheStore, Fetcher, ReachabilityProbe)
    - repositories: Storage and network implementations
    - services: Classification, strategies, namespaces, lifecycle
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from offline_cache.repositories import HttpxFetcher, RedisCacheStorage
    from offline_cache.services import LifecycleService

    service = LifecycleService.create(
        storage=RedisCacheStorage.create(),
        fetcher=HttpxFetcher.create(),
    )
    await service.install()
    await service.activate()
    ```

For HTTP API:
    ```python
    from offline_cache.api.app import app
    ```
"""

from offline_cache.config import configure_logging, get_redis_client, settings
from offline_cache.dto import CommandRequest
from offline_cache.entities import (
    AssetManifest,
    CachedResponse,
    Command,
    CommandType,
    RequestClassification,
    RequestDescriptor,
)
from offline_cache.errors import (
    AssetFetchFailure,
    LifecycleError,
    NetworkUnavailable,
    OfflineCacheError,
)
from offline_cache.handlers import ProxyHandler
from offline_cache.protocols import CacheStorage, CacheStore, Fetcher, ReachabilityProbe
from offline_cache.repositories import HttpxFetcher, MemoryCacheStorage, RedisCacheStorage
from offline_cache.services import (
    LifecycleService,
    NamespaceManager,
    OfflineDetector,
    RequestClassifier,
    StrategyExecutor,
    classify,
)

__all__ = [
    # Configuration
    "settings",
    "get_redis_client",
    "configure_logging",
    # Protocols (interfaces)
    "CacheStorage",
    "CacheStore",
    "Fetcher",
    "ReachabilityProbe",
    # Services (business logic)
    "LifecycleService",
    "NamespaceManager",
    "OfflineDetector",
    "RequestClassifier",
    "StrategyExecutor",
    "classify",
    # Handlers (HTTP)
    "ProxyHandler",
    # Repositories (data access)
    "HttpxFetcher",
    "MemoryCacheStorage",
    "RedisCacheStorage",
    # Entities (domain models)
    "AssetManifest",
    "CachedResponse",
    "Command",
    "CommandType",
    "RequestClassification",
    "RequestDescriptor",
    # Errors
    "OfflineCacheError",
    "NetworkUnavailable",
    "AssetFetchFailure",
    "LifecycleError",
    # DTOs (API contracts)
    "CommandRequest",
]
