"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Collaborators preset on app.state (by create_app) override the defaults
"""

from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from offline_cache.config import Settings, configure_logging, settings
from offline_cache.handlers import ProxyHandler
from offline_cache.protocols import CacheStorage
from offline_cache.repositories import HttpxFetcher, MemoryCacheStorage, RedisCacheStorage
from offline_cache.services import LifecycleService


def get_lifecycle(request: Request) -> LifecycleService:
    """Dependency injection for LifecycleService from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The LifecycleService instance from app.state

    Raises:
        RuntimeError: If service is not initialized
    """
    service = getattr(request.app.state, "lifecycle", None)
    if service is None:
        raise RuntimeError("LifecycleService not initialized. Check lifespan setup.")
    return service


def get_handler(request: Request) -> ProxyHandler:
    """Dependency injection for ProxyHandler from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The ProxyHandler instance from app.state

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "handler", None)
    if handler is None:
        raise RuntimeError("ProxyHandler not initialized. Check lifespan setup.")
    return handler


def build_storage(config: Settings) -> CacheStorage:
    """Create the storage backend selected by STORAGE_BACKEND."""
    if config.storage_backend == "memory":
        return MemoryCacheStorage()
    return RedisCacheStorage.create(config)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Initializes all layers and stores them in app.state, then runs the
    install and activate phases. No request is served before both complete;
    a failed install aborts startup.

    Args:
        app: The FastAPI application instance

    Yields:
        None

    Cleanup:
        Drains background work, closes the fetcher and the storage. The
        fetcher and the storage are closed even when startup fails.
    """
    config: Settings = getattr(app.state, "config", None) or settings
    configure_logging(config.log_level)

    storage = getattr(app.state, "storage", None) or build_storage(config)
    fetcher = getattr(app.state, "fetcher", None) or HttpxFetcher.create(timeout=config.fetch_timeout)

    lifecycle = LifecycleService.create(
        storage=storage,
        fetcher=fetcher,
        probe=getattr(app.state, "probe", None),
        manifest=getattr(app.state, "manifest", None),
        config=config,
    )
    handler = ProxyHandler(
        lifecycle=lifecycle,
        fetcher=fetcher,
        storage=storage,
        origin=config.origin,
    )

    # Store in app.state (FastAPI pattern)
    app.state.storage = storage
    app.state.fetcher = fetcher
    app.state.lifecycle = lifecycle
    app.state.handler = handler

    print(f"Origin: {config.origin}")
    print(f"Cache version: {config.cache_version} ({config.storage_backend})")

    try:
        await lifecycle.install()
        print("✓ Manifest cached")
        deleted = await lifecycle.activate()
        print(f"✓ Activated, removed {len(deleted)} old caches")

        yield

        await lifecycle.shutdown()
    finally:
        await fetcher.close()
        await storage.close()

        del app.state.handler
        del app.state.lifecycle
        print("✓ Offline cache shut down")


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[ProxyHandler, Depends(get_handler)]
LifecycleDep = Annotated[LifecycleService, Depends(get_lifecycle)]
