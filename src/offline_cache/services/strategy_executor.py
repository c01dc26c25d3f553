"""Caching strategies.

Every request classification maps to exactly one strategy and one cache
role. The executor never creates or deletes namespaces; it only reads and
writes entries in the store the NamespaceManager hands it.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from offline_cache.config import settings
from offline_cache.entities import (
    CachedResponse,
    CacheRole,
    RequestClassification,
    RequestDescriptor,
    Strategy,
)
from offline_cache.errors import AssetFetchFailure, NetworkUnavailable
from offline_cache.protocols import CacheStore, Fetcher

from .background import BackgroundTasks
from .namespace_manager import NamespaceManager
from .offline_detector import OfflineDetector

logger = logging.getLogger(__name__)

OFFLINE_PAGE_HTML = """<!DOCTYPE html>
<html>
<head>
  <title>You're Offline</title>
  <style>
    body {
      font-family: Arial, sans-serif;
      text-align: center;
      padding: 50px;
      background: #1c1c1c;
      color: white;
    }
  </style>
</head>
<body>
  <h1>You're Offline</h1>
  <p>Please check your internet connection and try again.</p>
  <button onclick="window.location.href='/'">Try Again</button>
</body>
</html>
"""


@dataclass(frozen=True)
class StrategyRoute:
    """Which strategy handles a classification, and against which store."""

    classification: RequestClassification
    strategy: Strategy
    role: CacheRole


ROUTES: dict[RequestClassification, StrategyRoute] = {
    RequestClassification.IMAGE: StrategyRoute(
        RequestClassification.IMAGE, Strategy.STALE_WHILE_REVALIDATE, CacheRole.IMAGES
    ),
    RequestClassification.API: StrategyRoute(
        RequestClassification.API, Strategy.NETWORK_FIRST, CacheRole.API
    ),
    RequestClassification.STATIC_ASSET: StrategyRoute(
        RequestClassification.STATIC_ASSET, Strategy.CACHE_FIRST, CacheRole.STATIC
    ),
    RequestClassification.HTML: StrategyRoute(
        RequestClassification.HTML, Strategy.NETWORK_FIRST_OFFLINE_FALLBACK, CacheRole.STATIC
    ),
    # Read-only: only consulted for the offline page
    RequestClassification.OTHER: StrategyRoute(
        RequestClassification.OTHER, Strategy.PASS_THROUGH_OFFLINE_FALLBACK, CacheRole.STATIC
    ),
}

StrategyHandler = Callable[[RequestDescriptor, CacheStore], Awaitable[CachedResponse]]


class StrategyExecutor:
    """Runs the caching strategy for a classified request.

    Example:
        ```python
        executor = StrategyExecutor(
            namespaces=NamespaceManager(storage),
            fetcher=HttpxFetcher.create(),
            offline_detector=OfflineDetector(probe),
        )
        response = await executor.execute(request, RequestClassification.API)
        ```
    """

    def __init__(
        self,
        namespaces: NamespaceManager,
        fetcher: Fetcher,
        offline_detector: OfflineDetector,
        background: BackgroundTasks | None = None,
        origin: str | None = None,
        offline_page_path: str | None = None,
    ) -> None:
        """Initialize the strategy executor.

        Args:
            namespaces: Source of the per-role stores (required).
            fetcher: Network access (required).
            offline_detector: Used only on the offline-fallback paths (required).
            background: Runner for detached revalidation. Defaults to a new one.
            origin: Origin the offline page is resolved against. Defaults to settings.
            offline_page_path: Path of the cached offline page. Defaults to settings.
        """
        self._namespaces = namespaces
        self._fetcher = fetcher
        self._detector = offline_detector
        self._background = background or BackgroundTasks()

        origin = (origin or settings.origin).rstrip("/")
        offline_page = RequestDescriptor.get(origin + (offline_page_path or settings.offline_page_path))
        self._offline_page_key = offline_page.key

        self._handlers: dict[Strategy, StrategyHandler] = {
            Strategy.CACHE_FIRST: self.cache_first,
            Strategy.NETWORK_FIRST: self.network_first,
            Strategy.STALE_WHILE_REVALIDATE: self.stale_while_revalidate,
            Strategy.NETWORK_FIRST_OFFLINE_FALLBACK: self.network_first_with_offline_fallback,
            Strategy.PASS_THROUGH_OFFLINE_FALLBACK: self.pass_through_with_offline_fallback,
        }

    @property
    def background(self) -> BackgroundTasks:
        return self._background

    @property
    def offline_page_key(self) -> str:
        return self._offline_page_key

    @staticmethod
    def route(classification: RequestClassification) -> StrategyRoute:
        return ROUTES[RequestClassification(classification)]

    async def execute(
        self,
        request: RequestDescriptor,
        classification: RequestClassification,
    ) -> CachedResponse:
        """Serve ``request`` with the strategy its classification routes to.

        Raises:
            AssetFetchFailure: Cache-first miss and the network failed
            NetworkUnavailable: Network failed and no fallback was available
        """
        route = self.route(classification)
        store = await self._namespaces.open(route.role)
        logger.debug("Handling %s as %s via %s", request.url, classification.value, route.strategy.value)
        return await self._handlers[route.strategy](request, store)

    async def cache_first(self, request: RequestDescriptor, store: CacheStore) -> CachedResponse:
        cached = await store.match(request.key)
        if cached is not None:
            return cached

        try:
            response = await self._fetcher.fetch(request)
        except NetworkUnavailable as e:
            logger.info("Static asset fetch failed: %s", request.url)
            raise AssetFetchFailure(f"Static asset fetch failed: {e.message}", url=request.url) from e

        if response.ok:
            await store.put(request.key, response)
        return response

    async def network_first(self, request: RequestDescriptor, store: CacheStore) -> CachedResponse:
        try:
            response = await self._fetcher.fetch(request)
        except NetworkUnavailable:
            cached = await store.match(request.key)
            if cached is not None:
                return cached
            raise

        if response.ok:
            await store.put(request.key, response)
        return response

    async def stale_while_revalidate(
        self,
        request: RequestDescriptor,
        store: CacheStore,
        role: CacheRole = CacheRole.IMAGES,
    ) -> CachedResponse:
        cached = await store.match(request.key)
        if cached is not None:
            self._background.submit(
                self._revalidate(request, role),
                name=f"revalidate {request.url}",
            )
            return cached

        try:
            response = await self._fetcher.fetch(request)
        except NetworkUnavailable as e:
            logger.info("Image fetch failed: %s (%s)", request.url, e.message)
            return CachedResponse.empty(404)

        if response.ok:
            await store.put(request.key, response)
        return response

    async def _revalidate(self, request: RequestDescriptor, role: CacheRole) -> None:
        try:
            response = await self._fetcher.fetch(request)
        except NetworkUnavailable as e:
            logger.debug("Background update skipped for %s: %s", request.url, e.message)
            return

        if response.ok:
            # Namespaces may have been cleared since the cached copy was served
            store = await self._namespaces.open(role)
            await store.put(request.key, response)

    async def network_first_with_offline_fallback(
        self,
        request: RequestDescriptor,
        store: CacheStore,
    ) -> CachedResponse:
        try:
            response = await self._fetcher.fetch(request)
        except NetworkUnavailable as e:
            logger.info("Network request failed, checking network status: %s", request.url)
            return await self._offline_fallback(request, store, e)

        if response.ok:
            await store.put(request.key, response)
        return response

    async def pass_through_with_offline_fallback(
        self,
        request: RequestDescriptor,
        store: CacheStore,
    ) -> CachedResponse:
        try:
            return await self._fetcher.fetch(request)
        except NetworkUnavailable as e:
            logger.info("Request failed: %s", request.url)
            if not request.is_document_like:
                raise
            return await self._offline_fallback(request, store, e)

    async def _offline_fallback(
        self,
        request: RequestDescriptor,
        store: CacheStore,
        error: NetworkUnavailable,
    ) -> CachedResponse:
        offline = await self._detector.is_offline()

        if offline:
            offline_page = await store.match(self._offline_page_key)
            if offline_page is not None:
                logger.info("Serving offline page for: %s", request.url)
                return offline_page

        cached = await store.match(request.key)
        if cached is not None:
            logger.info("Serving cached version: %s", request.url)
            return cached

        if offline:
            return CachedResponse.html(OFFLINE_PAGE_HTML)

        raise error
