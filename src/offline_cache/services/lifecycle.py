"""Lifecycle and control surface.

Business logic:
1. ``install()`` warms the static namespace with the asset manifest
2. ``activate()`` removes namespaces left behind by older versions
3. ``handle_fetch()`` classifies and serves requests (only once activated)
4. ``background_sync()`` and ``handle_command()`` serve the host's events
"""

import asyncio
import logging

from offline_cache.config import Settings, settings
from offline_cache.entities import (
    AssetManifest,
    CachedResponse,
    CacheRole,
    Command,
    CommandResult,
    CommandType,
    LifecycleState,
    RequestDescriptor,
)
from offline_cache.errors import AssetFetchFailure, LifecycleError, NetworkUnavailable
from offline_cache.protocols import CacheStorage, CacheStore, Fetcher, ReachabilityProbe

from .background import BackgroundTasks
from .classifier import RequestClassifier
from .namespace_manager import NamespaceManager
from .offline_detector import FetchReachabilityProbe, OfflineDetector
from .strategy_executor import StrategyExecutor

logger = logging.getLogger(__name__)

SYNC_TAG = "background-sync"


class LifecycleService:
    """Orchestrates install, activation, request handling and commands.

    This service depends on PROTOCOLS, not concrete implementations:
    - CacheStorage: can be Redis, in-memory, etc.
    - Fetcher: can be httpx with a real or a mock transport
    - ReachabilityProbe: can be the favicon probe or a test double

    Example:
        ```python
        service = LifecycleService.create(
            storage=RedisCacheStorage.create(),
            fetcher=HttpxFetcher.create(),
        )
        await service.install()
        await service.activate()
        response = await service.handle_fetch(request)
        ```
    """

    def __init__(
        self,
        namespaces: NamespaceManager,
        fetcher: Fetcher,
        executor: StrategyExecutor,
        classifier: RequestClassifier | None = None,
        manifest: AssetManifest | None = None,
        origin: str | None = None,
    ) -> None:
        """Initialize the lifecycle service.

        Args:
            namespaces: Namespace manager (required).
            fetcher: Network access for warm-up, refresh and preload (required).
            executor: Strategy executor for request handling (required).
            classifier: Request classifier. Defaults to the standard rule table.
            manifest: Assets to preload. Defaults to the built-in manifest.
            origin: Origin local manifest paths resolve against. Defaults to settings.
        """
        self._namespaces = namespaces
        self._fetcher = fetcher
        self._executor = executor
        self._classifier = classifier or RequestClassifier()
        self._manifest = manifest or AssetManifest()
        self._origin = (origin or settings.origin).rstrip("/")
        self._state = LifecycleState.NEW
        self._skip_waiting = False

    @classmethod
    def create(
        cls,
        storage: CacheStorage,
        fetcher: Fetcher,
        probe: ReachabilityProbe | None = None,
        manifest: AssetManifest | None = None,
        config: Settings | None = None,
    ) -> "LifecycleService":
        """Factory method wiring every layer from settings.

        Args:
            storage: Cache storage backend (required).
            fetcher: Network access (required).
            probe: Reachability probe. Defaults to a favicon probe over ``fetcher``.
            manifest: Assets to preload. Defaults to the built-in manifest.
            config: Settings to read names and paths from. Defaults to global settings.

        Returns:
            Configured LifecycleService
        """
        config = config or settings
        namespaces = NamespaceManager(
            storage,
            prefix=config.cache_prefix,
            version=config.cache_version,
        )
        probe = probe or FetchReachabilityProbe(
            fetcher,
            origin=config.origin,
            path=config.probe_path,
            timeout=config.probe_timeout,
        )
        executor = StrategyExecutor(
            namespaces=namespaces,
            fetcher=fetcher,
            offline_detector=OfflineDetector(probe),
            origin=config.origin,
            offline_page_path=config.offline_page_path,
        )
        return cls(
            namespaces=namespaces,
            fetcher=fetcher,
            executor=executor,
            manifest=manifest,
            origin=config.origin,
        )

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state is LifecycleState.ACTIVATED

    @property
    def skip_waiting_requested(self) -> bool:
        return self._skip_waiting

    @property
    def namespaces(self) -> NamespaceManager:
        """Get the namespace manager (for testing)."""
        return self._namespaces

    @property
    def executor(self) -> StrategyExecutor:
        """Get the strategy executor (for testing)."""
        return self._executor

    @property
    def manifest_urls(self) -> list[str]:
        return self._manifest.resolve(self._origin)

    def resolve(self, url: str) -> str:
        """Resolve a relative URL against the origin."""
        if url.startswith(("http://", "https://")):
            return url
        return f"{self._origin}/{url.lstrip('/')}"

    async def install(self) -> None:
        """Warm the static namespace with the whole manifest as one batch.

        Either every manifest entry is fetched successfully and stored, or
        nothing is stored and the install fails.

        Raises:
            AssetFetchFailure: If any manifest entry could not be fetched
        """
        self._state = LifecycleState.INSTALLING
        logger.info("Installing, caching %d manifest assets", len(self._manifest))

        store = await self._namespaces.open(CacheRole.STATIC)
        urls = self.manifest_urls
        results = await asyncio.gather(
            *(self._fetch_asset(url) for url in urls),
            return_exceptions=True,
        )

        for result in results:
            if isinstance(result, BaseException):
                self._state = LifecycleState.NEW
                logger.error("Install failed: %s", result)
                raise result

        for url, response in zip(urls, results):
            await store.put(RequestDescriptor.get(url).key, response)

        self._state = LifecycleState.INSTALLED
        self._skip_waiting = True
        logger.info("Installed successfully")

    async def _fetch_asset(self, url: str) -> CachedResponse:
        try:
            response = await self._fetcher.fetch(RequestDescriptor.get(url))
        except NetworkUnavailable as e:
            raise AssetFetchFailure(f"Failed to fetch {url}: {e.message}", url=url) from e

        if not response.ok:
            raise AssetFetchFailure(
                f"Failed to fetch {url}: HTTP {response.status}",
                url=url,
                status_code=response.status,
            )
        return response

    async def activate(self) -> list[str]:
        """Delete stale namespaces, open one per role, then start accepting requests.

        Returns:
            Names of the namespaces that were deleted

        Raises:
            LifecycleError: If install has not completed
        """
        if self._state is not LifecycleState.INSTALLED:
            raise LifecycleError(
                "Cannot activate before install completes",
                context={"state": self._state.value},
            )

        self._state = LifecycleState.ACTIVATING
        logger.info("Activating version %s", self._namespaces.version)
        deleted = await self._namespaces.reconcile()
        for role in CacheRole:
            await self._namespaces.open(role)
        self._state = LifecycleState.ACTIVATED
        logger.info("Activated, removed %d stale caches", len(deleted))
        return deleted

    async def handle_fetch(self, request: RequestDescriptor) -> CachedResponse | None:
        """Serve an intercepted request.

        Args:
            request: The intercepted request

        Returns:
            The response, or None when the request is declined and should be
            passed through unmodified by the caller

        Raises:
            LifecycleError: If an eligible request arrives before activation
            AssetFetchFailure: Static asset miss and network failure
            NetworkUnavailable: Network failure with no fallback available
        """
        if not self._classifier.is_eligible(request):
            return None

        if not self.is_active:
            raise LifecycleError(
                "Requests cannot be served before activation",
                context={"state": self._state.value},
            )

        classification = self._classifier.classify(request)
        return await self._executor.execute(request, classification)

    async def background_sync(self, tag: str) -> list[str] | None:
        """Handle a background sync event.

        Returns:
            Refreshed URLs, or None if the tag is not ours
        """
        if tag != SYNC_TAG:
            logger.debug("Ignoring sync tag %s", tag)
            return None
        return await self.update_caches()

    async def update_caches(self) -> list[str]:
        """Re-fetch every manifest entry and overwrite its cache entry.

        Failures are logged and skipped, never retried within the same run.

        Returns:
            URLs whose entries were refreshed
        """
        logger.info("Background cache update started")
        store = await self._namespaces.open(CacheRole.STATIC)

        refreshed = []
        for url in self.manifest_urls:
            try:
                response = await self._fetcher.fetch(RequestDescriptor.get(url))
                if not response.ok:
                    logger.info("Skipping asset %s: HTTP %d", url, response.status)
                    continue
                await store.put(RequestDescriptor.get(url).key, response)
            except Exception as e:
                logger.warning("Failed to update asset %s: %s", url, e)
                continue
            refreshed.append(url)

        logger.info("Background cache update completed (%d/%d)", len(refreshed), len(self._manifest))
        return refreshed

    async def handle_command(self, command: Command) -> CommandResult:
        """Process a control channel command.

        Args:
            command: The command to run

        Returns:
            CommandResult with command-specific details
        """
        if command.type is CommandType.SKIP_WAITING:
            self._skip_waiting = True
            return CommandResult(type=command.type, details={"state": self._state.value})

        if command.type is CommandType.CLEAR_CACHE:
            deleted = await self.clear_all_caches()
            return CommandResult(type=command.type, details={"deleted_count": deleted})

        if command.type is CommandType.PRELOAD_IMAGES:
            stored = await self.preload_images(command.urls)
            return CommandResult(
                type=command.type,
                details={"requested": len(command.urls), "stored": stored},
            )

        raise ValueError(f"Unknown command type: {command.type}")

    async def clear_all_caches(self) -> int:
        return await self._namespaces.clear_all()

    async def preload_images(self, urls: tuple[str, ...] | list[str]) -> list[str]:
        """Fetch each URL into the images namespace.

        Every URL is independent: a failure is logged and never aborts the batch.

        Returns:
            URLs that were stored
        """
        store = await self._namespaces.open(CacheRole.IMAGES)
        results = await asyncio.gather(*(self._preload_one(store, url) for url in urls))
        logger.info("Image preloading completed")
        return [url for url, stored in zip(urls, results) if stored]

    async def _preload_one(self, store: CacheStore, url: str) -> bool:
        request = RequestDescriptor.get(self.resolve(url))
        try:
            response = await self._fetcher.fetch(request)
            if not response.ok:
                logger.info("Skipping image %s: HTTP %d", url, response.status)
                return False
            await store.put(request.key, response)
        except Exception as e:
            logger.warning("Failed to preload image %s: %s", url, e)
            return False
        return True

    async def shutdown(self) -> None:
        """Wait for pending background work and retire this instance."""
        await self._executor.background.drain()
        self._state = LifecycleState.REDUNDANT
