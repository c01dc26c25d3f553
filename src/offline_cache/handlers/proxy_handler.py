"""HTTP handlers for the proxy and its control surface.

Handlers convert between HTTP requests, DTOs (API contracts) and service
calls. They handle HTTP concerns like status codes and error mapping.
"""

import logging

from fastapi import HTTPException, Request, Response, status

from offline_cache.config import settings
from offline_cache.dto import (
    CacheStatsResponse,
    CommandRequest,
    CommandResponse,
    HealthCheckResponse,
    SyncResponse,
)
from offline_cache.entities import CachedResponse, Command, RequestDescriptor
from offline_cache.errors import AssetFetchFailure, LifecycleError, NetworkUnavailable
from offline_cache.protocols import CacheStorage, Fetcher
from offline_cache.services import LifecycleService

logger = logging.getLogger(__name__)


class ProxyHandler:
    """HTTP handlers for intercepted requests and control commands.

    This handler delegates business logic to LifecycleService
    and handles HTTP-specific concerns like:
    - Building request descriptors from inbound requests
    - Passing declined requests through unmodified
    - Mapping propagated network errors to gateway errors

    Example:
        ```python
        handler = ProxyHandler(lifecycle=service, fetcher=fetcher, storage=storage)

        @app.api_route("/{path:path}", methods=["GET", "POST"])
        async def proxy(request: Request) -> Response:
            return await handler.handle_fetch(request)
        ```
    """

    def __init__(
        self,
        lifecycle: LifecycleService,
        fetcher: Fetcher,
        storage: CacheStorage,
        origin: str | None = None,
    ) -> None:
        """Initialize the proxy handler.

        Args:
            lifecycle: The lifecycle service for business logic (required).
            fetcher: Used to pass declined requests through (required).
            storage: Storage backend, for health checks (required).
            origin: Upstream origin requests are mapped onto. Defaults to settings.
        """
        self._lifecycle = lifecycle
        self._fetcher = fetcher
        self._storage = storage
        self._origin = (origin or settings.origin).rstrip("/")

    def build_descriptor(self, request: Request, body: bytes = b"") -> RequestDescriptor:
        """Map an inbound request onto the upstream origin."""
        url = self._origin + request.url.path
        if request.url.query:
            url = f"{url}?{request.url.query}"

        headers = {name.lower(): value for name, value in request.headers.items()}
        return RequestDescriptor(
            url=url,
            method=request.method,
            destination=headers.get("sec-fetch-dest", ""),
            headers=headers,
            body=body,
        )

    async def handle_fetch(self, request: Request) -> Response:
        """Handle any request to the proxied origin.

        Raises:
            HTTPException: 503 before activation, 502 when the network failed
                and no cached fallback exists
        """
        descriptor = self.build_descriptor(request, await request.body())

        try:
            result = await self._lifecycle.handle_fetch(descriptor)
            if result is None:
                result = await self._fetcher.fetch(descriptor)
        except LifecycleError as e:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=e.message,
            ) from e
        except (NetworkUnavailable, AssetFetchFailure) as e:
            logger.info("No fallback for %s %s: %s", descriptor.method, descriptor.url, e.message)
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=f"Upstream unavailable: {e.message}",
            ) from e

        return self.to_response(result)

    @staticmethod
    def to_response(result: CachedResponse) -> Response:
        """Build the outbound response, one header line per stored pair."""
        response = Response(content=result.body, status_code=result.status)
        for name, value in result.headers:
            response.headers.append(name, value)
        return response

    async def handle_command(self, request: CommandRequest) -> CommandResponse:
        """Handle POST /_offline/commands requests."""
        result = await self._lifecycle.handle_command(
            Command(type=request.type, urls=tuple(request.urls))
        )
        return CommandResponse(
            type=result.type.value,
            acknowledged=result.acknowledged,
            details=result.details,
        )

    async def background_sync(self, tag: str) -> SyncResponse:
        """Handle POST /_offline/sync/{tag} requests."""
        refreshed = await self._lifecycle.background_sync(tag)
        return SyncResponse(
            tag=tag,
            triggered=refreshed is not None,
            refreshed=refreshed or [],
        )

    async def get_stats(self) -> CacheStatsResponse:
        """Handle GET /_offline/stats requests.

        Raises:
            HTTPException: If the storage backend cannot be read
        """
        try:
            stats = await self._lifecycle.namespaces.stats()
        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to get stats: {e}",
            ) from e
        return CacheStatsResponse(**stats)

    async def health_check(self) -> HealthCheckResponse:
        """Handle GET /_offline/health requests."""
        storage_healthy = await self._storage.health_check()
        is_healthy = storage_healthy and self._lifecycle.is_active

        return HealthCheckResponse(
            status="healthy" if is_healthy else "unhealthy",
            storage_healthy=storage_healthy,
            lifecycle_state=self._lifecycle.state.value,
        )
