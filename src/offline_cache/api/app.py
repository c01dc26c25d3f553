from fastapi import FastAPI, Request, Response

from offline_cache.api.dependencies import HandlerDep, lifespan
from offline_cache.config import Settings, settings
from offline_cache.dto import (
    CacheStatsResponse,
    CommandRequest,
    CommandResponse,
    HealthCheckResponse,
    SyncResponse,
)
from offline_cache.entities import AssetManifest
from offline_cache.protocols import CacheStorage, Fetcher, ReachabilityProbe

CONTROL_PREFIX = "/_offline"

PROXY_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def create_app(
    config: Settings | None = None,
    storage: CacheStorage | None = None,
    fetcher: Fetcher | None = None,
    probe: ReachabilityProbe | None = None,
    manifest: AssetManifest | None = None,
) -> FastAPI:
    """Create the proxy application.

    Any collaborator left as None is built from settings during lifespan.
    """
    app = FastAPI(
        title="Offline Cache Proxy",
        description="Offline-first caching proxy with per-request cache strategies",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.storage = storage
    app.state.fetcher = fetcher
    app.state.probe = probe
    app.state.manifest = manifest

    @app.post(f"{CONTROL_PREFIX}/commands", response_model=CommandResponse)
    async def send_command(request: CommandRequest, handler: HandlerDep) -> CommandResponse:
        """Run SKIP_WAITING, CLEAR_CACHE or PRELOAD_IMAGES."""
        return await handler.handle_command(request)

    @app.post(f"{CONTROL_PREFIX}/sync/{{tag}}", response_model=SyncResponse)
    async def background_sync(tag: str, handler: HandlerDep) -> SyncResponse:
        """Trigger a background sync; only "background-sync" refreshes the manifest."""
        return await handler.background_sync(tag)

    @app.get(f"{CONTROL_PREFIX}/stats", response_model=CacheStatsResponse)
    async def get_stats(handler: HandlerDep) -> CacheStatsResponse:
        """Get per-namespace entry counts."""
        return await handler.get_stats()

    @app.get(f"{CONTROL_PREFIX}/health", response_model=HealthCheckResponse)
    async def health(handler: HandlerDep) -> HealthCheckResponse:
        """Health check endpoint."""
        return await handler.health_check()

    @app.api_route("/{path:path}", methods=PROXY_METHODS, include_in_schema=False)
    async def proxy(request: Request, handler: HandlerDep) -> Response:
        """Serve any other request through the cache engine."""
        return await handler.handle_fetch(request)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "offline_cache.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
