#!/usr/bin/env python3
"""
Demo script for the offline cache.

Runs the cache engine against a simulated upstream (httpx.MockTransport)
and in-memory storage, then pulls the network plug to show how each
strategy degrades.
"""

import asyncio

import httpx

from offline_cache.config import Settings
from offline_cache.entities import AssetManifest, Command, CommandType, RequestDescriptor
from offline_cache.errors import OfflineCacheError
from offline_cache.repositories import HttpxFetcher, MemoryCacheStorage
from offline_cache.services import LifecycleService

ORIGIN = "http://localhost:8080"

MANIFEST = AssetManifest(
    local=("/", "/offline.html", "/assets/css/style.css", "/index.json", "/favicon.ico"),
    external=(),
)

PAGES = {
    "/": (b"<html>home</html>", "text/html"),
    "/offline.html": (b"<html>offline</html>", "text/html"),
    "/assets/css/style.css": (b"body { background: #1c1c1c; }", "text/css"),
    "/index.json": (b'{"games": ["retro-bowl"]}', "application/json"),
    "/favicon.ico": (b"ico", "image/x-icon"),
    "/assets/img/logo.png": (b"png-bytes", "image/png"),
    "/library.html": (b"<html>library</html>", "text/html"),
}


class Upstream:
    """Simulated origin that can be switched off."""

    def __init__(self) -> None:
        self.online = True

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if not self.online:
            raise httpx.ConnectError("network is down", request=request)
        body, content_type = PAGES.get(request.url.path, (b"not found", "text/plain"))
        status = 200 if request.url.path in PAGES else 404
        return httpx.Response(status, content=body, headers={"content-type": content_type})


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


async def show(service: LifecycleService, path: str, **kwargs) -> None:
    request = RequestDescriptor.get(f"{ORIGIN}{path}", **kwargs)
    try:
        response = await service.handle_fetch(request)
    except OfflineCacheError as e:
        print(f"  ✗ {path}: {e}")
        return
    print(f"  ✓ {path}: {response.status} {response.body[:40]!r}")


async def main() -> None:
    upstream = Upstream()
    fetcher = HttpxFetcher(client=httpx.AsyncClient(transport=httpx.MockTransport(upstream)))
    service = LifecycleService.create(
        storage=MemoryCacheStorage(),
        fetcher=fetcher,
        manifest=MANIFEST,
        config=Settings(origin_url=ORIGIN, storage_backend="memory"),
    )

    print_section("Install and activate")
    await service.install()
    deleted = await service.activate()
    stats = await service.namespaces.stats()
    print(f"  Namespaces: {stats['namespaces']}")
    print(f"  Removed old caches: {deleted}")

    print_section("Online")
    await show(service, "/library.html", headers={"accept": "text/html"})
    await show(service, "/assets/img/logo.png", destination="image")
    await show(service, "/index.json")

    print_section("Offline")
    upstream.online = False
    await show(service, "/assets/css/style.css")
    await show(service, "/assets/img/logo.png", destination="image")
    await show(service, "/index.json")
    await show(service, "/never-seen.html", headers={"accept": "text/html"})
    await show(service, "/api/leaderboard")

    print_section("Commands")
    result = await service.handle_command(Command(type=CommandType.CLEAR_CACHE))
    print(f"  CLEAR_CACHE: {result.details}")

    await service.shutdown()
    await fetcher.close()


if __name__ == "__main__":
    asyncio.run(main())
