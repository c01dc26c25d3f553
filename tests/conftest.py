"""
Shared fixtures: a scripted network behind httpx.MockTransport, in-memory
storage and a reachability probe that tests switch on and off.
"""

import asyncio

import httpx
import pytest

from offline_cache.config import Settings
from offline_cache.entities import AssetManifest, CachedResponse, Reachability
from offline_cache.repositories import HttpxFetcher, MemoryCacheStorage
from offline_cache.services import (
    LifecycleService,
    NamespaceManager,
    OfflineDetector,
    StrategyExecutor,
)

ORIGIN = "https://app.test"

TEST_MANIFEST = AssetManifest(
    local=("/", "/offline.html", "/assets/css/style.css", "/index.json"),
    external=("https://cdn.jsdelivr.net/npm/bootstrap@5.3.3/dist/css/bootstrap.min.css",),
)


class FakeNetwork:
    """Scripted upstream for httpx.MockTransport.

    Unknown URLs answer 404. When ``online`` is False, or a URL is listed in
    ``failing``, the request fails with a connect error.
    """

    def __init__(self) -> None:
        self.online = True
        self.routes: dict[str, httpx.Response] = {}
        self.failing: set[str] = set()
        self.gates: dict[str, asyncio.Event] = {}
        self.calls: list[tuple[str, str]] = []
        self.requests: list[httpx.Request] = []

    def add(
        self,
        url: str,
        body: bytes = b"ok",
        status: int = 200,
        content_type: str = "text/plain",
        headers: list[tuple[str, str]] | None = None,
    ) -> None:
        self.routes[url] = httpx.Response(
            status,
            content=body,
            headers=[("content-type", content_type), *(headers or [])],
        )

    def calls_to(self, url: str) -> int:
        return sum(1 for _, called in self.calls if called == url)

    async def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.calls.append((request.method, url))
        self.requests.append(request)

        gate = self.gates.get(url)
        if gate is not None:
            await gate.wait()

        if not self.online or url in self.failing:
            raise httpx.ConnectError("connection refused", request=request)

        route = self.routes.get(url)
        if route is None:
            return httpx.Response(404, content=b"not found")
        return httpx.Response(route.status_code, content=route.content, headers=route.headers)


class StaticProbe:
    """Reachability probe whose answer the test sets directly."""

    def __init__(self, reachability: Reachability = Reachability.REACHABLE) -> None:
        self.reachability = reachability
        self.calls = 0

    async def probe(self) -> Reachability:
        self.calls += 1
        return self.reachability


def snapshot(body: bytes, status: int = 200, content_type: str = "text/plain") -> CachedResponse:
    return CachedResponse(status=status, headers={"content-type": content_type}, body=body)


@pytest.fixture
def config():
    return Settings(
        origin_url=ORIGIN,
        storage_backend="memory",
        cache_prefix="test-cache",
        cache_version="v1",
    )


@pytest.fixture
def network():
    return FakeNetwork()


@pytest.fixture
def fetcher(network):
    client = httpx.AsyncClient(transport=httpx.MockTransport(network.handler))
    return HttpxFetcher(client=client, timeout=5.0)


@pytest.fixture
def storage():
    return MemoryCacheStorage()


@pytest.fixture
def probe():
    return StaticProbe()


@pytest.fixture
def namespaces(storage, config):
    return NamespaceManager(storage, prefix=config.cache_prefix, version=config.cache_version)


@pytest.fixture
def executor(namespaces, fetcher, probe, config):
    return StrategyExecutor(
        namespaces=namespaces,
        fetcher=fetcher,
        offline_detector=OfflineDetector(probe),
        origin=config.origin,
        offline_page_path=config.offline_page_path,
    )


@pytest.fixture
def lifecycle(storage, fetcher, probe, config):
    return LifecycleService.create(
        storage=storage,
        fetcher=fetcher,
        probe=probe,
        manifest=TEST_MANIFEST,
        config=config,
    )


@pytest.fixture
def manifest_network(network):
    """Network serving every TEST_MANIFEST entry."""
    for url in TEST_MANIFEST.resolve(ORIGIN):
        network.add(url, body=f"asset {url}".encode())
    return network
