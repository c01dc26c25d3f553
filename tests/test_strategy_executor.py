"""
Tests for the caching strategies.
"""

import asyncio

import pytest
from conftest import ORIGIN, snapshot

from offline_cache.entities import (
    CacheRole,
    Reachability,
    RequestClassification,
    RequestDescriptor,
    Strategy,
)
from offline_cache.errors import AssetFetchFailure, NetworkUnavailable
from offline_cache.services import ROUTES, StrategyExecutor

CSS_URL = f"{ORIGIN}/assets/css/style.css"
API_URL = f"{ORIGIN}/api/scores"
IMAGE_URL = f"{ORIGIN}/assets/img/logo.png"
PAGE_URL = f"{ORIGIN}/library.html"
OFFLINE_URL = f"{ORIGIN}/offline.html"


def html_request(url: str = PAGE_URL) -> RequestDescriptor:
    return RequestDescriptor.get(url, destination="document", headers={"accept": "text/html"})


# Routing


def test_every_classification_has_exactly_one_route():
    assert set(ROUTES) == set(RequestClassification)
    assert len({route.strategy for route in ROUTES.values()}) == len(ROUTES)


@pytest.mark.parametrize(
    "classification, strategy, role",
    [
        (RequestClassification.IMAGE, Strategy.STALE_WHILE_REVALIDATE, CacheRole.IMAGES),
        (RequestClassification.API, Strategy.NETWORK_FIRST, CacheRole.API),
        (RequestClassification.STATIC_ASSET, Strategy.CACHE_FIRST, CacheRole.STATIC),
        (RequestClassification.HTML, Strategy.NETWORK_FIRST_OFFLINE_FALLBACK, CacheRole.STATIC),
        (RequestClassification.OTHER, Strategy.PASS_THROUGH_OFFLINE_FALLBACK, CacheRole.STATIC),
    ],
)
def test_route(classification, strategy, role):
    route = StrategyExecutor.route(classification)
    assert route.strategy is strategy
    assert route.role is role


async def test_execute_runs_a_single_strategy(executor, network, monkeypatch):
    calls = []

    def recorder(strategy):
        async def handler(request, store):
            calls.append(strategy)
            return snapshot(b"")

        return handler

    for strategy in Strategy:
        monkeypatch.setitem(executor._handlers, strategy, recorder(strategy))

    for classification in RequestClassification:
        calls.clear()
        await executor.execute(RequestDescriptor.get(CSS_URL), classification)
        assert calls == [ROUTES[classification].strategy]
    assert network.calls == []


# Cache-first


async def test_cache_first_hit_skips_network(executor, namespaces, network):
    store = await namespaces.open(CacheRole.STATIC)
    request = RequestDescriptor.get(CSS_URL)
    await store.put(request.key, snapshot(b"body { }", content_type="text/css"))

    response = await executor.execute(request, RequestClassification.STATIC_ASSET)

    assert response.body == b"body { }"
    assert network.calls == []


async def test_cache_first_miss_stores(executor, namespaces, network):
    network.add(CSS_URL, body=b"h1 { }", content_type="text/css")
    request = RequestDescriptor.get(CSS_URL)

    first = await executor.execute(request, RequestClassification.STATIC_ASSET)
    second = await executor.execute(request, RequestClassification.STATIC_ASSET)

    assert first.body == second.body == b"h1 { }"
    assert second.content_type == "text/css"
    assert network.calls_to(CSS_URL) == 1


async def test_cache_first_does_not_store_errors(executor, namespaces, network):
    network.add(CSS_URL, body=b"boom", status=500)

    response = await executor.execute(RequestDescriptor.get(CSS_URL), RequestClassification.STATIC_ASSET)

    store = await namespaces.open(CacheRole.STATIC)
    assert response.status == 500
    assert await store.count() == 0


async def test_cache_first_network_failure(executor, network):
    network.online = False

    with pytest.raises(AssetFetchFailure) as exc_info:
        await executor.execute(RequestDescriptor.get(CSS_URL), RequestClassification.STATIC_ASSET)

    assert isinstance(exc_info.value.__cause__, NetworkUnavailable)
    assert exc_info.value.url == CSS_URL


# Network-first


async def test_network_first_overwrites_cache(executor, namespaces, network):
    store = await namespaces.open(CacheRole.API)
    request = RequestDescriptor.get(API_URL)
    await store.put(request.key, snapshot(b"[1]"))
    network.add(API_URL, body=b"[1, 2]", content_type="application/json")

    response = await executor.execute(request, RequestClassification.API)

    assert response.body == b"[1, 2]"
    assert (await store.match(request.key)).body == b"[1, 2]"


async def test_network_first_falls_back_to_cache(executor, namespaces, network):
    store = await namespaces.open(CacheRole.API)
    request = RequestDescriptor.get(API_URL)
    await store.put(request.key, snapshot(b"[1]"))
    prior = await store.match(request.key)
    network.online = False

    response = await executor.execute(request, RequestClassification.API)

    assert response == prior


async def test_network_first_without_cache_raises(executor, network):
    network.online = False

    with pytest.raises(NetworkUnavailable):
        await executor.execute(RequestDescriptor.get(API_URL), RequestClassification.API)


# Stale-while-revalidate


async def test_swr_returns_cached_without_waiting(executor, namespaces, network):
    store = await namespaces.open(CacheRole.IMAGES)
    request = RequestDescriptor.get(IMAGE_URL)
    await store.put(request.key, snapshot(b"old-png", content_type="image/png"))
    cached = await store.match(request.key)
    network.add(IMAGE_URL, body=b"new-png", content_type="image/png")
    gate = network.gates[IMAGE_URL] = asyncio.Event()

    response = await asyncio.wait_for(
        executor.execute(request, RequestClassification.IMAGE),
        timeout=1.0,
    )

    assert response == cached
    assert executor.background.pending == 1

    gate.set()
    await executor.background.drain()

    assert network.calls_to(IMAGE_URL) == 1
    assert (await store.match(request.key)).body == b"new-png"


async def test_swr_refresh_lands_in_current_namespace_after_clear(executor, namespaces, network):
    store = await namespaces.open(CacheRole.IMAGES)
    request = RequestDescriptor.get(IMAGE_URL)
    await store.put(request.key, snapshot(b"old-png", content_type="image/png"))
    network.add(IMAGE_URL, body=b"new-png", content_type="image/png")
    gate = network.gates[IMAGE_URL] = asyncio.Event()

    await executor.execute(request, RequestClassification.IMAGE)
    await namespaces.clear_all()
    gate.set()
    await executor.background.drain()

    current = await namespaces.open(CacheRole.IMAGES)
    assert current is not store
    assert (await current.match(request.key)).body == b"new-png"
    assert await namespaces.storage.names() == [namespaces.namespace_for(CacheRole.IMAGES)]


async def test_swr_background_failure_is_invisible(executor, namespaces, network):
    store = await namespaces.open(CacheRole.IMAGES)
    request = RequestDescriptor.get(IMAGE_URL)
    await store.put(request.key, snapshot(b"old-png"))
    cached = await store.match(request.key)
    network.online = False

    response = await executor.execute(request, RequestClassification.IMAGE)
    await executor.background.drain()

    assert response == cached
    assert await store.match(request.key) == cached
    assert network.calls_to(IMAGE_URL) == 1


async def test_swr_miss_fetches_and_stores(executor, namespaces, network):
    network.add(IMAGE_URL, body=b"png", content_type="image/png")

    response = await executor.execute(RequestDescriptor.get(IMAGE_URL), RequestClassification.IMAGE)

    store = await namespaces.open(CacheRole.IMAGES)
    assert response.body == b"png"
    assert await store.count() == 1
    assert executor.background.pending == 0


async def test_swr_miss_offline_degrades_to_empty(executor, network):
    network.online = False

    response = await executor.execute(RequestDescriptor.get(IMAGE_URL), RequestClassification.IMAGE)

    assert response.status == 404
    assert response.body == b""


# HTML: network-first with offline fallback


async def test_html_online_caches_page(executor, namespaces, network, probe):
    network.add(PAGE_URL, body=b"<html>library</html>", content_type="text/html")

    response = await executor.execute(html_request(), RequestClassification.HTML)

    store = await namespaces.open(CacheRole.STATIC)
    assert response.body == b"<html>library</html>"
    assert (await store.match(html_request().key)).body == b"<html>library</html>"
    assert probe.calls == 0


async def test_html_offline_serves_offline_page(executor, namespaces, network, probe):
    store = await namespaces.open(CacheRole.STATIC)
    await store.put(RequestDescriptor.get(OFFLINE_URL).key, snapshot(b"<h1>offline</h1>"))
    await store.put(html_request().key, snapshot(b"<html>stale</html>"))
    network.online = False
    probe.reachability = Reachability.UNREACHABLE

    response = await executor.execute(html_request(), RequestClassification.HTML)

    assert response.body == b"<h1>offline</h1>"
    assert probe.calls == 1


async def test_html_reachable_serves_cached_copy(executor, namespaces, network, probe):
    store = await namespaces.open(CacheRole.STATIC)
    await store.put(RequestDescriptor.get(OFFLINE_URL).key, snapshot(b"<h1>offline</h1>"))
    await store.put(html_request().key, snapshot(b"<html>stale</html>"))
    network.failing.add(PAGE_URL)
    probe.reachability = Reachability.REACHABLE

    response = await executor.execute(html_request(), RequestClassification.HTML)

    assert response.body == b"<html>stale</html>"


async def test_html_offline_without_offline_page_uses_cached_copy(executor, namespaces, network, probe):
    store = await namespaces.open(CacheRole.STATIC)
    await store.put(html_request().key, snapshot(b"<html>stale</html>"))
    network.online = False
    probe.reachability = Reachability.UNREACHABLE

    response = await executor.execute(html_request(), RequestClassification.HTML)

    assert response.body == b"<html>stale</html>"


async def test_html_offline_with_empty_cache_synthesizes_page(executor, network, probe):
    network.online = False
    probe.reachability = Reachability.UNREACHABLE

    response = await executor.execute(html_request(), RequestClassification.HTML)

    assert response.status == 200
    assert response.content_type.startswith("text/html")
    assert b"You're Offline" in response.body


async def test_html_reachable_without_cache_raises(executor, network, probe):
    network.failing.add(PAGE_URL)
    probe.reachability = Reachability.REACHABLE

    with pytest.raises(NetworkUnavailable) as exc_info:
        await executor.execute(html_request(), RequestClassification.HTML)

    assert exc_info.value.url == PAGE_URL


# Other: pass-through with offline fallback


async def test_other_passes_through_without_caching(executor, namespaces, network):
    url = f"{ORIGIN}/favicon.ico"
    network.add(url, body=b"ico", content_type="image/x-icon")

    response = await executor.execute(RequestDescriptor.get(url), RequestClassification.OTHER)

    store = await namespaces.open(CacheRole.STATIC)
    assert response.body == b"ico"
    assert await store.count() == 0


async def test_other_non_document_failure_propagates(executor, namespaces, network, probe):
    store = await namespaces.open(CacheRole.STATIC)
    await store.put(RequestDescriptor.get(OFFLINE_URL).key, snapshot(b"<h1>offline</h1>"))
    network.online = False
    probe.reachability = Reachability.UNREACHABLE

    with pytest.raises(NetworkUnavailable):
        await executor.execute(RequestDescriptor.get(f"{ORIGIN}/favicon.ico"), RequestClassification.OTHER)

    assert probe.calls == 0


async def test_other_document_failure_uses_offline_fallback(executor, namespaces, network, probe):
    store = await namespaces.open(CacheRole.STATIC)
    await store.put(RequestDescriptor.get(OFFLINE_URL).key, snapshot(b"<h1>offline</h1>"))
    network.online = False
    probe.reachability = Reachability.UNREACHABLE

    response = await executor.execute(html_request(f"{ORIGIN}/about"), RequestClassification.OTHER)

    assert response.body == b"<h1>offline</h1>"
