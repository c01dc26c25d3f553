"""httpx-based implementation of the Fetcher protocol.

Key features:
- Lazily created, pooled ``httpx.AsyncClient``
- Transport failures, timeouts and invalid URLs become ``NetworkUnavailable``
- Non-2xx responses are returned as snapshots, never raised
- Redirects are not followed; a 3xx goes back to the caller as is
- Repeated response headers (e.g. ``set-cookie``) are kept apart
- Hop-by-hop and encoding headers are stripped (the body is already decoded)
"""

import logging

import httpx

from offline_cache.config import settings
from offline_cache.entities import CachedResponse, RequestDescriptor
from offline_cache.errors import NetworkUnavailable

logger = logging.getLogger(__name__)

HOP_BY_HOP_HEADERS = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "te",
        "trailer",
        "trailers",
        "transfer-encoding",
        "upgrade",
    }
)

# Never copied from the inbound request
REQUEST_SKIP_HEADERS = HOP_BY_HOP_HEADERS | {"host", "content-length"}

# Invalid once httpx has decoded the body
RESPONSE_SKIP_HEADERS = HOP_BY_HOP_HEADERS | {"content-encoding", "content-length"}


class HttpxFetcher:
    """Fetcher backed by ``httpx.AsyncClient``.

    This class satisfies the Fetcher protocol through structural
    typing - no explicit inheritance needed.

    Example:
        ```python
        fetcher = HttpxFetcher.create()
        response = await fetcher.fetch(RequestDescriptor.get("https://example.com/"))
        print(response.status)
        ```
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            client: Preconfigured client (e.g. with a mock transport).
                If None, one is created on first use.
            timeout: Default request timeout in seconds.
                Defaults to settings.fetch_timeout.
        """
        self._client = client
        self._timeout = timeout or settings.fetch_timeout

    @classmethod
    def create(cls, timeout: float | None = None) -> "HttpxFetcher":
        """Factory method to create HttpxFetcher with defaults."""
        return cls(timeout=timeout)

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client.

        Returns:
            The httpx.AsyncClient instance
        """
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                follow_redirects=False,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            )
        return self._client

    async def fetch(
        self,
        request: RequestDescriptor,
        timeout: float | None = None,
    ) -> CachedResponse:
        """Send a request and snapshot the response.

        Args:
            request: The request to send
            timeout: Override the client timeout in seconds

        Returns:
            The response snapshot

        Raises:
            NetworkUnavailable: On transport failure, timeout or invalid URL
        """
        headers = {
            name: value
            for name, value in request.headers.items()
            if name not in REQUEST_SKIP_HEADERS
        }

        try:
            response = await self.client.request(
                request.method,
                request.url,
                headers=headers,
                content=request.body or None,
                follow_redirects=False,
                timeout=timeout if timeout is not None else httpx.USE_CLIENT_DEFAULT,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.debug("Network request failed: %s %s (%s)", request.method, request.url, e)
            raise NetworkUnavailable(f"Network request failed: {e}", url=request.url) from e

        return CachedResponse(
            status=response.status_code,
            headers=[
                (name.lower(), value)
                for name, value in response.headers.multi_items()
                if name.lower() not in RESPONSE_SKIP_HEADERS
            ],
            body=response.content,
        )

    async def close(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None
