"""Network protocols.

The cache engine never talks to a transport directly. It depends on a
``Fetcher`` for real requests and a ``ReachabilityProbe`` for the offline
decision, so tests can simulate online/offline deterministically.
"""

from typing import Protocol, runtime_checkable

from offline_cache.entities import CachedResponse, Reachability, RequestDescriptor


@runtime_checkable
class Fetcher(Protocol):
    """Protocol for issuing network requests."""

    async def fetch(
        self,
        request: RequestDescriptor,
        timeout: float | None = None,
    ) -> CachedResponse:
        """Send a request and snapshot the response.

        Args:
            request: The request to send
            timeout: Override the transport timeout in seconds

        Returns:
            The response snapshot; non-2xx responses are returned, not raised

        Raises:
            NetworkUnavailable: On transport failure or timeout
        """
        ...

    async def close(self) -> None:
        """Close the underlying transport."""
        ...


@runtime_checkable
class ReachabilityProbe(Protocol):
    """Protocol for the lightweight connectivity check."""

    async def probe(self) -> Reachability:
        """Report whether the network is reachable at all.

        Returns:
            Reachability.REACHABLE if any response came back,
            Reachability.UNREACHABLE otherwise
        """
        ...
