"""Offline detection.

Distinguishes "this request failed" from "there is no network at all" with
a minimal same-origin probe. The result is never cached.
"""

import logging

from offline_cache.config import settings
from offline_cache.entities import Reachability, RequestDescriptor
from offline_cache.errors import NetworkUnavailable
from offline_cache.protocols import Fetcher, ReachabilityProbe

logger = logging.getLogger(__name__)


class FetchReachabilityProbe:
    """Probe that sends ``HEAD <origin><probe_path>`` through a Fetcher.

    Satisfies the ReachabilityProbe protocol. Any response, including
    non-2xx, counts as reachable: the probe tests connectivity, not
    resource availability.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        origin: str | None = None,
        path: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._url = (origin or settings.origin).rstrip("/") + (path or settings.probe_path)
        self._timeout = timeout or settings.probe_timeout

    @property
    def url(self) -> str:
        return self._url

    async def probe(self) -> Reachability:
        request = RequestDescriptor(
            url=self._url,
            method="HEAD",
            headers={"cache-control": "no-cache", "pragma": "no-cache"},
        )
        try:
            await self._fetcher.fetch(request, timeout=self._timeout)
        except NetworkUnavailable:
            return Reachability.UNREACHABLE
        return Reachability.REACHABLE


class OfflineDetector:
    """Turns a reachability probe into an offline decision.

    Example:
        ```python
        detector = OfflineDetector(FetchReachabilityProbe(fetcher))
        if await detector.is_offline():
            ...
        ```
    """

    def __init__(self, probe: ReachabilityProbe) -> None:
        self._probe = probe

    async def check(self) -> Reachability:
        """Run the probe once; a failing probe means unreachable."""
        try:
            result = await self._probe.probe()
        except Exception as e:
            logger.debug("Reachability probe failed: %s", e)
            return Reachability.UNREACHABLE

        if result is Reachability.UNREACHABLE:
            logger.info("Network is offline")
        else:
            logger.info("Network is available")
        return result

    async def is_offline(self) -> bool:
        return await self.check() is Reachability.UNREACHABLE
