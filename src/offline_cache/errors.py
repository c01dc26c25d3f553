"""Error kinds raised by the offline cache.

A cache miss is not an error: stores return ``None`` for unknown keys.
"""

from typing import Any


class OfflineCacheError(Exception):
    """Base class for all offline cache errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        self.message = message
        self.context = context or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        context_str = f" - Context: {self.context}" if self.context else ""
        return f"{self.__class__.__name__}: {self.message}{context_str}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, context={self.context!r})"


class NetworkUnavailable(OfflineCacheError):
    """Transport failure or timeout while talking to the network."""

    def __init__(
        self,
        message: str,
        url: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if url:
            ctx["url"] = url
        self.url = url
        super().__init__(message, ctx)


class AssetFetchFailure(OfflineCacheError):
    """A resource could not be fetched for caching (transport error or non-2xx)."""

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if url:
            ctx["url"] = url
        if status_code is not None:
            ctx["status_code"] = status_code
        self.url = url
        self.status_code = status_code
        super().__init__(message, ctx)


class LifecycleError(OfflineCacheError):
    """An operation was attempted in the wrong lifecycle state."""
