"""Cached response domain entity."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass


def header_pairs(headers: Mapping[str, str] | Iterable[tuple[str, str]]) -> tuple[tuple[str, str], ...]:
    """Normalize headers to ``(name, value)`` pairs with lower-cased names.

    Repeated headers such as ``set-cookie`` stay separate pairs, in order.
    """
    items = headers.items() if isinstance(headers, Mapping) else headers
    return tuple((str(name).lower(), str(value)) for name, value in items)


@dataclass(frozen=True)
class CachedResponse:
    """Snapshot of an HTTP response, as returned by the network or a store.

    Attributes:
        status: HTTP status code
        headers: Response header pairs with lower-cased names. A mapping is
            accepted and converted.
        body: Response body (already decoded)
        stored_at: Unix timestamp of the last write into a store, 0 if never stored
    """

    status: int
    headers: tuple[tuple[str, str], ...] = ()
    body: bytes = b""
    stored_at: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", header_pairs(self.headers))

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def get_list(self, name: str) -> list[str]:
        """All values of header ``name``, in order."""
        name = name.lower()
        return [value for key, value in self.headers if key == name]

    def header(self, name: str, default: str = "") -> str:
        values = self.get_list(name)
        return values[0] if values else default

    @property
    def content_type(self) -> str:
        return self.header("content-type")

    @classmethod
    def empty(cls, status: int = 404) -> "CachedResponse":
        """Typed empty result used when a resource degrades gracefully."""
        return cls(status=status)

    @classmethod
    def html(cls, content: str, status: int = 200) -> "CachedResponse":
        return cls(
            status=status,
            headers={"content-type": "text/html; charset=utf-8"},
            body=content.encode("utf-8"),
        )
