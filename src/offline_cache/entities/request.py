"""Request descriptor domain entity."""

from dataclasses import dataclass, field
from urllib.parse import SplitResult, urlsplit, urlunsplit


def canonical_url(url: str) -> str:
    """Normalize an absolute URL for use in a cache key.

    Scheme and host are lower-cased, an empty path becomes ``/`` and the
    fragment is dropped. The query string is kept verbatim.
    """
    parts = urlsplit(url)
    return urlunsplit(
        (
            parts.scheme.lower(),
            parts.netloc.lower(),
            parts.path or "/",
            parts.query,
            "",
        )
    )


@dataclass(frozen=True)
class RequestDescriptor:
    """An inbound request as seen by the cache engine.

    Attributes:
        url: Absolute request URL
        method: HTTP method (upper-case)
        destination: Destination hint (``Sec-Fetch-Dest``), empty if unknown
        headers: Request headers with lower-cased names
        body: Request body, only forwarded for pass-through requests
    """

    url: str
    method: str = "GET"
    destination: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", self.method.upper())
        object.__setattr__(self, "destination", self.destination.lower())
        object.__setattr__(self, "headers", {k.lower(): v for k, v in self.headers.items()})

    @property
    def parts(self) -> SplitResult:
        return urlsplit(self.url)

    @property
    def path(self) -> str:
        return self.parts.path or "/"

    @property
    def hostname(self) -> str:
        return self.parts.hostname or ""

    @property
    def scheme(self) -> str:
        return self.parts.scheme.lower()

    @property
    def key(self) -> str:
        """Request identity: method plus canonical URL. Headers never count."""
        return f"{self.method} {canonical_url(self.url)}"

    @property
    def accepts_html(self) -> bool:
        return "text/html" in self.headers.get("accept", "")

    @property
    def is_document_like(self) -> bool:
        return self.destination == "document" or self.accepts_html

    @classmethod
    def get(cls, url: str, **kwargs) -> "RequestDescriptor":
        """Build a plain GET descriptor for ``url``."""
        return cls(url=url, method="GET", **kwargs)
