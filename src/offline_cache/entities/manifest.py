"""Asset manifest warmed into the static namespace at install time."""

from collections.abc import Iterator
from dataclasses import dataclass
from urllib.parse import urljoin

DEFAULT_LOCAL_ASSETS: tuple[str, ...] = (
    "/",
    "/index.html",
    "/library.html",
    "/offline.html",
    "/assets/css/style.css",
    "/assets/css/navbar.css",
    "/assets/css/home.css",
    "/assets/css/gms.css",
    "/assets/css/recentplays.css",
    "/assets/js/script.js",
    "/assets/js/gms.js",
    "/assets/js/navbar-scroll.js",
    "/assets/js/mobile-nav.js",
    "/assets/js/colorExtractor.js",
    "/assets/js/word-of-day.js",
    "/assets/js/tabs.js",
    "/navbar.html",
    "/index.json",
    "/app.png",
    "/favicon.ico",
    "/assets/img/icons/favicon-48x48.png",
    "/assets/img/icons/favicon.svg",
    "/assets/img/icons/apple-touch-icon.png",
    "/assets/img/icons/site.webmanifest",
)

# Only CORS-enabled CDNs
DEFAULT_EXTERNAL_ASSETS: tuple[str, ...] = (
    "https://cdn.jsdelivr.net/npm/bootstrap@5.3.3/dist/css/bootstrap.min.css",
    "https://cdn.jsdelivr.net/npm/bootstrap@5.3.3/dist/js/bootstrap.bundle.min.js",
    "https://unpkg.com/aos@next/dist/aos.css",
    "https://unpkg.com/aos@next/dist/aos.js",
)


@dataclass(frozen=True)
class AssetManifest:
    """Ordered, immutable list of resources to preload.

    Attributes:
        local: Paths resolved against the origin
        external: Absolute allow-listed URLs
    """

    local: tuple[str, ...] = DEFAULT_LOCAL_ASSETS
    external: tuple[str, ...] = DEFAULT_EXTERNAL_ASSETS

    def resolve(self, origin: str) -> list[str]:
        """Absolute URLs in manifest order: local entries first."""
        base = origin.rstrip("/") + "/"
        return [urljoin(base, path.lstrip("/")) for path in self.local] + list(self.external)

    def __iter__(self) -> Iterator[str]:
        yield from self.local
        yield from self.external

    def __len__(self) -> int:
        return len(self.local) + len(self.external)
