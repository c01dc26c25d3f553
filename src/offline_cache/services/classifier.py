"""Request classification.

Maps a request to one of five categories with an ordered rule table.
Categories overlap (``/files/data.json`` looks both image-like and
API-like), so the first matching rule wins.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass

from offline_cache.entities import RequestClassification, RequestDescriptor

ELIGIBLE_SCHEMES = frozenset({"http", "https"})


@dataclass(frozen=True)
class ClassifierConfig:
    """Patterns the default rule table is built from."""

    image_destinations: frozenset[str] = frozenset({"image"})
    image_extensions: re.Pattern = re.compile(r"\.(jpg|jpeg|png|gif|webp|avif|svg)$", re.IGNORECASE)
    image_directories: tuple[str, ...] = ("/assets/gmsimgs/",)
    file_directories: tuple[str, ...] = ("/files/",)

    api_index_path: str = "/index.json"
    api_markers: tuple[str, ...] = (".json", "/api/")

    static_destinations: frozenset[str] = frozenset({"style", "script", "font"})
    static_extensions: re.Pattern = re.compile(r"\.(css|js|woff|woff2|ttf|eot)$", re.IGNORECASE)
    static_directories: tuple[str, ...] = ("/assets/css/", "/assets/js/")
    static_hosts: frozenset[str] = frozenset(
        {
            "cdn.jsdelivr.net",
            "pro.fontawesome.com",
            "unpkg.com",
            "fonts.googleapis.com",
            "fonts.gstatic.com",
        }
    )

    html_destinations: frozenset[str] = frozenset({"document"})


@dataclass(frozen=True)
class ClassificationRule:
    """One row of the classification table."""

    category: RequestClassification
    matches: Callable[[RequestDescriptor], bool]
    name: str = ""


def _contains_any(path: str, needles: tuple[str, ...]) -> bool:
    return any(needle in path for needle in needles)


def build_rules(config: ClassifierConfig) -> tuple[ClassificationRule, ...]:
    """Build the ordered rule table for ``config``."""

    def is_image(request: RequestDescriptor) -> bool:
        path = request.path
        has_image_ext = bool(config.image_extensions.search(path))
        return (
            request.destination in config.image_destinations
            or has_image_ext
            or _contains_any(path, config.image_directories)
            or (_contains_any(path, config.file_directories) and has_image_ext)
        )

    def is_api(request: RequestDescriptor) -> bool:
        path = request.path
        return path == config.api_index_path or _contains_any(path, config.api_markers)

    def is_static(request: RequestDescriptor) -> bool:
        path = request.path
        return (
            request.destination in config.static_destinations
            or bool(config.static_extensions.search(path))
            or _contains_any(path, config.static_directories)
            or request.hostname in config.static_hosts
        )

    def is_html(request: RequestDescriptor) -> bool:
        return request.destination in config.html_destinations or request.accepts_html

    return (
        ClassificationRule(RequestClassification.IMAGE, is_image, "image"),
        ClassificationRule(RequestClassification.API, is_api, "api"),
        ClassificationRule(RequestClassification.STATIC_ASSET, is_static, "static-asset"),
        ClassificationRule(RequestClassification.HTML, is_html, "html"),
    )


class RequestClassifier:
    """Ordered-table request classifier.

    Example:
        ```python
        classifier = RequestClassifier()
        request = RequestDescriptor.get("https://example.com/assets/js/app.js")
        classifier.classify(request)  # RequestClassification.STATIC_ASSET
        ```
    """

    def __init__(
        self,
        config: ClassifierConfig | None = None,
        rules: tuple[ClassificationRule, ...] | None = None,
    ) -> None:
        self._config = config or ClassifierConfig()
        self._rules = rules if rules is not None else build_rules(self._config)

    @property
    def rules(self) -> tuple[ClassificationRule, ...]:
        return self._rules

    def is_eligible(self, request: RequestDescriptor) -> bool:
        """Only GET over http(s) is handled; everything else is declined."""
        return request.method == "GET" and request.scheme in ELIGIBLE_SCHEMES

    def classify(self, request: RequestDescriptor) -> RequestClassification:
        for rule in self._rules:
            if rule.matches(request):
                return rule.category
        return RequestClassification.OTHER


_default_classifier = RequestClassifier()


def classify(request: RequestDescriptor) -> RequestClassification:
    """Classify ``request`` with the default rule table."""
    return _default_classifier.classify(request)


def is_eligible(request: RequestDescriptor) -> bool:
    return _default_classifier.is_eligible(request)
