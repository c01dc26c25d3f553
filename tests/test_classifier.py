"""
Tests for request classification.
"""

import re

import pytest

from offline_cache.entities import RequestClassification, RequestDescriptor
from offline_cache.services import ClassifierConfig, RequestClassifier, classify, is_eligible

IMAGE = RequestClassification.IMAGE
API = RequestClassification.API
STATIC = RequestClassification.STATIC_ASSET
HTML = RequestClassification.HTML
OTHER = RequestClassification.OTHER


@pytest.mark.parametrize(
    "url, destination, headers, expected",
    [
        ("https://app.test/assets/img/logo.png", "", {}, IMAGE),
        ("https://app.test/avatar", "image", {}, IMAGE),
        ("https://app.test/assets/gmsimgs/retro-bowl", "", {}, IMAGE),
        ("https://app.test/files/cover.JPG", "", {}, IMAGE),
        ("https://app.test/index.json", "", {}, API),
        ("https://app.test/api/scores", "", {}, API),
        ("https://app.test/data/games.json?page=2", "", {}, API),
        ("https://app.test/assets/css/style.css", "", {}, STATIC),
        ("https://app.test/assets/js/loader", "", {}, STATIC),
        ("https://app.test/typeface", "font", {}, STATIC),
        ("https://unpkg.com/aos@next/dist/aos", "", {}, STATIC),
        ("https://fonts.gstatic.com/s/roboto", "", {}, STATIC),
        ("https://app.test/library.html", "document", {}, HTML),
        ("https://app.test/", "", {"Accept": "text/html,application/xhtml+xml"}, HTML),
        ("https://app.test/favicon.ico", "", {}, OTHER),
        ("https://app.test/assets/img/icons/site.webmanifest", "", {}, OTHER),
    ],
)
def test_classify(url, destination, headers, expected):
    request = RequestDescriptor.get(url, destination=destination, headers=headers)
    assert classify(request) is expected


def test_first_match_wins_for_overlapping_categories():
    # An image under /api/ is still an image
    assert classify(RequestDescriptor.get("https://app.test/api/logo.png")) is IMAGE
    # JSON under a file directory is not image-like
    assert classify(RequestDescriptor.get("https://app.test/files/data.json")) is API
    # JSON on an allow-listed CDN is API, not static
    assert classify(RequestDescriptor.get("https://cdn.jsdelivr.net/npm/pkg/package.json")) is API
    # A stylesheet requested as a document is still static
    assert classify(RequestDescriptor.get("https://app.test/assets/css/home.css", destination="document")) is STATIC


def test_rule_table_order():
    names = [rule.name for rule in RequestClassifier().rules]
    assert names == ["image", "api", "static-asset", "html"]


def test_custom_config():
    classifier = RequestClassifier(
        ClassifierConfig(
            api_markers=("/v2/",),
            static_extensions=re.compile(r"\.mjs$"),
        )
    )
    assert classifier.classify(RequestDescriptor.get("https://app.test/v2/users")) is API
    assert classifier.classify(RequestDescriptor.get("https://app.test/app.mjs")) is STATIC
    assert classifier.classify(RequestDescriptor.get("https://app.test/api/users")) is OTHER


@pytest.mark.parametrize(
    "url, method, eligible",
    [
        ("https://app.test/", "GET", True),
        ("http://app.test/index.json", "get", True),
        ("https://app.test/api/scores", "POST", False),
        ("https://app.test/", "HEAD", False),
        ("chrome-extension://abcdef/popup.html", "GET", False),
        ("ftp://files.test/readme.txt", "GET", False),
    ],
)
def test_is_eligible(url, method, eligible):
    assert is_eligible(RequestDescriptor(url=url, method=method)) is eligible


def test_request_key_ignores_headers_and_fragment():
    a = RequestDescriptor.get("HTTPS://App.Test/index.html#top", headers={"Accept": "text/html"})
    b = RequestDescriptor.get("https://app.test/index.html")
    assert a.key == b.key == "GET https://app.test/index.html"
    assert RequestDescriptor.get("https://app.test").key == "GET https://app.test/"
