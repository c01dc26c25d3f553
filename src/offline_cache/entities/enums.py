"""Enumerations shared across layers."""

from enum import Enum


class RequestClassification(str, Enum):
    IMAGE = "image"
    API = "api"
    STATIC_ASSET = "static_asset"
    HTML = "html"
    OTHER = "other"


class CacheRole(str, Enum):
    """Logical cache bucket; each role gets one namespace per version."""

    STATIC = "static"
    IMAGES = "images"
    API = "api"


class Strategy(str, Enum):
    CACHE_FIRST = "cache-first"
    NETWORK_FIRST = "network-first"
    STALE_WHILE_REVALIDATE = "stale-while-revalidate"
    NETWORK_FIRST_OFFLINE_FALLBACK = "network-first-with-offline-fallback"
    PASS_THROUGH_OFFLINE_FALLBACK = "pass-through-with-offline-fallback"


class Reachability(str, Enum):
    REACHABLE = "reachable"
    UNREACHABLE = "unreachable"


class CommandType(str, Enum):
    SKIP_WAITING = "SKIP_WAITING"
    CLEAR_CACHE = "CLEAR_CACHE"
    PRELOAD_IMAGES = "PRELOAD_IMAGES"


class LifecycleState(str, Enum):
    NEW = "new"
    INSTALLING = "installing"
    INSTALLED = "installed"
    ACTIVATING = "activating"
    ACTIVATED = "activated"
    REDUNDANT = "redundant"
