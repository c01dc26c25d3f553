"""Domain entities for internal representation.

These are pure dataclasses (frozen) and enums used internally by services
and repositories. They are NOT used for API contracts - use DTOs
from the dto package for that.
"""

from .cached_response import CachedResponse
from .command import Command, CommandResult
from .enums import (
    CacheRole,
    CommandType,
    LifecycleState,
    Reachability,
    RequestClassification,
    Strategy,
)
from .manifest import AssetManifest
from .request import RequestDescriptor, canonical_url

__all__ = [
    "AssetManifest",
    "CachedResponse",
    "CacheRole",
    "Command",
    "CommandResult",
    "CommandType",
    "LifecycleState",
    "Reachability",
    "RequestClassification",
    "RequestDescriptor",
    "Strategy",
    "canonical_url",
]
