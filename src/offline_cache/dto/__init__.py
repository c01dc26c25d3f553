"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract of the control
surface. They are used for request/response validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .requests import CommandRequest
from .responses import (
    CacheStatsResponse,
    CommandResponse,
    HealthCheckResponse,
    SyncResponse,
)

__all__ = [
    "CommandRequest",
    "CommandResponse",
    "SyncResponse",
    "CacheStatsResponse",
    "HealthCheckResponse",
]
