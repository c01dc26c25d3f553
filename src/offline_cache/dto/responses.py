"""Response DTOs for API endpoints."""

from typing import Any

from pydantic import BaseModel, Field


class CommandResponse(BaseModel):
    """Response DTO for a processed command."""

    type: str = Field(..., description="The command that was processed")
    acknowledged: bool = Field(..., description="Whether the command was accepted")
    details: dict[str, Any] = Field(default_factory=dict, description="Command-specific result")


class SyncResponse(BaseModel):
    """Response DTO for a background sync trigger."""

    tag: str = Field(..., description="The sync tag received")
    triggered: bool = Field(..., description="Whether the tag started a cache refresh")
    refreshed: list[str] = Field(default_factory=list, description="URLs refreshed")


class CacheStatsResponse(BaseModel):
    """Response DTO for namespace statistics."""

    prefix: str = Field(..., description="Namespace name prefix")
    version: str = Field(..., description="Current version tag")
    namespaces: dict[str, int] = Field(default_factory=dict, description="Entry count per namespace")
    total_entries: int = Field(..., description="Total number of cached entries", ge=0)


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    storage_healthy: bool = Field(..., description="Whether the cache backend is reachable")
    lifecycle_state: str = Field(..., description="Current lifecycle state")
