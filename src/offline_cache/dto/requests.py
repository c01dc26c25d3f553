"""Request DTOs for API endpoints."""

from pydantic import BaseModel, Field, model_validator

from offline_cache.entities import CommandType


class CommandRequest(BaseModel):
    """Request DTO for the control channel.

    The handler will convert this to a Command entity for the service layer.
    """

    type: CommandType = Field(..., description="SKIP_WAITING, CLEAR_CACHE or PRELOAD_IMAGES")
    urls: list[str] = Field(
        default_factory=list,
        description="Resources to preload (PRELOAD_IMAGES only)",
    )

    @model_validator(mode="after")
    def _urls_only_for_preload(self) -> "CommandRequest":
        if self.urls and self.type is not CommandType.PRELOAD_IMAGES:
            raise ValueError("urls is only accepted for PRELOAD_IMAGES")
        return self
