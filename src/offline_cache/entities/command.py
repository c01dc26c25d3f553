"""Control channel command entities."""

from dataclasses import dataclass, field
from typing import Any

from .enums import CommandType


@dataclass(frozen=True)
class Command:
    """A command received over the control channel.

    Attributes:
        type: Which command to run
        urls: Resources to preload (``PRELOAD_IMAGES`` only)
    """

    type: CommandType
    urls: tuple[str, ...] = ()


@dataclass(frozen=True)
class CommandResult:
    """Acknowledgement for a processed command."""

    type: CommandType
    acknowledged: bool = True
    details: dict[str, Any] = field(default_factory=dict)
