"""
Actuator Interface

Abstract device interface the mode controller drives. Device-specific
drivers subclass Actuator; communication failures raise ActuatorError,
and a device that answers but refuses a change returns an unsuccessful
ModeWriteResult.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from relay_failover.common.config import Mode


@dataclass
class ModeWriteResult:
    """Result of a set_mode call"""
    success: bool
    mode: Mode | None = None
    error: str | None = None


class Actuator(ABC):
    """Relay channel that can switch input-handling mode"""

    name: str = "actuator"

    @abstractmethod
    async def get_mode(self, channel_id: int) -> Mode:
        """Return the mode the device currently reports for channel_id."""

    @abstractmethod
    async def set_mode(self, channel_id: int, mode: Mode) -> ModeWriteResult:
        """Switch channel_id to mode."""

    async def close(self) -> None:
        """Release any connections held by the driver."""
