"""
Control State Dataclasses

Data structures owned by the debouncer and the mode controller.
Neither is persisted: a restart begins from the defaults below.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from relay_failover.common.config import INITIAL_MODE, Mode


@dataclass
class DebounceState:
    """Consecutive outcome counters"""
    consecutive_failures: int = 0
    consecutive_successes: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "consecutive_failures": self.consecutive_failures,
            "consecutive_successes": self.consecutive_successes,
        }


@dataclass
class ControllerState:
    """Desired mode and the mode the actuator was last told"""
    current_mode: Mode = INITIAL_MODE
    last_applied_mode: Mode = INITIAL_MODE

    # Observability
    transitions: int = 0
    actuator_calls: int = 0
    actuator_failures: int = 0
    last_error: str | None = None
    last_transition_at: datetime | None = None

    @property
    def pending(self) -> bool:
        """True while the desired mode has not reached the actuator"""
        return self.current_mode != self.last_applied_mode

    def to_dict(self) -> dict[str, Any]:
        return {
            "current_mode": self.current_mode.value,
            "last_applied_mode": self.last_applied_mode.value,
            "pending": self.pending,
            "transitions": self.transitions,
            "actuator_calls": self.actuator_calls,
            "actuator_failures": self.actuator_failures,
            "last_error": self.last_error,
            "last_transition_at": (
                self.last_transition_at.isoformat() if self.last_transition_at else None
            ),
        }
