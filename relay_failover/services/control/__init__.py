"""
Control Layer - Debounce and Mode Control

Responsibilities:
- Debounce probe outcomes into mode decisions
- Apply decisions to the actuator without redundant calls
- Run the probe-and-apply loop and health endpoint
"""

from .debouncer import Debouncer
from .mode_controller import ModeController
from .service import FailoverService
from .state import ControllerState, DebounceState

__all__ = [
    "Debouncer",
    "ModeController",
    "FailoverService",
    "ControllerState",
    "DebounceState",
]
