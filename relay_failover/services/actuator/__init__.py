"""
Actuator Layer

Responsibilities:
- Define the abstract relay actuator interface
- Provide the simulated relay driver
- Resolve configured drivers by name or import path
"""

from .base import Actuator, ModeWriteResult
from .registry import create_actuator, resolve_driver
from .simulated import SimulatedRelay

__all__ = [
    "Actuator",
    "ModeWriteResult",
    "SimulatedRelay",
    "create_actuator",
    "resolve_driver",
]
