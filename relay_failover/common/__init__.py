"""
Common Utilities

Shared modules used across all services:
- config.py - Configuration dataclasses and the mode policy table
- exceptions.py - Custom exception classes
- logging_setup.py - Structured logging setup
- scheduler.py - Single-flight interval scheduler
"""

from .config import (
    Mode,
    ModeParameters,
    MODE_POLICY,
    INITIAL_MODE,
    ProbeSettings,
    ControlSettings,
    ActuatorSettings,
    HealthSettings,
    FailoverConfig,
    load_failover_config,
)
from .exceptions import (
    FailoverError,
    ConfigError,
    ProbeError,
    ActuatorError,
)
from .logging_setup import (
    setup_logging,
    get_service_logger,
    set_debug,
    log_probe,
    log_threshold_crossing,
    log_actuator_call,
)
from .scheduler import ScheduledLoop

__all__ = [
    # Config
    "Mode",
    "ModeParameters",
    "MODE_POLICY",
    "INITIAL_MODE",
    "ProbeSettings",
    "ControlSettings",
    "ActuatorSettings",
    "HealthSettings",
    "FailoverConfig",
    "load_failover_config",
    # Exceptions
    "FailoverError",
    "ConfigError",
    "ProbeError",
    "ActuatorError",
    # Logging
    "setup_logging",
    "get_service_logger",
    "set_debug",
    "log_probe",
    "log_threshold_crossing",
    "log_actuator_call",
    # Scheduling
    "ScheduledLoop",
]
