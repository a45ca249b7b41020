"""
Custom Exception Classes for the Relay Failover Controller

Hierarchical exception structure for error handling across services.
Only ConfigError may abort process start; everything else is absorbed
by the control loop.
"""


class FailoverError(Exception):
    """Base exception for all relay failover errors"""

    def __init__(self, message: str, recoverable: bool = True):
        self.message = message
        self.recoverable = recoverable
        super().__init__(message)


class ConfigError(FailoverError):
    """Configuration-related errors"""

    def __init__(self, message: str, errors: list[str] | None = None):
        self.errors = errors or []
        super().__init__(f"Config Error: {message}", recoverable=False)


class ProbeError(FailoverError):
    """Endpoint liveness check failed (network, timeout, auth, HTTP status)"""

    def __init__(
        self,
        message: str,
        endpoint: str | None = None,
        status_code: int | None = None,
    ):
        self.endpoint = endpoint
        self.status_code = status_code
        super().__init__(f"Probe Error: {message}", recoverable=True)


class ActuatorError(FailoverError):
    """Device call rejected or unreachable"""

    def __init__(
        self,
        message: str,
        channel_id: int | None = None,
        device_name: str | None = None,
    ):
        self.channel_id = channel_id
        self.device_name = device_name
        super().__init__(f"Actuator Error: {message}", recoverable=True)
