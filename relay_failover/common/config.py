"""
Configuration Dataclasses

Type-safe configuration structures for the failover controller.
Configuration is read once from YAML at startup and never reloaded.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# Environment variable that overrides probe.credential
CREDENTIAL_ENV_VAR = "RELAY_FAILOVER_CREDENTIAL"


class Mode(str, Enum):
    """Relay input-handling modes"""
    DETACHED = "detached"  # output held on, physical input ignored
    FOLLOW = "follow"      # output mirrors physical input


# Fail-safe mode at startup
INITIAL_MODE = Mode.DETACHED


@dataclass(frozen=True)
class ModeParameters:
    """Actuator parameters a mode maps to"""
    input_mode: str
    output: str  # "on" or "match_input"


# Fixed policy table, not computed
MODE_POLICY: dict[Mode, ModeParameters] = {
    Mode.DETACHED: ModeParameters(input_mode="detached", output="on"),
    Mode.FOLLOW: ModeParameters(input_mode="follow", output="match_input"),
}


@dataclass
class ProbeSettings:
    """Liveness probe configuration"""
    endpoint: str
    credential: str | None = None
    timeout_s: float = 5.0
    expect_json: bool = False


@dataclass
class ControlSettings:
    """Debounce and scheduling configuration"""
    check_interval_s: float = 30.0
    failure_threshold: int = 3
    channel_id: int = 0


@dataclass
class ActuatorSettings:
    """Actuator driver selection"""
    driver: str = "simulated"
    options: dict[str, Any] = field(default_factory=dict)


@dataclass
class HealthSettings:
    """Health endpoint configuration"""
    enabled: bool = True
    host: str = "127.0.0.1"
    port: int = 8090


@dataclass
class FailoverConfig:
    """Complete controller configuration"""
    probe: ProbeSettings
    control: ControlSettings = field(default_factory=ControlSettings)
    actuator: ActuatorSettings = field(default_factory=ActuatorSettings)
    health: HealthSettings = field(default_factory=HealthSettings)
    debug: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Summary for logging, credential masked"""
        return {
            "endpoint": self.probe.endpoint,
            "credential": "***" if self.probe.credential else None,
            "timeout_s": self.probe.timeout_s,
            "check_interval_s": self.control.check_interval_s,
            "failure_threshold": self.control.failure_threshold,
            "channel_id": self.control.channel_id,
            "actuator": self.actuator.driver,
            "health_port": self.health.port if self.health.enabled else None,
            "debug": self.debug,
        }


def load_failover_config(data: dict) -> FailoverConfig:
    """Load FailoverConfig from dictionary (e.g., parsed YAML)"""
    probe_data = data.get("probe", {}) or {}
    credential = os.environ.get(CREDENTIAL_ENV_VAR) or probe_data.get("credential")

    probe = ProbeSettings(
        endpoint=probe_data.get("endpoint", ""),
        credential=credential or None,
        timeout_s=float(probe_data.get("timeout_s", 5.0)),
        expect_json=bool(probe_data.get("expect_json", False)),
    )

    control_data = data.get("control", {}) or {}
    control = ControlSettings(
        check_interval_s=float(control_data.get("check_interval_s", 30.0)),
        failure_threshold=int(control_data.get("failure_threshold", 3)),
        channel_id=int(control_data.get("channel_id", 0)),
    )

    actuator_data = data.get("actuator", {}) or {}
    actuator = ActuatorSettings(
        driver=actuator_data.get("driver", "simulated"),
        options=dict(actuator_data.get("options") or {}),
    )

    health_data = data.get("health", {}) or {}
    health = HealthSettings(
        enabled=bool(health_data.get("enabled", True)),
        host=health_data.get("host", "127.0.0.1"),
        port=int(health_data.get("port", 8090)),
    )

    return FailoverConfig(
        probe=probe,
        control=control,
        actuator=actuator,
        health=health,
        debug=bool(data.get("debug", False)),
    )
