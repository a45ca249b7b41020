"""
Configuration Validator

Validates the raw configuration once at startup. This is the only
check allowed to abort process start.
"""

import math
from typing import Any
from urllib.parse import urlparse

from relay_failover.common.logging_setup import get_service_logger

logger = get_service_logger("config.validator")

# Sections the controller understands
KNOWN_SECTIONS = {"probe", "control", "actuator", "health", "debug"}


class ConfigValidator:
    """Validates failover configuration"""

    def validate(self, config: dict[str, Any]) -> tuple[bool, list[str]]:
        """
        Validate configuration.

        Args:
            config: Configuration dictionary

        Returns:
            Tuple of (is_valid, list of error messages)
        """
        errors: list[str] = []

        if not isinstance(config, dict):
            return False, ["Configuration must be a mapping"]

        for section in ("probe", "control", "actuator", "health"):
            value = config.get(section)
            if value is not None and not isinstance(value, dict):
                errors.append(f"Section '{section}' must be a mapping")

        if errors:
            return self._report(errors)

        errors.extend(self._validate_probe(config.get("probe") or {}))
        errors.extend(self._validate_control(config.get("control") or {}))
        errors.extend(self._validate_actuator(config.get("actuator") or {}))
        errors.extend(self._validate_health(config.get("health") or {}))

        debug = config.get("debug", False)
        if not isinstance(debug, bool):
            errors.append("debug must be true or false")

        unknown = sorted(set(config) - KNOWN_SECTIONS)
        if unknown:
            logger.warning(
                f"Ignoring unknown config sections: {', '.join(unknown)}",
                extra={"unknown_sections": unknown},
            )

        return self._report(errors)

    def _report(self, errors: list[str]) -> tuple[bool, list[str]]:
        is_valid = len(errors) == 0
        if not is_valid:
            logger.warning(
                f"Config validation failed: {len(errors)} errors",
                extra={"errors": errors},
            )
        else:
            logger.debug("Config validation passed")
        return is_valid, errors

    def _validate_probe(self, probe: dict[str, Any]) -> list[str]:
        """Validate endpoint, credential and timeout"""
        errors = []

        endpoint = probe.get("endpoint")
        if not endpoint:
            errors.append("Missing probe.endpoint")
        elif not isinstance(endpoint, str):
            errors.append("probe.endpoint must be a URL string")
        else:
            parsed = urlparse(endpoint)
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                errors.append(f"Invalid probe.endpoint URL: {endpoint}")

        credential = probe.get("credential")
        if credential is not None and not isinstance(credential, str):
            errors.append("probe.credential must be a string")
        elif credential and not _is_header_safe(credential):
            errors.append("probe.credential must be printable ASCII (sent as an HTTP header)")

        timeout = probe.get("timeout_s", 5.0)
        if not _is_positive_number(timeout):
            errors.append("probe.timeout_s must be a positive number")

        return errors

    def _validate_control(self, control: dict[str, Any]) -> list[str]:
        """Validate interval, threshold and channel"""
        errors = []

        interval = control.get("check_interval_s", 30.0)
        if not _is_positive_number(interval):
            errors.append("control.check_interval_s must be a positive number")

        threshold = control.get("failure_threshold", 3)
        if not _is_int(threshold) or threshold < 1:
            errors.append("control.failure_threshold must be an integer >= 1")

        channel_id = control.get("channel_id", 0)
        if not _is_int(channel_id) or channel_id < 0:
            errors.append("control.channel_id must be a non-negative integer")

        return errors

    def _validate_actuator(self, actuator: dict[str, Any]) -> list[str]:
        errors = []
        driver = actuator.get("driver", "simulated")
        if not isinstance(driver, str) or not driver:
            errors.append("actuator.driver must be a non-empty string")
        options = actuator.get("options")
        if options is not None and not isinstance(options, dict):
            errors.append("actuator.options must be a mapping")
        return errors

    def _validate_health(self, health: dict[str, Any]) -> list[str]:
        errors = []
        port = health.get("port", 8090)
        if not _is_int(port) or not 0 < port < 65536:
            errors.append("health.port must be between 1 and 65535")
        return errors


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_positive_number(value: Any) -> bool:
    return _is_number(value) and math.isfinite(value) and value > 0


def _is_header_safe(value: str) -> bool:
    return all(32 <= ord(ch) < 127 for ch in value)
