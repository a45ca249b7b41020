"""
Actuator Registry

Resolves the configured driver name into an Actuator instance.
Built-in drivers are looked up by name; anything else is treated as
an import path of the form "package.module:ClassName".
"""

import importlib
from typing import Any

from relay_failover.common.config import ActuatorSettings
from relay_failover.common.exceptions import ConfigError
from relay_failover.common.logging_setup import get_service_logger

from .base import Actuator
from .simulated import SimulatedRelay

logger = get_service_logger("actuator.registry")


BUILTIN_DRIVERS: dict[str, type[Actuator]] = {
    "simulated": SimulatedRelay,
}


def resolve_driver(driver: str) -> type[Actuator]:
    """Get the Actuator class for a driver name or import path"""
    if driver in BUILTIN_DRIVERS:
        return BUILTIN_DRIVERS[driver]

    module_name, sep, class_name = driver.partition(":")
    if not sep or not module_name or not class_name:
        raise ConfigError(
            f"Unknown actuator driver '{driver}' "
            f"(use one of {sorted(BUILTIN_DRIVERS)} or 'package.module:ClassName')"
        )

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigError(f"Cannot import actuator module '{module_name}': {e}")

    cls = getattr(module, class_name, None)
    if not isinstance(cls, type) or not issubclass(cls, Actuator):
        raise ConfigError(f"'{driver}' is not an Actuator subclass")
    return cls


def create_actuator(settings: ActuatorSettings) -> Actuator:
    """Instantiate the configured actuator"""
    cls = resolve_driver(settings.driver)
    options: dict[str, Any] = dict(settings.options)

    try:
        actuator = cls(**options)
    except TypeError as e:
        raise ConfigError(f"Invalid options for actuator '{settings.driver}': {e}")

    logger.info(
        f"Actuator driver loaded: {settings.driver}",
        extra={"driver": settings.driver, "options": sorted(options)},
    )
    return actuator
