#!/usr/bin/env python3
"""
Relay Failover Controller - Main Entry Point

Loads the YAML configuration, validates it once, and runs the
failover loop until SIGINT/SIGTERM.

Usage:
    relay-failover                      # Use default config.yaml
    relay-failover --config my.yaml     # Use custom config file
    relay-failover --dry-run            # Validate config and exit
    relay-failover --verbose            # Enable debug logging
"""

import argparse
import asyncio
import sys
from pathlib import Path

import yaml

from relay_failover import __version__
from relay_failover.common.config import FailoverConfig, load_failover_config
from relay_failover.common.exceptions import ConfigError
from relay_failover.common.logging_setup import get_service_logger, set_debug
from relay_failover.services.actuator.base import Actuator
from relay_failover.services.actuator.registry import create_actuator
from relay_failover.services.config.validator import ConfigValidator
from relay_failover.services.control.service import FailoverService

# Default configuration path
DEFAULT_CONFIG_PATH = "config.yaml"

logger = get_service_logger("main")


def load_config(config_path: str) -> dict:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration dictionary

    Raises:
        ConfigError: File missing or not valid YAML
    """
    path = Path(config_path)
    if not path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(path, "r") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing {config_path}: {e}")

    logger.info(f"Loaded configuration from {config_path}")
    return config or {}


def build_config(raw: dict) -> FailoverConfig:
    """Validate raw configuration and build FailoverConfig"""
    is_valid, errors = ConfigValidator().validate(raw)
    if not is_valid:
        raise ConfigError("invalid configuration", errors)
    return load_failover_config(raw)


def print_startup_banner(config: FailoverConfig):
    """Print startup information."""
    print()
    print("=" * 60)
    print(f"  RELAY FAILOVER CONTROLLER v{__version__}")
    print("=" * 60)
    print()
    print(f"  Endpoint:          {config.probe.endpoint}")
    print(f"  Credential:        {'set' if config.probe.credential else 'none'}")
    print(f"  Check interval:    {config.control.check_interval_s}s")
    print(f"  Failure threshold: {config.control.failure_threshold}")
    print(f"  Channel:           {config.control.channel_id}")
    print(f"  Actuator:          {config.actuator.driver}")
    if config.health.enabled:
        print(f"  Health:            http://{config.health.host}:{config.health.port}/health")
    print()
    print("=" * 60)
    print()


async def main_async(config: FailoverConfig, actuator: Actuator):
    """
    Async main function that runs the failover service.

    Args:
        config: Validated configuration
        actuator: Actuator resolved from config.actuator
    """
    service = FailoverService(config, actuator)

    try:
        await service.start()
    finally:
        await service.stop()


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Relay Failover Controller",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    relay-failover                      # Start with default config
    relay-failover --config my.yaml     # Use custom config file
    relay-failover --dry-run            # Validate config and exit
    relay-failover -v                   # Enable debug logging
        """
    )

    parser.add_argument(
        "--config", "-c",
        type=str,
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to configuration file (default: {DEFAULT_CONFIG_PATH})"
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate configuration and exit without starting"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (debug) logging"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Relay Failover Controller v{__version__}"
    )

    args = parser.parse_args()

    try:
        config = build_config(load_config(args.config))
        actuator = create_actuator(config.actuator)
    except ConfigError as e:
        print(e.message)
        for error in e.errors:
            print(f"  - {error}")
        sys.exit(1)

    set_debug(args.verbose or config.debug)

    print_startup_banner(config)

    if args.dry_run:
        print("Dry run mode - configuration valid")
        sys.exit(0)

    print("Press Ctrl+C to stop")
    print()

    try:
        asyncio.run(main_async(config, actuator))
    except KeyboardInterrupt:
        print("\nStopped by user")


if __name__ == "__main__":
    main()
