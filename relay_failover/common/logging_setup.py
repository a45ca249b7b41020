"""
Structured Logging Setup

Consistent logging configuration across all services.
Uses JSON format for structured logs in production.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

# Standard LogRecord attributes that are not copied as extra fields
_RESERVED_ATTRS = {
    "name", "msg", "args", "levelname", "levelno", "pathname",
    "filename", "module", "exc_info", "exc_text", "stack_info",
    "lineno", "funcName", "created", "msecs", "relativeCreated",
    "thread", "threadName", "processName", "process", "service",
    "message", "taskName",
}


class JsonFormatter(logging.Formatter):
    """JSON log formatter for structured logging"""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "service": getattr(record, "service", "unknown"),
            "message": record.getMessage(),
            "logger": record.name,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value

        return json.dumps(log_data, default=str)


class ServiceLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that adds service name to all logs"""

    def process(self, msg: str, kwargs: dict) -> tuple[str, dict]:
        kwargs.setdefault("extra", {})
        kwargs["extra"]["service"] = self.extra.get("service", "unknown")
        return msg, kwargs


def setup_logging(
    service_name: str,
    log_level: str = "INFO",
    json_format: bool = True,
) -> logging.Logger:
    """
    Set up structured logging for a service.

    Args:
        service_name: Name of the service (e.g., "probe", "control")
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON format (True for production, False for dev)

    Returns:
        Configured logger instance
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    logger = logging.getLogger(f"relay_failover.{service_name}")
    logger.setLevel(numeric_level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)

    if json_format:
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler.setFormatter(formatter)
    logger.addHandler(handler)

    # Don't propagate to root logger
    logger.propagate = False

    return logger


def get_service_logger(service_name: str) -> ServiceLoggerAdapter:
    """
    Get a logger adapter with service context.

    Args:
        service_name: Name of the service

    Returns:
        Logger adapter with service name in all logs
    """
    log_level = os.environ.get("RELAY_FAILOVER_LOG_LEVEL", "INFO")
    json_format = os.environ.get("RELAY_FAILOVER_LOG_FORMAT", "json").lower() == "json"

    logger = setup_logging(service_name, log_level, json_format)
    return ServiceLoggerAdapter(logger, {"service": service_name})


def set_debug(enabled: bool) -> None:
    """Switch every relay_failover logger to DEBUG (or back to INFO)"""
    level = logging.DEBUG if enabled else logging.INFO
    for name in list(logging.root.manager.loggerDict):
        if name == "relay_failover" or name.startswith("relay_failover."):
            logger = logging.getLogger(name)
            logger.setLevel(level)
            for handler in logger.handlers:
                handler.setLevel(level)


# Convenience loggers for control loop events
def log_probe(
    logger: logging.Logger,
    endpoint: str,
    success: bool,
    latency_ms: float,
    error_detail: str | None = None,
    status_code: int | None = None,
) -> None:
    """Log a probe outcome"""
    extra = {
        "event": "probe",
        "endpoint": endpoint,
        "success": success,
        "latency_ms": round(latency_ms, 1),
        "status_code": status_code,
    }
    if success:
        logger.info(f"Probe OK {endpoint} ({latency_ms:.0f}ms)", extra=extra)
    else:
        extra["error"] = error_detail
        logger.warning(f"Probe FAILED {endpoint}: {error_detail}", extra=extra)


def log_threshold_crossing(
    logger: logging.Logger,
    decision: str,
    consecutive_failures: int,
    consecutive_successes: int,
    failure_threshold: int,
) -> None:
    """Log a debounce threshold crossing"""
    logger.info(
        f"Debounce decision: {decision} "
        f"(failures={consecutive_failures}/{failure_threshold}, "
        f"successes={consecutive_successes})",
        extra={
            "event": "debounce",
            "decision": decision,
            "consecutive_failures": consecutive_failures,
            "consecutive_successes": consecutive_successes,
            "failure_threshold": failure_threshold,
        },
    )


def log_actuator_call(
    logger: logging.Logger,
    operation: str,
    channel_id: int,
    mode: str | None,
    success: bool = True,
    error: str | None = None,
    attempt: int | None = None,
) -> None:
    """Log an actuator call attempt or result"""
    extra: dict[str, Any] = {
        "event": "actuator",
        "operation": operation,
        "channel_id": channel_id,
        "mode": mode,
        "success": success,
    }
    if attempt is not None:
        extra["attempt"] = attempt

    if success:
        logger.info(f"Actuator {operation} channel={channel_id} mode={mode}", extra=extra)
    else:
        extra["error"] = error
        logger.error(
            f"Actuator {operation} failed channel={channel_id} mode={mode}: {error}",
            extra=extra,
        )
