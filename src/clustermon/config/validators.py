"""
Configuration validation utilities.

This module turns the raw `[monitor]` table of `config.toml` into a validated
MonitorConfig.
"""

import logging
from typing import Any, Dict

from ..constants import (
    DEFAULT_INTERVAL_SECONDS,
    DEFAULT_REQUEST_TIMEOUT,
    INTERVAL_DIVISOR,
    MIN_INTERVAL_SECONDS,
    MIN_REQUEST_TIMEOUT,
)
from ..models.config import MonitorConfig
from ..validation import (
    ValidationError,
    validate_enum_choice,
    validate_positive_float,
    validate_positive_integer,
)

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def validate_monitor_config(monitor_data: Dict[str, Any]) -> MonitorConfig:
    """
    Validate and create a MonitorConfig from raw configuration data.

    Args:
        monitor_data: Raw monitor configuration from TOML

    Returns:
        Validated MonitorConfig instance

    Raises:
        ValidationError: If validation fails
    """
    if not isinstance(monitor_data, dict):
        raise ValidationError("[monitor] must be a table", field_name="monitor", value=monitor_data)

    general_settings = _section(monitor_data, "general")
    connection_settings = _section(monitor_data, "connection")
    sampling_settings = _section(monitor_data, "sampling")

    request_timeout = validate_positive_integer(
        connection_settings.get("request_timeout", DEFAULT_REQUEST_TIMEOUT),
        min_value=MIN_REQUEST_TIMEOUT,
        max_value=3600,
        field_name="monitor.connection.request_timeout",
    )

    min_interval_seconds = validate_positive_float(
        sampling_settings.get("min_interval_seconds", MIN_INTERVAL_SECONDS),
        min_value=0.001,
        max_value=3600.0,
        field_name="monitor.sampling.min_interval_seconds",
    )

    interval_seconds = validate_positive_float(
        sampling_settings.get("interval_seconds", DEFAULT_INTERVAL_SECONDS),
        min_value=min_interval_seconds,
        max_value=86400.0,
        field_name="monitor.sampling.interval_seconds",
    )

    interval_divisor = validate_positive_integer(
        sampling_settings.get("interval_divisor", INTERVAL_DIVISOR),
        min_value=1,
        max_value=100,
        field_name="monitor.sampling.interval_divisor",
    )

    log_level = validate_enum_choice(
        general_settings.get("log_level", "INFO"),
        choices=LOG_LEVELS,
        field_name="monitor.general.log_level",
        case_sensitive=False,
    )

    config = MonitorConfig(
        request_timeout=request_timeout,
        interval_seconds=interval_seconds,
        min_interval_seconds=min_interval_seconds,
        interval_divisor=interval_divisor,
        log_level=log_level,
    )
    logger.debug(f"Validated monitor configuration: {config}")
    return config


def _section(monitor_data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = monitor_data.get(name, {})
    if not isinstance(section, dict):
        raise ValidationError(
            f"monitor.{name} must be a table", field_name=f"monitor.{name}", value=section
        )
    return section
