"""
Configuration data models.

This module contains the configuration structures that are passed explicitly
into the guard, the sampler and the session, loaded from `config.toml`.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ..constants import (
    DEFAULT_INTERVAL_SECONDS,
    DEFAULT_REQUEST_TIMEOUT,
    INTERVAL_DIVISOR,
    MIN_INTERVAL_SECONDS,
)


@dataclass
class MonitorConfig:
    """
    Configuration for the monitor's global behavior, loaded from `config.toml`.
    """

    # [monitor.connection]
    request_timeout: int = DEFAULT_REQUEST_TIMEOUT

    # [monitor.sampling]
    interval_seconds: float = DEFAULT_INTERVAL_SECONDS
    min_interval_seconds: float = MIN_INTERVAL_SECONDS
    interval_divisor: int = INTERVAL_DIVISOR

    # [monitor.general]
    log_level: str = "INFO"


@dataclass
class AppConfig:
    """
    The root configuration object that aggregates all loaded settings.
    """

    monitor: MonitorConfig = field(default_factory=MonitorConfig)
    # Where the settings were read from; None when defaults are in use.
    source_path: Optional[Path] = None
