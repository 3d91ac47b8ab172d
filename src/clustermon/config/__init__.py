"""
Configuration management for the clustermon package.

This module provides a clean interface for loading and validating
configuration data from TOML files.
"""

from .manager import DEFAULT_CONFIG_PATH, load_config, load_config_or_default, resolve_request_timeout
from .validators import validate_monitor_config

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "load_config",
    "load_config_or_default",
    "resolve_request_timeout",
    "validate_monitor_config",
]
