"""
Configuration loading and the request-timeout source.

Configuration is loaded explicitly and passed into the components that need
it; there is no process-wide configuration instance. The only implicit
behaviour is the fallback: when the configuration cannot be read, sessions
and the guard still get usable defaults.
"""

import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional

from ..models.config import AppConfig
from ..validation import handle_config_error, ErrorSeverity, ValidationError
from .validators import validate_monitor_config

logger = logging.getLogger(__name__)

# Default location of the main configuration file, relative to this package.
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent.parent / "conf" / "config.toml"

# Errors after which the defaults are used instead of the file.
CONFIG_FALLBACK_ERRORS = (FileNotFoundError, ValidationError, tomllib.TOMLDecodeError)


def _read_config_file(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        raise FileNotFoundError(f"clustermon configuration not found: {path}")
    with open(path, "rb") as f:
        return tomllib.load(f)


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """
    Load the complete application configuration from a TOML file.

    Args:
        config_path: Path to config.toml; defaults to DEFAULT_CONFIG_PATH

    Returns:
        Fully validated AppConfig instance

    Raises:
        FileNotFoundError: If the configuration file is missing
        ValidationError: If configuration validation fails
        tomllib.TOMLDecodeError: If the TOML file is malformed
    """
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH

    try:
        data = _read_config_file(path)
        monitor_config = validate_monitor_config(data.get("monitor", {}))
    except FileNotFoundError:
        raise
    except Exception as e:
        handle_config_error(
            error=e,
            context=f"loading {path}",
            severity=ErrorSeverity.ERROR,
            reraise=True,
            logger=logger
        )
        raise

    logger.info(f"Loaded configuration from {path}")
    return AppConfig(monitor=monitor_config, source_path=path)


def load_config_or_default(config_path: Optional[Path] = None) -> AppConfig:
    """
    Load the configuration, falling back to the built-in defaults.

    A missing, malformed or invalid file is logged as a warning and an
    AppConfig with default values (request timeout DEFAULT_REQUEST_TIMEOUT)
    is returned instead.
    """
    try:
        return load_config(config_path)
    except CONFIG_FALLBACK_ERRORS as e:
        logger.warning(f"Using default configuration: {e}")
        return AppConfig()


def resolve_request_timeout(config_path: Optional[Path] = None) -> int:
    """
    Return the default guard timeout in seconds.

    The value comes from ``[monitor.connection].request_timeout``. When the
    configuration is missing or invalid the hardcoded DEFAULT_REQUEST_TIMEOUT
    is returned instead.
    """
    return load_config_or_default(config_path).monitor.request_timeout
