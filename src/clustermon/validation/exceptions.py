"""
Exception taxonomy and error handling helpers.

This module defines the errors raised across the monitoring core together with
the consistent logging helpers used wherever an error is caught:

- DeadlineExceeded: a guarded operation did not finish before its deadline
- FetchError: one metric category could not be fetched or parsed
- PartialTickAbort: a sampling tick was dropped because of a FetchError
- CancellationError: a monitoring session was interrupted externally
"""

import logging
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)

TIMEOUT_MESSAGE = "request timed out"


class ErrorSeverity(Enum):
    """Severity levels for error handling."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ValidationError(Exception):
    """
    Exception raised when validation fails.

    Used for configuration values and guard/sampler arguments.
    """

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Any = None, severity: ErrorSeverity = ErrorSeverity.ERROR):
        super().__init__(message)
        self.field_name = field_name
        self.value = value
        self.severity = severity


class ClusterMonitorError(Exception):
    """Base class for errors raised by the monitoring core."""


class DeadlineExceeded(ClusterMonitorError, TimeoutError):
    """
    Raised when a guarded operation does not complete before its deadline.

    The operation itself is not interrupted; it keeps running in the
    background and its eventual result is discarded.
    """

    def __init__(self, timeout: float, operation: str = "operation"):
        super().__init__(f"{operation} did not complete within {timeout}s")
        self.timeout = timeout
        self.operation = operation


class FetchError(ClusterMonitorError):
    """Raised when the fetch of a single metric category fails."""

    def __init__(self, category: str, cause: BaseException):
        super().__init__(f"failed to fetch {category}: {cause}")
        self.category = category
        self.cause = cause


class PartialTickAbort(ClusterMonitorError):
    """
    Describes a sampling tick that was dropped after a category fetch failed.

    Never raised out of the sampler; it is logged and recorded instead.
    """

    def __init__(self, category: str, timestamp: datetime, cause: BaseException):
        super().__init__(
            f"tick at {timestamp:%H:%M:%S} abandoned after {category} failed: {cause}"
        )
        self.category = category
        self.timestamp = timestamp
        self.cause = cause


class CancellationError(ClusterMonitorError):
    """Reported when a monitoring session is interrupted before completion."""

    def __init__(self, message: str = "monitoring cancelled", sample_count: int = 0):
        super().__init__(message)
        self.sample_count = sample_count


def is_timeout(error: BaseException) -> bool:
    """Return True if the error, or the cause it wraps, is a deadline error."""
    if isinstance(error, (DeadlineExceeded, TimeoutError)):
        return True
    cause = getattr(error, "cause", None)
    return isinstance(cause, BaseException) and is_timeout(cause)


def describe_error(error: BaseException) -> str:
    """
    Render an error the way the operator-facing boundary reports it.

    Deadline errors render as a distinct "request timed out" message; every
    other error keeps its own text.
    """
    if is_timeout(error):
        return TIMEOUT_MESSAGE
    return f"request failed: {error}"


def handle_error(
    error: Exception,
    context: str,
    severity: Union[ErrorSeverity, str] = ErrorSeverity.ERROR,
    reraise: bool = True,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Handle errors with consistent logging and optional re-raising.

    Args:
        error: The exception that occurred
        context: Context description of where the error occurred
        severity: Severity level for logging
        reraise: Whether to re-raise the exception after logging
        logger: Logger instance to use (defaults to module logger)
    """
    effective_logger = logger or globals()['logger']

    error_msg = f"Error in {context}: {error}"

    if isinstance(severity, str):
        severity_str = severity.lower()
    else:
        severity_str = severity.value

    if severity_str == "debug":
        effective_logger.debug(error_msg, exc_info=True)
    elif severity_str == "info":
        effective_logger.info(error_msg)
    elif severity_str == "warning":
        effective_logger.warning(error_msg)
    elif severity_str == "error":
        effective_logger.error(error_msg)
    elif severity_str == "critical":
        effective_logger.critical(error_msg, exc_info=True)

    if reraise:
        raise error


def handle_config_error(error: Exception, context: str, **kwargs) -> None:
    """Handle configuration-related errors."""
    handle_error(error, f"config {context}", **kwargs)
