"""
Validation and error handling for the clustermon package.

This module provides the error taxonomy of the monitoring core, input
validation and consistent error reporting across the application.
"""

from .exceptions import (
    TIMEOUT_MESSAGE,
    CancellationError,
    ClusterMonitorError,
    DeadlineExceeded,
    ErrorSeverity,
    FetchError,
    PartialTickAbort,
    ValidationError,
    describe_error,
    handle_config_error,
    handle_error,
    is_timeout,
)
from .error_handler import ErrorContext, MonitorErrorHandler, MonitorErrorType
from .validators import (
    validate_enum_choice,
    validate_positive_float,
    validate_positive_integer,
)

__all__ = [
    # Error taxonomy
    "ClusterMonitorError",
    "DeadlineExceeded",
    "FetchError",
    "PartialTickAbort",
    "CancellationError",
    "TIMEOUT_MESSAGE",
    # Handling
    "ErrorSeverity",
    "ValidationError",
    "describe_error",
    "is_timeout",
    "handle_error",
    "handle_config_error",
    "ErrorContext",
    "MonitorErrorHandler",
    "MonitorErrorType",
    # Validators
    "validate_enum_choice",
    "validate_positive_float",
    "validate_positive_integer",
]
