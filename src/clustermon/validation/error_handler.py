"""
Asynchronous error recording for the sampling loop.

This module provides structured, lock-protected recording of the errors the
sampler absorbs (aborted ticks, fetch timeouts) so that a monitoring session
can report what went wrong without surfacing each failure to the caller.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Dict, Any, List

from .exceptions import ErrorSeverity, is_timeout


class MonitorErrorType(Enum):
    """Types of errors absorbed during monitoring."""
    FETCH_ERROR = "fetch_error"
    TIMEOUT_ERROR = "timeout_error"
    PARTIAL_TICK = "partial_tick"
    CANCELLATION_ERROR = "cancellation_error"
    UNKNOWN_ERROR = "unknown_error"


@dataclass
class ErrorContext:
    """Context information for a recorded error."""
    error_type: MonitorErrorType
    severity: ErrorSeverity
    component: str
    operation: str
    timestamp: datetime
    category: Optional[str] = None
    additional_data: Optional[Dict[str, Any]] = None


class MonitorErrorHandler:
    """
    Records errors with structured logging and per-type counts.

    Errors passed to ``handle_error`` are logged at the level matching their
    severity, appended to a bounded history and counted by type. Nothing is
    retried; recording is purely informational.
    """

    def __init__(self, logger: Optional[logging.Logger] = None, max_history_size: int = 1000):
        self.logger = logger or logging.getLogger(__name__)
        self.error_history: List[ErrorContext] = []
        self.error_counts: Dict[MonitorErrorType, int] = {}
        self.max_history_size = max_history_size
        self._lock = asyncio.Lock()

    async def handle_error(
        self,
        error: Exception,
        context: ErrorContext,
        reraise: bool = False
    ) -> None:
        """
        Record an error and log it with its context.

        Args:
            error: The exception that occurred
            context: Error context information
            reraise: Whether to reraise the exception after recording
        """
        async with self._lock:
            self.error_counts[context.error_type] = self.error_counts.get(context.error_type, 0) + 1
            self.error_history.append(context)
            if len(self.error_history) > self.max_history_size:
                self.error_history.pop(0)

        self._log_error(error, context)

        if reraise:
            raise error

    async def record_tick_abort(
        self,
        error: Exception,
        component: str,
        category: str,
        timestamp: datetime
    ) -> None:
        """
        Record a tick dropped because one category fetch failed.

        Timeouts are classified separately from other fetch failures so the
        summary shows how many ticks were lost to slow responses.
        """
        error_type = (
            MonitorErrorType.TIMEOUT_ERROR if is_timeout(error) else MonitorErrorType.PARTIAL_TICK
        )
        context = ErrorContext(
            error_type=error_type,
            severity=ErrorSeverity.WARNING,
            component=component,
            operation="tick",
            timestamp=timestamp,
            category=category,
        )
        await self.handle_error(error, context)

    async def get_error_summary(self) -> Dict[str, Any]:
        """
        Get a summary of all recorded errors.

        Returns:
            Dictionary containing error statistics and recent errors
        """
        async with self._lock:
            recent_errors = self.error_history[-10:]

            return {
                'total_errors': len(self.error_history),
                'error_counts': {k.value: v for k, v in self.error_counts.items()},
                'recent_errors': [
                    {
                        'error_type': ctx.error_type.value,
                        'severity': ctx.severity.value,
                        'component': ctx.component,
                        'operation': ctx.operation,
                        'category': ctx.category,
                        'timestamp': ctx.timestamp.isoformat(),
                    }
                    for ctx in recent_errors
                ]
            }

    def _log_error(self, error: Exception, context: ErrorContext) -> None:
        log_level = {
            ErrorSeverity.DEBUG: logging.DEBUG,
            ErrorSeverity.INFO: logging.INFO,
            ErrorSeverity.WARNING: logging.WARNING,
            ErrorSeverity.ERROR: logging.ERROR,
            ErrorSeverity.CRITICAL: logging.CRITICAL
        }.get(context.severity, logging.ERROR)

        log_data = {
            'error_type': context.error_type.value,
            'component': context.component,
            'operation': context.operation,
            'category': context.category,
            'exception_type': type(error).__name__,
        }
        if context.additional_data:
            log_data.update(context.additional_data)

        if context.severity in (ErrorSeverity.ERROR, ErrorSeverity.CRITICAL):
            self.logger.log(
                log_level,
                f"Error in {context.component}.{context.operation}: {error}",
                extra=log_data,
                exc_info=True
            )
        else:
            self.logger.log(
                log_level,
                f"{context.severity.value.capitalize()} in {context.component}.{context.operation}: {error}",
                extra=log_data
            )
