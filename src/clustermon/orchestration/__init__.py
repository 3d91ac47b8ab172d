"""
Orchestration of monitoring sessions.

This module exposes MonitoringSession, which runs sampling on a worker thread
while the caller waits, and the SignalHandler routing SIGINT/SIGTERM to
cancellation.
"""

from .session import MonitoringSession, configure_logging
from .signal_handler import SignalHandler

__all__ = [
    "MonitoringSession",
    "SignalHandler",
    "configure_logging",
]
