"""
Bounded request execution for the clustermon package.

This module provides the guard that keeps a single cluster request from
stalling the tool indefinitely.
"""

from .guard import BoundedExecutionGuard, GuardConfig

__all__ = [
    "BoundedExecutionGuard",
    "GuardConfig",
]
