"""
Counter snapshots and delta-rate derivation for the clustermon package.
"""

from .rates import (
    Rate,
    RateState,
    average_latency_ms,
    compute_rate,
    format_latency,
    format_rate,
)
from .snapshot_cache import CounterSnapshot, ReadWriteLock, SnapshotCache

__all__ = [
    "CounterSnapshot",
    "ReadWriteLock",
    "SnapshotCache",
    "Rate",
    "RateState",
    "compute_rate",
    "format_rate",
    "average_latency_ms",
    "format_latency",
]
