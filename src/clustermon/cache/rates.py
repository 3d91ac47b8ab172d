"""
Rate and latency derivation from two counter snapshots.

Rates are windowed: they use the difference between the previous and the
current observation. Average latencies are lifetime values computed from the
current cumulative totals only.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..constants import (
    CALCULATING_TEXT,
    LATENCY_FORMAT,
    NO_ACTIVITY_TEXT,
    RATE_FORMAT,
    RATE_FORMAT_FINE,
    RATE_FORMAT_K,
    RATE_THOUSAND,
    UNAVAILABLE_TEXT,
)
from .snapshot_cache import CounterSnapshot

RATE_COUNTERS = ("query_total", "index_total")


class RateState(Enum):
    """Outcome of a rate derivation."""
    CALCULATING = "calculating"  # no previous observation yet
    UNAVAILABLE = "unavailable"  # clock did not advance
    NO_ACTIVITY = "no_activity"  # counter unchanged or reset
    ACTIVE = "active"


@dataclass(frozen=True)
class Rate:
    """A derived per-second rate together with how it was obtained."""

    state: RateState
    per_second: Optional[float] = None

    def __str__(self) -> str:
        if self.state is RateState.ACTIVE:
            return format_rate(self.per_second)
        if self.state is RateState.CALCULATING:
            return CALCULATING_TEXT
        if self.state is RateState.NO_ACTIVITY:
            return NO_ACTIVITY_TEXT
        return UNAVAILABLE_TEXT


def compute_rate(
    previous: Optional[CounterSnapshot],
    current: CounterSnapshot,
    counter: str,
) -> Rate:
    """
    Derive the per-second rate of ``counter`` between two observations.

    Args:
        previous: Earlier snapshot of the same key, or None on first sight
        current: Snapshot just taken
        counter: Either "query_total" or "index_total"

    Returns:
        Rate describing the outcome; ``per_second`` is set only when ACTIVE
    """
    if counter not in RATE_COUNTERS:
        raise ValueError(f"counter must be one of {RATE_COUNTERS}, got {counter!r}")

    if previous is None:
        return Rate(RateState.CALCULATING)

    elapsed = current.captured_at - previous.captured_at
    if elapsed <= 0:
        return Rate(RateState.UNAVAILABLE)

    delta = getattr(current, counter) - getattr(previous, counter)
    if delta <= 0:
        return Rate(RateState.NO_ACTIVITY)

    return Rate(RateState.ACTIVE, delta / elapsed)


def format_rate(rate: float) -> str:
    """
    Format a per-second rate.

    >>> format_rate(2500)
    '2.5K/s'
    >>> format_rate(12.34)
    '12.3/s'
    >>> format_rate(0.456)
    '0.46/s'
    """
    if rate >= RATE_THOUSAND:
        return RATE_FORMAT_K.format(rate / RATE_THOUSAND)
    if rate >= 1:
        return RATE_FORMAT.format(rate)
    return RATE_FORMAT_FINE.format(rate)


def average_latency_ms(cumulative_time_ms: int, cumulative_count: int) -> Optional[float]:
    """Lifetime average time per operation, or None when nothing ran yet."""
    if cumulative_count <= 0:
        return None
    return cumulative_time_ms / cumulative_count


def format_latency(cumulative_time_ms: int, cumulative_count: int) -> str:
    average = average_latency_ms(cumulative_time_ms, cumulative_count)
    if average is None:
        return ""
    return LATENCY_FORMAT.format(average)
