"""
Data models for the single-shot health check.

A health check fetches every metric category once and records, per check,
either the parsed value or the message of the error that prevented it.
Besides the six metric categories it also inspects segment counts and the
distribution of started shards across nodes.
"""

from collections import Counter
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .. import constants as c
from ..telemetry.documents import get_int, get_mapping, get_rows, get_string


def is_system_index(name: str) -> bool:
    return name.startswith(c.SYSTEM_INDEX_PREFIXES)


@dataclass(frozen=True)
class SegmentWarnings:
    """Counts of user indices with a suspicious segment layout."""

    high_segment_indices: int = 0
    small_segment_indices: int = 0
    large_segment_indices: int = 0

    @classmethod
    def from_document(cls, document: Any) -> "SegmentWarnings":
        """
        Build the warnings from an all-indices `_stats` response.

        Indices without a segments section are ignored, as are system indices.
        """
        high = small = large = 0
        for name, stats in get_mapping(document, c.INDICES_FIELD).items():
            if is_system_index(str(name)):
                continue
            segments = get_mapping(stats, c.TOTAL_FIELD, c.SEGMENTS_FIELD)
            if not segments:
                continue
            count = get_int(segments, c.COUNT_FIELD)
            size = get_int(segments, c.MEMORY_IN_BYTES_FIELD)

            if count > c.HIGH_SEGMENT_THRESHOLD:
                high += 1
            average = size // count if count > 0 else 0
            if average < c.SMALL_SEGMENT_BYTES:
                small += 1
            if average > c.LARGE_SEGMENT_BYTES:
                large += 1

        return cls(high, small, large)

    @property
    def has_warnings(self) -> bool:
        return bool(self.high_segment_indices or self.small_segment_indices
                    or self.large_segment_indices)


@dataclass(frozen=True)
class ShardBalance:
    """
    Distribution of started shards over nodes.

    ratio is the smallest per-node shard count divided by the largest one; it
    stays None while fewer than two nodes hold started shards.
    """

    node_shards: Dict[str, int] = field(default_factory=dict)
    ratio: Optional[float] = None

    @classmethod
    def from_document(cls, document: Any) -> "ShardBalance":
        counts: Counter = Counter()
        for row in get_rows(document):
            if get_string(row, c.STATE_FIELD) != c.SHARD_STATE_STARTED:
                continue
            owner = _shard_owner(row)
            if owner:
                counts[owner] += 1

        ratio = None
        if len(counts) > 1:
            largest = max(counts.values())
            if largest > 0:
                ratio = min(counts.values()) / largest
        return cls(node_shards=dict(counts), ratio=ratio)

    @property
    def unbalanced(self) -> bool:
        return self.ratio is not None and self.ratio < c.BALANCE_RATIO_THRESHOLD


def _shard_owner(row: Mapping) -> str:
    for key in (c.NODE_FIELD, c.IP_FIELD):
        value = get_string(row, key)
        if value and value != c.UNASSIGNED_NODE:
            return value
    return ""


@dataclass(frozen=True)
class CheckResult:
    """Outcome of one check: a value, or the rendered error message."""

    name: str
    value: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class HealthCheckReport:
    """All check results of one health check, keyed by check name."""

    results: Dict[str, CheckResult] = field(default_factory=dict)

    def add(self, result: CheckResult) -> None:
        self.results[result.name] = result

    def __getitem__(self, name: str) -> CheckResult:
        return self.results[name]

    @property
    def failed(self) -> Dict[str, str]:
        return {name: r.error for name, r in self.results.items() if not r.ok}

    @property
    def ok(self) -> bool:
        return not self.failed
