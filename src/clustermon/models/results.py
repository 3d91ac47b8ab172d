"""
Monitoring results data models and aggregation structures.

This module defines the data structures produced by a monitoring session:
the per-category trends collected by the sampler, the issues and
recommendations derived from them by trend analysis, and the container that
brings both together for the caller.

Trends can be exported to polars DataFrames for tabular inspection.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

import polars as pl

from ..validation.exceptions import CancellationError
from .samples import SAMPLE_TYPES, MetricCategory, Sample


class SamplerState(Enum):
    """Lifecycle of a sampler; transitions only move forward."""
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class IssueSeverity(str, Enum):
    CRITICAL = "CRITICAL"
    WARNING = "WARNING"


class IssueType(str, Enum):
    CLUSTER_STATUS = "Cluster Status"
    SHARD_ASSIGNMENT = "Shard Assignment"
    RESOURCE_USAGE = "Resource Usage"
    PERFORMANCE = "Performance"


@dataclass(frozen=True)
class Issue:
    """
    A problem detected across the samples of one trend.

    first_seen and last_seen span the whole trend that produced the issue,
    not only the samples that crossed the threshold.
    """

    severity: IssueSeverity
    type: IssueType
    description: str
    occurrences: int
    first_seen: datetime
    last_seen: datetime


@dataclass
class Trend:
    """
    Samples of a single metric category in tick order.

    Order is the order of appending. Sample timestamps come from the wall
    clock and are not required to increase; a clock step backwards between
    ticks does not reorder or reject anything.
    """

    category: MetricCategory
    samples: List[Sample] = field(default_factory=list)

    def accepts(self, sample: Any) -> bool:
        return isinstance(sample, SAMPLE_TYPES[self.category])

    def append(self, sample: Sample) -> None:
        if not self.accepts(sample):
            raise TypeError(
                f"{self.category.label} trend expects {SAMPLE_TYPES[self.category].__name__}, "
                f"got {type(sample).__name__}"
            )
        self.samples.append(sample)

    def __len__(self) -> int:
        return len(self.samples)

    def __iter__(self) -> Iterator[Sample]:
        return iter(self.samples)

    def __getitem__(self, index: int) -> Sample:
        return self.samples[index]

    @property
    def first_seen(self) -> Optional[datetime]:
        return self.samples[0].timestamp if self.samples else None

    @property
    def last_seen(self) -> Optional[datetime]:
        return self.samples[-1].timestamp if self.samples else None

    def to_frame(self) -> pl.DataFrame:
        """Flatten the trend into one DataFrame row per sample entry."""
        rows = [row for sample in self.samples for row in sample.to_rows()]
        if not rows:
            return pl.DataFrame()
        return pl.DataFrame(rows)


def new_trends() -> Dict[MetricCategory, Trend]:
    """Return one empty trend per metric category, in sampling order."""
    return {category: Trend(category) for category in MetricCategory}


@dataclass
class MonitoringResult:
    """
    Complete outcome of a monitoring session.

    sample_count counts ticks whose six categories were all collected;
    skipped_ticks counts ticks abandoned because one fetch failed. Every trend
    therefore holds exactly sample_count samples.
    """

    duration: float
    interval: float
    sample_count: int = 0
    skipped_ticks: int = 0
    trends: Dict[MetricCategory, Trend] = field(default_factory=new_trends)
    issues: List[Issue] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    state: SamplerState = SamplerState.IDLE
    # Set when the session was interrupted before its duration elapsed.
    cancellation: Optional[CancellationError] = None
    error_summary: Dict[str, Any] = field(default_factory=dict)

    @property
    def cancelled(self) -> bool:
        return self.cancellation is not None

    def trend(self, category: MetricCategory) -> Trend:
        return self.trends[category]

    def to_frames(self) -> Dict[str, pl.DataFrame]:
        return {category.value: trend.to_frame() for category, trend in self.trends.items()}
