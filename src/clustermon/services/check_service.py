"""
Per-category metric fetching.

CheckService turns raw documents from a TelemetrySource into typed samples,
one method per metric category. When a BoundedExecutionGuard is supplied,
every request to the cluster runs under its deadline.

Failures are reported uniformly: a missed deadline surfaces as
DeadlineExceeded, anything else (transport error, unexpected document shape)
as FetchError naming the category.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Optional, TypeVar

from ..executor import BoundedExecutionGuard
from ..models.checks import CheckResult, HealthCheckReport, SegmentWarnings, ShardBalance
from ..models.samples import (
    ClusterHealthSample,
    IndexHealthSample,
    MetricCategory,
    NodeHealthSample,
    PerformanceSample,
    ResourceUsageSample,
    Sample,
    ShardHealthSample,
)
from ..telemetry.base import Document, TelemetrySource
from ..validation import DeadlineExceeded, FetchError, describe_error

logger = logging.getLogger(__name__)

T = TypeVar("T")

SEGMENTS_CHECK = "segments"
SHARD_BALANCE_CHECK = "shard_balance"


class CheckService:
    """
    Fetches and parses metric categories from a telemetry source.

    Args:
        source: Read-only access to the cluster
        guard: Optional guard bounding every request
        clock: Returns the timestamp stamped on each sample
    """

    def __init__(
        self,
        source: TelemetrySource,
        guard: Optional[BoundedExecutionGuard] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.source = source
        self.guard = guard
        self._clock = clock
        self._fetchers: Dict[MetricCategory, Callable[[], Sample]] = {
            MetricCategory.CLUSTER_HEALTH: self.get_cluster_health,
            MetricCategory.NODE_HEALTH: self.get_node_health,
            MetricCategory.SHARD_HEALTH: self.get_shard_health,
            MetricCategory.INDEX_HEALTH: self.get_index_health,
            MetricCategory.RESOURCE_USAGE: self.get_resource_usage,
            MetricCategory.PERFORMANCE: self.get_performance,
        }

    def fetch(self, category: MetricCategory) -> Sample:
        """Fetch one sample of the given category."""
        return self._fetchers[category]()

    def get_cluster_health(self) -> ClusterHealthSample:
        return self._fetch_sample(
            MetricCategory.CLUSTER_HEALTH, self.source.get_cluster_health,
            ClusterHealthSample.from_document,
        )

    def get_node_health(self) -> NodeHealthSample:
        return self._fetch_sample(
            MetricCategory.NODE_HEALTH, self.source.get_nodes_stats,
            NodeHealthSample.from_document,
        )

    def get_shard_health(self) -> ShardHealthSample:
        return self._fetch_sample(
            MetricCategory.SHARD_HEALTH, self.source.get_shards,
            ShardHealthSample.from_document,
        )

    def get_index_health(self) -> IndexHealthSample:
        return self._fetch_sample(
            MetricCategory.INDEX_HEALTH, self.source.get_indices,
            IndexHealthSample.from_document,
        )

    def get_resource_usage(self) -> ResourceUsageSample:
        return self._fetch_sample(
            MetricCategory.RESOURCE_USAGE, self.source.get_nodes_stats,
            ResourceUsageSample.from_document,
        )

    def get_performance(self) -> PerformanceSample:
        return self._fetch_sample(
            MetricCategory.PERFORMANCE, self.source.get_cluster_stats,
            PerformanceSample.from_document,
        )

    def get_segment_warnings(self) -> SegmentWarnings:
        return self._fetch(
            SEGMENTS_CHECK, lambda: self.source.get_index_stats(""),
            SegmentWarnings.from_document,
        )

    def get_shard_balance(self) -> ShardBalance:
        return self._fetch(
            SHARD_BALANCE_CHECK, self.source.get_shards,
            ShardBalance.from_document,
        )

    def run_health_check(self) -> HealthCheckReport:
        """
        Run every check once and collect the outcomes.

        A failing check never stops the others; its error is rendered into
        the report, with missed deadlines shown as "request timed out".
        """
        report = HealthCheckReport()
        checks = [(category.value, fetcher) for category, fetcher in self._fetchers.items()]
        checks.append((SEGMENTS_CHECK, self.get_segment_warnings))
        checks.append((SHARD_BALANCE_CHECK, self.get_shard_balance))

        for name, fetcher in checks:
            try:
                report.add(CheckResult(name, value=fetcher()))
            except (DeadlineExceeded, FetchError) as e:
                logger.warning(f"Health check {name} failed: {e}")
                report.add(CheckResult(name, error=describe_error(e)))

        logger.info(f"Health check finished, {len(report.failed)} of {len(checks)} checks failed")
        return report

    def _fetch_sample(
        self,
        category: MetricCategory,
        request: Callable[[], Document],
        parse: Callable[[Any, datetime], T],
    ) -> T:
        timestamp = self._clock()
        return self._fetch(category.label, request, lambda doc: parse(doc, timestamp))

    def _fetch(
        self,
        name: str,
        request: Callable[[], Document],
        parse: Callable[[Any], T],
    ) -> T:
        try:
            if self.guard is not None:
                document = self.guard.run(request, name=f"fetch {name}")
            else:
                document = request()
            return parse(document)
        except DeadlineExceeded:
            raise
        except Exception as e:
            raise FetchError(name, e) from e
