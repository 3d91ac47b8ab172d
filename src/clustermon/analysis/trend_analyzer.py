"""
Threshold-based analysis of monitoring trends.

Each rule inspects one trend and yields at most one issue. Rules are applied
in a fixed order (cluster health, resources, performance) so the resulting
issue list, and the recommendations derived from it, are deterministic for a
given set of trends.
"""

import logging
from typing import Dict, List, Tuple

from .. import constants as c
from ..models.results import Issue, IssueSeverity, IssueType, Trend
from ..models.samples import MetricCategory

logger = logging.getLogger(__name__)

HEALTHY_RECOMMENDATION = "Cluster is performing well - continue monitoring for trends"
FOLLOW_UP_RECOMMENDATION = "Schedule regular health checks and monitor identified issues"

RECOMMENDATIONS = {
    (IssueType.CLUSTER_STATUS, IssueSeverity.CRITICAL):
        "Investigate cluster RED status immediately - check node failures and shard allocation",
    (IssueType.CLUSTER_STATUS, IssueSeverity.WARNING):
        "Monitor cluster status - consider rebalancing if YELLOW persists",
    (IssueType.SHARD_ASSIGNMENT, IssueSeverity.WARNING):
        "Review shard allocation and node capacity - unassigned shards indicate resource constraints",
    (IssueType.RESOURCE_USAGE, IssueSeverity.WARNING):
        "Review resource allocation and consider scaling up nodes or optimizing usage",
    (IssueType.PERFORMANCE, IssueSeverity.WARNING):
        "Investigate performance bottlenecks - check indexing patterns and query optimization",
}


def _issue(trend: Trend, severity: IssueSeverity, issue_type: IssueType,
           description: str, occurrences: int) -> Issue:
    return Issue(
        severity=severity,
        type=issue_type,
        description=description,
        occurrences=occurrences,
        first_seen=trend.first_seen,
        last_seen=trend.last_seen,
    )


def analyze_cluster_health(trend: Trend, sample_count: int) -> List[Issue]:
    """Flag RED and mostly-YELLOW status, and any unassigned shards."""
    if not trend:
        return []

    red = sum(1 for sample in trend if sample.status == c.HEALTH_RED)
    yellow = sum(1 for sample in trend if sample.status == c.HEALTH_YELLOW)
    unassigned = sum(sample.unassigned_shards for sample in trend)

    issues = []
    if red > 0:
        issues.append(_issue(
            trend, IssueSeverity.CRITICAL, IssueType.CLUSTER_STATUS,
            f"Cluster was RED in {red}/{sample_count} samples", red,
        ))
    if yellow > sample_count // 2:
        issues.append(_issue(
            trend, IssueSeverity.WARNING, IssueType.CLUSTER_STATUS,
            f"Cluster was YELLOW in {yellow}/{sample_count} samples (>50%)", yellow,
        ))
    if unassigned > 0:
        issues.append(_issue(
            trend, IssueSeverity.WARNING, IssueType.SHARD_ASSIGNMENT,
            f"Total unassigned shards across samples: {unassigned}", unassigned,
        ))
    return issues


def analyze_resource_usage(trend: Trend, sample_count: int) -> List[Issue]:
    """Flag sustained heap pressure and any sample with a nearly full disk."""
    if not trend:
        return []

    issues = []
    high_heap = sum(1 for sample in trend if sample.heap_percent > c.HIGH_HEAP_PERCENT)
    max_heap = max(0.0, max(sample.heap_percent for sample in trend))
    if high_heap > sample_count // 3:
        issues.append(_issue(
            trend, IssueSeverity.WARNING, IssueType.RESOURCE_USAGE,
            f"High heap usage (>80%) in {high_heap}/{sample_count} samples, max: {max_heap:.1f}%",
            high_heap,
        ))

    high_disk = sum(1 for sample in trend if sample.disk_percent > c.HIGH_DISK_PERCENT)
    if high_disk > 0:
        issues.append(_issue(
            trend, IssueSeverity.WARNING, IssueType.RESOURCE_USAGE,
            f"High disk usage (>85%) in {high_disk}/{sample_count} samples",
            high_disk,
        ))
    return issues


def _slow_operation_stats(trend: Trend, total_attr: str, time_attr: str,
                          threshold_ms: float) -> Tuple[int, int, int]:
    """
    Count samples whose average latency exceeds the threshold.

    Returns (slow samples, summed time, summed count); samples without any
    operations are left out of all three.
    """
    slow = total_time = total_count = 0
    for sample in trend:
        count = getattr(sample, total_attr)
        if count <= 0:
            continue
        elapsed = getattr(sample, time_attr)
        if elapsed / count > threshold_ms:
            slow += 1
        total_time += elapsed
        total_count += count
    return slow, total_time, total_count


def analyze_performance(trend: Trend, sample_count: int) -> List[Issue]:
    """Flag slow indexing and slow searches from the cumulative counters."""
    if not trend:
        return []

    issues = []
    slow, total_time, total_count = _slow_operation_stats(
        trend, "index_total", "index_time_ms", c.SLOW_INDEX_MS
    )
    if slow > 0 and total_count > 0:
        issues.append(_issue(
            trend, IssueSeverity.WARNING, IssueType.PERFORMANCE,
            f"Slow indexing (>100ms avg) in {slow}/{sample_count} samples, "
            f"overall avg: {total_time / total_count:.1f}ms",
            slow,
        ))

    slow, total_time, total_count = _slow_operation_stats(
        trend, "query_total", "query_time_ms", c.SLOW_SEARCH_MS
    )
    if slow > 0 and total_count > 0:
        issues.append(_issue(
            trend, IssueSeverity.WARNING, IssueType.PERFORMANCE,
            f"Slow searches (>50ms avg) in {slow}/{sample_count} samples, "
            f"overall avg: {total_time / total_count:.1f}ms",
            slow,
        ))
    return issues


def generate_recommendations(issues: List[Issue]) -> List[str]:
    """
    Map issues to advisory strings.

    One recommendation per issue, in issue order, followed by a closing
    follow-up line. Without issues the single healthy-cluster line is returned.
    """
    if not issues:
        return [HEALTHY_RECOMMENDATION]

    recommendations = []
    for issue in issues:
        recommendation = RECOMMENDATIONS.get((issue.type, issue.severity))
        if recommendation:
            recommendations.append(recommendation)
    recommendations.append(FOLLOW_UP_RECOMMENDATION)
    return recommendations


def analyze_trends(
    trends: Dict[MetricCategory, Trend], sample_count: int
) -> Tuple[List[Issue], List[str]]:
    """
    Derive issues and recommendations from the collected trends.

    Args:
        trends: Trends keyed by metric category; missing categories count as empty
        sample_count: Number of complete ticks, used as the denominator of every rule

    Returns:
        Tuple of (issues, recommendations)
    """
    def trend_of(category: MetricCategory) -> Trend:
        return trends.get(category) or Trend(category)

    issues: List[Issue] = []
    issues.extend(analyze_cluster_health(trend_of(MetricCategory.CLUSTER_HEALTH), sample_count))
    issues.extend(analyze_resource_usage(trend_of(MetricCategory.RESOURCE_USAGE), sample_count))
    issues.extend(analyze_performance(trend_of(MetricCategory.PERFORMANCE), sample_count))

    recommendations = generate_recommendations(issues)
    logger.debug(f"Trend analysis over {sample_count} samples found {len(issues)} issues")
    return issues, recommendations
