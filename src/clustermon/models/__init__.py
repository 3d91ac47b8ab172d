"""
Data models for the clustermon package.

This module contains the configuration structures, the per-category sample
types and the result containers shared across the package.
"""

from .checks import (
    CheckResult,
    HealthCheckReport,
    SegmentWarnings,
    ShardBalance,
    is_system_index,
)
from .config import AppConfig, MonitorConfig
from .results import (
    Issue,
    IssueSeverity,
    IssueType,
    MonitoringResult,
    SamplerState,
    Trend,
    new_trends,
)
from .samples import (
    SAMPLE_TYPES,
    ClusterHealthSample,
    IndexHealth,
    IndexHealthSample,
    MetricCategory,
    NodeHealth,
    NodeHealthSample,
    PerformanceSample,
    ResourceUsageSample,
    Sample,
    ShardHealthSample,
)

__all__ = [
    # Configuration
    "AppConfig",
    "MonitorConfig",
    # Samples
    "MetricCategory",
    "Sample",
    "SAMPLE_TYPES",
    "ClusterHealthSample",
    "NodeHealth",
    "NodeHealthSample",
    "ShardHealthSample",
    "IndexHealth",
    "IndexHealthSample",
    "ResourceUsageSample",
    "PerformanceSample",
    # Health check
    "CheckResult",
    "HealthCheckReport",
    "SegmentWarnings",
    "ShardBalance",
    "is_system_index",
    # Results
    "Trend",
    "new_trends",
    "Issue",
    "IssueSeverity",
    "IssueType",
    "SamplerState",
    "MonitoringResult",
]
