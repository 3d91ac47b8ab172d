"""
clustermon: Temporal health monitoring for Elasticsearch-style clusters.

This package samples health, resource and performance metrics from a live
cluster over a bounded period and turns the collected trends into prioritized
issues and recommendations.

The package is organized into specialized modules:
- config: Configuration loading and validation
- models: Samples, trends and result data structures
- validation: Error taxonomy, validators and error recording
- executor: Deadline-bounded execution of cluster requests
- cache: Counter snapshots and rate derivation
- telemetry: Interface to the monitored cluster
- services: Per-category fetching and index detail
- monitoring: Time-series sampler
- analysis: Trend analysis and recommendations
- orchestration: Monitoring sessions and signal handling

Usage:
    from clustermon import MonitoringSession, configure_logging
    configure_logging("INFO")
    session = MonitoringSession.from_config_file(source)
    result = session.monitor(duration=60, interval=5)
    for issue in result.issues:
        print(issue.severity.value, issue.description)
"""

from .analysis import analyze_trends
from .cache import SnapshotCache, compute_rate, format_rate
from .config import load_config, resolve_request_timeout
from .executor import BoundedExecutionGuard, GuardConfig
from .models import (
    AppConfig,
    HealthCheckReport,
    Issue,
    IssueSeverity,
    IssueType,
    MetricCategory,
    MonitorConfig,
    MonitoringResult,
    SamplerState,
    Trend,
)
from .monitoring import ClusterSampler, SamplerConfig
from .orchestration import MonitoringSession, configure_logging
from .services import CheckService, IndexDetail, IndexService
from .telemetry import TelemetrySource
from .validation import (
    CancellationError,
    ClusterMonitorError,
    DeadlineExceeded,
    FetchError,
    PartialTickAbort,
    ValidationError,
)

__version__ = "0.1.0"

__all__ = [
    # Main interfaces
    "MonitoringSession",
    "configure_logging",
    "ClusterSampler",
    "SamplerConfig",
    "CheckService",
    "IndexService",
    "IndexDetail",
    "TelemetrySource",
    "BoundedExecutionGuard",
    "GuardConfig",
    "SnapshotCache",
    "compute_rate",
    "format_rate",
    "analyze_trends",
    # Configuration
    "load_config",
    "resolve_request_timeout",
    "AppConfig",
    "MonitorConfig",
    # Models
    "MetricCategory",
    "Trend",
    "Issue",
    "IssueSeverity",
    "IssueType",
    "SamplerState",
    "MonitoringResult",
    "HealthCheckReport",
    # Errors
    "ClusterMonitorError",
    "DeadlineExceeded",
    "FetchError",
    "PartialTickAbort",
    "CancellationError",
    "ValidationError",
]
