"""
Trend analysis for the clustermon package.
"""

from .trend_analyzer import (
    FOLLOW_UP_RECOMMENDATION,
    HEALTHY_RECOMMENDATION,
    RECOMMENDATIONS,
    analyze_cluster_health,
    analyze_performance,
    analyze_resource_usage,
    analyze_trends,
    generate_recommendations,
)

__all__ = [
    "analyze_trends",
    "analyze_cluster_health",
    "analyze_resource_usage",
    "analyze_performance",
    "generate_recommendations",
    "RECOMMENDATIONS",
    "HEALTHY_RECOMMENDATION",
    "FOLLOW_UP_RECOMMENDATION",
]
