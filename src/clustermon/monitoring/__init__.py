"""
Time-series sampling for the clustermon package.
"""

from .sampler import ClusterSampler, FetchOutcome, Notifier, SamplerConfig

__all__ = [
    "ClusterSampler",
    "FetchOutcome",
    "Notifier",
    "SamplerConfig",
]
