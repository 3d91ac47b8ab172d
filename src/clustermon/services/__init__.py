"""
Cluster-facing services for the clustermon package.

CheckService fetches and parses the metric categories, IndexService derives
current per-index rates from repeated observations.
"""

from .check_service import SEGMENTS_CHECK, SHARD_BALANCE_CHECK, CheckService
from .index_service import IndexDetail, IndexService

__all__ = [
    "CheckService",
    "SEGMENTS_CHECK",
    "SHARD_BALANCE_CHECK",
    "IndexDetail",
    "IndexService",
]
