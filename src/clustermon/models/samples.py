"""
Per-category sample data models.

Each metric category has one immutable sample type built from the raw
document returned by the cluster. Parsing goes through the tolerant accessors
in ``telemetry.documents``, so an absent or mistyped field degrades to its
default instead of failing the fetch.

All samples carry the wall-clock timestamp at which they were taken and can
flatten themselves into rows for tabular output.
"""

from collections.abc import Mapping
from dataclasses import dataclass, fields
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Tuple, Union

from .. import constants as c
from ..telemetry.documents import get_int, get_mapping, get_number, get_rows, get_string


class MetricCategory(Enum):
    """Metric categories, declared in the order they are sampled."""
    CLUSTER_HEALTH = "cluster_health"
    NODE_HEALTH = "node_health"
    SHARD_HEALTH = "shard_health"
    INDEX_HEALTH = "index_health"
    RESOURCE_USAGE = "resource_usage"
    PERFORMANCE = "performance"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")


@dataclass(frozen=True)
class ClusterHealthSample:
    """Reading of `_cluster/health`."""

    timestamp: datetime
    cluster_name: str = ""
    status: str = ""
    number_of_nodes: int = 0
    active_primary_shards: int = 0
    active_shards: int = 0
    unassigned_shards: int = 0
    relocating_shards: int = 0
    initializing_shards: int = 0

    @classmethod
    def from_document(cls, document: Any, timestamp: datetime) -> "ClusterHealthSample":
        return cls(
            timestamp=timestamp,
            cluster_name=get_string(document, c.CLUSTER_NAME_FIELD),
            status=get_string(document, c.STATUS_FIELD),
            number_of_nodes=get_int(document, c.NUMBER_OF_NODES_FIELD),
            active_primary_shards=get_int(document, c.ACTIVE_PRIMARY_SHARDS_FIELD),
            active_shards=get_int(document, c.ACTIVE_SHARDS_FIELD),
            unassigned_shards=get_int(document, c.UNASSIGNED_SHARDS_FIELD),
            relocating_shards=get_int(document, c.RELOCATING_SHARDS_FIELD),
            initializing_shards=get_int(document, c.INITIALIZING_SHARDS_FIELD),
        )

    @property
    def is_red(self) -> bool:
        return self.status == c.HEALTH_RED

    @property
    def is_yellow(self) -> bool:
        return self.status == c.HEALTH_YELLOW

    def to_rows(self) -> List[Dict[str, Any]]:
        return [_as_row(self)]


@dataclass(frozen=True)
class NodeHealth:
    """CPU and heap of a single node."""

    node_id: str
    name: str = ""
    cpu_percent: float = 0.0
    heap_percent: float = 0.0


@dataclass(frozen=True)
class NodeHealthSample:
    """Per-node reading of `_nodes/stats` taken in one tick."""

    timestamp: datetime
    nodes: Tuple[NodeHealth, ...] = ()

    @classmethod
    def from_document(cls, document: Any, timestamp: datetime) -> "NodeHealthSample":
        nodes = []
        for node_id, node in get_mapping(document, c.NODES_FIELD).items():
            if not isinstance(node, Mapping):
                continue
            nodes.append(NodeHealth(
                node_id=str(node_id),
                name=get_string(node, c.NAME_FIELD),
                cpu_percent=get_number(node, c.OS_FIELD, c.CPU_FIELD, c.PERCENT_FIELD),
                heap_percent=get_number(node, c.JVM_FIELD, c.MEM_FIELD, c.HEAP_USED_PERCENT_FIELD),
            ))
        return cls(timestamp=timestamp, nodes=tuple(nodes))

    def to_rows(self) -> List[Dict[str, Any]]:
        return [{"timestamp": self.timestamp, **_as_row(node)} for node in self.nodes]


@dataclass(frozen=True)
class ShardHealthSample:
    """Shard state counts from `_cat/shards`."""

    timestamp: datetime
    started_shards: int = 0
    initializing_shards: int = 0
    relocating_shards: int = 0
    unassigned_shards: int = 0

    @classmethod
    def from_document(cls, document: Any, timestamp: datetime) -> "ShardHealthSample":
        counts = {
            c.SHARD_STATE_STARTED: 0,
            c.SHARD_STATE_INITIALIZING: 0,
            c.SHARD_STATE_RELOCATING: 0,
            c.SHARD_STATE_UNASSIGNED: 0,
        }
        for row in get_rows(document):
            state = get_string(row, c.STATE_FIELD)
            if state in counts:
                counts[state] += 1
        return cls(
            timestamp=timestamp,
            started_shards=counts[c.SHARD_STATE_STARTED],
            initializing_shards=counts[c.SHARD_STATE_INITIALIZING],
            relocating_shards=counts[c.SHARD_STATE_RELOCATING],
            unassigned_shards=counts[c.SHARD_STATE_UNASSIGNED],
        )

    def to_rows(self) -> List[Dict[str, Any]]:
        return [_as_row(self)]


@dataclass(frozen=True)
class IndexHealth:
    """One row of `_cat/indices`; docs and size are kept as reported."""

    name: str
    health: str = ""
    status: str = ""
    docs: str = ""
    size: str = ""


@dataclass(frozen=True)
class IndexHealthSample:
    """All index rows of `_cat/indices` taken in one tick."""

    timestamp: datetime
    indices: Tuple[IndexHealth, ...] = ()

    @classmethod
    def from_document(cls, document: Any, timestamp: datetime) -> "IndexHealthSample":
        indices = tuple(
            IndexHealth(
                name=get_string(row, c.INDEX_FIELD),
                health=get_string(row, c.HEALTH_FIELD),
                status=get_string(row, c.STATUS_FIELD),
                docs=get_string(row, c.DOCS_COUNT_FIELD),
                size=get_string(row, c.STORE_SIZE_FIELD),
            )
            for row in get_rows(document)
        )
        return cls(timestamp=timestamp, indices=indices)

    def to_rows(self) -> List[Dict[str, Any]]:
        return [{"timestamp": self.timestamp, **_as_row(index)} for index in self.indices]


@dataclass(frozen=True)
class ResourceUsageSample:
    """
    Cluster-wide resource usage aggregated over all nodes.

    CPU and heap percentages are averaged across nodes; disk sizes are summed.
    """

    timestamp: datetime
    node_count: int = 0
    cpu_percent: float = 0.0
    heap_percent: float = 0.0
    disk_total_bytes: int = 0
    disk_available_bytes: int = 0

    @classmethod
    def from_document(cls, document: Any, timestamp: datetime) -> "ResourceUsageSample":
        node_count = 0
        cpu_sum = 0.0
        heap_sum = 0.0
        disk_total = 0
        disk_available = 0
        for node in get_mapping(document, c.NODES_FIELD).values():
            if not isinstance(node, Mapping):
                continue
            node_count += 1
            cpu_sum += get_number(node, c.OS_FIELD, c.CPU_FIELD, c.PERCENT_FIELD)
            heap_sum += get_number(node, c.JVM_FIELD, c.MEM_FIELD, c.HEAP_USED_PERCENT_FIELD)
            disk_total += get_int(node, c.FS_FIELD, c.TOTAL_FIELD, c.TOTAL_IN_BYTES_FIELD)
            disk_available += get_int(node, c.FS_FIELD, c.TOTAL_FIELD, c.AVAILABLE_IN_BYTES_FIELD)

        return cls(
            timestamp=timestamp,
            node_count=node_count,
            cpu_percent=cpu_sum / node_count if node_count else 0.0,
            heap_percent=heap_sum / node_count if node_count else 0.0,
            disk_total_bytes=disk_total,
            disk_available_bytes=disk_available,
        )

    @property
    def disk_percent(self) -> float:
        """Percentage of disk in use; 0 when the total is unknown."""
        if self.disk_total_bytes == 0:
            return 0.0
        return (self.disk_total_bytes - self.disk_available_bytes) * 100 / self.disk_total_bytes

    def to_rows(self) -> List[Dict[str, Any]]:
        return [{**_as_row(self), "disk_percent": self.disk_percent}]


@dataclass(frozen=True)
class PerformanceSample:
    """Cumulative indexing and search counters from `_cluster/stats`."""

    timestamp: datetime
    index_total: int = 0
    index_time_ms: int = 0
    query_total: int = 0
    query_time_ms: int = 0

    @classmethod
    def from_document(cls, document: Any, timestamp: datetime) -> "PerformanceSample":
        indices = get_mapping(document, c.INDICES_FIELD)
        return cls(
            timestamp=timestamp,
            index_total=get_int(indices, c.INDEXING_FIELD, c.INDEX_TOTAL_FIELD),
            index_time_ms=get_int(indices, c.INDEXING_FIELD, c.INDEX_TIME_IN_MILLIS_FIELD),
            query_total=get_int(indices, c.SEARCH_FIELD, c.QUERY_TOTAL_FIELD),
            query_time_ms=get_int(indices, c.SEARCH_FIELD, c.QUERY_TIME_IN_MILLIS_FIELD),
        )

    def to_rows(self) -> List[Dict[str, Any]]:
        return [_as_row(self)]


Sample = Union[
    ClusterHealthSample,
    NodeHealthSample,
    ShardHealthSample,
    IndexHealthSample,
    ResourceUsageSample,
    PerformanceSample,
]

SAMPLE_TYPES = {
    MetricCategory.CLUSTER_HEALTH: ClusterHealthSample,
    MetricCategory.NODE_HEALTH: NodeHealthSample,
    MetricCategory.SHARD_HEALTH: ShardHealthSample,
    MetricCategory.INDEX_HEALTH: IndexHealthSample,
    MetricCategory.RESOURCE_USAGE: ResourceUsageSample,
    MetricCategory.PERFORMANCE: PerformanceSample,
}


def _as_row(instance: Any) -> Dict[str, Any]:
    return {f.name: getattr(instance, f.name) for f in fields(instance)}
