"""
Centralized constants for the monitoring core.

Field names mirror the cluster REST API responses; thresholds and output
formats are fixed so that reports stay stable between releases.
"""

# --- Timing ---
DEFAULT_REQUEST_TIMEOUT = 5  # seconds, used when no configuration is available
MIN_REQUEST_TIMEOUT = 1
DEFAULT_INTERVAL_SECONDS = 2.0
MIN_INTERVAL_SECONDS = 1.0
INTERVAL_DIVISOR = 2

# --- Health states ---
HEALTH_GREEN = "green"
HEALTH_YELLOW = "yellow"
HEALTH_RED = "red"

SHARD_STATE_STARTED = "STARTED"
SHARD_STATE_INITIALIZING = "INITIALIZING"
SHARD_STATE_RELOCATING = "RELOCATING"
SHARD_STATE_UNASSIGNED = "UNASSIGNED"

# --- Cluster health fields ---
CLUSTER_NAME_FIELD = "cluster_name"
STATUS_FIELD = "status"
NUMBER_OF_NODES_FIELD = "number_of_nodes"
ACTIVE_PRIMARY_SHARDS_FIELD = "active_primary_shards"
ACTIVE_SHARDS_FIELD = "active_shards"
UNASSIGNED_SHARDS_FIELD = "unassigned_shards"
RELOCATING_SHARDS_FIELD = "relocating_shards"
INITIALIZING_SHARDS_FIELD = "initializing_shards"

# --- Node stats fields ---
NODES_FIELD = "nodes"
NAME_FIELD = "name"
OS_FIELD = "os"
CPU_FIELD = "cpu"
PERCENT_FIELD = "percent"
JVM_FIELD = "jvm"
MEM_FIELD = "mem"
HEAP_USED_PERCENT_FIELD = "heap_used_percent"
FS_FIELD = "fs"
TOTAL_FIELD = "total"
TOTAL_IN_BYTES_FIELD = "total_in_bytes"
AVAILABLE_IN_BYTES_FIELD = "available_in_bytes"

# --- _cat fields ---
INDEX_FIELD = "index"
HEALTH_FIELD = "health"
DOCS_COUNT_FIELD = "docs.count"
STORE_SIZE_FIELD = "store.size"
STATE_FIELD = "state"

# --- Stats fields ---
INDICES_FIELD = "indices"
INDEXING_FIELD = "indexing"
SEARCH_FIELD = "search"
INDEX_TOTAL_FIELD = "index_total"
INDEX_TIME_IN_MILLIS_FIELD = "index_time_in_millis"
QUERY_TOTAL_FIELD = "query_total"
QUERY_TIME_IN_MILLIS_FIELD = "query_time_in_millis"

# --- Trend thresholds ---
HIGH_HEAP_PERCENT = 80.0
HIGH_DISK_PERCENT = 85.0
SLOW_INDEX_MS = 100.0
SLOW_SEARCH_MS = 50.0

# --- Rate output ---
RATE_THOUSAND = 1000.0
RATE_FORMAT_K = "{:.1f}K/s"
RATE_FORMAT = "{:.1f}/s"
RATE_FORMAT_FINE = "{:.2f}/s"
LATENCY_FORMAT = "{:.1f}ms"
CALCULATING_TEXT = "Calculating..."
NO_ACTIVITY_TEXT = "-"
UNAVAILABLE_TEXT = "N/A"

# --- Segment checks ---
SEGMENTS_FIELD = "segments"
COUNT_FIELD = "count"
MEMORY_IN_BYTES_FIELD = "memory_in_bytes"
HIGH_SEGMENT_THRESHOLD = 50
SMALL_SEGMENT_BYTES = 1024 * 1024
LARGE_SEGMENT_BYTES = 1024 * 1024 * 1024
SYSTEM_INDEX_PREFIXES = (
    ".", "kibana", "apm", "security", "monitoring", "watcher", "ilm", "slm", "transform",
)

# --- Shard distribution ---
NODE_FIELD = "node"
IP_FIELD = "ip"
UNASSIGNED_NODE = "-"
BALANCE_RATIO_THRESHOLD = 0.7
