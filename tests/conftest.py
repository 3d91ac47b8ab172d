"""
Pytest configuration and shared fixtures for the clustermon test suite.

This module provides sample cluster documents, an in-memory telemetry source
and configuration file fixtures shared by all test modules.
"""

import shutil
import sys
import tempfile
import threading
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from clustermon.telemetry.base import TelemetrySource  # noqa: E402


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def sample_config_data():
    """Sample [monitor] configuration data for testing."""
    return {
        "general": {
            "log_level": "INFO",
        },
        "connection": {
            "request_timeout": 5,
        },
        "sampling": {
            "interval_seconds": 2.0,
            "min_interval_seconds": 1.0,
            "interval_divisor": 2,
        },
    }


@pytest.fixture
def config_files(temp_dir, sample_config_data):
    """Create a temporary config.toml for testing."""
    import toml

    config_file = temp_dir / "config.toml"
    with open(config_file, "w") as f:
        toml.dump({"monitor": sample_config_data}, f)

    return {
        "config": config_file,
        "dir": temp_dir,
    }


# ============================================================================
# Cluster Documents
# ============================================================================


def make_cluster_health(status: str = "green", unassigned: int = 0, **overrides) -> Dict[str, Any]:
    document = {
        "cluster_name": "test-cluster",
        "status": status,
        "number_of_nodes": 2,
        "active_primary_shards": 5,
        "active_shards": 10,
        "unassigned_shards": unassigned,
        "relocating_shards": 0,
        "initializing_shards": 0,
    }
    document.update(overrides)
    return document


def make_node(name: str, cpu: float, heap: float, total: int, available: int) -> Dict[str, Any]:
    return {
        "name": name,
        "os": {"cpu": {"percent": cpu}},
        "jvm": {"mem": {"heap_used_percent": heap}},
        "fs": {"total": {"total_in_bytes": total, "available_in_bytes": available}},
    }


def make_nodes_stats(heap: float = 40.0, disk_used_percent: float = 50.0) -> Dict[str, Any]:
    total = 1000
    available = int(total * (100 - disk_used_percent) / 100)
    return {
        "nodes": {
            "n1": make_node("node-1", 10.0, heap, total, available),
            "n2": make_node("node-2", 30.0, heap, total, available),
        }
    }


def make_cluster_stats(index_total: int = 100, index_time: int = 500,
                       query_total: int = 200, query_time: int = 400) -> Dict[str, Any]:
    return {
        "indices": {
            "indexing": {"index_total": index_total, "index_time_in_millis": index_time},
            "search": {"query_total": query_total, "query_time_in_millis": query_time},
        }
    }


@pytest.fixture
def cluster_health_document():
    return make_cluster_health()


@pytest.fixture
def nodes_stats_document():
    return make_nodes_stats()


@pytest.fixture
def cluster_stats_document():
    return make_cluster_stats()


@pytest.fixture
def shards_document():
    return [
        {"index": "logs", "shard": "0", "prirep": "p", "state": "STARTED", "node": "node-1"},
        {"index": "logs", "shard": "0", "prirep": "r", "state": "STARTED", "node": "node-2"},
        {"index": "logs", "shard": "1", "prirep": "p", "state": "STARTED", "node": "node-1"},
        {"index": "logs", "shard": "1", "prirep": "r", "state": "UNASSIGNED", "node": None},
        {"index": "metrics", "shard": "0", "prirep": "p", "state": "RELOCATING", "node": "node-2"},
    ]


@pytest.fixture
def indices_document():
    return [
        {"health": "green", "status": "open", "index": "logs",
         "docs.count": "1200", "store.size": "3.1mb"},
        {"health": "yellow", "status": "open", "index": "metrics",
         "docs.count": "10", "store.size": "12kb"},
    ]


@pytest.fixture
def index_stats_document():
    return {
        "indices": {
            "logs": {
                "total": {
                    "search": {"query_total": 1000, "query_time_in_millis": 2500},
                    "indexing": {"index_total": 400, "index_time_in_millis": 800},
                    "segments": {"count": 60, "memory_in_bytes": 10 * 1024},
                }
            },
            ".kibana": {
                "total": {"segments": {"count": 500, "memory_in_bytes": 10}}
            },
        }
    }


# ============================================================================
# Telemetry Source
# ============================================================================


class FakeTelemetrySource(TelemetrySource):
    """
    In-memory TelemetrySource returning canned documents.

    ``responses`` maps a method name to a document, an exception instance to
    raise, or a callable producing either. ``calls`` records every request.
    """

    def __init__(self, responses: Optional[Dict[str, Any]] = None):
        self.responses: Dict[str, Any] = {
            "get_cluster_health": make_cluster_health(),
            "get_cluster_stats": make_cluster_stats(),
            "get_nodes_stats": make_nodes_stats(),
            "get_indices": [],
            "get_shards": [],
            "get_index_stats": {"indices": {}},
        }
        self.responses.update(responses or {})
        self.calls: List[str] = []
        self._lock = threading.Lock()

    def _respond(self, method: str, *args):
        with self._lock:
            self.calls.append(method)
        response = self.responses[method]
        if callable(response):
            response = response(*args)
        if isinstance(response, BaseException):
            raise response
        return response

    def get_cluster_health(self):
        return self._respond("get_cluster_health")

    def get_cluster_stats(self):
        return self._respond("get_cluster_stats")

    def get_nodes_stats(self):
        return self._respond("get_nodes_stats")

    def get_indices(self):
        return self._respond("get_indices")

    def get_shards(self):
        return self._respond("get_shards")

    def get_index_stats(self, index_name: str):
        return self._respond("get_index_stats", index_name)


@pytest.fixture
def fake_source():
    return FakeTelemetrySource()


# ============================================================================
# Test Utilities
# ============================================================================


class StepClock:
    """Clock returning successive datetimes one second apart."""

    def __init__(self, start: Optional[datetime] = None):
        self.current = start or datetime(2024, 1, 1, 12, 0, 0)

    def __call__(self) -> datetime:
        value = self.current
        self.current += timedelta(seconds=1)
        return value


class TestUtils:
    """Utility functions for testing."""

    make_cluster_health = staticmethod(make_cluster_health)
    make_nodes_stats = staticmethod(make_nodes_stats)
    make_cluster_stats = staticmethod(make_cluster_stats)

    @staticmethod
    def sequence(*values: Any) -> Callable[..., Any]:
        """Return a callable yielding ``values`` in order, repeating the last."""
        remaining = list(values)

        def next_value(*_args):
            return remaining.pop(0) if len(remaining) > 1 else remaining[0]

        return next_value


@pytest.fixture
def test_utils():
    """Provide test utilities."""
    return TestUtils


@pytest.fixture
def step_clock():
    return StepClock()
