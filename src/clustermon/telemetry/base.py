"""
Defines the interface to the monitored cluster.

This module provides:
- Document: the type of the raw, schemaless responses returned by the cluster.
- TelemetrySource: an abstract base class (ABC) that every transport-level
  client implements. The monitoring core only ever reads through it.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Union

logger = logging.getLogger(__name__)

# A decoded JSON response: a mapping for most APIs, a list of row mappings for
# the `_cat` endpoints.
Document = Union[Dict[str, Any], List[Dict[str, Any]]]


class TelemetrySource(ABC):
    """
    Abstract base class for read-only access to a cluster's REST API.

    Implementations perform the actual requests and JSON decoding; they raise
    on transport or HTTP failures. They never mutate the cluster.
    """

    @abstractmethod
    def get_cluster_health(self) -> Document:
        """Return the `_cluster/health` response."""

    @abstractmethod
    def get_cluster_stats(self) -> Document:
        """Return the `_cluster/stats` response."""

    @abstractmethod
    def get_nodes_stats(self) -> Document:
        """Return the `_nodes/stats` response, keyed by node id under "nodes"."""

    @abstractmethod
    def get_indices(self) -> Document:
        """Return the `_cat/indices` rows."""

    @abstractmethod
    def get_shards(self) -> Document:
        """Return the `_cat/shards` rows."""

    @abstractmethod
    def get_index_stats(self, index_name: str) -> Document:
        """
        Return the `_stats` response for one index.

        Args:
            index_name: Name of the index; an empty string requests all indices.
        """
