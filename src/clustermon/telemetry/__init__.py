"""
Access to the monitored cluster for the clustermon package.

This module provides the TelemetrySource interface implemented by
transport-level clients, and the tolerant accessors used to read the
schemaless documents they return.
"""

from .base import Document, TelemetrySource
from .documents import get_int, get_mapping, get_number, get_path, get_rows, get_string

__all__ = [
    "Document",
    "TelemetrySource",
    "get_path",
    "get_mapping",
    "get_number",
    "get_int",
    "get_string",
    "get_rows",
]
