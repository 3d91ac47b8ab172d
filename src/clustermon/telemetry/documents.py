"""
Tolerant accessors for schemaless cluster API documents.

Responses from the cluster are loosely typed JSON. Every parser reads them
through these helpers so that one rule applies everywhere: a missing field
yields the default, and a field holding the wrong type is treated as missing.
Booleans, NaN and infinities are never accepted where a number is expected.
"""

import math
from collections.abc import Mapping
from typing import Any, List, Optional


def get_path(document: Any, *keys: str) -> Any:
    """Walk nested mappings by key; return None when any step is absent."""
    current = document
    for key in keys:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current


def get_mapping(document: Any, *keys: str) -> Mapping:
    value = get_path(document, *keys)
    return value if isinstance(value, Mapping) else {}


def _as_number(value: Any) -> Optional[float]:
    """Return a finite int or float unchanged; None for anything else."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def get_number(document: Any, *keys: str, default: float = 0.0) -> float:
    value = _as_number(get_path(document, *keys))
    return default if value is None else float(value)


def get_int(document: Any, *keys: str, default: int = 0) -> int:
    value = _as_number(get_path(document, *keys))
    return default if value is None else int(value)


def get_string(document: Any, *keys: str, default: str = "") -> str:
    value = get_path(document, *keys)
    return value if isinstance(value, str) else default


def get_rows(document: Any) -> List[Mapping]:
    """
    Return the row mappings of a `_cat` style response.

    Accepts either a bare list of rows or a mapping carrying the list under
    the empty key; anything that is not a mapping is skipped.
    """
    if isinstance(document, Mapping):
        document = document.get("")
    if not isinstance(document, list):
        return []
    return [row for row in document if isinstance(row, Mapping)]
