"""
Last-seen cumulative counters per resource.

Search and indexing counters reported by the cluster only ever grow. To show
a current rate the tool has to remember the previous observation of each
index; this module holds those observations for the lifetime of the process.
"""

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Iterator, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CounterSnapshot:
    """
    Cumulative counters of one resource at one point in time.

    Attributes:
        key: Resource identifier, usually an index name
        query_total: Lifetime number of search queries
        query_time_ms: Lifetime time spent in search queries
        index_total: Lifetime number of indexing operations
        index_time_ms: Lifetime time spent indexing
        captured_at: Epoch seconds at which the counters were read
    """

    key: str
    query_total: int
    query_time_ms: int
    index_total: int
    index_time_ms: int
    captured_at: float


class ReadWriteLock:
    """
    Lock allowing many concurrent readers or a single writer.

    Waiting writers block new readers so that a steady stream of reads cannot
    starve a write.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer_active = False
        self._writers_waiting = 0

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        with self._cond:
            while self._writer_active or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer_active or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer_active = True
        try:
            yield
        finally:
            with self._cond:
                self._writer_active = False
                self._cond.notify_all()


class SnapshotCache:
    """
    Keyed store of the most recent CounterSnapshot per resource.

    ``set`` replaces the previous entry for the key outright; entries are
    never merged or evicted.
    """

    def __init__(self):
        self._snapshots: Dict[str, CounterSnapshot] = {}
        self._lock = ReadWriteLock()

    def get(self, key: str) -> Optional[CounterSnapshot]:
        """Return the stored snapshot for ``key``, or None if never observed."""
        with self._lock.read_locked():
            return self._snapshots.get(key)

    def set(self, snapshot: CounterSnapshot) -> None:
        """Store ``snapshot``, overwriting any earlier one for the same key."""
        with self._lock.write_locked():
            self._snapshots[snapshot.key] = snapshot
        logger.debug(f"Stored counter snapshot for {snapshot.key} at {snapshot.captured_at}")

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._snapshots)

    def __contains__(self, key: str) -> bool:
        with self._lock.read_locked():
            return key in self._snapshots
