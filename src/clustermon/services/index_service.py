"""
On-demand index detail with current search and indexing rates.

Rates need two observations of the same index. The first call for an index
only records its counters and reports "Calculating..."; every later call
derives the rate from the change since the previous call, then replaces the
stored counters.
"""

import logging
import time
from functools import partial
from dataclasses import dataclass
from typing import Callable, Optional

from .. import constants as c
from ..cache import CounterSnapshot, SnapshotCache, compute_rate, format_latency
from ..executor import BoundedExecutionGuard
from ..telemetry.base import TelemetrySource
from ..telemetry.documents import get_int, get_mapping
from ..validation import DeadlineExceeded, FetchError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IndexDetail:
    """Display-ready rates and latencies of one index."""

    name: str
    search_rate: str = ""
    index_rate: str = ""
    avg_query_time: str = ""
    avg_index_time: str = ""


class IndexService:
    def __init__(
        self,
        source: TelemetrySource,
        cache: Optional[SnapshotCache] = None,
        guard: Optional[BoundedExecutionGuard] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.source = source
        self.cache = cache if cache is not None else SnapshotCache()
        self.guard = guard
        self._clock = clock

    def get_index_detail(self, index_name: str) -> IndexDetail:
        """
        Return the current rates and lifetime latencies of an index.

        An index missing from the stats response yields an empty detail and
        leaves the cache untouched.

        Raises:
            DeadlineExceeded: If the guarded request missed its deadline
            FetchError: If the request failed
        """
        document = self._request_stats(index_name)
        captured_at = self._clock()

        total = get_mapping(document, c.INDICES_FIELD, index_name, c.TOTAL_FIELD)
        if not total:
            logger.debug(f"No stats reported for index {index_name}")
            return IndexDetail(index_name)

        current = CounterSnapshot(
            key=index_name,
            query_total=get_int(total, c.SEARCH_FIELD, c.QUERY_TOTAL_FIELD),
            query_time_ms=get_int(total, c.SEARCH_FIELD, c.QUERY_TIME_IN_MILLIS_FIELD),
            index_total=get_int(total, c.INDEXING_FIELD, c.INDEX_TOTAL_FIELD),
            index_time_ms=get_int(total, c.INDEXING_FIELD, c.INDEX_TIME_IN_MILLIS_FIELD),
            captured_at=captured_at,
        )
        previous = self.cache.get(index_name)
        self.cache.set(current)

        return IndexDetail(
            name=index_name,
            search_rate=str(compute_rate(previous, current, "query_total")),
            index_rate=str(compute_rate(previous, current, "index_total")),
            avg_query_time=format_latency(current.query_time_ms, current.query_total),
            avg_index_time=format_latency(current.index_time_ms, current.index_total),
        )

    def _request_stats(self, index_name: str):
        request = partial(self.source.get_index_stats, index_name)
        try:
            if self.guard is not None:
                return self.guard.run(request, name=f"index stats for {index_name}")
            return request()
        except DeadlineExceeded:
            raise
        except Exception as e:
            raise FetchError(f"index stats for {index_name}", e) from e
