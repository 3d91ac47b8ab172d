"""
Unit tests for IndexService rate derivation across repeated calls.
"""

import pytest

from conftest import FakeTelemetrySource
from clustermon.cache import SnapshotCache
from clustermon.services import IndexDetail, IndexService
from clustermon.validation import FetchError


def stats(query_total, query_time, index_total, index_time, name="logs"):
    return {
        "indices": {
            name: {
                "total": {
                    "search": {"query_total": query_total, "query_time_in_millis": query_time},
                    "indexing": {"index_total": index_total, "index_time_in_millis": index_time},
                }
            }
        }
    }


class FixedClock:
    def __init__(self, *values):
        self.values = list(values)

    def __call__(self):
        return self.values.pop(0)


@pytest.mark.unit
class TestIndexDetail:
    """Test cases for get_index_detail."""

    def test_first_call_is_calculating(self):
        source = FakeTelemetrySource({"get_index_stats": stats(1000, 2500, 400, 800)})
        cache = SnapshotCache()
        service = IndexService(source, cache=cache, clock=FixedClock(100.0))

        detail = service.get_index_detail("logs")

        assert detail == IndexDetail(
            name="logs",
            search_rate="Calculating...",
            index_rate="Calculating...",
            avg_query_time="2.5ms",
            avg_index_time="2.0ms",
        )
        assert cache.get("logs").query_total == 1000

    def test_second_call_reports_rates(self, test_utils):
        source = FakeTelemetrySource({
            "get_index_stats": test_utils.sequence(
                stats(1000, 2500, 400, 800),
                stats(31000, 62500, 400, 900),
            )
        })
        service = IndexService(source, clock=FixedClock(100.0, 110.0))

        service.get_index_detail("logs")
        detail = service.get_index_detail("logs")

        assert detail.search_rate == "3.0K/s"
        assert detail.index_rate == "-"
        # Latencies stay lifetime averages of the current totals.
        assert detail.avg_query_time == "2.0ms"
        assert detail.avg_index_time == "2.2ms"

    def test_clock_not_advancing_is_unavailable(self, test_utils):
        source = FakeTelemetrySource({
            "get_index_stats": test_utils.sequence(stats(10, 5, 10, 5), stats(20, 9, 20, 9))
        })
        service = IndexService(source, clock=FixedClock(100.0, 100.0))

        service.get_index_detail("logs")
        detail = service.get_index_detail("logs")

        assert detail.search_rate == "N/A"
        assert detail.index_rate == "N/A"

    def test_latency_empty_without_operations(self):
        source = FakeTelemetrySource({"get_index_stats": stats(0, 0, 0, 0)})
        service = IndexService(source, clock=FixedClock(100.0))

        detail = service.get_index_detail("logs")

        assert detail.avg_query_time == ""
        assert detail.avg_index_time == ""

    def test_unknown_index_leaves_cache_untouched(self):
        source = FakeTelemetrySource({"get_index_stats": stats(1, 1, 1, 1, name="other")})
        cache = SnapshotCache()
        service = IndexService(source, cache=cache, clock=FixedClock(100.0))

        detail = service.get_index_detail("logs")

        assert detail == IndexDetail("logs")
        assert len(cache) == 0

    def test_request_failure_wrapped(self):
        source = FakeTelemetrySource({"get_index_stats": ConnectionError("refused")})
        service = IndexService(source)

        with pytest.raises(FetchError):
            service.get_index_detail("logs")
