"""
Unit tests for bounded request execution.

Tests result and exception pass-through, deadline handling, timeout
validation and the abandoned-operation bookkeeping of the guard.
"""

import threading
import time

import pytest

from clustermon.executor.guard import BoundedExecutionGuard, GuardConfig
from clustermon.validation import DeadlineExceeded, ValidationError, describe_error


def wait_for(predicate, timeout=5.0):
    """Poll until predicate() holds; stats are updated by done callbacks."""
    deadline = time.monotonic() + timeout
    while not predicate() and time.monotonic() < deadline:
        time.sleep(0.01)
    return predicate()


@pytest.mark.unit
class TestGuardConfig:
    """Test cases for GuardConfig."""

    def test_guard_config_defaults(self):
        config = GuardConfig()

        assert config.default_timeout == 5
        assert config.thread_name_prefix == "GuardWorker"

    @pytest.mark.parametrize("timeout", [0, 0.5, -1, "soon", True])
    def test_invalid_default_timeout_rejected(self, timeout):
        with pytest.raises(ValidationError):
            BoundedExecutionGuard(GuardConfig(default_timeout=timeout))


@pytest.mark.unit
class TestBoundedExecutionGuard:
    """Test cases for BoundedExecutionGuard.run."""

    def test_returns_result_of_fast_operation(self):
        guard = BoundedExecutionGuard()

        assert guard.run(lambda: {"status": "green"}) == {"status": "green"}
        assert wait_for(lambda: guard.get_stats()["tasks_completed"] == 1)

    def test_reraises_operation_error_unchanged(self):
        guard = BoundedExecutionGuard()
        error = ConnectionError("connection refused")

        def failing():
            raise error

        with pytest.raises(ConnectionError) as exc_info:
            guard.run(failing)

        assert exc_info.value is error
        assert wait_for(lambda: guard.get_stats()["tasks_failed"] == 1)

    def test_operation_timeout_error_is_not_a_deadline(self):
        """A TimeoutError raised by the operation itself passes through as is."""
        guard = BoundedExecutionGuard()

        def socket_timeout():
            raise TimeoutError("read timed out")

        with pytest.raises(TimeoutError) as exc_info:
            guard.run(socket_timeout)

        assert not isinstance(exc_info.value, DeadlineExceeded)

    def test_timeout_below_one_second_rejected(self):
        guard = BoundedExecutionGuard()

        with pytest.raises(ValidationError) as exc_info:
            guard.run(lambda: None, timeout=0.5)

        assert exc_info.value.field_name == "timeout"

    def test_worker_thread_named_with_prefix(self):
        guard = BoundedExecutionGuard(GuardConfig(thread_name_prefix="Fetch"))

        name = guard.run(lambda: threading.current_thread().name)

        assert name.startswith("Fetch-")

    @pytest.mark.slow
    def test_deadline_abandons_slow_operation(self):
        guard = BoundedExecutionGuard()
        release = threading.Event()

        def slow():
            release.wait(10)
            return "late"

        start = time.monotonic()
        with pytest.raises(DeadlineExceeded) as exc_info:
            guard.run(slow, timeout=1, name="fetch cluster health")
        elapsed = time.monotonic() - start

        assert 0.9 <= elapsed < 3
        assert exc_info.value.timeout == 1
        assert "fetch cluster health" in str(exc_info.value)
        assert describe_error(exc_info.value) == "request timed out"

        stats = guard.get_stats()
        assert stats["tasks_timed_out"] == 1
        assert stats["abandoned_running"] == 1

        # The abandoned operation finishes later; its result is dropped.
        release.set()
        assert wait_for(lambda: guard.get_stats()["abandoned_running"] == 0)

        stats = guard.get_stats()
        assert stats["abandoned_running"] == 0
        assert stats["abandoned_finished"] == 1
        assert stats["tasks_completed"] == 0

    @pytest.mark.slow
    def test_concurrent_calls_are_independent(self):
        guard = BoundedExecutionGuard()
        results = []
        errors = []

        def call(delay, value):
            try:
                results.append(guard.run(lambda: (time.sleep(delay), value)[1], timeout=1))
            except DeadlineExceeded as e:
                errors.append(e)

        threads = [
            threading.Thread(target=call, args=(0.01, "fast")),
            threading.Thread(target=call, args=(2.0, "slow")),
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results == ["fast"]
        assert len(errors) == 1
