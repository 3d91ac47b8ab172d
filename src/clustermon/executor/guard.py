"""
Bounded execution of blocking cluster requests.

Every request to the monitored cluster goes through a guard that waits a fixed
number of seconds for the answer. When the deadline passes first, the caller
gets a DeadlineExceeded error straight away; the request itself is left
running on its worker thread and whatever it eventually returns is dropped.
"""

import itertools
import logging
import threading
from concurrent.futures import Future, wait
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Set, TypeVar

from ..constants import DEFAULT_REQUEST_TIMEOUT, MIN_REQUEST_TIMEOUT
from ..validation import DeadlineExceeded, validate_positive_float

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class GuardConfig:
    """Configuration for bounded request execution."""

    default_timeout: float = DEFAULT_REQUEST_TIMEOUT
    thread_name_prefix: str = "GuardWorker"


class BoundedExecutionGuard:
    """
    Runs zero-argument operations with a hard deadline.

    Each call starts the operation on its own daemon thread and races it
    against the timeout:
    - finished in time: the return value is returned, an exception re-raised
    - deadline first: DeadlineExceeded is raised and the operation abandoned

    Abandoned operations are never interrupted; their threads finish on their
    own and the late outcome is only counted in the stats.
    """

    def __init__(self, config: Optional[GuardConfig] = None):
        """
        Initialize the guard.

        Args:
            config: Guard configuration; defaults to GuardConfig()

        Raises:
            ValidationError: If the default timeout is below one second
        """
        self.config = config or GuardConfig()
        self.config.default_timeout = self._validate_timeout(self.config.default_timeout)
        self._lock = threading.Lock()
        self._sequence = itertools.count(1)
        self._abandoned: Set[Future] = set()

        self.stats = {
            "tasks_submitted": 0,
            "tasks_completed": 0,
            "tasks_failed": 0,
            "tasks_timed_out": 0,
            "abandoned_finished": 0,
        }

    def run(
        self,
        operation: Callable[[], T],
        timeout: Optional[float] = None,
        name: str = "operation",
    ) -> T:
        """
        Run an operation and wait at most ``timeout`` seconds for it.

        Args:
            operation: Zero-argument callable performing the request
            timeout: Deadline in seconds; defaults to config.default_timeout
            name: Description used in logs and in DeadlineExceeded

        Returns:
            Whatever the operation returned

        Raises:
            DeadlineExceeded: If the deadline elapsed first
            ValidationError: If timeout is below one second
            Exception: Any exception raised by the operation itself
        """
        effective_timeout = (
            self.config.default_timeout if timeout is None else self._validate_timeout(timeout)
        )
        future = self.submit(operation, name=name)

        done, _ = wait([future], timeout=effective_timeout)
        if future not in done:
            with self._lock:
                self.stats["tasks_timed_out"] += 1
                if not future.done():
                    self._abandoned.add(future)
            logger.warning(f"{name} did not complete within {effective_timeout}s, abandoning it")
            raise DeadlineExceeded(effective_timeout, name)

        return future.result()

    def submit(self, operation: Callable[[], T], name: str = "operation") -> "Future[T]":
        """
        Start an operation on a fresh daemon thread.

        Args:
            operation: Zero-argument callable to execute
            name: Description used for the worker thread name

        Returns:
            Future completed with the operation's outcome
        """
        future: Future = Future()
        future.add_done_callback(self._task_completed)

        with self._lock:
            self.stats["tasks_submitted"] += 1
            sequence = next(self._sequence)

        worker = threading.Thread(
            target=self._execute,
            args=(future, operation),
            name=f"{self.config.thread_name_prefix}-{sequence}",
            daemon=True,
        )
        worker.start()
        logger.debug(f"Started {name} on {worker.name}")
        return future

    def get_stats(self) -> Dict[str, Any]:
        """
        Get current guard statistics.

        Returns:
            Dictionary containing usage statistics
        """
        with self._lock:
            stats = self.stats.copy()
            stats["abandoned_running"] = len(self._abandoned)
        return stats

    @staticmethod
    def _execute(future: Future, operation: Callable[[], Any]) -> None:
        if not future.set_running_or_notify_cancel():
            return
        try:
            result = operation()
        except BaseException as e:
            future.set_exception(e)
        else:
            future.set_result(result)

    def _task_completed(self, future: Future) -> None:
        with self._lock:
            if future in self._abandoned:
                # Late result of a timed-out call; nobody is waiting for it.
                self._abandoned.discard(future)
                self.stats["abandoned_finished"] += 1
                return
            if future.cancelled():
                return
            if future.exception() is not None:
                self.stats["tasks_failed"] += 1
            else:
                self.stats["tasks_completed"] += 1

    @staticmethod
    def _validate_timeout(timeout: Any) -> float:
        return validate_positive_float(
            timeout, min_value=MIN_REQUEST_TIMEOUT, field_name="timeout"
        )
