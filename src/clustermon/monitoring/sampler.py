"""
Time-series sampling of cluster metrics.

ClusterSampler polls every metric category once per interval for a bounded
duration. A tick is all-or-nothing: the six categories are fetched in a fixed
order and the first failure drops the whole tick, so every trend ends up with
exactly one sample per completed tick.

Sampling can be interrupted at any moment through ``request_cancel``, which is
safe to call from any thread (a signal handler included). The samples
collected so far are analyzed and returned as a cancelled result.
"""

import asyncio
import logging
import threading
import time
from concurrent.futures import Executor
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional

from ..analysis import analyze_trends
from ..constants import DEFAULT_INTERVAL_SECONDS, INTERVAL_DIVISOR, MIN_INTERVAL_SECONDS
from ..models.config import MonitorConfig
from ..models.results import MonitoringResult, SamplerState
from ..models.samples import ClusterHealthSample, MetricCategory, Sample
from ..services.check_service import CheckService
from ..validation import (
    CancellationError,
    FetchError,
    MonitorErrorHandler,
    PartialTickAbort,
    validate_positive_float,
    validate_positive_integer,
)

logger = logging.getLogger(__name__)

Notifier = Callable[[str], None]


@dataclass
class SamplerConfig:
    """
    Timing of a sampling run, in seconds.

    When the interval exceeds the duration it is replaced by
    ``max(duration / interval_divisor, min_interval)``.
    """

    duration: float
    interval: float = DEFAULT_INTERVAL_SECONDS
    min_interval: float = MIN_INTERVAL_SECONDS
    interval_divisor: int = INTERVAL_DIVISOR

    def __post_init__(self):
        self.duration = validate_positive_float(self.duration, min_value=0.001, field_name="duration")
        self.interval = validate_positive_float(self.interval, min_value=0.001, field_name="interval")
        self.min_interval = validate_positive_float(
            self.min_interval, min_value=0.001, field_name="min_interval"
        )
        self.interval_divisor = validate_positive_integer(
            self.interval_divisor, min_value=1, field_name="interval_divisor"
        )

    @classmethod
    def from_monitor_config(cls, duration: float, monitor: MonitorConfig,
                            interval: Optional[float] = None) -> "SamplerConfig":
        return cls(
            duration=duration,
            interval=monitor.interval_seconds if interval is None else interval,
            min_interval=monitor.min_interval_seconds,
            interval_divisor=monitor.interval_divisor,
        )

    def effective_interval(self) -> float:
        if self.interval <= self.duration:
            return self.interval
        return max(self.duration / self.interval_divisor, self.min_interval)


@dataclass(frozen=True)
class FetchOutcome:
    """Result of fetching one category: either a sample or the error raised."""

    category: MetricCategory
    value: Optional[Sample] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ClusterSampler:
    """
    Periodically samples all metric categories and analyzes the trends.

    A sampler runs once; create a new one for every monitoring session.
    """

    def __init__(
        self,
        check_service: CheckService,
        config: SamplerConfig,
        clock: Callable[[], float] = time.monotonic,
        notifier: Optional[Notifier] = None,
        error_handler: Optional[MonitorErrorHandler] = None,
        executor: Optional[Executor] = None,
    ):
        """
        Args:
            check_service: Fetches and parses each category
            config: Duration and interval settings
            clock: Monotonic clock used for the end-of-run cutoff
            notifier: Called with a message when a tick shows RED status or
                unassigned shards
            error_handler: Records aborted ticks; a fresh one by default
            executor: Runs the blocking fetches; the loop's default executor if None
        """
        self.check_service = check_service
        self.config = config
        self.notifier = notifier
        self.error_handler = error_handler or MonitorErrorHandler(logger)
        self.executor = executor
        self._clock = clock

        self.interval = config.effective_interval()
        if self.interval != config.interval:
            logger.warning(
                f"Interval adjusted to {self.interval}s "
                f"(requested {config.interval}s exceeds the {config.duration}s duration)"
            )

        self._lock = threading.Lock()
        self._state = SamplerState.IDLE
        self._cancel_requested = False
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._cancel_event: Optional[asyncio.Event] = None
        self._result = MonitoringResult(duration=config.duration, interval=self.interval)

    @property
    def state(self) -> SamplerState:
        with self._lock:
            return self._state

    def get_result(self) -> MonitoringResult:
        """
        Return the result collected so far.

        After ``run`` finishes, or after its task was cancelled, this is the
        final result including issues and recommendations.
        """
        return self._result

    def request_cancel(self) -> None:
        """Ask a running (or not yet started) sampler to stop; thread-safe."""
        with self._lock:
            if self._state in (SamplerState.COMPLETED, SamplerState.CANCELLED):
                return
            self._cancel_requested = True
            loop, event = self._loop, self._cancel_event
        if loop is not None and event is not None and not loop.is_closed():
            try:
                loop.call_soon_threadsafe(event.set)
            except RuntimeError:
                # Loop closed between the check and the call; run() is over.
                pass
        logger.info("Monitoring cancellation requested")

    async def run(self) -> MonitoringResult:
        """
        Sample until the duration elapses or cancellation is requested.

        Returns:
            MonitoringResult with trends, issues and recommendations

        Raises:
            RuntimeError: If the sampler has already been run
        """
        with self._lock:
            if self._state is not SamplerState.IDLE:
                raise RuntimeError("a sampler can only be run once")
            self._loop = asyncio.get_running_loop()
            self._cancel_event = asyncio.Event()
            if self._cancel_requested:
                self._cancel_event.set()
            self._state = SamplerState.RUNNING

        end_time = self._clock() + self.config.duration
        logger.info(
            f"Starting cluster monitoring for {self.config.duration}s "
            f"(sampling every {self.interval}s)"
        )

        try:
            while not await self._wait_for_cancel(self.interval):
                if self._clock() > end_time:
                    break
                await self._run_tick()
        except asyncio.CancelledError:
            self._finish(cancelled=True)
            raise

        cancelled = self._cancel_event.is_set()
        self._result.error_summary = await self.error_handler.get_error_summary()
        self._finish(cancelled=cancelled)
        return self._result

    async def _wait_for_cancel(self, timeout: float) -> bool:
        """Wait up to ``timeout`` seconds; True if cancellation arrived."""
        try:
            await asyncio.wait_for(self._cancel_event.wait(), timeout)
        except asyncio.TimeoutError:
            return False
        return True

    async def _run_tick(self) -> None:
        samples: List[Sample] = []
        for category in MetricCategory:
            outcome = await self._fetch(category)
            if outcome is None:
                return
            if outcome.ok and not self._result.trends[category].accepts(outcome.value):
                outcome = FetchOutcome(category, error=FetchError(
                    category.value,
                    TypeError(f"unexpected sample type {type(outcome.value).__name__}"),
                ))
            if not outcome.ok:
                await self._abort_tick(outcome)
                return
            samples.append(outcome.value)

        for sample, category in zip(samples, MetricCategory):
            self._result.trends[category].append(sample)
        self._result.sample_count += 1
        logger.info(f"Sample {self._result.sample_count} collected at {datetime.now():%H:%M:%S}")

        self._check_alerts(samples[0])

    async def _fetch(self, category: MetricCategory) -> Optional[FetchOutcome]:
        """
        Fetch one category, racing it against cancellation.

        Returns None when cancellation won; the fetch is then abandoned.
        """
        loop = asyncio.get_running_loop()
        fetch = loop.run_in_executor(
            self.executor, self.check_service.fetch, category
        )
        cancelled = asyncio.ensure_future(self._cancel_event.wait())
        try:
            done, _ = await asyncio.wait({fetch, cancelled}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            cancelled.cancel()

        if fetch not in done:
            fetch.cancel()
            logger.debug(f"Abandoned {category.label} fetch on cancellation")
            return None

        try:
            return FetchOutcome(category, value=fetch.result())
        except Exception as e:
            return FetchOutcome(category, error=e)

    async def _abort_tick(self, outcome: FetchOutcome) -> None:
        timestamp = datetime.now()
        abort = PartialTickAbort(outcome.category.label, timestamp, outcome.error)
        self._result.skipped_ticks += 1
        logger.warning(
            f"Failed to get {outcome.category.label} at {timestamp:%H:%M:%S}: {outcome.error}"
        )
        await self.error_handler.record_tick_abort(
            abort, component="sampler", category=outcome.category.value, timestamp=timestamp
        )

    def _check_alerts(self, health: ClusterHealthSample) -> None:
        timestamp = f"{health.timestamp:%H:%M:%S}"
        if health.is_red:
            message = f"CRITICAL: Cluster status is RED at {timestamp}"
            logger.critical(message)
            self._notify(message)
        if health.unassigned_shards > 0:
            message = f"WARNING: {health.unassigned_shards} unassigned shards detected at {timestamp}"
            logger.warning(message)
            self._notify(message)

    def _notify(self, message: str) -> None:
        if self.notifier is None:
            return
        try:
            self.notifier(message)
        except Exception as e:
            logger.error(f"Notifier failed: {e}")

    def _finish(self, cancelled: bool) -> None:
        result = self._result
        result.issues, result.recommendations = analyze_trends(result.trends, result.sample_count)
        if cancelled:
            result.cancellation = CancellationError(sample_count=result.sample_count)
            result.state = SamplerState.CANCELLED
            logger.info(f"Monitoring cancelled after {result.sample_count} samples")
        else:
            result.state = SamplerState.COMPLETED
            logger.info(
                f"Monitoring completed. Collected {result.sample_count} samples "
                f"over {self.config.duration}s ({result.skipped_ticks} skipped)"
            )
        with self._lock:
            self._state = result.state
