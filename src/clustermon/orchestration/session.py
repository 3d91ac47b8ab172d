"""
Monitoring session orchestration.

MonitoringSession wires the configured guard, check service and sampler
together for one telemetry source. A monitoring run executes the sampler's
event loop on a dedicated worker thread while the calling thread waits, so
that Ctrl-C delivered to the main thread can cancel the run promptly.
"""

import asyncio
import logging
import sys
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional

from ..cache import SnapshotCache
from ..config import load_config_or_default
from ..executor import BoundedExecutionGuard, GuardConfig
from ..models.checks import HealthCheckReport
from ..models.config import AppConfig
from ..models.results import MonitoringResult
from ..monitoring.sampler import ClusterSampler, Notifier, SamplerConfig
from ..services import CheckService, IndexDetail, IndexService
from ..telemetry.base import TelemetrySource
from .signal_handler import SignalHandler

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# How often the waiting thread wakes up so pending signals get handled.
_JOIN_POLL_SECONDS = 0.2


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging the way every clustermon entry point does."""
    logging.basicConfig(
        level=level.upper(),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stdout,
    )
    logging.getLogger().setLevel(level.upper())


class MonitoringSession:
    """
    Entry point for monitoring one cluster.

    Args:
        source: Read-only access to the cluster
        config: Loaded application config; defaults apply when None
        notifier: Receives immediate alerts raised while sampling
    """

    def __init__(
        self,
        source: TelemetrySource,
        config: Optional[AppConfig] = None,
        notifier: Optional[Notifier] = None,
    ):
        self.source = source
        self.config = config or AppConfig()
        self.notifier = notifier
        self.guard = BoundedExecutionGuard(
            GuardConfig(default_timeout=self.config.monitor.request_timeout)
        )
        self.check_service = CheckService(source, guard=self.guard)
        self.index_service = IndexService(source, cache=SnapshotCache(), guard=self.guard)
        self._sampler: Optional[ClusterSampler] = None
        self._sampler_lock = threading.Lock()

    @classmethod
    def from_config_file(cls, source: TelemetrySource, config_path: Optional[Path] = None,
                         notifier: Optional[Notifier] = None) -> "MonitoringSession":
        """
        Create a session from config.toml and apply its log level.

        A missing or invalid file falls back to the default configuration.
        """
        config = load_config_or_default(config_path)
        configure_logging(config.monitor.log_level)
        return cls(source, config, notifier=notifier)

    def health_check(self) -> HealthCheckReport:
        return self.check_service.run_health_check()

    def index_detail(self, index_name: str) -> IndexDetail:
        return self.index_service.get_index_detail(index_name)

    def monitor(
        self,
        duration: float,
        interval: Optional[float] = None,
        handle_signals: bool = True,
    ) -> MonitoringResult:
        """
        Sample the cluster for ``duration`` seconds and analyze the trends.

        Blocks until the run completes or is cancelled, either through
        ``cancel`` or, when ``handle_signals`` is set and this is the main
        thread, through SIGINT/SIGTERM.

        Args:
            duration: Total monitoring time in seconds
            interval: Sampling interval; the configured one when None
            handle_signals: Route SIGINT/SIGTERM to cancellation

        Returns:
            The sampler's MonitoringResult, marked cancelled when interrupted
        """
        sampler_config = SamplerConfig.from_monitor_config(duration, self.config.monitor, interval)
        # Not the loop's default executor: asyncio.run would join it on exit
        # and wait for a fetch abandoned on cancellation.
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="ClusterFetch")
        sampler = ClusterSampler(
            self.check_service, sampler_config, notifier=self.notifier, executor=executor
        )
        with self._sampler_lock:
            self._sampler = sampler

        signal_handler = None
        if handle_signals and threading.current_thread() is threading.main_thread():
            signal_handler = SignalHandler()
            signal_handler.setup_signal_handlers()
            signal_handler.register_sampler(id(sampler), sampler)

        failure: list = []

        def run_sampler() -> None:
            try:
                asyncio.run(sampler.run())
            except Exception as e:
                failure.append(e)
            finally:
                executor.shutdown(wait=False)

        worker = threading.Thread(target=run_sampler, name="ClusterSampler", daemon=True)
        try:
            worker.start()
            while worker.is_alive():
                worker.join(_JOIN_POLL_SECONDS)
        except BaseException:
            sampler.request_cancel()
            raise
        finally:
            if signal_handler is not None:
                signal_handler.unregister_sampler(id(sampler))
                signal_handler.cleanup_signal_handlers()
            with self._sampler_lock:
                self._sampler = None

        if failure:
            logger.error(f"Monitoring run failed: {failure[0]}")
            raise failure[0]

        guard_stats = self.guard.get_stats()
        logger.debug(f"Guard statistics after monitoring: {guard_stats}")
        return sampler.get_result()

    def cancel(self) -> None:
        """Cancel the monitoring run in progress, if any."""
        with self._sampler_lock:
            sampler = self._sampler
        if sampler is not None:
            sampler.request_cancel()
