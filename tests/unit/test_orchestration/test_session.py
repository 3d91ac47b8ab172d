"""
Tests for monitoring session orchestration and signal routing.
"""

import logging
import signal
import threading
import time
from unittest.mock import Mock

import pytest

from conftest import FakeTelemetrySource, make_cluster_health
from clustermon.models import AppConfig, MonitorConfig, SamplerState
from clustermon.orchestration import MonitoringSession, SignalHandler, configure_logging
from clustermon.orchestration import signal_handler as signal_module


def fast_session(source=None, **kwargs) -> MonitoringSession:
    config = AppConfig(monitor=MonitorConfig(
        request_timeout=5, interval_seconds=0.05, min_interval_seconds=0.05,
    ))
    return MonitoringSession(source or FakeTelemetrySource(), config, **kwargs)


@pytest.fixture
def restore_root_level():
    root = logging.getLogger()
    level = root.level
    yield root
    root.setLevel(level)


@pytest.fixture
def clean_registry():
    yield
    with signal_module._active_samplers_lock:
        signal_module._active_samplers.clear()


@pytest.mark.unit
class TestMonitoringSession:
    """Test cases for MonitoringSession."""

    def test_monitor_runs_to_completion(self):
        session = fast_session()

        result = session.monitor(0.3, handle_signals=False)

        assert result.state is SamplerState.COMPLETED
        assert result.sample_count >= 1
        assert result.interval == 0.05
        assert result.recommendations

    def test_explicit_interval_overrides_config(self):
        session = fast_session()

        result = session.monitor(0.2, interval=0.1, handle_signals=False)

        assert result.interval == 0.1

    def test_cancel_from_another_thread(self):
        session = fast_session()
        timer = threading.Timer(0.3, session.cancel)
        timer.start()
        try:
            result = session.monitor(60, handle_signals=False)
        finally:
            timer.cancel()

        assert result.cancelled
        assert result.state is SamplerState.CANCELLED

    @pytest.mark.slow
    def test_cancel_does_not_wait_for_blocked_fetch(self):
        """Cancellation returns while the abandoned request is still running."""
        release = threading.Event()

        def blocking_health():
            release.wait(10)
            return make_cluster_health()

        source = FakeTelemetrySource({"get_cluster_health": blocking_health})
        config = AppConfig(monitor=MonitorConfig(
            request_timeout=8, interval_seconds=0.05, min_interval_seconds=0.05,
        ))
        session = MonitoringSession(source, config)
        timer = threading.Timer(0.5, session.cancel)
        start = time.monotonic()
        timer.start()
        try:
            result = session.monitor(60, handle_signals=False)
            elapsed = time.monotonic() - start
        finally:
            timer.cancel()
            release.set()

        assert elapsed < 3
        assert result.cancelled
        assert result.sample_count == 0

    def test_cancel_without_run_is_noop(self):
        fast_session().cancel()

    def test_signal_cancels_run_and_handlers_restored(self, clean_registry):
        original = signal.getsignal(signal.SIGINT)
        session = fast_session()
        timer = threading.Timer(
            0.3, SignalHandler._global_signal_handler, args=(signal.SIGINT, None)
        )
        timer.start()
        try:
            result = session.monitor(60)
        finally:
            timer.cancel()

        assert result.cancelled
        assert signal.getsignal(signal.SIGINT) == original
        assert signal_module._active_samplers == {}

    def test_notifier_receives_alerts(self):
        notifier = Mock()
        source = FakeTelemetrySource({"get_cluster_health": make_cluster_health(status="red")})
        session = fast_session(source, notifier=notifier)

        session.monitor(0.2, handle_signals=False)

        assert notifier.called
        assert "RED" in notifier.call_args_list[0].args[0]

    def test_health_check(self, fake_source):
        report = fast_session(fake_source).health_check()

        assert report.ok

    def test_index_detail(self, index_stats_document):
        source = FakeTelemetrySource({"get_index_stats": index_stats_document})

        detail = fast_session(source).index_detail("logs")

        assert detail.search_rate == "Calculating..."
        assert detail.avg_query_time == "2.5ms"

    def test_from_config_file(self, config_files, fake_source, restore_root_level):
        session = MonitoringSession.from_config_file(fake_source, config_files["config"])

        assert session.config.monitor.request_timeout == 5
        assert session.guard.config.default_timeout == 5
        assert session.config.source_path == config_files["config"]

    def test_from_config_file_missing_uses_defaults(self, temp_dir, fake_source, restore_root_level):
        session = MonitoringSession.from_config_file(fake_source, temp_dir / "missing.toml")

        assert session.config == AppConfig()
        assert session.guard.config.default_timeout == 5

    def test_from_config_file_applies_log_level(self, temp_dir, sample_config_data,
                                                fake_source, restore_root_level):
        import toml

        sample_config_data["general"]["log_level"] = "DEBUG"
        config_file = temp_dir / "debug.toml"
        with open(config_file, "w") as f:
            toml.dump({"monitor": sample_config_data}, f)

        MonitoringSession.from_config_file(fake_source, config_file)

        assert restore_root_level.level == logging.DEBUG


@pytest.mark.unit
class TestSignalHandler:
    """Test cases for SignalHandler."""

    def test_setup_and_cleanup_restore_handlers(self):
        original = signal.getsignal(signal.SIGTERM)
        handler = SignalHandler()

        handler.setup_signal_handlers()
        assert handler.installed
        assert signal.getsignal(signal.SIGTERM) == SignalHandler._global_signal_handler

        handler.cleanup_signal_handlers()
        assert not handler.installed
        assert signal.getsignal(signal.SIGTERM) == original

    def test_setup_off_main_thread_is_skipped(self, caplog):
        handler = SignalHandler()

        with caplog.at_level(logging.WARNING):
            thread = threading.Thread(target=handler.setup_signal_handlers)
            thread.start()
            thread.join()

        assert not handler.installed
        assert "Failed to set up signal handlers" in caplog.text

    def test_signal_cancels_registered_samplers(self, clean_registry):
        handler = SignalHandler()
        first, second = Mock(), Mock()
        handler.register_sampler(1, first)
        handler.register_sampler(2, second)
        handler.unregister_sampler(2)

        SignalHandler._global_signal_handler(signal.SIGINT, None)

        first.request_cancel.assert_called_once()
        second.request_cancel.assert_not_called()


@pytest.mark.unit
class TestConfigureLogging:
    """Test cases for configure_logging."""

    def test_sets_root_level(self):
        root = logging.getLogger()
        previous = root.level
        try:
            configure_logging("debug")
            assert root.level == logging.DEBUG
        finally:
            root.setLevel(previous)
