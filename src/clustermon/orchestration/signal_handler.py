"""
Signal handling for the orchestration module.

This module manages signal registration, cleanup, and delegation to active
ClusterSampler instances using a global registry pattern.
"""

import logging
import signal
import threading
from typing import TYPE_CHECKING, Any, Dict

if TYPE_CHECKING:
    from ..monitoring.sampler import ClusterSampler

logger = logging.getLogger(__name__)

# Signal handlers cannot be bound to instances, so active samplers are kept
# in a registry the process-wide handler walks.
_active_samplers: Dict[int, "ClusterSampler"] = {}
_active_samplers_lock = threading.Lock()


class SignalHandler:
    """
    Routes SIGINT and SIGTERM to the cancellation of registered samplers.

    Handlers can only be installed from the main thread; elsewhere setup is
    skipped with a warning and samplers must be cancelled explicitly.
    """

    def __init__(self):
        self._original_sigint_handler = None
        self._original_sigterm_handler = None
        self._signal_handlers_set = False

    @property
    def installed(self) -> bool:
        return self._signal_handlers_set

    def setup_signal_handlers(self) -> None:
        """Install the process-wide handlers, remembering the previous ones."""
        try:
            self._original_sigint_handler = signal.signal(signal.SIGINT, self._global_signal_handler)
            self._original_sigterm_handler = signal.signal(signal.SIGTERM, self._global_signal_handler)
            self._signal_handlers_set = True
            logger.debug("Signal handlers set up for monitoring session")
        except ValueError as e:
            logger.warning(f"Failed to set up signal handlers: {e}")

    def cleanup_signal_handlers(self) -> None:
        """Restore original signal handlers."""
        if not self._signal_handlers_set:
            return

        try:
            if self._original_sigint_handler is not None:
                signal.signal(signal.SIGINT, self._original_sigint_handler)
            if self._original_sigterm_handler is not None:
                signal.signal(signal.SIGTERM, self._original_sigterm_handler)
            logger.debug("Signal handlers restored")
        except ValueError as e:
            logger.warning(f"Failed to restore signal handlers: {e}")
        finally:
            self._signal_handlers_set = False

    def register_sampler(self, sampler_id: int, sampler: "ClusterSampler") -> None:
        with _active_samplers_lock:
            _active_samplers[sampler_id] = sampler
            logger.debug(f"Registered sampler {sampler_id} for signal handling")

    def unregister_sampler(self, sampler_id: int) -> None:
        with _active_samplers_lock:
            if _active_samplers.pop(sampler_id, None) is not None:
                logger.debug(f"Unregistered sampler {sampler_id} from signal handling")

    @staticmethod
    def _global_signal_handler(signum: int, frame: Any) -> None:
        """
        Request cancellation of every registered sampler.

        Args:
            signum: Signal number that was received
            frame: Current stack frame (unused)
        """
        logger.warning(f"Signal {signum} received. Cancelling all active monitoring sessions.")
        with _active_samplers_lock:
            samplers = list(_active_samplers.items())
        for sampler_id, sampler in samplers:
            logger.info(f"Requesting cancellation of sampler {sampler_id}")
            sampler.request_cancel()
