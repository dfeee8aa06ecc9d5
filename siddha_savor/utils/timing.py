"""
Per-operation timing handle.

An OperationTimer is created by whoever starts a unit of work (a request
handler or a Celery task) and passed down to the services it calls, so
durations never live in process-wide state.
"""
import logging
import time
from contextlib import contextmanager

logger = logging.getLogger(__name__)


class OperationTimer:
    def __init__(self, slow_threshold_ms=1000, log=None):
        self.slow_threshold_ms = slow_threshold_ms
        self.durations = {}
        self._log = log or logger

    @contextmanager
    def measure(self, label):
        start = time.perf_counter()
        try:
            yield
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            self.durations[label] = elapsed_ms
            if elapsed_ms > self.slow_threshold_ms:
                self._log.warning("Slow operation: %s took %.2fms", label, elapsed_ms)

    def summary(self):
        return {label: round(ms, 2) for label, ms in self.durations.items()}


def timer_from_config(config):
    return OperationTimer(slow_threshold_ms=config.get('SLOW_OPERATION_MS', 1000))
