"""
Logging telemetry sink - cycle rate and escalated errors.
"""

import logging

logger = logging.getLogger(__name__)


class LoggingTelemetrySink:
    """Observability sink that reports through logging and keeps the last values."""

    def __init__(self):
        self.last_cycle_rate: float | None = None
        self.errors: list[Exception] = []

    def record_cycle_rate(self, cycles_per_second: float) -> None:
        self.last_cycle_rate = cycles_per_second
        logger.debug(f"Inference rate: {cycles_per_second:.1f} cycles/s")

    def record_error(self, error: Exception) -> None:
        self.errors.append(error)
        logger.error(f"Session error ({type(error).__name__}): {error}")
