"""
Adaptive Scheduler - throttles cycles to observed processing cost.

Keeps a short window of recent cycle durations and targets an interval
slightly above their mean, so cycles never queue up under load and run
back-to-back when processing is fast.
"""

import logging
import math
from collections import deque

from ..utils.constants import (
    DEFAULT_FALLBACK_INTERVAL_MS,
    DEFAULT_INTERVAL_HEADROOM,
    DEFAULT_MAX_INTERVAL_MS,
    DEFAULT_MIN_INTERVAL_MS,
    DEFAULT_MIN_TIMING_SAMPLES,
    DEFAULT_TIMING_WINDOW_SIZE,
)

logger = logging.getLogger(__name__)


class AdaptiveScheduler:
    """Computes the delay before the next cycle. Never raises."""

    def __init__(
        self,
        window_size: int = DEFAULT_TIMING_WINDOW_SIZE,
        min_samples: int = DEFAULT_MIN_TIMING_SAMPLES,
        headroom: float = DEFAULT_INTERVAL_HEADROOM,
        min_interval_ms: float = DEFAULT_MIN_INTERVAL_MS,
        max_interval_ms: float = DEFAULT_MAX_INTERVAL_MS,
        fallback_interval_ms: float = DEFAULT_FALLBACK_INTERVAL_MS,
    ):
        self.min_samples = min_samples
        self.headroom = headroom
        self.min_interval_ms = min_interval_ms
        self.max_interval_ms = max_interval_ms
        self.fallback_interval_ms = fallback_interval_ms
        self._timings: deque[float] = deque(maxlen=max(1, window_size))

    @property
    def sample_count(self) -> int:
        return len(self._timings)

    def record_timing(self, duration_ms: float) -> None:
        """Push a cycle duration; the oldest sample falls out when full."""
        try:
            value = float(duration_ms)
        except (TypeError, ValueError):
            logger.debug(f"Ignoring non-numeric timing sample: {duration_ms!r}")
            return
        if not math.isfinite(value) or value < 0:
            logger.debug(f"Ignoring invalid timing sample: {value}")
            return
        self._timings.append(value)

    def get_interval(self) -> float:
        """
        Milliseconds to wait between cycle starts.

        Returns:
            Fallback interval until enough samples exist, otherwise
            mean * headroom clamped to [min_interval_ms, max_interval_ms]
        """
        if len(self._timings) < self.min_samples:
            return self.fallback_interval_ms

        average = sum(self._timings) / len(self._timings)
        interval = average * self.headroom
        return max(self.min_interval_ms, min(self.max_interval_ms, interval))

    def reset(self) -> None:
        self._timings.clear()
