"""
Cycle-rate meter - completed cycles per second, reported once per window.
"""

from ..models import TelemetrySink
from ..utils.constants import CYCLE_RATE_WINDOW_MS


class CycleRateMeter:
    """Counts completed cycles and reports the rate to a sink every window."""

    def __init__(self, sink: TelemetrySink | None, window_ms: float = CYCLE_RATE_WINDOW_MS):
        self.sink = sink
        self.window_ms = window_ms
        self._count = 0
        self._window_start: float | None = None
        self.last_rate: float | None = None

    def record(self, now_ms: float) -> None:
        """Count one completed cycle at now_ms."""
        if self._window_start is None:
            self._window_start = now_ms

        self._count += 1
        elapsed = now_ms - self._window_start
        if elapsed >= self.window_ms:
            self.last_rate = self._count * 1000.0 / elapsed
            if self.sink is not None:
                self.sink.record_cycle_rate(self.last_rate)
            self._count = 0
            self._window_start = now_ms

    def reset(self) -> None:
        self._count = 0
        self._window_start = None
