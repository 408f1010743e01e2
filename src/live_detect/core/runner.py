"""
Session Runner - drives Pipeline.tick from a refresh-aligned asyncio loop.

Each due tick is scheduled as its own task so the loop keeps ticking while a
cycle is suspended on inference; the pipeline's busy flag turns those extra
ticks into no-ops.

Signals:
    SIGINT / SIGTERM  stop the session
    SIGUSR1           toggle pause/resume (backgrounding signal)
"""

import asyncio
import logging
import signal
import time

from .pipeline import Pipeline, PipelineState

logger = logging.getLogger(__name__)


class SessionRunner:
    """Runs one detection session until duration, stop request, or failure."""

    def __init__(
        self,
        pipeline: Pipeline,
        tick_hz: float = 60.0,
        duration_seconds: float | None = None,
    ):
        self.pipeline = pipeline
        self.tick_interval = 1.0 / tick_hz
        self.duration_seconds = duration_seconds
        self._stop_requested = False
        self._tasks: set[asyncio.Task] = set()

    def request_stop(self) -> None:
        if not self._stop_requested:
            logger.info("Stop requested")
        self._stop_requested = True

    def toggle_pause(self) -> None:
        """Pause a running pipeline or resume a paused one."""
        if self.pipeline.state is PipelineState.RUNNING:
            self.pipeline.pause()
        elif self.pipeline.state is PipelineState.PAUSED:
            self.pipeline.resume()

    def install_signal_handlers(self) -> None:
        """Register signal handlers on the running loop (POSIX only)."""
        loop = asyncio.get_running_loop()
        handlers = {
            signal.SIGINT: self.request_stop,
            signal.SIGTERM: self.request_stop,
        }
        if hasattr(signal, "SIGUSR1"):
            handlers[signal.SIGUSR1] = self.toggle_pause

        for signum, handler in handlers.items():
            try:
                loop.add_signal_handler(signum, handler)
            except (NotImplementedError, RuntimeError):
                logger.debug(f"Signal handler for {signum} not supported here")

    async def run(self) -> str:
        """
        Start the pipeline (if idle) and tick until the session ends.

        Returns:
            Reason for stopping: 'duration', 'requested', 'error' or 'stopped'
        """
        if self.pipeline.state is PipelineState.IDLE:
            self.pipeline.start()

        start_time = time.monotonic()
        reason = "stopped"

        try:
            while True:
                if self._stop_requested:
                    reason = "requested"
                    break

                if self.pipeline.state is PipelineState.STOPPED:
                    reason = "error" if self.pipeline.last_error else "stopped"
                    break

                if (
                    self.duration_seconds is not None
                    and time.monotonic() - start_time >= self.duration_seconds
                ):
                    reason = "duration"
                    break

                if self.pipeline.is_due():
                    self._schedule_tick()

                await asyncio.sleep(self.tick_interval)
        finally:
            self.pipeline.stop()
            if self._tasks:
                await asyncio.gather(*self._tasks, return_exceptions=True)

        logger.info(f"Session ended: {reason}")
        return reason

    def _schedule_tick(self) -> None:
        task = asyncio.ensure_future(self.pipeline.tick())
        self._tasks.add(task)
        task.add_done_callback(self._on_tick_done)

    def _on_tick_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Unexpected error in detection cycle: {error}", exc_info=error)
