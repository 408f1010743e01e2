"""
Tests for the asyncio session runner
"""

import asyncio
import unittest

import numpy as np

from live_detect.config import PipelineConfig
from live_detect.core import ClassNameRegistry, Pipeline, PipelineState, SessionRunner
from live_detect.models import Frame


class StaticSource:
    def current_frame(self):
        return Frame.from_array(np.zeros((480, 640, 3), dtype=np.uint8))


class EmptyEngine:
    """Returns a valid output with no confident anchors."""

    is_loaded = True

    def __init__(self, error=None):
        self.error = error
        self.calls = 0

    async def execute(self, tensor):
        self.calls += 1
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return np.zeros((1, 84, 8), dtype=np.float32)


def make_pipeline(engine):
    config = PipelineConfig(fallback_interval_ms=0.0)
    return Pipeline(config, StaticSource(), engine, ClassNameRegistry.coco())


class TestSessionRunner(unittest.IsolatedAsyncioTestCase):
    """Test session start, ticking and termination."""

    async def test_runs_until_duration(self):
        """Test the session ticks cycles and ends on duration."""
        engine = EmptyEngine()
        pipeline = make_pipeline(engine)

        reason = await SessionRunner(pipeline, tick_hz=200, duration_seconds=0.1).run()

        self.assertEqual(reason, "duration")
        self.assertIs(pipeline.state, PipelineState.STOPPED)
        self.assertGreater(engine.calls, 0)

    async def test_stop_request(self):
        """Test a stop request ends the session on the next loop pass."""
        pipeline = make_pipeline(EmptyEngine())
        runner = SessionRunner(pipeline, tick_hz=200)
        runner.request_stop()

        self.assertEqual(await runner.run(), "requested")
        self.assertIs(pipeline.state, PipelineState.STOPPED)

    async def test_engine_failure_ends_with_error(self):
        """Test an inference failure ends the session with reason 'error'."""
        pipeline = make_pipeline(EmptyEngine(error=RuntimeError("device lost")))

        reason = await SessionRunner(pipeline, tick_hz=200, duration_seconds=5).run()

        self.assertEqual(reason, "error")
        self.assertIsNotNone(pipeline.last_error)

    async def test_toggle_pause(self):
        """Test the pause toggle flips between RUNNING and PAUSED."""
        pipeline = make_pipeline(EmptyEngine())
        pipeline.start()
        runner = SessionRunner(pipeline)

        runner.toggle_pause()
        self.assertIs(pipeline.state, PipelineState.PAUSED)
        runner.toggle_pause()
        self.assertIs(pipeline.state, PipelineState.RUNNING)


if __name__ == "__main__":
    unittest.main()
