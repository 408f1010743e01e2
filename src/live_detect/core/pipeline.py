"""
Detection Pipeline - one detection cycle end to end, plus session state.

States:
    IDLE -> RUNNING <-> PAUSED -> STOPPED, and STOPPED -> IDLE for a new session.

A cycle is: frame -> preprocess -> inference (the only await) -> decode ->
suppress -> map -> track -> DetectionSet. At most one cycle is in flight;
ticks arriving while a cycle awaits inference are skipped. A cycle that
completes after stop() is discarded without touching tracker state.

Error policy:
    PreprocessError, InferenceError  -> session stops, error reported
    DecodeError                      -> cycle aborted, session keeps running
"""

import logging
import time
from collections.abc import Callable, Iterable
from enum import Enum

import numpy as np

from ..config import PipelineConfig
from ..errors import DecodeError, InferenceError, PipelineStateError, PreprocessError
from ..models import (
    Candidate,
    ClassNames,
    Detection,
    DetectionSet,
    DisplaySurface,
    Frame,
    FrameSource,
    InferenceEngine,
    PaddingInfo,
    Renderer,
    TelemetrySink,
)
from ..utils.constants import STATUS_REPORT_INTERVAL
from .decoder import DetectionDecoder
from .mapper import CoordinateMapper
from .preprocessor import FramePreprocessor
from .scheduler import AdaptiveScheduler
from .suppressor import NonMaxSuppressor
from .telemetry import CycleRateMeter
from .tracker import ObjectTracker

logger = logging.getLogger(__name__)


class PipelineState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    STOPPED = "stopped"


class CycleScope:
    """
    Per-cycle buffer scope.

    Buffers held here are released when the scope exits, whichever way the
    cycle ends. Engines exposing ``release(buffer)`` get each one back.
    """

    def __init__(self, engine: InferenceEngine | None = None):
        self._engine = engine
        self._buffers: list[np.ndarray] = []
        self.released = 0

    def hold(self, buffer):
        self._buffers.append(buffer)
        return buffer

    def __enter__(self) -> "CycleScope":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        release = getattr(self._engine, "release", None)
        while self._buffers:
            buffer = self._buffers.pop()
            if release is not None:
                release(buffer)
            self.released += 1


def keyword_matches(keyword: str, class_name: str) -> bool:
    """Case-insensitive substring match; an empty keyword matches nothing."""
    keyword = keyword.strip().lower()
    return bool(keyword) and keyword in class_name.lower()


class Pipeline:
    """
    Detection session: owns the components and all cross-cycle state.

    Tracker records and the timing window are only mutated from here.
    """

    def __init__(
        self,
        config: PipelineConfig,
        frame_source: FrameSource,
        engine: InferenceEngine,
        class_names: ClassNames,
        renderers: Iterable[Renderer] = (),
        display: DisplaySurface | None = None,
        telemetry: TelemetrySink | None = None,
        clock: Callable[[], float] = time.monotonic,
        wall_clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            config: Session tunables
            frame_source: Provides the current frame
            engine: Executes the model
            class_names: Class id -> label lookup
            renderers: Receive every completed DetectionSet
            display: Reports rendered size for display-space mapping
            telemetry: Receives cycle rate and escalated errors
            clock: Monotonic seconds, used for throttling and timings
            wall_clock: Epoch seconds, used for DetectionSet timestamps and ids
        """
        self.config = config
        self.frame_source = frame_source
        self.engine = engine
        self.class_names = class_names
        self.renderers = list(renderers)
        self.display = display
        self.telemetry = telemetry
        self._clock = clock
        self._wall_clock = wall_clock

        self.preprocessor = FramePreprocessor(config.model_width, config.model_height)
        self.decoder = DetectionDecoder(config.num_classes)
        self.suppressor = NonMaxSuppressor(
            confidence_threshold=config.confidence_threshold,
            iou_threshold=config.iou_threshold,
            max_detections=config.max_detections,
        )
        self.tracker = ObjectTracker(
            match_threshold=config.track_match_threshold,
            model_width=config.model_width,
            model_height=config.model_height,
        )
        self.scheduler = AdaptiveScheduler(
            window_size=config.timing_window_size,
            min_samples=config.min_timing_samples,
            headroom=config.interval_headroom,
            min_interval_ms=config.min_interval_ms,
            max_interval_ms=config.max_interval_ms,
            fallback_interval_ms=config.fallback_interval_ms,
        )
        self.rate_meter = CycleRateMeter(telemetry)

        self.keyword = config.keyword
        self.last_error: Exception | None = None
        self.cycle_count = 0

        self._state = PipelineState.IDLE
        self._busy = False
        self._session = 0
        self._last_cycle_ms: float | None = None
        self._state_listeners: list[Callable[[PipelineState, PipelineState], None]] = []

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def busy(self) -> bool:
        """True while a cycle is in flight."""
        return self._busy

    def on_state_change(
        self, listener: Callable[[PipelineState, PipelineState], None]
    ) -> None:
        """Register listener(old_state, new_state)."""
        self._state_listeners.append(listener)

    def _set_state(self, new_state: PipelineState) -> None:
        old_state = self._state
        if old_state is new_state:
            return
        self._state = new_state
        logger.info(f"Pipeline {old_state.value} -> {new_state.value}")
        for listener in self._state_listeners:
            listener(old_state, new_state)

    def start(self) -> None:
        """
        IDLE -> RUNNING.

        Raises:
            PipelineStateError: If not idle, the model is not loaded, or the
                frame source has no frame yet
        """
        if self._state is PipelineState.STOPPED:
            raise PipelineStateError("Session stopped - call new_session() first")
        if self._state is not PipelineState.IDLE:
            raise PipelineStateError(f"Cannot start from {self._state.value}")
        if not self.engine.is_loaded:
            raise PipelineStateError("Model not loaded yet")
        if not self.frame_source.current_frame().is_ready():
            raise PipelineStateError("Frame source not ready (no frame dimensions)")

        self._reset_session_state()
        self._session += 1
        self.last_error = None
        self._set_state(PipelineState.RUNNING)
        logger.info(
            f"Detection started (keyword: {self.keyword or 'none'}, "
            f"input: {self.config.model_width}x{self.config.model_height})"
        )

    def pause(self) -> bool:
        """
        RUNNING -> PAUSED, e.g. when the host is backgrounded.

        Tracker and timing state are kept. Returns False if not running.
        """
        if self._state is not PipelineState.RUNNING:
            return False
        self._set_state(PipelineState.PAUSED)
        return True

    def resume(self, now_ms: float | None = None) -> bool:
        """
        PAUSED -> RUNNING.

        The throttle clock restarts at now_ms, so the first cycle after a
        resume waits one full interval. Returns False if not paused.
        """
        if self._state is not PipelineState.PAUSED:
            return False
        self._last_cycle_ms = self._now_ms() if now_ms is None else now_ms
        self._set_state(PipelineState.RUNNING)
        return True

    def stop(self) -> None:
        """
        Any state -> STOPPED. Clears tracker and timing state.

        A cycle still awaiting inference is discarded when it completes.
        """
        if self._state is PipelineState.STOPPED:
            return
        self._session += 1
        self._reset_session_state()
        self._set_state(PipelineState.STOPPED)
        logger.info(f"Detection stopped after {self.cycle_count} cycles")

    def new_session(self) -> None:
        """STOPPED -> IDLE so the pipeline can be started again."""
        if self._state in (PipelineState.RUNNING, PipelineState.PAUSED):
            raise PipelineStateError("Stop the running session first")
        self.cycle_count = 0
        self._set_state(PipelineState.IDLE)

    def set_keyword(self, keyword: str) -> None:
        self.keyword = keyword.strip().lower()
        logger.info(f"Keyword set: {self.keyword or 'none'}")

    def _reset_session_state(self) -> None:
        self.tracker.reset()
        self.scheduler.reset()
        self.rate_meter.reset()
        self._last_cycle_ms = None

    # ------------------------------------------------------------------
    # Cycle
    # ------------------------------------------------------------------

    def _now_ms(self) -> float:
        return self._clock() * 1000.0

    def is_due(self, now_ms: float | None = None) -> bool:
        """True if a tick at now_ms (default: now) would start a cycle."""
        if self._state is not PipelineState.RUNNING or self._busy:
            return False
        if self._last_cycle_ms is None:
            return True
        if now_ms is None:
            now_ms = self._now_ms()
        return now_ms - self._last_cycle_ms >= self.scheduler.get_interval()

    async def tick(self, now_ms: float | None = None) -> DetectionSet | None:
        """
        Periodic tick from the host loop.

        Runs one cycle if the pipeline is running, idle (single-flight) and
        the adaptive interval has elapsed since the last cycle started.

        Returns:
            DetectionSet for a completed cycle, None if skipped, aborted,
            failed or discarded
        """
        now = self._now_ms() if now_ms is None else now_ms
        if not self.is_due(now):
            return None

        self._last_cycle_ms = now
        self._busy = True
        try:
            return await self._run_cycle(self._session)
        finally:
            self._busy = False

    async def _run_cycle(self, session: int) -> DetectionSet | None:
        started = self._clock()

        try:
            with CycleScope(self.engine) as scope:
                frame = self._acquire_frame()
                tensor, padding = self.preprocessor.prepare(frame)
                scope.hold(tensor)

                output = scope.hold(await self._execute(tensor))

                if self._is_stale(session):
                    logger.debug("Discarding cycle completed after stop")
                    return None

                candidates = self.decoder.decode(output)
                kept = self.suppressor.suppress(candidates)
                detection_set = self._build_detection_set(kept, padding)

        except DecodeError as e:
            logger.warning(f"Cycle aborted - malformed model output: {e}")
            return None
        except (PreprocessError, InferenceError) as e:
            if not self._is_stale(session):
                self._fail(e)
            return None

        duration_ms = (self._clock() - started) * 1000.0
        self.scheduler.record_timing(duration_ms)
        self.cycle_count += 1
        self.rate_meter.record(self._now_ms())

        self._emit(detection_set)

        if self.cycle_count % STATUS_REPORT_INTERVAL == 0:
            self._log_status(detection_set, duration_ms)

        return detection_set

    def _acquire_frame(self) -> Frame:
        try:
            return self.frame_source.current_frame()
        except Exception as e:
            raise PreprocessError(f"Frame source failed: {e}") from e

    async def _execute(self, tensor: np.ndarray) -> np.ndarray:
        try:
            return await self.engine.execute(tensor)
        except Exception as e:
            raise InferenceError(f"Inference failed: {e}") from e

    def _is_stale(self, session: int) -> bool:
        return session != self._session or self._state is PipelineState.STOPPED

    def _fail(self, error: Exception) -> None:
        logger.error(f"Detection error: {error}")
        self.last_error = error
        if self.telemetry is not None:
            self.telemetry.record_error(error)
        self.stop()

    def _build_detection_set(
        self, kept: list[Candidate], padding: PaddingInfo
    ) -> DetectionSet:
        """Map, label and track kept candidates, then commit the tracker."""
        timestamp = self._wall_clock()
        display_size = self.display.display_size() if self.display else None
        mapper = CoordinateMapper.for_display(padding, display_size)

        detections: list[Detection] = []
        for candidate in kept:
            box = candidate.xyxy()
            class_name = self.class_names.lookup(candidate.class_id)
            detections.append(
                Detection(
                    id=self.tracker.resolve_id(candidate.class_id, box, timestamp),
                    class_id=candidate.class_id,
                    class_name=class_name,
                    score=candidate.score,
                    box=box,
                    screen_box=mapper.to_screen(box),
                    is_keyword_match=keyword_matches(self.keyword, class_name),
                )
            )

        self.tracker.commit(detections)
        return DetectionSet(timestamp=timestamp, detections=detections, keyword=self.keyword)

    def _emit(self, detection_set: DetectionSet) -> None:
        for renderer in self.renderers:
            try:
                renderer.render(detection_set)
            except Exception as e:
                logger.error(f"Renderer {type(renderer).__name__} failed: {e}", exc_info=True)

    def _log_status(self, detection_set: DetectionSet, duration_ms: float) -> None:
        """Log periodic status."""
        rate = self.rate_meter.last_rate or 0.0
        logger.info(
            f"Cycle {self.cycle_count} | {duration_ms:.0f}ms | "
            f"Interval: {self.scheduler.get_interval():.0f}ms | Rate: {rate:.1f}/s | "
            f"Objects: {detection_set.total_count} "
            f"({detection_set.keyword_match_count} matching)"
        )
