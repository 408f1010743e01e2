"""
Pipeline Configuration

Flat runtime view of the validated config. Components receive their
tunables from here instead of reading the raw dictionary.
"""

from dataclasses import dataclass

from pydantic import ValidationError

from ..errors import ConfigValidationError
from ..utils.constants import (
    CAMERA_RECONNECT_DELAY,
    DEFAULT_CONFIDENCE_THRESHOLD,
    DEFAULT_FALLBACK_INTERVAL_MS,
    DEFAULT_INTERVAL_HEADROOM,
    DEFAULT_IOU_THRESHOLD,
    DEFAULT_JSON_DIR,
    DEFAULT_MAX_DETECTIONS,
    DEFAULT_MAX_INTERVAL_MS,
    DEFAULT_MIN_INTERVAL_MS,
    DEFAULT_MIN_TIMING_SAMPLES,
    DEFAULT_MODEL_HEIGHT,
    DEFAULT_MODEL_WIDTH,
    DEFAULT_NUM_CLASSES,
    DEFAULT_TICK_HZ,
    DEFAULT_TIMING_WINDOW_SIZE,
    DEFAULT_TRACK_MATCH_THRESHOLD,
    MAX_CAMERA_RECONNECT_ATTEMPTS,
)
from .loader import load_config_file
from .schemas import validate_config_pydantic


@dataclass
class PipelineConfig:
    """
    Tunables for one detection session.

    Defaults: 640x640 input, 80 classes,
    0.4 confidence, 0.45 IoU, 100 detections, 0.15 track radius,
    10-sample timing window, 0-500 ms interval with a 200 ms fallback.
    """

    # Model
    model_file: str | None = None
    metadata_file: str | None = None
    model_width: int = DEFAULT_MODEL_WIDTH
    model_height: int = DEFAULT_MODEL_HEIGHT
    num_classes: int = DEFAULT_NUM_CLASSES
    device: str | None = None

    # Detection
    keyword: str = ""
    confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD
    iou_threshold: float = DEFAULT_IOU_THRESHOLD
    max_detections: int = DEFAULT_MAX_DETECTIONS

    # Tracking
    track_match_threshold: float = DEFAULT_TRACK_MATCH_THRESHOLD

    # Scheduling
    timing_window_size: int = DEFAULT_TIMING_WINDOW_SIZE
    min_timing_samples: int = DEFAULT_MIN_TIMING_SAMPLES
    interval_headroom: float = DEFAULT_INTERVAL_HEADROOM
    min_interval_ms: float = DEFAULT_MIN_INTERVAL_MS
    max_interval_ms: float = DEFAULT_MAX_INTERVAL_MS
    fallback_interval_ms: float = DEFAULT_FALLBACK_INTERVAL_MS

    # Camera
    camera_url: str | int = 0
    max_reconnect_attempts: int = MAX_CAMERA_RECONNECT_ATTEMPTS
    reconnect_delay: float = CAMERA_RECONNECT_DELAY

    # Runtime
    default_duration_hours: float = 1.0
    tick_hz: float = DEFAULT_TICK_HZ

    # Output
    json_enabled: bool = True
    json_dir: str = DEFAULT_JSON_DIR
    console_level: str = "summary"

    @classmethod
    def from_yaml(cls, path: str) -> "PipelineConfig":
        """Load configuration from YAML file."""
        return cls.from_dict(load_config_file(path))

    @classmethod
    def from_dict(cls, data: dict) -> "PipelineConfig":
        """
        Create config from dictionary.

        Raises:
            ConfigValidationError: If the dictionary fails schema validation
        """
        try:
            parsed = validate_config_pydantic(data or {})
        except ValidationError as e:
            raise ConfigValidationError(f"Invalid configuration: {e}") from e

        model = parsed.model
        detection = parsed.detection
        scheduler = parsed.scheduler

        return cls(
            model_file=model.model_file,
            metadata_file=model.metadata_file,
            model_width=model.input_width,
            model_height=model.input_height,
            num_classes=model.num_classes,
            device=model.device,
            keyword=detection.keyword.strip().lower(),
            confidence_threshold=detection.confidence_threshold,
            iou_threshold=detection.iou_threshold,
            max_detections=detection.max_detections,
            track_match_threshold=parsed.tracking.match_threshold,
            timing_window_size=scheduler.window_size,
            min_timing_samples=scheduler.min_samples,
            interval_headroom=scheduler.headroom,
            min_interval_ms=scheduler.min_interval_ms,
            max_interval_ms=scheduler.max_interval_ms,
            fallback_interval_ms=scheduler.fallback_interval_ms,
            camera_url=parsed.camera.url,
            max_reconnect_attempts=parsed.camera.max_reconnect_attempts,
            reconnect_delay=parsed.camera.reconnect_delay,
            default_duration_hours=parsed.runtime.default_duration_hours,
            tick_hz=parsed.runtime.tick_hz,
            json_enabled=parsed.output.json_enabled,
            json_dir=parsed.output.json_dir,
            console_level=parsed.output.console_level,
        )
