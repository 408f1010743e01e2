"""
Pydantic schemas for configuration validation.

Provides type-safe, declarative validation with clear error messages.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..utils.constants import (
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
    CAMERA_RECONNECT_DELAY,
)


class StrictModel(BaseModel):
    """Base model that rejects unknown fields."""

    model_config = ConfigDict(extra="forbid")


class ModelConfig(StrictModel):
    """Model file and input geometry."""

    model_file: str | None = Field(default=None, description="Model weights (.pt)")
    metadata_file: str | None = Field(
        default=None, description="metadata.yaml with class names"
    )
    input_width: int = Field(default=DEFAULT_MODEL_WIDTH, gt=0)
    input_height: int = Field(default=DEFAULT_MODEL_HEIGHT, gt=0)
    num_classes: int = Field(default=DEFAULT_NUM_CLASSES, gt=0)
    device: str | None = Field(default=None, description="cuda, cpu or None for auto")

    @field_validator("model_file")
    @classmethod
    def validate_model_file(cls, v: str | None) -> str | None:
        if v is not None and not v.endswith(".pt"):
            raise ValueError("Model file must be .pt format")
        return v


class DetectionConfig(StrictModel):
    """Keyword filter and suppression settings."""

    keyword: str = Field(default="", description="Case-insensitive class name filter")
    confidence_threshold: float = Field(
        default=DEFAULT_CONFIDENCE_THRESHOLD,
        ge=0.0,
        le=1.0,
        description="Detection confidence threshold",
    )
    iou_threshold: float = Field(default=DEFAULT_IOU_THRESHOLD, gt=0.0, le=1.0)
    max_detections: int = Field(default=DEFAULT_MAX_DETECTIONS, gt=0)


class TrackingConfig(StrictModel):
    """Cross-cycle identity matching."""

    match_threshold: float = Field(
        default=DEFAULT_TRACK_MATCH_THRESHOLD,
        gt=0.0,
        le=1.0,
        description="Max top-left shift as a fraction of the model input size",
    )


class SchedulerConfig(StrictModel):
    """Adaptive cycle interval settings (milliseconds)."""

    window_size: int = Field(default=DEFAULT_TIMING_WINDOW_SIZE, gt=0)
    min_samples: int = Field(default=DEFAULT_MIN_TIMING_SAMPLES, gt=0)
    headroom: float = Field(default=DEFAULT_INTERVAL_HEADROOM, gt=0.0)
    min_interval_ms: float = Field(default=DEFAULT_MIN_INTERVAL_MS, ge=0)
    max_interval_ms: float = Field(default=DEFAULT_MAX_INTERVAL_MS, ge=0)
    fallback_interval_ms: float = Field(default=DEFAULT_FALLBACK_INTERVAL_MS, ge=0)

    @model_validator(mode="after")
    def validate_bounds(self):
        if self.min_interval_ms > self.max_interval_ms:
            raise ValueError("min_interval_ms must be <= max_interval_ms")
        if self.min_samples > self.window_size:
            raise ValueError("min_samples must be <= window_size")
        return self


class CameraConfig(StrictModel):
    """Frame source settings."""

    url: str | int = Field(default=0, description="Camera URL, device index or file")
    max_reconnect_attempts: int = Field(default=MAX_CAMERA_RECONNECT_ATTEMPTS, ge=0)
    reconnect_delay: float = Field(default=CAMERA_RECONNECT_DELAY, ge=0)


class RuntimeConfig(StrictModel):
    """Session runtime settings."""

    default_duration_hours: float = Field(default=1.0, gt=0)
    tick_hz: float = Field(default=DEFAULT_TICK_HZ, gt=0, le=1000)


class OutputConfig(StrictModel):
    """Detection output settings."""

    json_enabled: bool = True
    json_dir: str = DEFAULT_JSON_DIR
    console_level: Literal["detailed", "summary", "silent"] = "summary"


class Config(StrictModel):
    """Complete configuration schema."""

    model: ModelConfig = Field(default_factory=ModelConfig)
    detection: DetectionConfig = Field(default_factory=DetectionConfig)
    tracking: TrackingConfig = Field(default_factory=TrackingConfig)
    scheduler: SchedulerConfig = Field(default_factory=SchedulerConfig)
    camera: CameraConfig = Field(default_factory=CameraConfig)
    runtime: RuntimeConfig = Field(default_factory=RuntimeConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


def validate_config_pydantic(config: dict) -> Config:
    """
    Validate config using Pydantic schemas.

    Args:
        config: Raw configuration dictionary

    Returns:
        Validated Config model

    Raises:
        pydantic.ValidationError: If validation fails
    """
    return Config.model_validate(config)
