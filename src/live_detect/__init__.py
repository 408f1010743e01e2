"""
Live Detection System

Turns a live video stream into a temporally stable set of labeled,
localized objects, highlighted by a user-chosen keyword. Built on YOLO.

Package structure:
  core/     - Per-frame pipeline stages, scheduler, session orchestration
  models/   - Data models and collaborator protocols
  config/   - Configuration loading and validation
  output/   - Renderers and telemetry sinks
  utils/    - Constants and class tables
"""

__version__ = "1.0.0"

from .config import PipelineConfig, ValidationResult, validate_config_full
from .core import (
    AdaptiveScheduler,
    ClassNameRegistry,
    Pipeline,
    PipelineState,
    SessionRunner,
)
from .errors import (
    DecodeError,
    InferenceError,
    LiveDetectError,
    PipelineStateError,
    PreprocessError,
)
from .models import Detection, DetectionSet, Frame

__all__ = [
    "AdaptiveScheduler",
    "ClassNameRegistry",
    "DecodeError",
    "Detection",
    "DetectionSet",
    "Frame",
    "InferenceError",
    "LiveDetectError",
    # Core
    "Pipeline",
    # Config
    "PipelineConfig",
    "PipelineState",
    "PipelineStateError",
    "PreprocessError",
    "SessionRunner",
    "ValidationResult",
    "validate_config_full",
]
