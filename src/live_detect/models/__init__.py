"""
Consolidated data models for live detection.

This package contains the data structures passed between pipeline stages
and the protocols of the collaborators the pipeline consumes.
"""

from .collaborators import (
    ClassNames,
    DisplaySurface,
    FrameSource,
    InferenceEngine,
    Renderer,
    TelemetrySink,
)
from .detection import (
    Candidate,
    Detection,
    DetectionSet,
    Frame,
    PaddingInfo,
    ScreenBox,
    TrackRecord,
)

__all__ = [
    # Data models
    "Candidate",
    # Protocols
    "ClassNames",
    "Detection",
    "DetectionSet",
    "DisplaySurface",
    "Frame",
    "FrameSource",
    "InferenceEngine",
    "PaddingInfo",
    "Renderer",
    "ScreenBox",
    "TelemetrySink",
    "TrackRecord",
]
