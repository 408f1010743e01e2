"""
Core detection components.

Per-frame stages (preprocess, decode, suppress, map, track), the adaptive
scheduler, and the Pipeline that orchestrates them. Model execution and
frame acquisition adapters live in inference.py and camera.py.
"""

from .class_names import ClassNameRegistry
from .decoder import DetectionDecoder
from .mapper import CoordinateMapper
from .pipeline import CycleScope, Pipeline, PipelineState, keyword_matches
from .preprocessor import FramePreprocessor, compute_letterbox
from .runner import SessionRunner
from .scheduler import AdaptiveScheduler
from .suppressor import NonMaxSuppressor, box_iou
from .tracker import ObjectTracker

__all__ = [
    "AdaptiveScheduler",
    "ClassNameRegistry",
    "CoordinateMapper",
    "CycleScope",
    "DetectionDecoder",
    "FramePreprocessor",
    "NonMaxSuppressor",
    "ObjectTracker",
    "Pipeline",
    "PipelineState",
    "SessionRunner",
    "box_iou",
    "compute_letterbox",
    "keyword_matches",
]
