"""
Utility modules for constants and class-name tables.
"""

from .coco_classes import COCO_CLASSES
from .constants import (
    DEFAULT_FALLBACK_INTERVAL_MS,
    DEFAULT_JSON_DIR,
    DEFAULT_MODEL_HEIGHT,
    DEFAULT_MODEL_WIDTH,
    ENV_CAMERA_URL,
    ENV_DETECTION_KEYWORD,
)

__all__ = [
    "COCO_CLASSES",
    "DEFAULT_FALLBACK_INTERVAL_MS",
    "DEFAULT_JSON_DIR",
    "DEFAULT_MODEL_HEIGHT",
    "DEFAULT_MODEL_WIDTH",
    "ENV_CAMERA_URL",
    "ENV_DETECTION_KEYWORD",
]
