"""
Detection data models - frames, padding metadata, candidates and detections.
"""

from dataclasses import dataclass, field
from typing import Any

import numpy as np


@dataclass(frozen=True)
class Frame:
    """
    Raw frame handed over by the frame source.

    Attributes:
        pixels: H x W x 3 uint8 array in RGB order
        width: Frame width in pixels (0 before the source is ready)
        height: Frame height in pixels (0 before the source is ready)
    """

    pixels: np.ndarray | None
    width: int
    height: int

    @classmethod
    def empty(cls) -> "Frame":
        """Frame reported by a source that has nothing to deliver yet."""
        return cls(pixels=None, width=0, height=0)

    @classmethod
    def from_array(cls, pixels: np.ndarray) -> "Frame":
        """Wrap an H x W x 3 array, deriving the dimensions from its shape."""
        height, width = pixels.shape[:2]
        return cls(pixels=pixels, width=int(width), height=int(height))

    def is_ready(self) -> bool:
        """True if the frame carries pixels with non-zero dimensions."""
        return self.pixels is not None and self.width > 0 and self.height > 0


@dataclass(frozen=True)
class PaddingInfo:
    """
    Letterbox transform applied to a frame, kept so it can be inverted.

    Attributes:
        scale: min(model_width / w, model_height / h)
        pad_left: Columns of padding added on the left
        pad_top: Rows of padding added on top
        original_shape: Source frame (height, width)
        new_width: Resized width before padding
        new_height: Resized height before padding
        pad_right: Columns of padding added on the right
        pad_bottom: Rows of padding added at the bottom
    """

    scale: float
    pad_left: int
    pad_top: int
    original_shape: tuple[int, int]
    new_width: int = 0
    new_height: int = 0
    pad_right: int = 0
    pad_bottom: int = 0


@dataclass(frozen=True)
class Candidate:
    """
    Decoded model prediction before suppression.

    The box is [y1, x1, y2, x2] in model pixel space.
    """

    box: tuple[float, float, float, float]
    score: float
    class_id: int

    def xyxy(self) -> tuple[float, float, float, float]:
        """Box reordered to [x1, y1, x2, y2]."""
        y1, x1, y2, x2 = self.box
        return (x1, y1, x2, y2)


@dataclass(frozen=True)
class ScreenBox:
    """Box in display space."""

    x: float
    y: float
    width: float
    height: float


@dataclass
class Detection:
    """
    A labeled, localized object emitted for one cycle.

    Attributes:
        id: Identity kept stable across consecutive cycles by the tracker
        class_id: Model class index
        class_name: Human-readable class name
        score: Confidence in [0, 1]
        box: [x1, y1, x2, y2] in model pixel space
        screen_box: Box in display space
        is_keyword_match: True if class_name contains the session keyword
    """

    id: str
    class_id: int
    class_name: str
    score: float
    box: tuple[float, float, float, float]
    screen_box: ScreenBox
    is_keyword_match: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "class_id": self.class_id,
            "class_name": self.class_name,
            "score": round(float(self.score), 4),
            "box": [float(v) for v in self.box],
            "screen_box": {
                "x": float(self.screen_box.x),
                "y": float(self.screen_box.y),
                "width": float(self.screen_box.width),
                "height": float(self.screen_box.height),
            },
            "is_keyword_match": self.is_keyword_match,
        }


@dataclass(frozen=True)
class TrackRecord:
    """Reduced snapshot of a detection, retained for one cycle only."""

    id: str
    class_id: int
    box: tuple[float, float, float, float]

    @classmethod
    def from_detection(cls, detection: Detection) -> "TrackRecord":
        return cls(id=detection.id, class_id=detection.class_id, box=detection.box)


@dataclass
class DetectionSet:
    """
    Result of one completed cycle, handed to renderers.

    Attributes:
        timestamp: Wall-clock seconds when the cycle completed
        detections: Detections in suppression keep order
        keyword: Keyword the matches were computed against
    """

    timestamp: float
    detections: list[Detection] = field(default_factory=list)
    keyword: str = ""

    @property
    def total_count(self) -> int:
        return len(self.detections)

    @property
    def keyword_match_count(self) -> int:
        return sum(1 for d in self.detections if d.is_keyword_match)

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "keyword": self.keyword,
            "total_count": self.total_count,
            "keyword_match_count": self.keyword_match_count,
            "detections": [d.to_dict() for d in self.detections],
        }
