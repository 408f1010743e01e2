"""
Detection Decoder - raw model output to candidate boxes.

Expects YOLO-style heads without objectness: (1, 4 + num_classes, num_anchors)
with (cx, cy, w, h) followed by per-class scores for every anchor.
"""

import numpy as np

from ..errors import DecodeError
from ..models import Candidate
from ..utils.constants import DEFAULT_NUM_CLASSES


class DetectionDecoder:
    """Converts raw model output into [y1, x1, y2, x2] candidates."""

    def __init__(self, num_classes: int = DEFAULT_NUM_CLASSES):
        self.num_classes = num_classes

    def decode(self, output: np.ndarray) -> list[Candidate]:
        """
        Decode one batch of raw output.

        Args:
            output: Array shaped (1, 4 + num_classes, num_anchors)

        Returns:
            One Candidate per anchor, in anchor order

        Raises:
            DecodeError: If the output rank or shape is unexpected
        """
        preds = self._to_anchor_major(output)
        if preds.shape[0] == 0:
            return []

        cx, cy, w, h = preds[:, 0], preds[:, 1], preds[:, 2], preds[:, 3]
        x1 = cx - w / 2
        y1 = cy - h / 2
        x2 = x1 + w
        y2 = y1 + h

        class_scores = preds[:, 4 : 4 + self.num_classes]
        class_ids = np.argmax(class_scores, axis=1)
        scores = class_scores[np.arange(class_scores.shape[0]), class_ids]

        boxes = np.stack([y1, x1, y2, x2], axis=1)
        return [
            Candidate(
                box=(float(b[0]), float(b[1]), float(b[2]), float(b[3])),
                score=float(s),
                class_id=int(c),
            )
            for b, s, c in zip(boxes, scores, class_ids)
        ]

    def _to_anchor_major(self, output) -> np.ndarray:
        """Validate shape and transpose to (num_anchors, 4 + num_classes)."""
        try:
            arr = np.asarray(output, dtype=np.float32)
        except (TypeError, ValueError) as e:
            raise DecodeError(f"Model output is not numeric: {e}") from e

        expected_channels = 4 + self.num_classes
        if arr.ndim != 3:
            raise DecodeError(
                f"Expected output rank 3 (1, {expected_channels}, N), got shape {arr.shape}"
            )
        if arr.shape[0] != 1:
            raise DecodeError(f"Expected batch size 1, got {arr.shape[0]}")
        if arr.shape[1] != expected_channels:
            raise DecodeError(
                f"Expected {expected_channels} channels, got shape {arr.shape}"
            )

        return arr[0].transpose(1, 0)
