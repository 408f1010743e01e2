"""
Non-Maximum Suppressor - removes duplicate and overlapping candidates.

Suppression is class-agnostic: a confident "truck" box suppresses an
overlapping "car" box. Per-class NMS is intentionally not applied.
"""

import logging

from ..models import Candidate
from ..utils.constants import (
    DEFAULT_CONFIDENCE_THRESHOLD,
    DEFAULT_IOU_THRESHOLD,
    DEFAULT_MAX_DETECTIONS,
)

logger = logging.getLogger(__name__)


def box_iou(
    a: tuple[float, float, float, float], b: tuple[float, float, float, float]
) -> float:
    """
    Intersection-over-union of two axis-aligned boxes.

    Both boxes use the same corner order ([y1, x1, y2, x2] or [x1, y1, x2, y2]);
    corners may be given in either orientation.

    Returns:
        IoU in [0, 1] (0 when the union has no area)
    """
    a_lo0, a_hi0 = min(a[0], a[2]), max(a[0], a[2])
    a_lo1, a_hi1 = min(a[1], a[3]), max(a[1], a[3])
    b_lo0, b_hi0 = min(b[0], b[2]), max(b[0], b[2])
    b_lo1, b_hi1 = min(b[1], b[3]), max(b[1], b[3])

    inter0 = max(0.0, min(a_hi0, b_hi0) - max(a_lo0, b_lo0))
    inter1 = max(0.0, min(a_hi1, b_hi1) - max(a_lo1, b_lo1))
    intersection = inter0 * inter1

    area_a = (a_hi0 - a_lo0) * (a_hi1 - a_lo1)
    area_b = (b_hi0 - b_lo0) * (b_hi1 - b_lo1)
    union = area_a + area_b - intersection
    if union <= 0:
        return 0.0
    return intersection / union


class NonMaxSuppressor:
    """Greedy, class-agnostic NMS with a confidence floor and output cap."""

    def __init__(
        self,
        confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
        iou_threshold: float = DEFAULT_IOU_THRESHOLD,
        max_detections: int = DEFAULT_MAX_DETECTIONS,
    ):
        self.confidence_threshold = confidence_threshold
        self.iou_threshold = iou_threshold
        self.max_detections = max_detections

    def suppress(self, candidates: list[Candidate]) -> list[Candidate]:
        """
        Filter candidates down to non-overlapping, confident boxes.

        Args:
            candidates: Decoded candidates in anchor order

        Returns:
            Kept candidates, score-descending (ties keep input order)
        """
        if self.max_detections <= 0:
            return []

        confident = [c for c in candidates if c.score >= self.confidence_threshold]
        # sorted() is stable, so equal scores keep their anchor order
        ranked = sorted(confident, key=lambda c: c.score, reverse=True)

        kept: list[Candidate] = []
        for candidate in ranked:
            if all(
                box_iou(candidate.box, k.box) < self.iou_threshold for k in kept
            ):
                kept.append(candidate)
                if len(kept) >= self.max_detections:
                    break

        logger.debug(
            f"NMS: {len(candidates)} candidates, {len(confident)} confident, {len(kept)} kept"
        )
        return kept
