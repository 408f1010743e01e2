"""
Object Tracker - stable identities across consecutive cycles.

Matching is greedy and scan-ordered: each detection takes the first previous
record of the same class whose reference point moved less than the match
threshold on both axes. There is no grace period; a record that goes
unmatched for one cycle is gone.

New ids that would collide within one pass (same class, rounded position
and timestamp millis) get a "-1", "-2", ... suffix.

Coordinate convention: the reference point is the box's top-left corner
normalized by the model input size, (x1 / model_width, y1 / model_height).
A match threshold of 0.15 therefore allows a shift of 15% of the model
frame (96 px at 640x640) between cycles.
"""

import logging
from collections.abc import Iterable

from ..models import Detection, TrackRecord
from ..utils.constants import (
    DEFAULT_MODEL_HEIGHT,
    DEFAULT_MODEL_WIDTH,
    DEFAULT_TRACK_MATCH_THRESHOLD,
)

logger = logging.getLogger(__name__)


class ObjectTracker:
    """Holds exactly one generation of track history: the previous cycle."""

    def __init__(
        self,
        match_threshold: float = DEFAULT_TRACK_MATCH_THRESHOLD,
        model_width: int = DEFAULT_MODEL_WIDTH,
        model_height: int = DEFAULT_MODEL_HEIGHT,
    ):
        self.match_threshold = match_threshold
        self.model_width = model_width
        self.model_height = model_height
        self._previous: list[TrackRecord] = []
        self._pass_ids: set[str] = set()

    @property
    def previous_records(self) -> tuple[TrackRecord, ...]:
        """Snapshot of the last completed cycle."""
        return tuple(self._previous)

    def reference_point(
        self, box: tuple[float, float, float, float]
    ) -> tuple[float, float]:
        """Normalized top-left corner of an [x1, y1, x2, y2] model-space box."""
        return box[0] / self.model_width, box[1] / self.model_height

    def find_match(
        self, class_id: int, box: tuple[float, float, float, float]
    ) -> TrackRecord | None:
        """
        First previous record of the same class within the match threshold.

        Malformed records are skipped rather than raised on.
        """
        if len(box) < 2:
            return None
        x, y = self.reference_point(box)

        for record in self._previous:
            if record.class_id != class_id or not record.box or len(record.box) < 2:
                continue
            px, py = self.reference_point(record.box)
            if abs(x - px) < self.match_threshold and abs(y - py) < self.match_threshold:
                return record

        return None

    def resolve_id(
        self,
        class_id: int,
        box: tuple[float, float, float, float],
        timestamp: float,
        assigned_id: str | None = None,
    ) -> str:
        """
        Resolve the identity of one detection.

        Args:
            class_id: Detected class
            box: [x1, y1, x2, y2] in model pixel space
            timestamp: Wall-clock seconds of the current cycle
            assigned_id: Id already given to this detection in this pass

        Returns:
            Reused, matched or newly synthesized id
        """
        if assigned_id:
            return assigned_id

        match = self.find_match(class_id, box)
        if match is not None:
            self._pass_ids.add(match.id)
            return match.id

        base = self.new_id(class_id, box, timestamp)
        new_id = base
        suffix = 1
        # Same class, rounded position and millis within one pass
        while new_id in self._pass_ids:
            new_id = f"{base}-{suffix}"
            suffix += 1
        self._pass_ids.add(new_id)
        return new_id

    def new_id(
        self, class_id: int, box: tuple[float, float, float, float], timestamp: float
    ) -> str:
        """Deterministic id from class, rounded position and cycle timestamp."""
        x, y = self.reference_point(box)
        millis = int(timestamp * 1000) % 1000
        return f"{class_id}_{round(x * 100)}_{round(y * 100)}_{millis}"

    def commit(self, detections: Iterable[Detection]) -> None:
        """Replace the previous generation with this cycle's detections."""
        dropped = len(self._previous)
        self._previous = [TrackRecord.from_detection(d) for d in detections]
        self._pass_ids.clear()
        logger.debug(f"Tracker: {dropped} records replaced by {len(self._previous)}")

    def reset(self) -> None:
        """Forget all identities."""
        self._previous = []
        self._pass_ids.clear()
