"""
JSON Writer Renderer
Writes detection sets to a JSONL file and optionally logs them to console.
"""

import json
import logging
import os
from datetime import datetime

from ..models import DetectionSet
from ..utils.constants import SUMMARY_CYCLE_INTERVAL

logger = logging.getLogger(__name__)


class JsonlDetectionWriter:
    """
    Renderer that appends one JSON line per DetectionSet.

    Console levels:
        detailed - one log line per keyword match (or per set without a keyword)
        summary  - periodic totals every SUMMARY_CYCLE_INTERVAL sets
        silent   - file only
    """

    def __init__(
        self,
        json_dir: str = "data",
        console_level: str = "summary",
        json_enabled: bool = True,
    ):
        self.json_dir = json_dir
        self.console_level = console_level
        self.json_enabled = json_enabled
        self.filename: str | None = None
        self.set_count = 0
        self.detection_count = 0
        self.match_count = 0
        self.matches_by_class: dict[str, int] = {}
        self._file = None
        self._start_time = datetime.now()

    def open(self) -> None:
        """Create the output file. Called lazily on the first render."""
        if not self.json_enabled or self._file is not None:
            return
        os.makedirs(self.json_dir, exist_ok=True)
        self.filename = _generate_output_filename(self.json_dir)
        self._file = open(self.filename, "w", encoding="utf-8")
        logger.info(f"JSON Writer started: {self.filename}")
        logger.info(f"Console: {self.console_level}")

    def render(self, detection_set: DetectionSet) -> None:
        self.open()
        self.set_count += 1
        self.detection_count += detection_set.total_count
        self.match_count += detection_set.keyword_match_count
        for detection in detection_set.detections:
            if detection.is_keyword_match:
                self.matches_by_class[detection.class_name] = (
                    self.matches_by_class.get(detection.class_name, 0) + 1
                )

        if self._file is not None:
            self._file.write(json.dumps(detection_set.to_dict()) + "\n")
            self._file.flush()

        if self.console_level == "detailed":
            _print_detection_set(detection_set, self.set_count)
        elif (
            self.console_level == "summary"
            and self.set_count % SUMMARY_CYCLE_INTERVAL == 0
        ):
            self._print_summary()

    def close(self) -> None:
        """Close the file and log final statistics."""
        if self._file is not None:
            self._file.close()
            self._file = None
        self._log_final_summary()

    def _print_summary(self) -> None:
        """Print periodic summary for 'summary' console mode."""
        elapsed = (datetime.now() - self._start_time).total_seconds()
        logger.info(
            f"[{elapsed / 60:.1f}min] Sets: {self.set_count} | "
            f"Objects: {self.detection_count} | Matches: {self.match_count}"
        )

    def _log_final_summary(self) -> None:
        logger.info("JSON Writer complete")
        logger.info(f"Detection sets: {self.set_count}")
        logger.info(f"Objects: {self.detection_count} ({self.match_count} keyword matches)")
        for class_name, count in sorted(self.matches_by_class.items()):
            logger.info(f"  {class_name}: {count}")
        if self.filename:
            logger.info(f"Output: {self.filename}")


def _print_detection_set(detection_set: DetectionSet, set_count: int) -> None:
    """Log each keyword match, or every detection when no keyword is set."""
    for detection in detection_set.detections:
        if detection_set.keyword and not detection.is_keyword_match:
            continue
        box = detection.screen_box
        logger.info(
            f"#{set_count:5d} | {detection.id} ({detection.class_name}) "
            f"conf={detection.score:.2f} at ({box.x:.0f}, {box.y:.0f}) "
            f"{box.width:.0f}x{box.height:.0f}"
        )


def _generate_output_filename(json_dir: str) -> str:
    """Generate timestamped output filename."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return f"{json_dir}/detections_{timestamp}.jsonl"
