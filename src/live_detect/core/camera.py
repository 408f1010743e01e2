"""
Camera initialization and frame acquisition.
"""

import logging
import time

import cv2

from ..models import Frame
from ..utils.constants import CAMERA_RECONNECT_DELAY, MAX_CAMERA_RECONNECT_ATTEMPTS

logger = logging.getLogger(__name__)


def initialize_camera(
    camera_url: str | int,
    max_attempts: int = MAX_CAMERA_RECONNECT_ATTEMPTS,
    delay: float = CAMERA_RECONNECT_DELAY,
) -> cv2.VideoCapture:
    """
    Initialize camera with retry logic.

    Args:
        camera_url: Camera URL, device index or video file path
        max_attempts: Reconnection attempts after the first failure
        delay: Seconds between attempts

    Returns:
        OpenCV VideoCapture object

    Raises:
        RuntimeError: If camera cannot be opened after retries
    """
    for attempt in range(max_attempts + 1):
        logger.info(f"Connecting to camera: {camera_url} (attempt {attempt + 1})")
        cap = cv2.VideoCapture(camera_url)

        if cap.isOpened():
            logger.info("Camera connected successfully")
            return cap

        cap.release()
        if attempt < max_attempts:
            logger.warning(f"Failed to connect, retrying in {delay}s...")
            time.sleep(delay)

    logger.error(f"Failed to connect to camera after {max_attempts + 1} attempts")
    raise RuntimeError(f"Cannot connect to camera: {camera_url}")


class CameraFrameSource:
    """
    Frame source backed by cv2.VideoCapture.

    Frames are converted from OpenCV's BGR order to RGB. A failed read yields
    Frame.empty(), which the pipeline treats as an unreadable frame.
    """

    def __init__(self, cap: cv2.VideoCapture):
        self.cap = cap
        self.frames_read = 0

    @classmethod
    def open(
        cls,
        camera_url: str | int,
        max_attempts: int = MAX_CAMERA_RECONNECT_ATTEMPTS,
        delay: float = CAMERA_RECONNECT_DELAY,
    ) -> "CameraFrameSource":
        return cls(initialize_camera(camera_url, max_attempts, delay))

    def current_frame(self) -> Frame:
        ret, bgr = self.cap.read()
        if not ret or bgr is None:
            logger.warning("Failed to read frame")
            return Frame.empty()

        self.frames_read += 1
        return Frame.from_array(cv2.cvtColor(bgr, cv2.COLOR_BGR2RGB))

    def display_size(self) -> tuple[float, float]:
        """Native capture size; boxes are reported in source-frame pixels."""
        width = self.cap.get(cv2.CAP_PROP_FRAME_WIDTH)
        height = self.cap.get(cv2.CAP_PROP_FRAME_HEIGHT)
        return width, height

    def release(self) -> None:
        self.cap.release()
        logger.info(f"Camera released after {self.frames_read} frames")
