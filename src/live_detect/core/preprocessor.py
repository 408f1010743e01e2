"""
Frame Preprocessor - letterbox resize and normalization.

Turns an arbitrary-size RGB frame into a fixed-size, normalized model
input and records the padding/scale needed to invert the transform.
"""

import logging
import math

import cv2
import numpy as np

from ..errors import PreprocessError
from ..models import Frame, PaddingInfo
from ..utils.constants import DEFAULT_MODEL_HEIGHT, DEFAULT_MODEL_WIDTH

logger = logging.getLogger(__name__)


def _round_half_up(value: float) -> int:
    # Half-up, not banker's rounding
    return int(math.floor(value + 0.5))


def compute_letterbox(
    width: int, height: int, model_width: int, model_height: int
) -> PaddingInfo:
    """
    Compute scale and symmetric padding for a frame of the given size.

    Args:
        width: Source frame width
        height: Source frame height
        model_width: Model input width
        model_height: Model input height

    Returns:
        PaddingInfo describing the transform

    Raises:
        PreprocessError: If either source dimension is not positive
    """
    if width <= 0 or height <= 0:
        raise PreprocessError(f"Invalid frame dimensions: {width}x{height}")

    scale = min(model_width / width, model_height / height)
    new_width = max(1, min(model_width, _round_half_up(width * scale)))
    new_height = max(1, min(model_height, _round_half_up(height * scale)))

    pad_top = (model_height - new_height) // 2
    pad_left = (model_width - new_width) // 2

    return PaddingInfo(
        scale=scale,
        pad_left=pad_left,
        pad_top=pad_top,
        original_shape=(height, width),
        new_width=new_width,
        new_height=new_height,
        pad_right=model_width - new_width - pad_left,
        pad_bottom=model_height - new_height - pad_top,
    )


class FramePreprocessor:
    """Letterbox-resizes and normalizes frames into (1, H, W, 3) float32 input."""

    def __init__(
        self,
        model_width: int = DEFAULT_MODEL_WIDTH,
        model_height: int = DEFAULT_MODEL_HEIGHT,
    ):
        self.model_width = model_width
        self.model_height = model_height

    def prepare(self, frame: Frame) -> tuple[np.ndarray, PaddingInfo]:
        """
        Prepare a frame for inference.

        Args:
            frame: RGB frame from the frame source

        Returns:
            (input tensor shaped (1, model_height, model_width, 3), PaddingInfo)

        Raises:
            PreprocessError: If the frame is empty, unreadable or not H x W x 3
        """
        pixels = frame.pixels
        if pixels is None or frame.width <= 0 or frame.height <= 0:
            raise PreprocessError(
                f"Frame not ready ({frame.width}x{frame.height})"
            )
        if pixels.ndim != 3 or pixels.shape[2] != 3:
            raise PreprocessError(f"Expected HxWx3 frame, got shape {pixels.shape}")

        height, width = pixels.shape[:2]
        if (width, height) != (frame.width, frame.height):
            logger.debug(
                f"Frame reports {frame.width}x{frame.height}, buffer is {width}x{height}"
            )

        padding = compute_letterbox(width, height, self.model_width, self.model_height)

        try:
            if (padding.new_width, padding.new_height) != (width, height):
                resized = cv2.resize(
                    pixels,
                    (padding.new_width, padding.new_height),
                    interpolation=cv2.INTER_LINEAR,
                )
            else:
                resized = pixels

            padded = cv2.copyMakeBorder(
                resized,
                padding.pad_top,
                padding.pad_bottom,
                padding.pad_left,
                padding.pad_right,
                cv2.BORDER_CONSTANT,
                value=(0, 0, 0),
            )
        except cv2.error as e:
            raise PreprocessError(f"Failed to resize frame: {e}") from e

        tensor = padded.astype(np.float32) / 255.0
        return tensor[np.newaxis, ...], padding
