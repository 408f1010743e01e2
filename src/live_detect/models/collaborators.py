"""
Collaborator Protocols - interfaces the pipeline consumes but does not own.

Frame acquisition, model execution, rendering and telemetry live outside
the core. Anything satisfying these protocols can be wired into a Pipeline,
which keeps the core testable with in-memory fakes.

Example:
    pipeline = Pipeline(
        config,
        frame_source=CameraFrameSource(url),
        engine=TorchInferenceEngine.from_weights("yolo11n.pt"),
        class_names=ClassNameRegistry.coco(),
        renderers=[JsonlDetectionWriter("data")],
    )
"""

from typing import Protocol, runtime_checkable

import numpy as np

from .detection import DetectionSet, Frame


@runtime_checkable
class FrameSource(Protocol):
    """Synchronous frame provider. May report zero dimensions before ready."""

    def current_frame(self) -> Frame:
        """
        Return the most recent frame.

        Returns:
            Frame (Frame.empty() when nothing is available yet)
        """
        ...


@runtime_checkable
class InferenceEngine(Protocol):
    """
    Asynchronous model executor.

    Implementations may fail by raising any exception; the pipeline
    wraps it in InferenceError.
    """

    @property
    def is_loaded(self) -> bool:
        """True once the model is ready to execute."""
        ...

    async def execute(self, tensor: np.ndarray) -> np.ndarray:
        """
        Run the model on a prepared input.

        Args:
            tensor: Float32 input shaped (1, H, W, 3), values in [0, 1]

        Returns:
            Raw output shaped (1, 4 + num_classes, num_anchors)
        """
        ...


@runtime_checkable
class ClassNames(Protocol):
    """Class id to label lookup."""

    def lookup(self, class_id: int) -> str:
        """Return the label for class_id (placeholder for unknown ids)."""
        ...


@runtime_checkable
class Renderer(Protocol):
    """Receives one DetectionSet per completed cycle. Performs no core work."""

    def render(self, detection_set: DetectionSet) -> None: ...


@runtime_checkable
class DisplaySurface(Protocol):
    """Reports the rendered size of the source frame."""

    def display_size(self) -> tuple[float, float]:
        """
        Returns:
            (render_width, render_height) in display units
        """
        ...


@runtime_checkable
class TelemetrySink(Protocol):
    """Observability sink for cycle-rate telemetry and escalated errors."""

    def record_cycle_rate(self, cycles_per_second: float) -> None: ...

    def record_error(self, error: Exception) -> None: ...
