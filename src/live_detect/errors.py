"""
Exception hierarchy for the live detection system.

Session-fatal errors (PreprocessError, InferenceError) stop the pipeline.
DecodeError only aborts the current cycle.
"""


class LiveDetectError(Exception):
    """Base class for all live detection errors."""


class PreprocessError(LiveDetectError):
    """Raised when a frame cannot be turned into model input."""


class InferenceError(LiveDetectError):
    """Raised when the inference engine fails to execute."""


class DecodeError(LiveDetectError):
    """Raised when raw model output has an unexpected shape."""


class PipelineStateError(LiveDetectError):
    """Raised on an illegal pipeline state transition."""


class ConfigValidationError(LiveDetectError):
    """Raised when config validation fails."""
