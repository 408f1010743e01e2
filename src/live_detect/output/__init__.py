"""
Outputs of a detection session - renderers and telemetry sinks.
"""

from .json_writer import JsonlDetectionWriter
from .telemetry import LoggingTelemetrySink

__all__ = ["JsonlDetectionWriter", "LoggingTelemetrySink"]
