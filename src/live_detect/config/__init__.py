"""
Configuration loading, validation, and runtime settings.

- load_config_file / find_config_file: YAML loading with pointer files
- load_config_with_env: Apply environment variable overrides
- validate_config_full: Comprehensive validation with errors/warnings
- PipelineConfig: Flat tunables handed to the pipeline components
"""

from .loader import find_config_file, load_config_file, load_config_with_env
from .pipeline_config import PipelineConfig
from .schemas import Config, validate_config_pydantic
from .validator import ValidationResult, print_validation_result, validate_config_full

__all__ = [
    "Config",
    "PipelineConfig",
    "ValidationResult",
    "find_config_file",
    "load_config_file",
    "load_config_with_env",
    "print_validation_result",
    "validate_config_full",
    "validate_config_pydantic",
]
