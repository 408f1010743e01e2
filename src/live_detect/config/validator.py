"""
Configuration Validator - Validates config syntax and semantic correctness.

Schema errors come from the pydantic models; semantic checks (files that
do not exist, a keyword that no class will ever match) are added on top as
errors or warnings.
"""

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..utils.coco_classes import COCO_CLASSES
from .schemas import Config, validate_config_pydantic

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Result of config validation."""

    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    derived: dict[str, Any] = field(default_factory=dict)


def validate_config_full(
    config: dict, class_names: dict[int, str] | None = None
) -> ValidationResult:
    """
    Comprehensive config validation with detailed error messages.

    Args:
        config: Configuration dictionary to validate
        class_names: Optional mapping of class ID -> class name from the model.
                     Defaults to the COCO table for keyword checks.

    Returns:
        ValidationResult with errors, warnings, and derived settings.
    """
    result = ValidationResult(valid=True)

    if not isinstance(config, dict):
        result.valid = False
        result.errors.append("Configuration must be a mapping")
        return result

    try:
        parsed = validate_config_pydantic(config)
    except ValidationError as e:
        for error in e.errors():
            location = ".".join(str(part) for part in error["loc"]) or "config"
            result.errors.append(f"{location}: {error['msg']}")
        result.valid = False
        return result

    _validate_model_files(parsed, result)
    _validate_keyword(parsed, result, class_names or COCO_CLASSES)

    if result.errors:
        result.valid = False

    return result


def _validate_model_files(config: Config, result: ValidationResult) -> None:
    """Check model and metadata files."""
    model_file = config.model.model_file
    if not model_file:
        result.warnings.append("model.model_file not set - must be given on the command line")
    elif not Path(model_file).exists():
        result.warnings.append(
            f"Model file not found: {model_file} (will be downloaded if valid)"
        )

    metadata_file = config.model.metadata_file
    if metadata_file and not Path(metadata_file).exists():
        result.errors.append(f"Metadata file not found: {metadata_file}")


def _validate_keyword(
    config: Config, result: ValidationResult, class_names: dict[int, str]
) -> None:
    """Warn when the keyword cannot match any known class."""
    keyword = config.detection.keyword.strip().lower()
    if not keyword:
        result.warnings.append(
            "detection.keyword is empty - no detection will be highlighted"
        )
        return

    matches = sorted(
        (cid, name) for cid, name in class_names.items() if keyword in name.lower()
    )
    result.derived["keyword_classes"] = matches
    if not matches:
        result.warnings.append(
            f"Keyword '{keyword}' does not match any model class name"
        )


# ANSI color codes for terminal output
class Colors:
    GREEN = "\033[92m"
    RED = "\033[91m"
    YELLOW = "\033[93m"
    CYAN = "\033[96m"
    BOLD = "\033[1m"
    RESET = "\033[0m"

    @classmethod
    def disable(cls):
        """Disable colors for non-TTY output."""
        cls.GREEN = cls.RED = cls.YELLOW = ""
        cls.CYAN = cls.BOLD = cls.RESET = ""


# Disable colors if not a TTY
if not sys.stdout.isatty():
    Colors.disable()


def print_validation_result(result: ValidationResult) -> None:
    """Print validation result in Terraform-like format."""
    print()
    print(f"{Colors.BOLD}Configuration Validation{Colors.RESET}")
    print("=" * 60)

    if result.valid:
        print(f"\n{Colors.GREEN}✓ Configuration is valid{Colors.RESET}")
    else:
        print(f"\n{Colors.RED}✗ Configuration has errors{Colors.RESET}")

    if result.errors:
        print(f"\n{Colors.RED}Errors:{Colors.RESET}")
        for error in result.errors:
            print(f"  {Colors.RED}✗{Colors.RESET} {error}")

    if result.warnings:
        print(f"\n{Colors.YELLOW}Warnings:{Colors.RESET}")
        for warning in result.warnings:
            print(f"  {Colors.YELLOW}!{Colors.RESET} {warning}")

    keyword_classes = result.derived.get("keyword_classes", [])
    if result.valid and keyword_classes:
        print(f"\n{Colors.CYAN}Derived Configuration:{Colors.RESET}")
        class_str = ", ".join(f"{name} ({cid})" for cid, name in keyword_classes)
        print(f"  Keyword matches: {class_str}")

    print()
