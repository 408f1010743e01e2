"""
Configuration loading - YAML files, pointer files and environment overrides.
"""

import logging
import os
from pathlib import Path

import yaml

from ..errors import ConfigValidationError
from ..utils.constants import ENV_CAMERA_URL, ENV_DETECTION_KEYWORD

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "config.yaml"


def find_config_file(config_path: str = DEFAULT_CONFIG_NAME) -> Path:
    """
    Find config file in standard locations.

    Search order:
    1. Specified path (if provided and not default)
    2. Current directory (config.yaml)
    3. ~/.config/live-detect/config.yaml

    Args:
        config_path: User-specified config path

    Returns:
        Path to config file

    Raises:
        ConfigValidationError: If no config file is found
    """
    if config_path != DEFAULT_CONFIG_NAME:
        specified = Path(config_path)
        if specified.exists():
            return specified
        raise ConfigValidationError(f"Specified config file not found: {config_path}")

    search_paths = [
        Path.cwd() / DEFAULT_CONFIG_NAME,
        Path.home() / ".config" / "live-detect" / DEFAULT_CONFIG_NAME,
    ]

    for path in search_paths:
        if path.exists():
            logger.info(f"Using config: {path}")
            return path

    searched = ", ".join(str(p) for p in search_paths)
    raise ConfigValidationError(f"No config file found (searched: {searched})")


def load_config_file(config_file: str | Path) -> dict:
    """
    Load a YAML config file.

    Supports pointer files: if config only contains `use: path/to/config.yaml`,
    that file is loaded instead (resolved relative to the pointer file).

    Raises:
        ConfigValidationError: If the YAML is invalid or not a mapping
    """
    config_file = Path(config_file)
    try:
        with open(config_file, encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}

        if isinstance(config, dict) and list(config.keys()) == ["use"]:
            pointer_path = config_file.parent / config["use"]
            logger.info(f"Config pointer: {config_file} -> {config['use']}")
            with open(pointer_path, encoding="utf-8") as f:
                config = yaml.safe_load(f) or {}
            config_file = pointer_path

    except yaml.YAMLError as e:
        raise ConfigValidationError(f"Invalid YAML in {config_file}: {e}") from e

    if not isinstance(config, dict):
        raise ConfigValidationError(f"Config in {config_file} must be a mapping")

    logger.info(f"Configuration loaded from {config_file}")
    return config


def load_config_with_env(config: dict) -> dict:
    """
    Apply environment variable overrides to config.

    Args:
        config: Base configuration dictionary

    Returns:
        Configuration with environment variables applied
    """
    if ENV_CAMERA_URL in os.environ:
        camera_url: str | int = os.environ[ENV_CAMERA_URL]
        logger.info(f"Using camera URL from environment: {ENV_CAMERA_URL}")
        if isinstance(camera_url, str) and camera_url.isdigit():
            camera_url = int(camera_url)
        config.setdefault("camera", {})["url"] = camera_url

    if ENV_DETECTION_KEYWORD in os.environ:
        logger.info(f"Using keyword from environment: {ENV_DETECTION_KEYWORD}")
        config.setdefault("detection", {})["keyword"] = os.environ[
            ENV_DETECTION_KEYWORD
        ]

    return config
