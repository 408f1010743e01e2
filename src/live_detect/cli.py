"""
Live Detection System CLI
Main entry point for running a detection session.

  python -m live_detect [hours] --keyword car
  python -m live_detect --validate
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from .config import (
    PipelineConfig,
    find_config_file,
    load_config_file,
    load_config_with_env,
    print_validation_result,
    validate_config_full,
)
from .core import ClassNameRegistry, Pipeline, SessionRunner
from .errors import ConfigValidationError, PipelineStateError

logger = logging.getLogger(__name__)


def setup_logging(quiet: bool = False, verbose: bool = False) -> None:
    """
    Setup logging configuration.

    Args:
        quiet: If True, only show warnings and errors
        verbose: If True, include debug output
    """
    level = logging.INFO
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG

    # Custom formatter with shorter module names
    class ShortNameFormatter(logging.Formatter):
        def format(self, record):
            record.name = record.name.replace("live_detect.", "ld.")
            return super().format(record)

    handler = logging.StreamHandler()
    handler.setFormatter(
        ShortNameFormatter(
            fmt="%(asctime)s %(name)s %(levelname)s %(message)s", datefmt="%H:%M:%S"
        )
    )
    logging.root.addHandler(handler)
    logging.root.setLevel(level)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Live Detection System - keyword-filtered object detection on a video stream",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m live_detect 1 --keyword car    # Highlight cars for 1 hour
  python -m live_detect 0.5 -k person -q   # 30 minutes, minimal logs
  python -m live_detect --validate         # Check config validity

Signals:
  SIGUSR1 toggles pause/resume, SIGINT/SIGTERM stop the session

Environment Variables:
  CAMERA_URL        - Override camera URL from config
  DETECTION_KEYWORD - Override keyword from config
        """,
    )

    parser.add_argument(
        "duration",
        type=float,
        nargs="?",
        help="Duration in hours (default: from config.yaml)",
    )
    parser.add_argument("-k", "--keyword", help="Object keyword to highlight")
    parser.add_argument(
        "-c",
        "--config",
        default="config.yaml",
        help="Path to config file (default: config.yaml)",
    )
    parser.add_argument("-m", "--model", help="Model weights file (.pt)")
    parser.add_argument("--camera", help="Camera URL, device index or video file")
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Quiet mode - only show warnings and errors",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Validate configuration and exit",
    )

    return parser.parse_args(argv)


def load_config(args: argparse.Namespace) -> dict:
    """
    Load the config file (if any) and apply env and command-line overrides.

    Raises:
        ConfigValidationError: If a specified config file is missing or invalid
    """
    try:
        config = load_config_file(find_config_file(args.config))
    except ConfigValidationError:
        if args.config != "config.yaml":
            raise
        logger.info("No config file found - using defaults")
        config = {}

    config = load_config_with_env(config)

    if args.keyword is not None:
        config.setdefault("detection", {})["keyword"] = args.keyword
    if args.model is not None:
        config.setdefault("model", {})["model_file"] = args.model
    if args.camera is not None:
        camera: str | int = int(args.camera) if args.camera.isdigit() else args.camera
        config.setdefault("camera", {})["url"] = camera

    return config


def parse_duration(duration_arg: float | None, config: PipelineConfig) -> float:
    """
    Parse duration from command line argument or config.

    Returns:
        Duration in hours

    Raises:
        SystemExit: If duration is invalid
    """
    if duration_arg is not None:
        if duration_arg <= 0:
            logger.error(f"Invalid duration '{duration_arg}' - must be positive")
            sys.exit(1)
        return duration_arg
    return config.default_duration_hours


def build_class_names(config: PipelineConfig, model_names: dict[int, str]) -> ClassNameRegistry:
    """Metadata file first, then the model's own names, then COCO."""
    if config.metadata_file:
        return ClassNameRegistry.from_metadata(config.metadata_file)
    if model_names:
        return ClassNameRegistry.from_names(model_names)
    return ClassNameRegistry.coco()


def print_banner(config: PipelineConfig, duration_hours: float) -> None:
    """Print system startup banner."""
    print("\n" + "=" * 70)
    print("LIVE DETECTION SYSTEM")
    print("=" * 70)
    print(f"\nModel: {config.model_file}")
    print(f"Keyword: {config.keyword or '(none)'}")
    print(f"Input: {config.model_width}x{config.model_height}")
    print("\nRuntime:")
    print(f"  Duration: {duration_hours} hour(s) ({duration_hours * 60:.0f} minutes)")
    print(f"  Camera: {config.camera_url}")
    print("  Press Ctrl+C to stop early")
    print("=" * 70)
    print()


async def run_session(pipeline: Pipeline, config: PipelineConfig, duration_hours: float) -> str:
    """Start the pipeline and tick it until the session ends."""
    runner = SessionRunner(
        pipeline, tick_hz=config.tick_hz, duration_seconds=duration_hours * 3600
    )
    runner.install_signal_handlers()
    return await runner.run()


def run_validate(config_dict: dict) -> None:
    """Run validation mode."""
    result = validate_config_full(config_dict)
    print_validation_result(result)
    sys.exit(0 if result.valid else 1)


def main(argv: list[str] | None = None) -> None:
    """Main orchestrator function."""
    args = parse_args(argv)
    setup_logging(quiet=args.quiet or args.validate, verbose=args.verbose)

    try:
        config_dict = load_config(args)
    except ConfigValidationError as e:
        logger.error(str(e))
        sys.exit(1)

    if args.validate:
        run_validate(config_dict)
        return

    result = validate_config_full(config_dict)
    if not result.valid:
        print_validation_result(result)
        sys.exit(1)
    for warning in result.warnings:
        logger.warning(warning)

    config = PipelineConfig.from_dict(config_dict)
    if not config.model_file:
        logger.error("No model file - set model.model_file or pass --model")
        sys.exit(1)

    duration_hours = parse_duration(args.duration, config)

    # Heavy imports only when actually running
    from .core.camera import CameraFrameSource
    from .core.inference import TorchInferenceEngine
    from .output import JsonlDetectionWriter, LoggingTelemetrySink

    try:
        source = CameraFrameSource.open(
            config.camera_url, config.max_reconnect_attempts, config.reconnect_delay
        )
    except RuntimeError as e:
        logger.error(str(e))
        sys.exit(1)

    engine = None
    try:
        engine = TorchInferenceEngine.from_weights(config.model_file, device=config.device)
        class_names = build_class_names(config, engine.names)
    except Exception:
        if engine is not None:
            engine.unload()
        source.release()
        raise
    logger.info(f"Class names loaded: {len(class_names)}")

    writer = JsonlDetectionWriter(
        json_dir=config.json_dir,
        console_level=config.console_level,
        json_enabled=config.json_enabled,
    )
    telemetry = LoggingTelemetrySink()
    pipeline = Pipeline(
        config,
        frame_source=source,
        engine=engine,
        class_names=class_names,
        renderers=[writer],
        display=source,
        telemetry=telemetry,
    )

    print_banner(config, duration_hours)

    try:
        reason = asyncio.run(run_session(pipeline, config, duration_hours))
    except PipelineStateError as e:
        logger.error(f"Cannot start detection: {e}")
        reason = "error"
    finally:
        writer.close()
        source.release()
        engine.unload()

    print(f"\n{'=' * 70}")
    print(f"SESSION ENDED ({reason}) after {pipeline.cycle_count} cycles")
    if writer.filename:
        print(f"Output: {Path(writer.filename)}")
    print(f"{'=' * 70}\n")

    if reason == "error":
        sys.exit(1)


if __name__ == "__main__":
    main()
