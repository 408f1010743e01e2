"""
Tests for command-line argument handling and config assembly
"""

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from live_detect.cli import build_class_names, load_config, main, parse_args, parse_duration
from live_detect.core.camera import CameraFrameSource
from live_detect.core.inference import TorchInferenceEngine
from live_detect.config import PipelineConfig
from live_detect.errors import ConfigValidationError


class TestParseArgs(unittest.TestCase):
    """Test argument parsing."""

    def test_duration_and_keyword(self):
        """Test positional hours and keyword flag."""
        args = parse_args(["0.5", "--keyword", "car", "-q"])

        self.assertEqual(args.duration, 0.5)
        self.assertEqual(args.keyword, "car")
        self.assertTrue(args.quiet)
        self.assertFalse(args.validate)

    def test_defaults(self):
        """Test no arguments falls back to config.yaml and config duration."""
        args = parse_args([])

        self.assertIsNone(args.duration)
        self.assertEqual(args.config, "config.yaml")

    def test_parse_duration(self):
        """Test the config duration is used when none is given."""
        self.assertEqual(parse_duration(None, PipelineConfig(default_duration_hours=2.0)), 2.0)
        self.assertEqual(parse_duration(0.25, PipelineConfig()), 0.25)
        with self.assertRaises(SystemExit):
            parse_duration(-1, PipelineConfig())


class TestLoadConfig(unittest.TestCase):
    """Test file, environment and flag precedence."""

    def test_flags_override_file(self):
        """Test command-line values win over the config file."""
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "custom.yaml"
            path.write_text(
                "detection:\n  keyword: person\ncamera:\n  url: rtsp://cam\n",
                encoding="utf-8",
            )
            args = parse_args(["-c", str(path), "-k", "car", "--camera", "1"])

            with mock.patch.dict(os.environ, {}, clear=True):
                config = load_config(args)

        self.assertEqual(config["detection"]["keyword"], "car")
        self.assertEqual(config["camera"]["url"], 1)

    def test_missing_explicit_config_raises(self):
        """Test an explicit config path that does not exist is an error."""
        args = parse_args(["-c", "/nonexistent/custom.yaml"])
        with self.assertRaises(ConfigValidationError):
            load_config(args)


class TestBuildClassNames(unittest.TestCase):
    """Test class name source selection."""

    def test_model_names_before_coco(self):
        """Test the model's own names are used without a metadata file."""
        registry = build_class_names(PipelineConfig(), {0: "drone"})
        self.assertEqual(registry.lookup(0), "drone")

    def test_coco_fallback(self):
        """Test COCO is used when the model has no names."""
        registry = build_class_names(PipelineConfig(), {})
        self.assertEqual(registry.lookup(2), "car")


class TestMainStartup(unittest.TestCase):
    """Test resource handling while a session is being set up."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.config_path = Path(self.tmp.name) / "custom.yaml"
        self.config_path.write_text("model:\n  model_file: missing.pt\n", encoding="utf-8")

        env = mock.patch.dict(os.environ, {}, clear=True)
        env.start()
        self.addCleanup(env.stop)

    def test_camera_failure_skips_model_load(self):
        """Test an unreachable camera exits before any weights are loaded."""
        with (
            mock.patch.object(
                CameraFrameSource, "open", side_effect=RuntimeError("no camera")
            ),
            mock.patch.object(TorchInferenceEngine, "from_weights") as from_weights,
        ):
            with self.assertRaises(SystemExit) as ctx:
                main(["-q", "-c", str(self.config_path)])

        self.assertEqual(ctx.exception.code, 1)
        from_weights.assert_not_called()

    def test_model_failure_releases_camera(self):
        """Test the camera is released when the weights fail to load."""
        source = mock.MagicMock()
        with (
            mock.patch.object(CameraFrameSource, "open", return_value=source),
            mock.patch.object(
                TorchInferenceEngine, "from_weights", side_effect=OSError("bad weights")
            ),
        ):
            with self.assertRaises(OSError):
                main(["-q", "-c", str(self.config_path)])

        source.release.assert_called_once()


if __name__ == "__main__":
    unittest.main()
