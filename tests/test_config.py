"""
Tests for configuration loading and validation
"""

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from live_detect.config import (
    PipelineConfig,
    find_config_file,
    load_config_file,
    load_config_with_env,
    validate_config_full,
)
from live_detect.errors import ConfigValidationError


class TestPipelineConfig(unittest.TestCase):
    """Test PipelineConfig construction."""

    def test_defaults(self):
        """Test an empty config yields the reference tunables."""
        config = PipelineConfig.from_dict({})

        self.assertEqual((config.model_width, config.model_height), (640, 640))
        self.assertEqual(config.num_classes, 80)
        self.assertEqual(config.confidence_threshold, 0.4)
        self.assertEqual(config.iou_threshold, 0.45)
        self.assertEqual(config.max_detections, 100)
        self.assertEqual(config.track_match_threshold, 0.15)
        self.assertEqual(config.timing_window_size, 10)
        self.assertEqual(config.min_timing_samples, 5)
        self.assertEqual(config.interval_headroom, 1.2)
        self.assertEqual(config.max_interval_ms, 500)
        self.assertEqual(config.fallback_interval_ms, 200)

    def test_sections_mapped(self):
        """Test nested YAML sections map onto flat fields."""
        config = PipelineConfig.from_dict(
            {
                "model": {"model_file": "yolo11n.pt", "input_width": 320, "input_height": 320},
                "detection": {"keyword": "  Car ", "confidence_threshold": 0.5},
                "tracking": {"match_threshold": 0.1},
                "scheduler": {"max_interval_ms": 250},
                "camera": {"url": "rtsp://cam/stream"},
            }
        )

        self.assertEqual(config.model_file, "yolo11n.pt")
        self.assertEqual(config.model_width, 320)
        self.assertEqual(config.keyword, "car")
        self.assertEqual(config.confidence_threshold, 0.5)
        self.assertEqual(config.track_match_threshold, 0.1)
        self.assertEqual(config.max_interval_ms, 250)
        self.assertEqual(config.camera_url, "rtsp://cam/stream")

    def test_invalid_raises(self):
        """Test schema violations raise ConfigValidationError."""
        with self.assertRaises(ConfigValidationError):
            PipelineConfig.from_dict({"detection": {"confidence_threshold": 1.5}})

    def test_from_yaml(self):
        """Test loading straight from a YAML file."""
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.yaml"
            path.write_text("detection:\n  keyword: person\n", encoding="utf-8")

            self.assertEqual(PipelineConfig.from_yaml(str(path)).keyword, "person")


class TestValidateConfigFull(unittest.TestCase):
    """Test full validation with errors and warnings."""

    def test_unknown_key_is_error(self):
        """Test unknown keys are rejected."""
        result = validate_config_full({"detection": {"keywrd": "car"}})

        self.assertFalse(result.valid)
        self.assertTrue(any("keywrd" in e for e in result.errors))

    def test_interval_bounds_cross_check(self):
        """Test min_interval_ms above max_interval_ms is an error."""
        result = validate_config_full(
            {"scheduler": {"min_interval_ms": 600, "max_interval_ms": 500}}
        )
        self.assertFalse(result.valid)

    def test_min_samples_above_window(self):
        """Test min_samples cannot exceed the window size."""
        result = validate_config_full({"scheduler": {"window_size": 3, "min_samples": 5}})
        self.assertFalse(result.valid)

    def test_wrong_model_extension(self):
        """Test non-.pt model files are rejected."""
        result = validate_config_full({"model": {"model_file": "model.onnx"}})
        self.assertFalse(result.valid)

    def test_missing_metadata_file_is_error(self):
        """Test a metadata file that does not exist is an error."""
        result = validate_config_full({"model": {"metadata_file": "/nonexistent/metadata.yaml"}})
        self.assertFalse(result.valid)

    def test_keyword_classes_derived(self):
        """Test matching classes are listed for the keyword."""
        result = validate_config_full({"detection": {"keyword": "car"}})

        self.assertTrue(result.valid)
        self.assertIn((2, "car"), result.derived["keyword_classes"])

    def test_unmatched_keyword_warns(self):
        """Test a keyword matching no class is a warning, not an error."""
        result = validate_config_full({"detection": {"keyword": "unicorn"}})

        self.assertTrue(result.valid)
        self.assertTrue(any("unicorn" in w for w in result.warnings))

    def test_custom_class_names(self):
        """Test the keyword is checked against the model's own classes."""
        result = validate_config_full(
            {"detection": {"keyword": "drone"}}, class_names={0: "drone", 1: "bird"}
        )
        self.assertEqual(result.derived["keyword_classes"], [(0, "drone")])


class TestConfigLoader(unittest.TestCase):
    """Test file discovery, pointer files and env overrides."""

    def test_specified_file_missing(self):
        """Test an explicit path that does not exist raises."""
        with self.assertRaises(ConfigValidationError):
            find_config_file("/nonexistent/custom.yaml")

    def test_pointer_file(self):
        """Test a 'use:' pointer loads the referenced file."""
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "configs" / "night.yaml"
            target.parent.mkdir()
            target.write_text("detection:\n  keyword: cat\n", encoding="utf-8")
            pointer = Path(tmp) / "config.yaml"
            pointer.write_text("use: configs/night.yaml\n", encoding="utf-8")

            config = load_config_file(pointer)

        self.assertEqual(config, {"detection": {"keyword": "cat"}})

    def test_invalid_yaml(self):
        """Test malformed YAML raises ConfigValidationError."""
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.yaml"
            path.write_text("detection: [unclosed\n", encoding="utf-8")

            with self.assertRaises(ConfigValidationError):
                load_config_file(path)

    def test_non_mapping_yaml(self):
        """Test a YAML list is not a valid config."""
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.yaml"
            path.write_text("- a\n- b\n", encoding="utf-8")

            with self.assertRaises(ConfigValidationError):
                load_config_file(path)

    def test_env_overrides(self):
        """Test CAMERA_URL and DETECTION_KEYWORD override the file."""
        env = {"CAMERA_URL": "2", "DETECTION_KEYWORD": "dog"}
        with mock.patch.dict(os.environ, env):
            config = load_config_with_env({"camera": {"url": "rtsp://x"}})

        self.assertEqual(config["camera"]["url"], 2)
        self.assertEqual(config["detection"]["keyword"], "dog")

    def test_env_untouched_without_variables(self):
        """Test config is unchanged when no overrides are set."""
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertEqual(load_config_with_env({"runtime": {}}), {"runtime": {}})


if __name__ == "__main__":
    unittest.main()
