"""
Tests for adaptive cycle scheduling
"""

import unittest

from live_detect.core.scheduler import AdaptiveScheduler


class TestAdaptiveScheduler(unittest.TestCase):
    """Test interval computation from the timing window."""

    def test_fallback_below_min_samples(self):
        """Test 200 ms is returned until five samples exist."""
        scheduler = AdaptiveScheduler()
        self.assertEqual(scheduler.get_interval(), 200)

        for _ in range(4):
            scheduler.record_timing(100)
        self.assertEqual(scheduler.get_interval(), 200)

    def test_mean_with_headroom(self):
        """Test five samples of 100 ms give a 120 ms interval."""
        scheduler = AdaptiveScheduler()
        for _ in range(5):
            scheduler.record_timing(100)

        self.assertAlmostEqual(scheduler.get_interval(), 120.0)

    def test_clamped_to_max(self):
        """Test slow cycles are capped at 500 ms."""
        scheduler = AdaptiveScheduler()
        for _ in range(5):
            scheduler.record_timing(1000)

        self.assertEqual(scheduler.get_interval(), 500)

    def test_fast_cycles_reach_zero(self):
        """Test zero-duration cycles run back-to-back."""
        scheduler = AdaptiveScheduler()
        for _ in range(5):
            scheduler.record_timing(0)

        self.assertEqual(scheduler.get_interval(), 0)

    def test_window_evicts_oldest(self):
        """Test only the last ten samples count."""
        scheduler = AdaptiveScheduler()
        for _ in range(10):
            scheduler.record_timing(400)
        for _ in range(10):
            scheduler.record_timing(50)

        self.assertEqual(scheduler.sample_count, 10)
        self.assertAlmostEqual(scheduler.get_interval(), 60.0)

    def test_invalid_samples_ignored(self):
        """Test NaN, infinite and negative samples are dropped silently."""
        scheduler = AdaptiveScheduler()
        for value in (float("nan"), float("inf"), -5, "fast", None):
            scheduler.record_timing(value)

        self.assertEqual(scheduler.sample_count, 0)
        self.assertEqual(scheduler.get_interval(), 200)

    def test_reset(self):
        """Test reset returns to the fallback interval."""
        scheduler = AdaptiveScheduler()
        for _ in range(5):
            scheduler.record_timing(100)

        scheduler.reset()
        self.assertEqual(scheduler.get_interval(), 200)


if __name__ == "__main__":
    unittest.main()
