"""
Constants used throughout the live detection system
"""

# Model input
DEFAULT_MODEL_WIDTH = 640
DEFAULT_MODEL_HEIGHT = 640
DEFAULT_NUM_CLASSES = 80  # COCO

# Suppression
DEFAULT_CONFIDENCE_THRESHOLD = 0.4
DEFAULT_IOU_THRESHOLD = 0.45
DEFAULT_MAX_DETECTIONS = 100

# Tracking (normalized model-space units, see core/tracker.py)
DEFAULT_TRACK_MATCH_THRESHOLD = 0.15

# Adaptive scheduling (milliseconds)
DEFAULT_TIMING_WINDOW_SIZE = 10
DEFAULT_MIN_TIMING_SAMPLES = 5
DEFAULT_INTERVAL_HEADROOM = 1.2
DEFAULT_MIN_INTERVAL_MS = 0.0
DEFAULT_MAX_INTERVAL_MS = 500.0
DEFAULT_FALLBACK_INTERVAL_MS = 200.0

# Performance and monitoring
CYCLE_RATE_WINDOW_MS = 1000.0  # Report cycles per second over this window
STATUS_REPORT_INTERVAL = 100  # Log status every N completed cycles
DEFAULT_TICK_HZ = 60.0  # Display-refresh aligned tick rate

# Camera reconnection
MAX_CAMERA_RECONNECT_ATTEMPTS = 2
CAMERA_RECONNECT_DELAY = 2.0  # Seconds between reconnection attempts

# Output
DEFAULT_JSON_DIR = "data"
SUMMARY_CYCLE_INTERVAL = 50  # Print summary every N detection sets

# Environment variables
ENV_CAMERA_URL = "CAMERA_URL"
ENV_DETECTION_KEYWORD = "DETECTION_KEYWORD"
