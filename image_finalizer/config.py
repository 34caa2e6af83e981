# config.py
"""
Application configuration constants for Image Finalizer
"""
import os

# Border defaults
DEFAULT_BORDER_PERCENTAGE = 10.0
BORDER_PERCENTAGE_MIN = 0.0
BORDER_PERCENTAGE_MAX = 50.0
DEFAULT_SYMMETRICAL = False

# Resize defaults
DEFAULT_RESIZE_ENABLED = False
DEFAULT_RESIZE_LONGEST_DIMENSION = 800
RESIZE_DIMENSION_MAX = 20000

# Encoder options
QUALITY_MIN = 1
QUALITY_MAX = 100
DEFAULT_JPEG_QUALITY = 80
DEFAULT_AVIF_QUALITY = 80
AVIF_SPEED_MIN = 1
AVIF_SPEED_MAX = 10
DEFAULT_AVIF_SPEED = 4

# Preview settings
PREVIEW_BOX = (500, 500)
EVENT_POLL_INTERVAL_MS = 30  # UI tick draining worker events

# Worker pool size (None lets the pool pick one thread per core)
MAX_WORKER_THREADS = None

# Encode batches in worker processes instead of threads
USE_PROCESS_POOL = False

# Logging
LOG_FILE_NAME = "image_finalizer.log"
LOG_DIR = os.environ.get("IMAGE_FINALIZER_LOG_DIR")
LOG_MAX_BYTES = 1_048_576
LOG_BACKUP_COUNT = 5

# Window
WINDOW_TITLE = "Image Finalizer"
WINDOW_SIZE = (760, 900)
