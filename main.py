"""PySide6 entrypoint: launches the main application window from image_finalizer.main.

Usage: ``python main.py [INPUT_DIR [OUTPUT_DIR]]``
"""

import sys

try:
    from image_finalizer.main import main
except ImportError as exc:
    # Provide a clear error if imports fail due to PYTHONPATH issues
    raise RuntimeError("Failed to import image_finalizer. Ensure project root is on PYTHONPATH.") from exc


if __name__ == "__main__":
    sys.exit(main())
