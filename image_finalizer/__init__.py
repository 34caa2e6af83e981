"""Image Finalizer: batch border tool with a live preview."""

__version__ = "0.1.0"
