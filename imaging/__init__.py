"""Border pipeline for image finalizer: geometry, compositing and encoding."""

from . import errors, image_operations, image_processor, validation

__all__ = ["errors", "image_operations", "image_processor", "validation"]
