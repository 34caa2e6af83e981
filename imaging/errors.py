"""Exception hierarchy for the border pipeline.

Per-image failures derive from :class:`ImageProcessingError` so batch callers
can isolate a single bad file with one ``except`` clause.
"""

from __future__ import annotations


class ImageProcessingError(Exception):
    """Base exception for image processing errors."""


class SourceReadError(ImageProcessingError):
    """A source file is missing, corrupt or in an unsupported codec."""


class OutputWriteError(ImageProcessingError):
    """The output directory or file could not be created or written."""


class EncodeError(ImageProcessingError):
    """The selected encoder rejected the rendered image."""


class DirectoryError(ImageProcessingError):
    """The input directory cannot be listed."""


__all__ = [
    "DirectoryError",
    "EncodeError",
    "ImageProcessingError",
    "OutputWriteError",
    "SourceReadError",
]
