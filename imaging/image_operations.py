"""Border geometry and raster operations.

The functions in this module are small and pure so the live preview and the
batch export run exactly the same code.  Every function returns a new image;
inputs are never modified in place.
"""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple

from PIL import Image

WHITE = (255, 255, 255, 255)
CANVAS_MODE = "RGBA"


class ResizeFilter(Enum):
    """Resampling kernels offered for the longest-dimension resize."""

    NEAREST = ("Nearest", Image.Resampling.NEAREST, "Fastest, lowest quality.")
    TRIANGLE = ("Triangle", Image.Resampling.BILINEAR, "Fast, decent quality.")
    CATMULL_ROM = ("CatmullRom", Image.Resampling.BICUBIC, "Good quality, moderate speed.")
    LANCZOS3 = ("Lanczos3", Image.Resampling.LANCZOS, "Best quality, slowest.")

    def __init__(self, label: str, resample: Image.Resampling, description: str) -> None:
        self.label = label
        self.resample = resample
        self.description = description


class BorderGeometry(NamedTuple):
    new_width: int
    new_height: int
    x_offset: int
    y_offset: int


def clamp_percentage(percentage: float, *, low: float = 0.0, high: float = 50.0) -> float:
    """Clamp a user supplied border percentage into ``[low, high]``."""
    return min(max(float(percentage), low), high)


def compute_border_geometry(
    width: int, height: int, percentage: float, symmetrical: bool
) -> BorderGeometry:
    """Return the canvas size and paste offset for a bordered image.

    The border is always a percentage of the longest side.  In symmetrical
    mode the same number of pixels is added to both axes, keeping the aspect
    ratio delta; otherwise the canvas is forced square.  Size math is done in
    floating point and truncated toward zero, which callers may rely on.

    The percentage is not range checked; see :func:`clamp_percentage`.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")

    longest = max(width, height)
    grown = int(longest * (1.0 + percentage / 100.0))

    if symmetrical:
        delta = grown - longest
        new_width = width + delta
        new_height = height + delta
    else:
        new_width = new_height = grown

    return BorderGeometry(
        new_width,
        new_height,
        (new_width - width) // 2,
        (new_height - height) // 2,
    )


def composite_on_canvas(image: Image.Image, geometry: BorderGeometry) -> Image.Image:
    """Paste ``image`` onto an opaque white canvas described by ``geometry``.

    This is a straight overwrite, not an alpha blend: transparent source
    pixels stay transparent on the canvas.
    """
    canvas = Image.new(CANVAS_MODE, (geometry.new_width, geometry.new_height), WHITE)
    source = image if image.mode == CANVAS_MODE else image.convert(CANVAS_MODE)
    canvas.paste(source, (geometry.x_offset, geometry.y_offset))
    return canvas


def add_border(image: Image.Image, percentage: float, symmetrical: bool) -> Image.Image:
    """Run the geometry calculator and compositor on ``image``."""
    geometry = compute_border_geometry(image.width, image.height, percentage, symmetrical)
    return composite_on_canvas(image, geometry)


def longest_dimension_size(width: int, height: int, target: int) -> tuple[int, int]:
    """Return the size whose longest side is ``target`` with the aspect kept."""
    if target <= 0:
        raise ValueError("target must be greater than zero")
    if width > height:
        return target, max(1, int(target * (height / width)))
    return max(1, int(target * (width / height))), target


def resize_longest_dimension(
    image: Image.Image, target: int, resize_filter: ResizeFilter = ResizeFilter.LANCZOS3
) -> Image.Image:
    """Resize ``image`` so its longest side equals ``target``."""
    size = longest_dimension_size(image.width, image.height, target)
    return image.resize(size, resize_filter.resample)


def fit_within(image: Image.Image, box: tuple[int, int]) -> Image.Image:
    """Downscale ``image`` uniformly to fit in ``box``; never upscale."""
    max_width, max_height = box
    width, height = image.size
    if width <= max_width and height <= max_height:
        return image

    scale = min(max_width / width, max_height / height)
    size = (max(1, int(width * scale)), max(1, int(height * scale)))
    return image.resize(size, Image.Resampling.LANCZOS)


def render_preview(
    image: Image.Image,
    percentage: float,
    symmetrical: bool,
    box: tuple[int, int] = (500, 500),
) -> Image.Image:
    """Return a display sized copy of ``image`` with its border applied."""
    return fit_within(add_border(image, percentage, symmetrical), box)


__all__ = [
    "BorderGeometry",
    "ResizeFilter",
    "add_border",
    "clamp_percentage",
    "composite_on_canvas",
    "compute_border_geometry",
    "fit_within",
    "longest_dimension_size",
    "render_preview",
    "resize_longest_dimension",
]
