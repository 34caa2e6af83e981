"""Input validation and source discovery helpers."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Union
from urllib.parse import urlparse

from PIL import Image, UnidentifiedImageError

from .errors import DirectoryError, SourceReadError

SOURCE_EXTENSIONS = frozenset({".png", ".jpg", ".jpeg", ".gif", ".bmp", ".tif"})


def _has_url_scheme(path_str: str) -> bool:
    """Return True if *path_str* looks like a URL with a scheme.

    Single-letter schemes such as ``"C"`` are treated as drive letters on
    Windows and therefore ignored.
    """
    parsed = urlparse(path_str)
    return bool(parsed.scheme and len(parsed.scheme) > 1)


def is_source_image(path: Union[str, Path], allowed_exts: Iterable[str] = SOURCE_EXTENSIONS) -> bool:
    """Return True when *path* has one of the ``allowed_exts`` (case-insensitive)."""
    return Path(path).suffix.lower() in {ext.lower() for ext in allowed_exts}


def validate_input_directory(path: Union[str, Path]) -> Path:
    """Validate a user-supplied input *path* and return it resolved.

    Raises :class:`DirectoryError` for URLs, missing paths and non-directories.
    """
    path_str = str(path)
    if _has_url_scheme(path_str):
        raise DirectoryError("URLs are not allowed")

    p = Path(path_str).expanduser()
    try:
        p = p.resolve(strict=True)
    except FileNotFoundError as exc:
        raise DirectoryError(f"Directory does not exist: {path_str}") from exc
    except (OSError, RuntimeError) as exc:
        raise DirectoryError(f"Cannot access directory {path_str}: {exc}") from exc

    if not p.is_dir():
        raise DirectoryError(f"Not a directory: {path_str}")
    return p


def discover_images(
    directory: Union[str, Path], allowed_exts: Iterable[str] = SOURCE_EXTENSIONS
) -> List[Path]:
    """List the source images directly inside *directory*.

    Subdirectories are not searched.  The result is sorted by file name so the
    first entry, which drives the preview, is stable between runs.
    """
    root = validate_input_directory(directory)
    try:
        entries = list(root.iterdir())
    except OSError as exc:
        raise DirectoryError(f"Failed to read directory {root}: {exc}") from exc

    return sorted(
        (entry for entry in entries if is_source_image(entry, allowed_exts) and entry.is_file()),
        key=lambda entry: entry.name,
    )


def load_source_image(path: Union[str, Path]) -> Image.Image:
    """Decode *path* fully and return it as an RGBA image.

    Raises :class:`SourceReadError` when the file is missing, corrupt or
    decodes to an empty raster.
    """
    try:
        with Image.open(path) as img:
            img.load()
            rgba = img.convert("RGBA")
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as exc:
        raise SourceReadError(f"Failed to read {path}: {exc}") from exc

    if rgba.width == 0 or rgba.height == 0:
        raise SourceReadError(f"Image has no pixels: {path}")
    return rgba


def validate_output_directory(path: Union[str, Path]) -> Path:
    """Validate an output directory *path* without creating it.

    The directory may not exist yet; it is created on first write.  An
    existing non-directory at that location is rejected.
    """
    path_str = str(path)
    if _has_url_scheme(path_str):
        raise ValueError("URLs are not allowed")

    p = Path(path_str).expanduser().resolve()
    if p.exists() and not p.is_dir():
        raise ValueError(f"Not a directory: {p}")
    return p
