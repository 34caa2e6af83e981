import logging
import os
from concurrent.futures import Future, ProcessPoolExecutor, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from PIL import Image

from .errors import EncodeError, ImageProcessingError, OutputWriteError
from .image_operations import ResizeFilter, add_border, resize_longest_dimension
from .validation import load_source_image

logger = logging.getLogger("image_finalizer.processor")

CompletionCallback = Callable[[Path, Optional[Path], Optional[str]], Any]


class OutputFormat(Enum):
    """Output codecs and the file extension each one writes."""

    PNG = ("PNG", "png")
    JPEG = ("JPEG", "jpg")
    TIFF = ("TIFF", "tiff")
    AVIF = ("AVIF", "avif")
    WEBP = ("WEBP", "webp")

    def __init__(self, pillow_format: str, extension: str) -> None:
        self.pillow_format = pillow_format
        self.extension = extension


@dataclass(frozen=True)
class BorderOptions:
    """
    Options shared by the preview and the export pipeline.

    Attributes:
        symmetrical (bool): Add the same padding to both axes instead of
            forcing a square canvas.
        border_percentage (float): Padding as a percentage of the longest side.
    """
    symmetrical: bool = False
    border_percentage: float = 10.0


@dataclass(frozen=True)
class ExportOptions(BorderOptions):
    """
    Full options snapshot for one batch export.

    Attributes:
        resize_enabled (bool): Downscale after the border is applied.
        resize_longest_dimension (int): Target size of the longest side.
        resize_filter (ResizeFilter): Resampling kernel for the resize.
        output_format (OutputFormat): Codec used to write each file.
        jpeg_quality (int): JPEG quality, 1-100.
        avif_quality (int): AVIF quality, 1-100.
        avif_speed (int): AVIF encoder speed, 1 (slowest) to 10 (fastest).
    """
    resize_enabled: bool = False
    resize_longest_dimension: int = 800
    resize_filter: ResizeFilter = ResizeFilter.LANCZOS3
    output_format: OutputFormat = OutputFormat.PNG
    jpeg_quality: int = 80
    avif_quality: int = 80
    avif_speed: int = 4

    def __post_init__(self) -> None:
        if self.resize_longest_dimension <= 0:
            raise ValueError("resize_longest_dimension must be greater than zero")
        for name in ("jpeg_quality", "avif_quality"):
            value = getattr(self, name)
            if not 1 <= value <= 100:
                raise ValueError(f"{name} must be between 1 and 100, got {value}")
        if not 1 <= self.avif_speed <= 10:
            raise ValueError(f"avif_speed must be between 1 and 10, got {self.avif_speed}")

    @property
    def border(self) -> BorderOptions:
        return BorderOptions(self.symmetrical, self.border_percentage)


def output_path_for(source: Union[str, Path], output_dir: Union[str, Path], output_format: OutputFormat) -> Path:
    """Return ``{output_dir}/{stem}_bordered.{ext}`` for *source*."""
    return Path(output_dir) / f"{Path(source).stem}_bordered.{output_format.extension}"


def encoder_params(options: ExportOptions) -> Dict[str, Any]:
    """Pillow ``save`` keyword arguments for the selected format."""
    fmt = options.output_format
    params: Dict[str, Any] = {"format": fmt.pillow_format}
    if fmt is OutputFormat.JPEG:
        params["quality"] = options.jpeg_quality
    elif fmt is OutputFormat.AVIF:
        params.update({"quality": options.avif_quality, "speed": options.avif_speed})
    elif fmt is OutputFormat.WEBP:
        params["lossless"] = True
    elif fmt is OutputFormat.TIFF:
        params["compression"] = "raw"
    return params


def render_export(image: Image.Image, options: ExportOptions) -> Image.Image:
    """Apply the border and the optional resize to a decoded source."""
    result = add_border(image, options.border_percentage, options.symmetrical)
    if options.resize_enabled:
        result = resize_longest_dimension(
            result, options.resize_longest_dimension, options.resize_filter
        )
    return result


def save_bordered(
    image: Image.Image,
    options: ExportOptions,
    output_dir: Union[str, Path],
    stem_source: Union[str, Path],
) -> Path:
    """Encode *image* into *output_dir* and return the written path.

    PNG keeps the RGBA canvas; every other codec receives RGB with the alpha
    channel dropped.  An existing file with the same name is overwritten.
    """
    directory = Path(output_dir)
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OutputWriteError(f"Cannot create output directory {directory}: {exc}") from exc

    path = output_path_for(stem_source, directory, options.output_format)
    encoded = image if options.output_format is OutputFormat.PNG else image.convert("RGB")

    try:
        handle = open(path, "wb")
    except OSError as exc:
        raise OutputWriteError(f"Cannot open {path} for writing: {exc}") from exc

    try:
        with handle:
            encoded.save(handle, **encoder_params(options))
    except (OSError, ValueError, KeyError) as exc:
        path.unlink(missing_ok=True)
        # Pillow reports codec failures as OSError without an errno
        if isinstance(exc, OSError) and exc.errno is not None:
            raise OutputWriteError(f"Failed to write {path}: {exc}") from exc
        raise EncodeError(
            f"{options.output_format.pillow_format} encoder rejected {path.name}: {exc}"
        ) from exc

    return path


def export_image(
    image_path: Union[str, Path],
    options: ExportOptions,
    output_dir: Union[str, Path],
) -> Path:
    """
    Add a border to one image and write it to *output_dir*.

    Args:
        image_path: Path to the source image
        options: Export options snapshot
        output_dir: Directory receiving ``{stem}_bordered.{ext}``

    Returns:
        Path: The written file

    Raises:
        ImageProcessingError: If reading, encoding or writing fails
    """
    source = load_source_image(image_path)
    try:
        rendered = render_export(source, options)
    except ValueError as exc:
        raise EncodeError(f"Cannot render {image_path}: {exc}") from exc

    output_path = save_bordered(rendered, options, output_dir, image_path)
    logger.info("Border added to %s. Saved to %s", Path(image_path).name, output_path)
    return output_path


class BorderProcessor:
    """Runs the border pipeline for whole batches on a worker pool."""

    def __init__(self, max_workers: Optional[int] = None):
        self._max_workers = max_workers or os.cpu_count() or 4
        self._thread_pool = ThreadPoolExecutor(max_workers=self._max_workers)
        self._proc_pool: Optional[ProcessPoolExecutor] = None

    def process_batch(
        self,
        image_paths: List[Union[str, Path]],
        options: ExportOptions,
        output_dir: Union[str, Path],
        *,
        use_processes: bool = False,
        on_complete: Optional[CompletionCallback] = None,
    ) -> Dict[str, Optional[Path]]:
        """
        Process multiple images in parallel.

        A failing image is logged and reported as ``None``; it never stops
        the remaining images.

        Args:
            image_paths: List of paths to input images
            options: Export options applied to every image
            output_dir: Directory to save processed images
            use_processes: Run jobs in a process pool instead of threads
            on_complete: Called as ``(source, output, error)`` per image

        Returns:
            Dict[str, Optional[Path]]: Input path mapped to the written file
        """
        results: Dict[str, Optional[Path]] = {}
        if not image_paths:
            return results

        futures: Dict[Future, Path] = {}
        for path in image_paths:
            if use_processes:
                if self._proc_pool is None:
                    self._proc_pool = ProcessPoolExecutor(max_workers=self._max_workers)
                future = self._proc_pool.submit(export_image, str(path), options, str(output_dir))
            else:
                future = self._thread_pool.submit(export_image, path, options, output_dir)
            futures[future] = Path(path)

        for future in as_completed(futures):
            path = futures[future]
            output: Optional[Path] = None
            error: Optional[str] = None
            try:
                output = future.result()
            except ImageProcessingError as exc:
                error = str(exc)
            except Exception as exc:
                error = f"Unexpected error: {exc}"
            if error is not None:
                logger.error("Failed to process %s: %s", path, error)
            results[str(path)] = output
            if on_complete is not None:
                on_complete(path, output, error)

        return results

    def shutdown(self) -> None:
        """Release the worker pools."""
        self._thread_pool.shutdown(wait=True)
        if self._proc_pool is not None:
            self._proc_pool.shutdown(wait=True)
            self._proc_pool = None
