"""Session controller for the border tool.

This module introduces :class:`BorderSessionController`, a small service
layer that owns everything the window displays: the chosen directories, the
discovered sources, the current options, the preview bitmap and the export
progress.  Background jobs never touch that state.  They post immutable
events to a single queue and the interactive thread applies them in
:meth:`BorderSessionController.drain_events`, once per UI tick.  The
controller has no Qt dependency, so the same logic is driven by the PySide6
window and by plain tests.
"""

from __future__ import annotations

import dataclasses
import logging
import queue
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from threading import Lock
from typing import Any, Callable, List, Optional, Tuple, Union

from PIL import Image

from imaging.errors import DirectoryError, SourceReadError
from imaging.image_operations import clamp_percentage, render_preview
from imaging.image_processor import BorderProcessor, ExportOptions
from imaging.validation import discover_images, load_source_image, validate_output_directory

from .. import config

logger = logging.getLogger("image_finalizer.session")

Job = Callable[[], Any]
Submit = Callable[[Job], Any]


class DirectoryKind(Enum):
    INPUT = "input"
    OUTPUT = "output"


@dataclass(frozen=True)
class PreviewReady:
    """A preview finished rendering for request number ``generation``."""

    generation: int
    image: Image.Image


@dataclass(frozen=True)
class DirectoryPicked:
    """The directory picker returned a path."""

    kind: DirectoryKind
    path: Path


@dataclass(frozen=True)
class ItemComplete:
    """One image of the running batch finished, successfully or not."""

    source: Path
    output: Optional[Path]
    error: Optional[str] = None


SessionEvent = Union[PreviewReady, DirectoryPicked, ItemComplete]


def default_options() -> ExportOptions:
    """Return the option snapshot every session starts with."""

    return ExportOptions(
        symmetrical=config.DEFAULT_SYMMETRICAL,
        border_percentage=config.DEFAULT_BORDER_PERCENTAGE,
        resize_enabled=config.DEFAULT_RESIZE_ENABLED,
        resize_longest_dimension=config.DEFAULT_RESIZE_LONGEST_DIMENSION,
        jpeg_quality=config.DEFAULT_JPEG_QUALITY,
        avif_quality=config.DEFAULT_AVIF_QUALITY,
        avif_speed=config.DEFAULT_AVIF_SPEED,
    )


def _run_inline(job: Job) -> None:
    job()


class BorderSessionController:
    """Coordinate previews and batch exports independently of UI widgets."""

    def __init__(
        self,
        processor: Optional[BorderProcessor] = None,
        *,
        submit: Optional[Submit] = None,
        preview_box: Tuple[int, int] = config.PREVIEW_BOX,
        use_processes: bool = config.USE_PROCESS_POOL,
    ) -> None:
        self._processor = processor or BorderProcessor(max_workers=config.MAX_WORKER_THREADS)
        self._submit: Submit = submit or _run_inline
        self._preview_box = preview_box
        self._use_processes = use_processes
        self._events: "queue.SimpleQueue[SessionEvent]" = queue.SimpleQueue()
        self._generation_lock = Lock()
        self._preview_generation = 0

        self.input_dir: Optional[Path] = None
        self.output_dir: Optional[Path] = None
        self.image_paths: List[Path] = []
        self.options: ExportOptions = default_options()
        self.original_image: Optional[Image.Image] = None
        self.preview_image: Optional[Image.Image] = None
        self.status_message = ""
        self.processing = False
        self.completed = 0
        self.total = 0
        self.failures: List[Tuple[Path, str]] = []

    # Event channel -----------------------------------------------------------
    def post(self, event: SessionEvent) -> None:
        """Queue *event* for the interactive thread. Safe from any thread."""

        self._events.put(event)

    def directory_picked(self, kind: DirectoryKind, path: Optional[Union[str, Path]]) -> None:
        """Forward a picker result; a cancelled picker (``None``) is a no-op."""

        if path is None or str(path) == "":
            return
        self.post(DirectoryPicked(kind, Path(path)))

    def drain_events(self) -> List[SessionEvent]:
        """Apply all queued events and return the ones that changed state."""

        applied: List[SessionEvent] = []
        while True:
            try:
                event = self._events.get_nowait()
            except queue.Empty:
                break
            if self._apply(event):
                applied.append(event)
        return applied

    def _apply(self, event: SessionEvent) -> bool:
        if isinstance(event, PreviewReady):
            if not self.is_current_preview(event.generation):
                logger.debug("Dropping stale preview %d", event.generation)
                return False
            self.preview_image = event.image
            return True
        if isinstance(event, DirectoryPicked):
            if event.kind is DirectoryKind.INPUT:
                self._set_input_directory(event.path)
            else:
                self._set_output_directory(event.path)
            return True
        if isinstance(event, ItemComplete):
            return self._record_item(event)
        raise TypeError(f"Unknown session event: {event!r}")

    # Directories ---------------------------------------------------------------
    def _set_input_directory(self, path: Path) -> None:
        self._invalidate_preview()
        self.original_image = None
        self.preview_image = None
        try:
            paths = discover_images(path)
        except DirectoryError as exc:
            logger.warning("Cannot use input directory %s: %s", path, exc)
            self.input_dir = None
            self.image_paths = []
            self.status_message = str(exc)
            return

        self.input_dir = Path(path)
        self.image_paths = paths
        self.status_message = f"Found {len(paths)} images"
        logger.info("Found %d images in %s", len(paths), path)
        if not paths:
            return

        try:
            self.original_image = load_source_image(paths[0])
        except SourceReadError as exc:
            logger.error("Error loading original image: %s", exc)
            self.status_message = f"Error loading original image: {exc}"
            return
        self.request_preview()

    def _set_output_directory(self, path: Path) -> None:
        try:
            self.output_dir = validate_output_directory(path)
        except ValueError as exc:
            logger.warning("Cannot use output directory %s: %s", path, exc)
            self.status_message = str(exc)

    # Options and preview -----------------------------------------------------
    def set_options(self, options: ExportOptions) -> bool:
        """Replace the options snapshot; re-render the preview on border changes."""

        percentage = clamp_percentage(
            options.border_percentage,
            low=config.BORDER_PERCENTAGE_MIN,
            high=config.BORDER_PERCENTAGE_MAX,
        )
        if percentage != options.border_percentage:
            options = dataclasses.replace(options, border_percentage=percentage)
        if options == self.options:
            return False

        border_changed = options.border != self.options.border
        self.options = options
        if border_changed:
            self.request_preview()
        return True

    def update_options(self, **changes: Any) -> bool:
        """Apply keyword *changes* to the current options snapshot."""

        return self.set_options(dataclasses.replace(self.options, **changes))

    def is_current_preview(self, generation: int) -> bool:
        with self._generation_lock:
            return generation == self._preview_generation

    def _invalidate_preview(self) -> int:
        with self._generation_lock:
            self._preview_generation += 1
            return self._preview_generation

    def request_preview(self) -> Optional[int]:
        """Schedule a preview render and return its generation number.

        Any earlier request still in flight becomes stale: it skips its work if
        it has not started yet, and its result is dropped on arrival.
        """

        if self.original_image is None:
            return None
        generation = self._invalidate_preview()
        image = self.original_image
        border = self.options.border
        box = self._preview_box

        def job() -> None:
            if not self.is_current_preview(generation):
                return
            rendered = render_preview(image, border.border_percentage, border.symmetrical, box)
            self.post(PreviewReady(generation, rendered))

        self._submit(job)
        return generation

    # Batch export --------------------------------------------------------------
    def start_export(self) -> bool:
        """Submit the batch with the current options snapshot."""

        if self.processing:
            return False
        if self.output_dir is None:
            self.status_message = "Select an output directory first."
            return False
        if not self.image_paths:
            self.status_message = "No images to process."
            return False

        paths = list(self.image_paths)
        options = self.options
        output_dir = self.output_dir
        self.total = len(paths)
        self.completed = 0
        self.failures = []
        self.processing = True
        self.status_message = "Processing images..."
        logger.info("Processing %d images into %s", self.total, output_dir)

        def job() -> None:
            self._processor.process_batch(
                paths,
                options,
                output_dir,
                use_processes=self._use_processes,
                on_complete=self._post_item_complete,
            )

        self._submit(job)
        return True

    def _post_item_complete(self, source: Path, output: Optional[Path], error: Optional[str]) -> None:
        self.post(ItemComplete(source, output, error))

    def _record_item(self, event: ItemComplete) -> bool:
        if not self.processing:
            return False
        self.completed += 1
        if event.error is not None:
            self.failures.append((event.source, event.error))
        if self.completed >= self.total:
            self.processing = False
            if self.failures:
                self.status_message = (
                    f"Processing complete. {len(self.failures)} of {self.total} images failed."
                )
            else:
                self.status_message = "Processing complete."
            logger.info(self.status_message)
        return True

    @property
    def progress(self) -> float:
        """Fraction of the running batch that has finished, in ``[0, 1]``."""

        if self.total == 0:
            return 0.0
        return min(self.completed / self.total, 1.0)

    def shutdown(self) -> None:
        """Stop the batch worker pool."""

        self._processor.shutdown()
