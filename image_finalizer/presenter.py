"""
BorderPresenter: binds the control panel and preview to the session controller.
"""
import logging
from pathlib import Path
from typing import Optional

from imaging.image_processor import ExportOptions

from .controllers import BorderSessionController, DirectoryKind, PreviewReady


class BorderPresenter:
    def __init__(self, view, controller: BorderSessionController):
        self.view = view
        self.controller = controller
        self.logger = logging.getLogger("image_finalizer.presenter")

    @property
    def panel(self):
        return self.view.control_panel

    def read_options(self) -> ExportOptions:
        """Build an options snapshot from the current widget values."""
        panel = self.panel
        return ExportOptions(
            symmetrical=panel.symmetric_checkbox.isChecked(),
            border_percentage=panel.border_percentage(),
            resize_enabled=panel.resize_checkbox.isChecked(),
            resize_longest_dimension=panel.longest_dimension_spin.value(),
            resize_filter=panel.selected_filter(),
            output_format=panel.selected_format(),
            jpeg_quality=panel.jpeg_quality_slider.value(),
            avif_quality=panel.avif_quality_slider.value(),
            avif_speed=panel.avif_speed_slider.value(),
        )

    def options_changed(self) -> None:
        try:
            options = self.read_options()
        except ValueError as exc:
            self.logger.warning("Ignoring invalid options: %s", exc)
            return
        self.controller.set_options(options)

    def directory_chosen(self, kind: DirectoryKind, path: Optional[str]) -> None:
        """Forward a picker result. An empty path means the user cancelled."""
        self.controller.directory_picked(kind, path or None)

    def start_processing(self) -> None:
        self.options_changed()
        self.controller.start_export()
        self.refresh()

    def tick(self) -> None:
        """Drain worker events and refresh the view; called once per UI tick."""
        events = self.controller.drain_events()
        if not events:
            return
        if any(isinstance(event, PreviewReady) for event in events):
            self.view.preview.set_preview(self.controller.preview_image)
        self.refresh()

    def refresh(self) -> None:
        controller = self.controller
        panel = self.panel

        if controller.preview_image is None:
            self.view.preview.set_preview(None)
        panel.input_dir_edit.setText(_path_text(controller.input_dir))
        panel.output_dir_edit.setText(_path_text(controller.output_dir))
        panel.found_label.setText(f"Found {len(controller.image_paths)} images")
        panel.set_processing(controller.processing, controller.progress)
        panel.status_label.setText(controller.status_message)


def _path_text(path: Optional[Path]) -> str:
    return "" if path is None else str(path)
