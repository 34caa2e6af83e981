from unittest.mock import MagicMock

import pytest
from PIL import Image

from image_finalizer.controllers import DirectoryKind, ItemComplete, PreviewReady
from image_finalizer.presenter import BorderPresenter
from imaging.image_operations import ResizeFilter
from imaging.image_processor import ExportOptions, OutputFormat


@pytest.fixture
def mock_view():
    view = MagicMock()
    panel = view.control_panel
    panel.symmetric_checkbox.isChecked.return_value = True
    panel.border_percentage.return_value = 12.5
    panel.resize_checkbox.isChecked.return_value = True
    panel.longest_dimension_spin.value.return_value = 1024
    panel.selected_filter.return_value = ResizeFilter.CATMULL_ROM
    panel.selected_format.return_value = OutputFormat.AVIF
    panel.jpeg_quality_slider.value.return_value = 70
    panel.avif_quality_slider.value.return_value = 60
    panel.avif_speed_slider.value.return_value = 8
    return view


@pytest.fixture
def mock_controller():
    controller = MagicMock()
    controller.drain_events.return_value = []
    controller.preview_image = None
    controller.input_dir = None
    controller.output_dir = None
    controller.image_paths = []
    controller.processing = False
    controller.progress = 0.0
    controller.status_message = ""
    return controller


@pytest.fixture
def presenter(mock_view, mock_controller):
    return BorderPresenter(mock_view, mock_controller)


def test_read_options_collects_widget_values(presenter):
    """Verify read_options assembles an ExportOptions from the panel."""
    assert presenter.read_options() == ExportOptions(
        symmetrical=True,
        border_percentage=12.5,
        resize_enabled=True,
        resize_longest_dimension=1024,
        resize_filter=ResizeFilter.CATMULL_ROM,
        output_format=OutputFormat.AVIF,
        jpeg_quality=70,
        avif_quality=60,
        avif_speed=8,
    )


def test_options_changed_forwards_snapshot(presenter, mock_controller):
    presenter.options_changed()
    mock_controller.set_options.assert_called_once_with(presenter.read_options())


def test_invalid_widget_values_are_not_forwarded(presenter, mock_view, mock_controller):
    mock_view.control_panel.avif_speed_slider.value.return_value = 0
    presenter.options_changed()
    mock_controller.set_options.assert_not_called()


def test_cancelled_picker_forwards_none(presenter, mock_controller):
    presenter.directory_chosen(DirectoryKind.OUTPUT, "")
    mock_controller.directory_picked.assert_called_once_with(DirectoryKind.OUTPUT, None)


def test_tick_without_events_leaves_view_alone(presenter, mock_view):
    presenter.tick()
    mock_view.preview.set_preview.assert_not_called()
    mock_view.control_panel.set_processing.assert_not_called()


def test_tick_applies_preview(presenter, mock_view, mock_controller):
    image = Image.new("RGBA", (5, 5))
    mock_controller.preview_image = image
    mock_controller.drain_events.return_value = [PreviewReady(3, image)]

    presenter.tick()

    mock_view.preview.set_preview.assert_called_once_with(image)


def test_tick_updates_progress_and_status(presenter, mock_view, mock_controller, tmp_path):
    mock_controller.drain_events.return_value = [ItemComplete(tmp_path / "a.png", None)]
    mock_controller.processing = True
    mock_controller.progress = 0.5
    mock_controller.image_paths = [tmp_path / "a.png", tmp_path / "b.png"]
    mock_controller.input_dir = tmp_path
    mock_controller.status_message = "Processing images..."

    presenter.tick()

    panel = mock_view.control_panel
    panel.set_processing.assert_called_once_with(True, 0.5)
    panel.status_label.setText.assert_called_once_with("Processing images...")
    panel.found_label.setText.assert_called_once_with("Found 2 images")
    panel.input_dir_edit.setText.assert_called_once_with(str(tmp_path))
    panel.output_dir_edit.setText.assert_called_once_with("")
    mock_view.preview.set_preview.assert_called_once_with(None)


def test_start_processing_syncs_options_first(presenter, mock_controller):
    presenter.start_processing()
    mock_controller.set_options.assert_called_once()
    mock_controller.start_export.assert_called_once()
