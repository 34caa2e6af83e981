"""Control panel widget for the main Image Finalizer window."""

from __future__ import annotations

from typing import Dict

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QButtonGroup,
    QCheckBox,
    QFrame,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QProgressBar,
    QPushButton,
    QRadioButton,
    QSizePolicy,
    QSlider,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from imaging.image_operations import ResizeFilter
from imaging.image_processor import ExportOptions, OutputFormat

from .. import config

# The border slider works in tenths of a percent
BORDER_SLIDER_SCALE = 10


class ControlPanel(QFrame):
    """Directory pickers, border/resize/format options and batch controls."""

    inputDirectoryRequested = Signal()
    outputDirectoryRequested = Signal()
    optionsChanged = Signal()
    startRequested = Signal()

    def __init__(self, *, defaults: ExportOptions, parent=None) -> None:
        super().__init__(parent)
        self._defaults = defaults
        self._filter_buttons: Dict[ResizeFilter, QRadioButton] = {}
        self._format_buttons: Dict[OutputFormat, QRadioButton] = {}

        self.setObjectName("controlPanel")
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Fixed)

        self._build_layout()
        self._sync_visibility()

    # Public control accessors -------------------------------------------------
    @property
    def input_dir_edit(self) -> QLineEdit:
        return self._input_dir_edit

    @property
    def output_dir_edit(self) -> QLineEdit:
        return self._output_dir_edit

    @property
    def found_label(self) -> QLabel:
        return self._found_label

    @property
    def symmetric_checkbox(self) -> QCheckBox:
        return self._symmetric_chk

    @property
    def resize_checkbox(self) -> QCheckBox:
        return self._resize_chk

    @property
    def longest_dimension_spin(self) -> QSpinBox:
        return self._longest_spin

    @property
    def jpeg_quality_slider(self) -> QSlider:
        return self._jpeg_quality_slider

    @property
    def avif_quality_slider(self) -> QSlider:
        return self._avif_quality_slider

    @property
    def avif_speed_slider(self) -> QSlider:
        return self._avif_speed_slider

    @property
    def border_slider(self) -> QSlider:
        return self._border_slider

    @property
    def start_button(self) -> QPushButton:
        return self._start_btn

    @property
    def progress_bar(self) -> QProgressBar:
        return self._progress_bar

    @property
    def status_label(self) -> QLabel:
        return self._status_label

    def border_percentage(self) -> float:
        return self._border_slider.value() / BORDER_SLIDER_SCALE

    def selected_filter(self) -> ResizeFilter:
        for resize_filter, button in self._filter_buttons.items():
            if button.isChecked():
                return resize_filter
        return self._defaults.resize_filter

    def selected_format(self) -> OutputFormat:
        for output_format, button in self._format_buttons.items():
            if button.isChecked():
                return output_format
        return self._defaults.output_format

    def set_processing(self, processing: bool, progress: float = 0.0) -> None:
        """Swap the start button for the progress bar while a batch runs."""
        self._start_btn.setVisible(not processing)
        self._progress_bar.setVisible(processing)
        percent = progress * 100.0
        self._progress_bar.setValue(int(percent))
        self._progress_bar.setFormat(f"{percent:.1f}%")

    # Layout builders ---------------------------------------------------------
    def _build_layout(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(4, 4, 4, 4)
        layout.setSpacing(8)

        heading = QLabel(config.WINDOW_TITLE)
        heading.setObjectName("heading")
        layout.addWidget(heading)

        self._build_directory_rows(layout)
        self._symmetric_chk = QCheckBox("Symmetrical Border")
        self._symmetric_chk.setChecked(self._defaults.symmetrical)
        self._symmetric_chk.toggled.connect(lambda _: self.optionsChanged.emit())
        layout.addWidget(self._symmetric_chk)

        layout.addWidget(self._separator())
        self._build_resize_controls(layout)
        layout.addWidget(self._separator())
        self._build_format_controls(layout)
        layout.addWidget(self._separator())
        self._build_border_slider(layout)
        self._build_batch_controls(layout)

    def _separator(self) -> QFrame:
        line = QFrame()
        line.setFrameShape(QFrame.HLine)
        line.setFrameShadow(QFrame.Sunken)
        return line

    def _build_directory_rows(self, parent_layout: QVBoxLayout) -> None:
        grid = QGridLayout()
        grid.setHorizontalSpacing(6)

        self._input_dir_edit = QLineEdit()
        self._input_dir_edit.setReadOnly(True)
        input_btn = QPushButton("Open Input Directory")
        input_btn.clicked.connect(self.inputDirectoryRequested.emit)
        self._found_label = QLabel("Found 0 images")

        grid.addWidget(QLabel("Input Directory:"), 0, 0)
        grid.addWidget(self._input_dir_edit, 0, 1)
        grid.addWidget(input_btn, 0, 2)
        grid.addWidget(self._found_label, 0, 3)

        self._output_dir_edit = QLineEdit()
        self._output_dir_edit.setReadOnly(True)
        output_btn = QPushButton("Open Output Directory")
        output_btn.clicked.connect(self.outputDirectoryRequested.emit)

        grid.addWidget(QLabel("Output Directory:"), 1, 0)
        grid.addWidget(self._output_dir_edit, 1, 1)
        grid.addWidget(output_btn, 1, 2)

        parent_layout.addLayout(grid)

    def _build_resize_controls(self, parent_layout: QVBoxLayout) -> None:
        self._resize_chk = QCheckBox("Resize Images")
        self._resize_chk.setChecked(self._defaults.resize_enabled)
        self._resize_chk.toggled.connect(self._on_toggle)
        parent_layout.addWidget(self._resize_chk)

        self._resize_box = QWidget()
        box_layout = QVBoxLayout(self._resize_box)
        box_layout.setContentsMargins(16, 0, 0, 0)

        row = QHBoxLayout()
        row.addWidget(QLabel("Longest Dimension:"))
        self._longest_spin = QSpinBox()
        self._longest_spin.setRange(1, config.RESIZE_DIMENSION_MAX)
        self._longest_spin.setValue(self._defaults.resize_longest_dimension)
        self._longest_spin.valueChanged.connect(lambda _: self.optionsChanged.emit())
        row.addWidget(self._longest_spin)
        row.addStretch()
        box_layout.addLayout(row)

        box_layout.addWidget(QLabel("Resize Algorithm:"))
        group = QButtonGroup(self)
        for resize_filter in ResizeFilter:
            line = QHBoxLayout()
            button = QRadioButton(resize_filter.label)
            button.setChecked(resize_filter is self._defaults.resize_filter)
            group.addButton(button)
            self._filter_buttons[resize_filter] = button
            line.addWidget(button)
            line.addWidget(QLabel(resize_filter.description))
            line.addStretch()
            box_layout.addLayout(line)
        group.buttonToggled.connect(self._on_radio_toggled)

        parent_layout.addWidget(self._resize_box)

    def _build_format_controls(self, parent_layout: QVBoxLayout) -> None:
        parent_layout.addWidget(QLabel("Output Format:"))
        row = QHBoxLayout()
        group = QButtonGroup(self)
        for output_format in OutputFormat:
            button = QRadioButton(output_format.pillow_format)
            button.setChecked(output_format is self._defaults.output_format)
            group.addButton(button)
            self._format_buttons[output_format] = button
            row.addWidget(button)
        row.addStretch()
        group.buttonToggled.connect(self._on_radio_toggled)
        parent_layout.addLayout(row)

        self._jpeg_box = QWidget()
        jpeg_row = QHBoxLayout(self._jpeg_box)
        jpeg_row.setContentsMargins(0, 0, 0, 0)
        jpeg_row.addWidget(QLabel("JPEG Quality (1-100):"))
        self._jpeg_quality_slider = self._slider(
            config.QUALITY_MIN, config.QUALITY_MAX, self._defaults.jpeg_quality
        )
        jpeg_row.addWidget(self._jpeg_quality_slider)
        parent_layout.addWidget(self._jpeg_box)

        self._avif_box = QWidget()
        avif_row = QHBoxLayout(self._avif_box)
        avif_row.setContentsMargins(0, 0, 0, 0)
        avif_row.addWidget(
            QLabel("AVIF Speed (1-10) 1 = Slowest, better compression, 10 = Fastest")
        )
        self._avif_speed_slider = self._slider(
            config.AVIF_SPEED_MIN, config.AVIF_SPEED_MAX, self._defaults.avif_speed
        )
        avif_row.addWidget(self._avif_speed_slider)
        avif_row.addWidget(QLabel("AVIF Quality (1-100):"))
        self._avif_quality_slider = self._slider(
            config.QUALITY_MIN, config.QUALITY_MAX, self._defaults.avif_quality
        )
        avif_row.addWidget(self._avif_quality_slider)
        parent_layout.addWidget(self._avif_box)

    def _build_border_slider(self, parent_layout: QVBoxLayout) -> None:
        row = QHBoxLayout()
        self._border_slider = QSlider(Qt.Horizontal)
        self._border_slider.setRange(
            int(config.BORDER_PERCENTAGE_MIN * BORDER_SLIDER_SCALE),
            int(config.BORDER_PERCENTAGE_MAX * BORDER_SLIDER_SCALE),
        )
        self._border_slider.setValue(round(self._defaults.border_percentage * BORDER_SLIDER_SCALE))
        self._border_value_label = QLabel()
        self._border_slider.valueChanged.connect(self._on_border_changed)
        row.addWidget(self._border_slider, stretch=1)
        row.addWidget(self._border_value_label)
        row.addWidget(QLabel("Border Percentage"))
        self._update_border_label()
        parent_layout.addLayout(row)

    def _build_batch_controls(self, parent_layout: QVBoxLayout) -> None:
        self._start_btn = QPushButton("Start Processing")
        self._start_btn.clicked.connect(self.startRequested.emit)
        parent_layout.addWidget(self._start_btn)

        self._progress_bar = QProgressBar()
        self._progress_bar.setRange(0, 100)
        self._progress_bar.setVisible(False)
        parent_layout.addWidget(self._progress_bar)

        self._status_label = QLabel("")
        self._status_label.setWordWrap(True)
        parent_layout.addWidget(self._status_label)

    def _slider(self, low: int, high: int, value: int) -> QSlider:
        slider = QSlider(Qt.Horizontal)
        slider.setRange(low, high)
        slider.setValue(value)
        slider.setToolTip(str(value))
        slider.valueChanged.connect(lambda v: slider.setToolTip(str(v)))
        slider.valueChanged.connect(lambda _: self.optionsChanged.emit())
        return slider

    # Change handlers -----------------------------------------------------------
    def _on_toggle(self, _checked: bool) -> None:
        self._sync_visibility()
        self.optionsChanged.emit()

    def _on_radio_toggled(self, _button, checked: bool) -> None:
        # buttonToggled fires for the released and the pressed button
        if not checked:
            return
        self._sync_visibility()
        self.optionsChanged.emit()

    def _on_border_changed(self, _value: int) -> None:
        self._update_border_label()
        self.optionsChanged.emit()

    def _update_border_label(self) -> None:
        self._border_value_label.setText(f"{self.border_percentage():.1f}%")

    def _sync_visibility(self) -> None:
        self._resize_box.setVisible(self._resize_chk.isChecked())
        output_format = self.selected_format()
        self._jpeg_box.setVisible(output_format is OutputFormat.JPEG)
        self._avif_box.setVisible(output_format is OutputFormat.AVIF)


__all__ = ["BORDER_SLIDER_SCALE", "ControlPanel"]
