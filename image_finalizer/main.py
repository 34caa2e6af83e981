# main.py
"""
Entry point and main application window for Image Finalizer.
"""
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Sequence

from PySide6.QtCore import QTimer
from PySide6.QtWidgets import (
    QApplication,
    QFileDialog,
    QLabel,
    QMainWindow,
    QVBoxLayout,
    QWidget,
)

from . import config
from .controllers import BorderSessionController, DirectoryKind
from .presenter import BorderPresenter
from .widgets.control_panel import ControlPanel
from .widgets.preview import PreviewLabel
from .workers import PoolSubmitter

LOGGER_NAME = "image_finalizer"


def configure_logging() -> logging.Logger:
    """Configure and return the application logger.

    The handler setup is idempotent to avoid duplicate handlers when the module
    is imported multiple times (e.g., in tests). A rotating file handler limits
    on-disk log growth while mirroring output to stdout for developer visibility.
    """

    logger = logging.getLogger(LOGGER_NAME)
    if logger.handlers:
        return logger

    logger.setLevel(logging.INFO)

    formatter = logging.Formatter(
        "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
    )

    log_dir = Path(config.LOG_DIR) if config.LOG_DIR else Path(__file__).resolve().parents[1]
    log_path = log_dir / config.LOG_FILE_NAME
    log_path.parent.mkdir(parents=True, exist_ok=True)

    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=config.LOG_MAX_BYTES,
        backupCount=config.LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)

    logger.addHandler(file_handler)
    logger.addHandler(stream_handler)
    logger.propagate = False

    return logger


logger = configure_logging()


def global_exception_handler(exc_type, value, tb):
    logger.error("Uncaught exception", exc_info=(exc_type, value, tb))
    sys.__excepthook__(exc_type, value, tb)


sys.excepthook = global_exception_handler


class MainWindow(QMainWindow):
    def __init__(self, controller: Optional[BorderSessionController] = None):
        super().__init__()
        self.setWindowTitle(config.WINDOW_TITLE)
        self.resize(*config.WINDOW_SIZE)

        self.submitter = PoolSubmitter(on_error=self._on_worker_error)
        self.controller = controller or BorderSessionController(submit=self.submitter)

        central = QWidget()
        self.setCentralWidget(central)
        main_layout = QVBoxLayout(central)
        main_layout.setContentsMargins(8, 6, 8, 6)
        main_layout.setSpacing(8)

        self.control_panel = ControlPanel(defaults=self.controller.options, parent=self)
        main_layout.addWidget(self.control_panel)

        main_layout.addWidget(QLabel("Preview"))
        self.preview = PreviewLabel()
        main_layout.addWidget(self.preview, stretch=1)

        self.presenter = BorderPresenter(self, self.controller)
        self._bind_control_panel()

        # Worker results are applied on the GUI thread, once per tick
        self.event_timer = QTimer(self)
        self.event_timer.setInterval(config.EVENT_POLL_INTERVAL_MS)
        self.event_timer.timeout.connect(self.presenter.tick)
        self.event_timer.start()

        self.presenter.refresh()
        logger.info("MainWindow initialized.")

    def _bind_control_panel(self) -> None:
        panel = self.control_panel
        panel.inputDirectoryRequested.connect(lambda: self._pick_directory(DirectoryKind.INPUT))
        panel.outputDirectoryRequested.connect(lambda: self._pick_directory(DirectoryKind.OUTPUT))
        panel.optionsChanged.connect(self.presenter.options_changed)
        panel.startRequested.connect(self.presenter.start_processing)

    def _pick_directory(self, kind: DirectoryKind) -> None:
        title = "Select Input Directory" if kind is DirectoryKind.INPUT else "Select Output Directory"
        path = QFileDialog.getExistingDirectory(self, title)
        self.presenter.directory_chosen(kind, path)

    def open_directories(self, input_dir: Optional[str] = None, output_dir: Optional[str] = None) -> None:
        """Preselect directories, e.g. from command line arguments."""
        self.controller.directory_picked(DirectoryKind.INPUT, input_dir)
        self.controller.directory_picked(DirectoryKind.OUTPUT, output_dir)
        self.presenter.tick()

    def _on_worker_error(self, message: str) -> None:
        self.control_panel.status_label.setText(f"Error: {message}")

    def closeEvent(self, event):
        self.event_timer.stop()
        self.submitter.wait()
        self.controller.shutdown()
        super().closeEvent(event)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Launch the window; optional arguments preselect input and output directories."""
    args = list(sys.argv[1:] if argv is None else argv)

    app = QApplication.instance() or QApplication([sys.argv[0], *args])
    app.setStyle("Fusion")

    window = MainWindow()
    window.open_directories(*args[:2])
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
