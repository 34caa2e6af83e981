from io import BytesIO
from typing import Optional

from PIL import Image
from PySide6.QtCore import QByteArray, QSize, Qt
from PySide6.QtGui import QImage, QPixmap
from PySide6.QtWidgets import QLabel

PLACEHOLDER_TEXT = "No preview available. Load images first."


def pil_to_qpixmap(pil_img: Image.Image) -> QPixmap:
    """Convert a Pillow image to a QPixmap through an in-memory PNG."""
    out = BytesIO()
    pil_img.save(out, format='PNG')
    qimg = QImage.fromData(QByteArray(out.getvalue()), 'PNG')
    return QPixmap.fromImage(qimg)


class PreviewLabel(QLabel):
    """A QLabel showing the bordered preview at its rendered size."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.current_pixmap: Optional[QPixmap] = None
        self.setAlignment(Qt.AlignCenter)
        self.setMinimumSize(QSize(500, 500))
        self.setText(PLACEHOLDER_TEXT)
        self.setAccessibleName("Preview")

    def set_preview(self, image: Optional[Image.Image]) -> None:
        """
        Display *image*, or the placeholder when it is None.

        The preview pipeline already fits the image into the preview box, so
        it is shown without further scaling.
        """
        if image is None:
            self.clear()
            return
        self.current_pixmap = pil_to_qpixmap(image)
        self.setPixmap(self.current_pixmap)
        self.setProperty('hasImage', True)

    def clear(self):
        """Clear the current image and reset the placeholder text."""
        super().clear()
        self.current_pixmap = None
        self.setText(PLACEHOLDER_TEXT)
        self.setProperty('hasImage', False)
