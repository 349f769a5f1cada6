"""Aspect-preserving image view with an optional bounding box overlay."""
from __future__ import annotations

from typing import Any, Optional

from PyQt6.QtCore import QRect, QRectF, QSize, Qt
from PyQt6.QtGui import QColor, QPainter, QPen, QPixmap
from PyQt6.QtWidgets import QSizePolicy, QWidget

from backend.utils.geometry import DisplayRect, map_box, scale_for
from frontend.widgets import style


class SplitView(QWidget):
    """Paints a pixmap scaled to fit and the current mask's box mapped onto it.

    The box rectangle is derived from the painted image size on every paint, so a
    resize or a new pixmap always repositions it.
    """

    def __init__(self, placeholder: str = "", parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._pixmap: Optional[QPixmap] = None
        self._bbox: Any = None
        self._placeholder = placeholder
        self.setMinimumSize(QSize(160, 120))
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self.setStyleSheet(style.image_frame_style())

    def set_placeholder(self, text: str) -> None:
        self._pixmap = None
        self._placeholder = text
        self.update()

    def set_image_data(self, data: bytes) -> bool:
        pixmap = QPixmap()
        if not pixmap.loadFromData(data):
            self.set_placeholder("Unreadable image")
            return False
        self._pixmap = pixmap
        self.update()
        return True

    def has_image(self) -> bool:
        return self._pixmap is not None and not self._pixmap.isNull()

    def set_bbox(self, bbox: Any) -> None:
        self._bbox = bbox
        self.update()

    def image_rect(self) -> Optional[QRect]:
        """Area the pixmap occupies inside the widget, centred and aspect-preserving."""
        if not self.has_image():
            return None
        size = self._pixmap.size()
        size.scale(self.size(), Qt.AspectRatioMode.KeepAspectRatio)
        left = (self.width() - size.width()) // 2
        top = (self.height() - size.height()) // 2
        return QRect(left, top, size.width(), size.height())

    def display_rect(self) -> Optional[DisplayRect]:
        target = self.image_rect()
        if target is None:
            return None
        scale = scale_for(
            (self._pixmap.width(), self._pixmap.height()),
            (target.width(), target.height()),
        )
        rect = map_box(self._bbox, scale)
        if rect is None:
            return None
        return rect.translated(target.left(), target.top())

    def resizeEvent(self, event):  # type: ignore[override]
        super().resizeEvent(event)
        self.update()

    def paintEvent(self, event):  # type: ignore[override]
        painter = QPainter(self)
        try:
            painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
            target = self.image_rect()
            if target is None:
                painter.drawText(self.rect(), Qt.AlignmentFlag.AlignCenter, self._placeholder)
                return
            painter.drawPixmap(target, self._pixmap)
            rect = self.display_rect()
            if rect is not None:
                pen = QPen(QColor(style.BBOX_COLOR))
                pen.setWidth(style.BBOX_WIDTH)
                painter.setPen(pen)
                painter.setBrush(Qt.BrushStyle.NoBrush)
                painter.drawRect(QRectF(*rect.as_tuple()))
        finally:
            painter.end()
