"""
Scout Panel

Displays the scout image with the planning overlay (z-lines and FOV box) and
forwards pointer events to the DragController. The widget only draws what
the PlanningSession holds; all geometry decisions live in the planning
package.
"""

from typing import Optional

import numpy as np
from PySide6.QtWidgets import QWidget, QVBoxLayout, QGroupBox
from PySide6.QtCore import Qt, QRectF, QPointF
from PySide6.QtGui import QColor, QFont, QImage, QPainter, QPen

from core.base import ScoutImage
from planning.drag import DisplayRect, DragController, DragHandle
from planning.session import PlanningSession
from ..style import COLORS


_CURSORS = {
    DragHandle.START_LINE: Qt.SizeVerCursor,
    DragHandle.END_LINE: Qt.SizeVerCursor,
    DragHandle.FOV_TOP: Qt.SizeVerCursor,
    DragHandle.FOV_BOTTOM: Qt.SizeVerCursor,
    DragHandle.FOV_LEFT: Qt.SizeHorCursor,
    DragHandle.FOV_RIGHT: Qt.SizeHorCursor,
    DragHandle.FOV_MOVE: Qt.SizeAllCursor,
}


def array_to_qimage(pixels: np.ndarray) -> QImage:
    """Convert a uint8 (height, width) array to an owned grayscale QImage."""
    data = np.ascontiguousarray(pixels, dtype=np.uint8)
    height, width = data.shape
    image = QImage(data.data, width, height, data.strides[0], QImage.Format_Grayscale8)
    # Copy so the QImage does not reference the numpy buffer
    return image.copy()


class ScoutView(QWidget):
    """Scout image view with an interactive planning overlay."""

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._image: Optional[QImage] = None
        self._scout: Optional[ScoutImage] = None
        self._session: Optional[PlanningSession] = None
        self._drag: Optional[DragController] = None
        self._planning_visible = False

        self.setMouseTracking(True)
        self.setMinimumSize(400, 400)

    def set_session(self, session: PlanningSession, drag: DragController) -> None:
        """Attach the planning session and controller of the current case."""
        if self._session is not None:
            try:
                self._session.changed.disconnect(self.update)
            except (RuntimeError, TypeError):
                pass
        self._session = session
        self._drag = drag
        session.changed.connect(self.update)
        self.update()

    def set_scout(self, scout: Optional[ScoutImage]) -> None:
        """Show a scout image, or clear the view."""
        self._scout = scout
        self._image = array_to_qimage(scout.to_display()) if scout is not None else None
        self.update()

    def set_planning_visible(self, visible: bool) -> None:
        """Show the overlay only while planning is active."""
        if visible != self._planning_visible:
            self._planning_visible = visible
            if not visible:
                self.unsetCursor()
            self.update()

    def display_rect(self) -> DisplayRect:
        """
        Rectangle the scout occupies in the widget (aspect preserved, centered).
        """
        if self._image is None:
            return DisplayRect(0, 0, 0, 0)
        img_w, img_h = self._image.width(), self._image.height()
        scale = min(self.width() / img_w, self.height() / img_h)
        width, height = img_w * scale, img_h * scale
        return DisplayRect(
            left=(self.width() - width) / 2,
            top=(self.height() - height) / 2,
            width=width,
            height=height,
        )

    # ------------------------------------------------------------------
    # Pointer events
    # ------------------------------------------------------------------

    def mousePressEvent(self, event):
        if self._drag is None or event.button() != Qt.LeftButton:
            return super().mousePressEvent(event)
        pos = event.position()
        handle = self._drag.hit_test(pos.x(), pos.y(), self.display_rect())
        if handle is not None:
            self._drag.pointer_down(handle, pos.x(), pos.y())

    def mouseMoveEvent(self, event):
        if self._drag is None:
            return super().mouseMoveEvent(event)
        pos = event.position()
        rect = self.display_rect()
        if self._drag.is_dragging:
            self._drag.pointer_move(pos.x(), pos.y(), rect)
        elif self._planning_visible:
            handle = self._drag.hit_test(pos.x(), pos.y(), rect)
            if handle is None:
                self.unsetCursor()
            else:
                self.setCursor(_CURSORS[handle])

    def mouseReleaseEvent(self, event):
        if self._drag is not None and event.button() == Qt.LeftButton:
            self._drag.pointer_up()
        else:
            super().mouseReleaseEvent(event)

    def leaveEvent(self, event):
        if self._drag is not None:
            self._drag.pointer_leave()
        super().leaveEvent(event)

    # ------------------------------------------------------------------
    # Painting
    # ------------------------------------------------------------------

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.fillRect(self.rect(), QColor("#000000"))

        if self._image is None:
            painter.setPen(QColor(COLORS["text_secondary"]))
            painter.drawText(self.rect(), Qt.AlignCenter, 'Click "Scout Scan" to load')
            painter.end()
            return

        rect = self.display_rect()
        target = QRectF(rect.left, rect.top, rect.width, rect.height)
        painter.drawImage(target, self._image)

        session = self._session
        if self._planning_visible and session is not None and session.has_frame:
            self._paint_overlay(painter, rect, session)

        if self._scout is not None and self._scout.has_z_calibration:
            painter.setPen(QColor("#FFFFFF"))
            painter.drawText(
                QPointF(rect.left + 8, rect.top + rect.height - 8),
                f"Z: {self._scout.z_min_mm:.1f} → {self._scout.z_max_mm:.1f} mm"
            )
        painter.end()

    def _paint_overlay(self, painter: QPainter, rect: DisplayRect, session: PlanningSession) -> None:
        frame = session.frame
        sx = rect.width / frame.width
        sy = rect.height / frame.height
        lines, fov = session.lines, session.fov

        def to_x(px: float) -> float:
            return rect.left + px * sx

        def to_y(py: float) -> float:
            return rect.top + py * sy

        painter.setRenderHint(QPainter.Antialiasing)
        label_font = QFont()
        label_font.setPointSize(8)
        painter.setFont(label_font)

        # FOV box
        fov_color = QColor(COLORS["fov"])
        fill = QColor(fov_color)
        fill.setAlpha(26)
        box = QRectF(QPointF(to_x(fov.x_min), to_y(fov.y_min)),
                     QPointF(to_x(fov.x_max), to_y(fov.y_max)))
        painter.setPen(QPen(fov_color, 2))
        painter.fillRect(box, fill)
        painter.drawRect(box)
        painter.drawText(QPointF(box.center().x() - 10, box.top() - 6), "FOV")

        # Edge grips
        painter.setBrush(fov_color)
        cx, cy = box.center().x(), box.center().y()
        for grip in (
            QRectF(box.left() - 3, cy - 16, 6, 32),
            QRectF(box.right() - 3, cy - 16, 6, 32),
            QRectF(cx - 16, box.top() - 3, 32, 6),
            QRectF(cx - 16, box.bottom() - 3, 32, 6),
        ):
            painter.drawRect(grip)
        painter.setBrush(Qt.NoBrush)

        # Z-range lines
        line_color = QColor(COLORS["planning_line"])
        painter.setPen(QPen(line_color, 2))
        for y, label, offset in ((lines.start_y, "START", -6), (lines.end_y, "END", 14)):
            dy = to_y(y)
            painter.drawLine(QPointF(rect.left, dy), QPointF(rect.left + rect.width, dy))
            painter.drawText(QPointF(rect.left + 8, dy + offset), label)

        # Planning mode badge
        painter.setPen(QColor("#FFFFFF"))
        painter.drawText(
            QRectF(rect.left, rect.top + 4, rect.width - 8, 20),
            Qt.AlignRight | Qt.AlignTop,
            "Planning Mode"
        )


class ScoutPanel(QWidget):
    """Group box around the scout view."""

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        group = QGroupBox("Scout")
        group_layout = QVBoxLayout(group)
        self.view = ScoutView()
        group_layout.addWidget(self.view)
        layout.addWidget(group)
