from __future__ import annotations

from PyQt6.QtCore import QPoint, QPointF, QRectF, Qt, pyqtSignal
from PyQt6.QtGui import QColor, QFont, QImage, QPainter, QPen
from PyQt6.QtWidgets import QToolTip, QWidget

from .catalog import POI
from .transform import CoordinateTransform, ViewportParams

MARKER_PX = 32
CLICK_SLOP_PX = 4


class MapView(QWidget):
    """Pan/zoom view of the background map with POI markers.

    Image coordinates are map pixels; ``viewportChanged`` fires after every
    pan, zoom or resize with the new ViewportParams.
    """

    viewportChanged = pyqtSignal(object)  # ViewportParams
    poiClicked = pyqtSignal(str)
    backgroundClicked = pyqtSignal()

    def __init__(self, parent: QWidget | None = None):
        super().__init__(parent)
        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)

        self._map: QImage | None = None
        self._pois: list[POI] = []

        self._zoom = 1.0
        self._zoom_min = 0.25
        self._zoom_max = 8.0
        self._view_center = QPointF(0.0, 0.0)   # map coords

        # panning state (LMB/MMB drag)
        self._panning = False
        self._pan_last_pos: QPoint | None = None
        self._press_pos: QPoint | None = None

    # ---------------- Public API ----------------

    def set_map(self, map_img: QImage | None) -> None:
        self._map = map_img
        self.reset_view()

    def set_pois(self, pois: list[POI]) -> None:
        self._pois = list(pois)
        self.update()

    def params(self) -> ViewportParams:
        return ViewportParams.from_view(self._view_center, self._zoom, self._fit_scale(), self.width(), self.height())

    def transform(self) -> CoordinateTransform:
        return CoordinateTransform(self.params())

    def to_image(self, pt: QPointF) -> QPointF:
        return self.transform().to_image_space(QPointF(pt))

    def to_widget(self, pt: QPointF) -> QPointF:
        return self.transform().to_viewport_space(QPointF(pt))

    def zoom(self) -> float:
        return self._zoom

    def native_zoom(self) -> float:
        """Zoom at which one map pixel covers one widget pixel."""
        return 1.0 / self._fit_scale()

    def reset_view(self) -> None:
        self._zoom = 1.0
        if self._map:
            self._view_center = QPointF(self._map.width() / 2.0, self._map.height() / 2.0)
        else:
            self._view_center = QPointF(0.0, 0.0)
        self._changed()

    def center_on(self, pt: QPointF, zoom: float | None = None) -> None:
        if zoom is not None:
            self._zoom = max(self._zoom_min, min(self._zoom_max, float(zoom)))
        self._view_center = QPointF(float(pt.x()), float(pt.y()))
        self._changed()

    def zoom_at(self, pos: QPointF, factor: float) -> None:
        """Zoom by ``factor`` keeping the map point under ``pos`` fixed."""
        new_zoom = max(self._zoom_min, min(self._zoom_max, self._zoom * factor))
        if abs(new_zoom - self._zoom) < 1e-9:
            return
        before = self.to_image(pos)
        self._zoom = new_zoom
        after = self.to_image(pos)
        self._view_center = QPointF(
            self._view_center.x() + (before.x() - after.x()),
            self._view_center.y() + (before.y() - after.y()),
        )
        self._changed()

    def poi_at(self, pos: QPointF) -> POI | None:
        half = MARKER_PX / 2.0
        xf = self.transform()
        # topmost (last drawn) marker wins
        for p in reversed(self._pois):
            w = xf.to_viewport_space(p.pos)
            if abs(w.x() - pos.x()) <= half and abs(w.y() - pos.y()) <= half:
                return p
        return None

    # ---------------- Internal helpers ----------------

    def _fit_scale(self) -> float:
        if not self._map or self.width() <= 0 or self.height() <= 0:
            return 1.0
        mw, mh = self._map.width(), self._map.height()
        return min(self.width() / mw, self.height() / mh) if mw and mh else 1.0

    def _changed(self) -> None:
        self.update()
        self.viewportChanged.emit(self.params())

    # ---------------- Qt events ----------------

    def resizeEvent(self, e):
        super().resizeEvent(e)
        self.viewportChanged.emit(self.params())

    def wheelEvent(self, e):
        delta = e.angleDelta().y()
        if delta == 0:
            return
        self.zoom_at(e.position(), 1.15 if delta > 0 else (1.0 / 1.15))
        e.accept()

    def mouseDoubleClickEvent(self, e):
        if e.button() == Qt.MouseButton.MiddleButton:
            self.reset_view()
            e.accept()
            return
        super().mouseDoubleClickEvent(e)

    def mousePressEvent(self, e):
        if e.button() in (Qt.MouseButton.LeftButton, Qt.MouseButton.MiddleButton):
            self._panning = True
            self._pan_last_pos = e.position().toPoint()
            self._press_pos = self._pan_last_pos
            e.accept()
            return
        super().mousePressEvent(e)

    def mouseMoveEvent(self, e):
        pos = e.position().toPoint()
        if self._panning and self._pan_last_pos is not None:
            dp = pos - self._pan_last_pos
            self._pan_last_pos = pos
            scale = self.params().scale
            # drag right => move view center left (natural pan)
            self._view_center = QPointF(self._view_center.x() - dp.x() * scale, self._view_center.y() - dp.y() * scale)
            self._changed()
            e.accept()
            return

        hit = self.poi_at(e.position())
        if hit is not None:
            QToolTip.showText(e.globalPosition().toPoint(), hit.name, self)
            self.setCursor(Qt.CursorShape.PointingHandCursor)
        else:
            QToolTip.hideText()
            self.unsetCursor()

    def mouseReleaseEvent(self, e):
        if not self._panning:
            super().mouseReleaseEvent(e)
            return
        self._panning = False
        pos = e.position().toPoint()
        press = self._press_pos
        self._pan_last_pos = None
        self._press_pos = None
        if e.button() == Qt.MouseButton.LeftButton and press is not None \
                and (pos - press).manhattanLength() <= CLICK_SLOP_PX:
            hit = self.poi_at(e.position())
            if hit is not None:
                self.poiClicked.emit(hit.id)
            else:
                self.backgroundClicked.emit()
        e.accept()

    def paintEvent(self, _e):
        p = QPainter(self)
        p.fillRect(self.rect(), QColor(24, 20, 16))
        if not self._map:
            p.end()
            return

        xf = self.transform()
        img_rect = QRectF(0.0, 0.0, float(self._map.width()), float(self._map.height()))
        src = self.params().visible_rect().intersected(img_rect)
        if src.width() > 0 and src.height() > 0:
            tl = xf.to_viewport_space(src.topLeft())
            br = xf.to_viewport_space(src.bottomRight())
            p.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform, True)
            p.drawImage(QRectF(tl, br), self._map, src)

        self._draw_markers(p, xf)
        p.end()

    def _draw_markers(self, p: QPainter, xf: CoordinateTransform):
        if not self._pois:
            return
        p.save()
        p.setRenderHint(QPainter.RenderHint.Antialiasing, True)
        font = QFont(p.font())
        font.setPixelSize(int(MARKER_PX * 0.55))
        p.setFont(font)
        pen = QPen(QColor(60, 40, 20, 230))
        pen.setWidth(2)
        half = MARKER_PX / 2.0
        for poi in self._pois:
            c = xf.to_viewport_space(poi.pos)
            chip = QRectF(c.x() - half, c.y() - half, MARKER_PX, MARKER_PX)
            if not chip.intersects(QRectF(self.rect())):
                continue
            p.setPen(pen)
            p.setBrush(QColor(245, 230, 200, 235))
            p.drawEllipse(chip)
            p.drawText(chip, Qt.AlignmentFlag.AlignCenter, poi.emoji)
        p.restore()
