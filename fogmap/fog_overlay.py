from __future__ import annotations

from PyQt6.QtCore import QEvent, QPoint, QPointF, Qt
from PyQt6.QtGui import QColor, QPainter, QPen
from PyQt6.QtWidgets import QWidget

from .fog_renderer import FogRenderer, FogStyle
from .input_pipeline import InputPipeline
from .map_view import MapView
from .mode import ModeController
from .persistence import FogPersistence
from .pointer import from_mouse_event, from_touch_event
from .strokes import StrokeStore
from .transform import CoordinateTransform, ViewportParams

_TOUCH_TYPES = (
    QEvent.Type.TouchBegin,
    QEvent.Type.TouchUpdate,
    QEvent.Type.TouchEnd,
    QEvent.Type.TouchCancel,
)


class FogOverlay(QWidget):
    """Fog layer stacked over a MapView.

    Always painted; only accepts pointer input while GM mode is on. Anything
    it does not consume (wheel, middle button, input outside GM mode) falls
    through to the map underneath.
    """

    def __init__(self, map_view: MapView, store: StrokeStore, mode: ModeController,
                 persistence: FogPersistence, brush_radius: float = 40.0, style: FogStyle = FogStyle()):
        super().__init__(map_view)
        self.map_view = map_view
        self.store = store
        self.mode = mode
        self.renderer = FogRenderer(style)
        self.pipeline = InputPipeline(store, mode, persistence, brush_radius, parent=self)

        self._params = map_view.params()
        self.pipeline.set_viewport(self._params)
        self.last_mouse_pos: QPoint | None = None

        self.setAttribute(Qt.WidgetAttribute.WA_AcceptTouchEvents, True)
        self.setAttribute(Qt.WidgetAttribute.WA_NoSystemBackground, True)
        self.setMouseTracking(True)
        self._apply_interactive(mode.is_editing())
        self.setGeometry(0, 0, self._params.width, self._params.height)

        map_view.viewportChanged.connect(self.on_viewport_changed)
        mode.editingChanged.connect(self._on_editing_changed)
        self.pipeline.strokeAdded.connect(lambda _s: self.update())

    # ---------------- Public API ----------------

    def params(self) -> ViewportParams:
        return self._params

    def set_style(self, style: FogStyle) -> None:
        self.renderer.set_style(style)
        self.update()

    def on_viewport_changed(self, params: ViewportParams) -> None:
        self._params = params
        self.pipeline.set_viewport(params)
        if self.width() != params.width or self.height() != params.height:
            self.setGeometry(0, 0, params.width, params.height)
        self.update()

    # ---------------- Internal helpers ----------------

    def _apply_interactive(self, editing: bool) -> None:
        # outside GM mode the map underneath receives every pointer event
        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents, not editing)
        if editing:
            self.setCursor(Qt.CursorShape.CrossCursor)
        else:
            self.unsetCursor()
            self.last_mouse_pos = None

    def _on_editing_changed(self, editing: bool) -> None:
        if not editing:
            self.pipeline.finish()
        self._apply_interactive(editing)
        self.update()

    # ---------------- Qt events ----------------

    def event(self, e):
        if e.type() in _TOUCH_TYPES:
            ev = from_touch_event(e)
            if ev is not None and self.pipeline.handle(ev):
                e.accept()
                return True
            e.ignore()
            return False
        return super().event(e)

    def _pointer(self, e) -> None:
        if e.button() == Qt.MouseButton.MiddleButton or (e.buttons() & Qt.MouseButton.MiddleButton):
            e.ignore()
            return
        ev = from_mouse_event(e)
        if ev is not None and self.pipeline.handle(ev):
            e.accept()
        else:
            e.ignore()

    def mousePressEvent(self, e):
        self._pointer(e)

    def mouseDoubleClickEvent(self, e):
        # handled as a press so the map never starts a pan under the brush
        self._pointer(e)

    def mouseMoveEvent(self, e):
        self.last_mouse_pos = e.position().toPoint()
        self._pointer(e)
        self.update()

    def mouseReleaseEvent(self, e):
        self._pointer(e)

    def wheelEvent(self, e):
        e.ignore()

    def leaveEvent(self, e):
        self.last_mouse_pos = None
        self.update()
        super().leaveEvent(e)

    def paintEvent(self, _e):
        frame = self.renderer.frame(self.store.all(), self._params)
        p = QPainter(self)
        if not frame.isNull():
            p.drawImage(0, 0, frame)

        # brush preview, sized in map pixels so it matches the stamp at any zoom
        if self.mode.is_editing() and self.last_mouse_pos is not None:
            r = CoordinateTransform(self._params).radius_to_viewport(self.pipeline.brush_radius)
            erase = self.pipeline.sticky_erase
            pen = QPen(QColor(255, 120, 120, 220) if erase else QColor(255, 255, 255, 220))
            pen.setWidth(2)
            p.setPen(pen)
            p.setBrush(Qt.BrushStyle.NoBrush)
            p.setRenderHint(QPainter.RenderHint.Antialiasing, True)
            p.drawEllipse(QPointF(self.last_mouse_pos), r, r)
        p.end()
