from __future__ import annotations

from enum import Enum

import structlog
from PyQt6.QtCore import QObject, pyqtSignal

from .mode import ModeController
from .persistence import FogPersistence
from .pointer import PointerEvent, PointerPhase
from .strokes import FogStroke, StrokeStore
from .transform import CoordinateTransform, ViewportParams

log = structlog.get_logger(__name__)


class GestureState(Enum):
    IDLE = "idle"
    DRAWING = "drawing"


class InputPipeline(QObject):
    """Turns pointer gestures into fog stamps.

    IDLE -> DRAWING on pointer-down (edit mode only), a stamp per move,
    DRAWING -> IDLE on up/cancel with a single save. Reveal vs erase is
    chosen once per gesture.
    """

    strokeAdded = pyqtSignal(object)          # FogStroke
    gestureFinished = pyqtSignal(int, bool)   # stamps in gesture, saved ok

    def __init__(self, store: StrokeStore, mode: ModeController, persistence: FogPersistence,
                 brush_radius: float = 40.0, parent: QObject | None = None):
        super().__init__(parent)
        self.store = store
        self.mode = mode
        self.persistence = persistence
        self.brush_radius = float(brush_radius)
        self.sticky_erase = False

        self._transform: CoordinateTransform | None = None
        self._state = GestureState.IDLE
        self._erase = False
        self._stamps = 0

    # ---------------- Public API ----------------

    @property
    def state(self) -> GestureState:
        return self._state

    @property
    def gesture_erases(self) -> bool:
        return self._erase

    def set_viewport(self, params: ViewportParams) -> None:
        # strokes live in image space, so a mid-gesture change only affects later samples
        self._transform = CoordinateTransform(params)

    def set_brush_radius(self, radius: float) -> None:
        self.brush_radius = max(1.0, float(radius))

    def handle(self, ev: PointerEvent) -> bool:
        """Feed one normalized event; returns True when the event was consumed."""
        if ev.phase is PointerPhase.DOWN:
            return self._on_down(ev)
        if self._state is not GestureState.DRAWING:
            return False
        if ev.phase is PointerPhase.MOVE:
            self._stamp(ev)
            return True
        # UP and CANCEL both finalize
        self.finish()
        return True

    def finish(self) -> bool:
        """End the active gesture (if any) and save once. Returns the save result."""
        if self._state is not GestureState.DRAWING:
            return False
        self._state = GestureState.IDLE
        ok = self.persistence.save(self.store)
        log.debug("Gesture finished", stamps=self._stamps, erase=self._erase, saved=ok)
        self.gestureFinished.emit(self._stamps, ok)
        self._stamps = 0
        return ok

    # ---------------- Internal helpers ----------------

    def _on_down(self, ev: PointerEvent) -> bool:
        if self._state is GestureState.DRAWING:
            # duplicate device press: same gesture
            return True
        if not self.mode.is_editing() or self._transform is None:
            return False
        self._state = GestureState.DRAWING
        self._erase = bool(ev.is_multi_touch or ev.erase_requested or self.sticky_erase)
        self._stamps = 0
        self._stamp(ev)
        return True

    def _stamp(self, ev: PointerEvent) -> None:
        if self._transform is None:
            return
        ip = self._transform.to_image_space(ev.position)
        s = FogStroke(x=float(ip.x()), y=float(ip.y()), radius=self.brush_radius, erase=self._erase)
        self.store.append(s)
        self._stamps += 1
        self.strokeAdded.emit(s)
