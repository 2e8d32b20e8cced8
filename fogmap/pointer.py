"""Normalizes Qt mouse and touch events into one PointerEvent shape."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from PyQt6.QtCore import QEvent, QPointF, Qt
from PyQt6.QtGui import QMouseEvent, QTouchEvent


class PointerPhase(Enum):
    DOWN = "down"
    MOVE = "move"
    UP = "up"
    CANCEL = "cancel"


@dataclass(frozen=True)
class PointerEvent:
    phase: PointerPhase
    position: QPointF           # viewport (widget) coords
    is_multi_touch: bool = False
    erase_requested: bool = False


_MOUSE_PHASES = {
    QEvent.Type.MouseButtonPress: PointerPhase.DOWN,
    # second press of a double click
    QEvent.Type.MouseButtonDblClick: PointerPhase.DOWN,
    QEvent.Type.MouseMove: PointerPhase.MOVE,
    QEvent.Type.MouseButtonRelease: PointerPhase.UP,
}

_TOUCH_PHASES = {
    QEvent.Type.TouchBegin: PointerPhase.DOWN,
    QEvent.Type.TouchUpdate: PointerPhase.MOVE,
    QEvent.Type.TouchEnd: PointerPhase.UP,
    QEvent.Type.TouchCancel: PointerPhase.CANCEL,
}


def from_mouse_event(e: QMouseEvent) -> PointerEvent | None:
    phase = _MOUSE_PHASES.get(e.type())
    if phase is None:
        return None
    # RMB or Shift selects the erase brush
    rmb = e.button() == Qt.MouseButton.RightButton or bool(e.buttons() & Qt.MouseButton.RightButton)
    shift = bool(e.modifiers() & Qt.KeyboardModifier.ShiftModifier)
    return PointerEvent(phase, QPointF(e.position()), False, rmb or shift)


def from_touch_event(e: QTouchEvent) -> PointerEvent | None:
    phase = _TOUCH_PHASES.get(e.type())
    if phase is None:
        return None
    pts = e.points()
    pos = QPointF(pts[0].position()) if pts else QPointF(0.0, 0.0)
    return PointerEvent(phase, pos, len(pts) > 1, False)
