"""Tests for normalizing Qt device events into PointerEvent."""

import pytest
from PyQt6.QtCore import QEvent, QPointF, Qt
from PyQt6.QtGui import QEventPoint, QMouseEvent, QPointingDevice, QTouchEvent

from fogmap.pointer import PointerPhase, from_mouse_event, from_touch_event

pytestmark = pytest.mark.usefixtures("qapp")

NO_MODS = Qt.KeyboardModifier.NoModifier


def mouse(kind, button=Qt.MouseButton.LeftButton, buttons=None, mods=NO_MODS, pos=(12.0, 34.0)):
    p = QPointF(*pos)
    return QMouseEvent(kind, p, p, button, buttons if buttons is not None else button, mods)


class TestMouse:
    def test_press_is_down(self):
        ev = from_mouse_event(mouse(QEvent.Type.MouseButtonPress))
        assert ev.phase is PointerPhase.DOWN
        assert (ev.position.x(), ev.position.y()) == (12.0, 34.0)
        assert ev.is_multi_touch is False
        assert ev.erase_requested is False

    def test_move_and_release(self):
        assert from_mouse_event(mouse(QEvent.Type.MouseMove, Qt.MouseButton.NoButton,
                                      Qt.MouseButton.LeftButton)).phase is PointerPhase.MOVE
        assert from_mouse_event(mouse(QEvent.Type.MouseButtonRelease, buttons=Qt.MouseButton.NoButton)).phase is PointerPhase.UP

    def test_right_button_requests_erase(self):
        ev = from_mouse_event(mouse(QEvent.Type.MouseButtonPress, Qt.MouseButton.RightButton))
        assert ev.erase_requested is True

    def test_shift_requests_erase(self):
        ev = from_mouse_event(mouse(QEvent.Type.MouseButtonPress, mods=Qt.KeyboardModifier.ShiftModifier))
        assert ev.erase_requested is True

    def test_double_click_is_down(self):
        ev = from_mouse_event(mouse(QEvent.Type.MouseButtonDblClick))
        assert ev.phase is PointerPhase.DOWN
        assert ev.erase_requested is False

    def test_other_mouse_events_are_ignored(self):
        assert from_mouse_event(mouse(QEvent.Type.NonClientAreaMouseButtonPress)) is None


class TestTouch:
    def _touch(self, kind, n):
        dev = QPointingDevice.primaryPointingDevice()
        pts = [QEventPoint(i, QEventPoint.State.Pressed, QPointF(10.0 * i, 5.0), QPointF(10.0 * i, 5.0)) for i in range(n)]
        return QTouchEvent(kind, dev, NO_MODS, pts)

    def test_single_finger(self):
        ev = from_touch_event(self._touch(QEvent.Type.TouchBegin, 1))
        assert ev.phase is PointerPhase.DOWN
        assert ev.is_multi_touch is False

    def test_second_finger_is_multi_touch(self):
        ev = from_touch_event(self._touch(QEvent.Type.TouchBegin, 2))
        assert ev.is_multi_touch is True

    def test_cancel_without_points(self):
        ev = from_touch_event(self._touch(QEvent.Type.TouchCancel, 0))
        assert ev.phase is PointerPhase.CANCEL
        assert (ev.position.x(), ev.position.y()) == (0.0, 0.0)
