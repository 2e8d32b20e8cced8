from __future__ import annotations

import structlog
from PyQt6.QtCore import QObject, pyqtSignal

log = structlog.get_logger(__name__)


class ModeController(QObject):
    """Session-local GM edit flag. Never persisted; off at startup."""

    editingChanged = pyqtSignal(bool)

    def __init__(self, editing: bool = False, parent: QObject | None = None):
        super().__init__(parent)
        self._editing = bool(editing)

    def is_editing(self) -> bool:
        return self._editing

    def set_editing(self, editing: bool) -> None:
        editing = bool(editing)
        if editing == self._editing:
            return
        self._editing = editing
        log.info("GM mode changed", editing=editing)
        self.editingChanged.emit(editing)

    def toggle(self) -> bool:
        self.set_editing(not self._editing)
        return self._editing
