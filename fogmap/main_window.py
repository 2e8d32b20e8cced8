from __future__ import annotations

from pathlib import Path

import structlog
from PyQt6.QtCore import QSettings, Qt
from PyQt6.QtGui import QGuiApplication, QKeySequence, QShortcut
from PyQt6.QtWidgets import (
    QFrame, QHBoxLayout, QLabel, QLineEdit, QListWidget, QListWidgetItem,
    QMainWindow, QPushButton, QSlider, QTextBrowser, QVBoxLayout, QWidget,
)

from . import __version__
from .catalog import Catalog, POI
from .fog_overlay import FogOverlay
from .map_loader import LoadedMap
from .map_view import MapView
from .mode import ModeController
from .persistence import FogPersistence
from .settings import FogSettings
from .sheet import poi_link, sheet_html
from .storage import KeyValueStorage

log = structlog.get_logger(__name__)

HELP_TEXT = (
    "GM Mode (G): toggle fog editing\n"
    "Left drag: reveal  |  Right drag or Shift+drag: hide\n"
    "Two-finger touch: hide  |  Erase brush (E): always hide\n"
    "Wheel: zoom  |  Middle drag: pan  |  Middle double click: reset view"
)


class MainWindow(QMainWindow):
    def __init__(self, catalog: Catalog, loaded: LoadedMap | None, storage: KeyValueStorage,
                 settings: QSettings, fog_settings: FogSettings | None = None):
        super().__init__()
        self.catalog = catalog
        self.loaded = loaded
        self.settings = settings
        self.fog_settings = fog_settings or FogSettings.load(settings)

        self.mode = ModeController(parent=self)
        namespace = loaded.map_id if loaded is not None else Path(catalog.map_image).name
        self.persistence = FogPersistence(storage, namespace=namespace)
        self.store = self.persistence.load()

        self.map_view = MapView()
        self.overlay = FogOverlay(
            self.map_view, self.store, self.mode, self.persistence,
            brush_radius=self.fog_settings.brush_radius, style=self.fog_settings.style(),
        )
        self._current_poi: POI | None = None

        self.statusBar().showMessage("Ready")

        # ---------- UI ----------
        root = QWidget()
        self.setCentralWidget(root)
        v = QVBoxLayout(root)

        row1 = QHBoxLayout()
        v.addLayout(row1)
        self.btn_gm = QPushButton("GM Mode: Off")
        self.btn_gm.setCheckable(True)
        self.btn_erase = QPushButton("Erase brush")
        self.btn_erase.setCheckable(True)
        self.btn_erase.setEnabled(False)
        self.btn_zoom_reset = QPushButton("Reset view")
        row1.addWidget(self.btn_gm)
        row1.addWidget(self.btn_erase)
        row1.addWidget(self.btn_zoom_reset)

        row1.addWidget(QLabel("Brush size"))
        self.size_slider = QSlider(Qt.Orientation.Horizontal)
        self.size_slider.setRange(5, 250)
        self.size_slider.setValue(int(round(self.fog_settings.brush_radius)))
        row1.addWidget(self.size_slider)
        row1.addStretch(1)

        body = QHBoxLayout()
        v.addLayout(body, 1)

        side = QVBoxLayout()
        self.search = QLineEdit()
        self.search.setPlaceholderText("Search places…")
        self.results = QListWidget()
        self.sheet = QTextBrowser()
        self.sheet.setOpenExternalLinks(False)
        sheet_btns = QHBoxLayout()
        self.btn_center = QPushButton("Center")
        self.btn_link = QPushButton("Copy link")
        sheet_btns.addWidget(self.btn_center)
        sheet_btns.addWidget(self.btn_link)
        self.sheet_box = QFrame()
        self.sheet_box.setFrameShape(QFrame.Shape.StyledPanel)
        sl = QVBoxLayout(self.sheet_box)
        sl.setContentsMargins(4, 4, 4, 4)
        sl.addWidget(self.sheet, 1)
        sl.addLayout(sheet_btns)
        self.sheet_box.setVisible(False)

        side.addWidget(self.search)
        side.addWidget(self.results, 1)
        side.addWidget(self.sheet_box, 2)
        side_w = QWidget()
        side_w.setLayout(side)
        side_w.setFixedWidth(300)
        body.addWidget(side_w)
        body.addWidget(self.map_view, 1)

        # ---------- Signals ----------
        self.btn_gm.toggled.connect(self.mode.set_editing)
        self.mode.editingChanged.connect(self._on_editing_changed)
        self.btn_erase.toggled.connect(self.on_erase_toggled)
        self.btn_zoom_reset.clicked.connect(self.map_view.reset_view)
        self.size_slider.valueChanged.connect(self.on_size)

        self.search.textChanged.connect(self.refresh_results)
        self.results.itemActivated.connect(self._on_result_activated)
        self.results.itemClicked.connect(self._on_result_activated)
        self.map_view.poiClicked.connect(self.open_poi)
        self.map_view.backgroundClicked.connect(self.close_sheet)
        self.btn_center.clicked.connect(self.center_current)
        self.btn_link.clicked.connect(self.copy_link)

        self.overlay.pipeline.gestureFinished.connect(self._on_gesture_finished)

        QShortcut(QKeySequence("G"), self, activated=self.mode.toggle)
        QShortcut(QKeySequence("E"), self, activated=self.btn_erase.toggle)

        self.map_view.set_map(loaded.qimage if loaded is not None else None)
        self.map_view.set_pois(catalog.pois)
        self.refresh_results()

        self.resize(1340, 920)
        self.setWindowTitle(f"FogMap {__version__}")
        self.statusBar().showMessage(f"{len(self.store)} fog strokes loaded  |  {HELP_TEXT.splitlines()[0]}", 4000)

    # ---------- Fog ----------

    def _on_editing_changed(self, editing: bool):
        if self.btn_gm.isChecked() != editing:
            self.btn_gm.setChecked(editing)
        self.btn_gm.setText(f"GM Mode: {'On' if editing else 'Off'}")
        self.btn_erase.setEnabled(editing)
        self.statusBar().showMessage("Fog editing enabled" if editing else "Fog locked", 2000)

    def on_erase_toggled(self, enabled: bool):
        self.overlay.pipeline.sticky_erase = bool(enabled)
        self.overlay.update()

    def on_size(self, val: int):
        self.overlay.pipeline.set_brush_radius(val)
        self.fog_settings.brush_radius = float(val)
        self.fog_settings.save(self.settings)
        self.overlay.update()

    def _on_gesture_finished(self, stamps: int, saved: bool):
        if not saved:
            self.statusBar().showMessage(f"Fog not saved ({self.persistence.last_error}); changes kept for this session", 5000)

    # ---------- POIs ----------

    def refresh_results(self, *_):
        self.results.clear()
        for p in self.catalog.search(self.search.text()):
            item = QListWidgetItem(f"{p.emoji}  {p.name}")
            item.setData(Qt.ItemDataRole.UserRole, p.id)
            self.results.addItem(item)

    def _on_result_activated(self, item: QListWidgetItem):
        pid = item.data(Qt.ItemDataRole.UserRole)
        if pid:
            self.open_poi(str(pid), center=True)

    def open_poi(self, poi_id: str, center: bool = False) -> bool:
        p = self.catalog.find(poi_id)
        if p is None:
            log.info("Unknown place requested", poi=poi_id)
            self.statusBar().showMessage(f"Unknown place: {poi_id}", 3000)
            return False
        self._current_poi = p
        self.sheet.setHtml(sheet_html(p))
        self.sheet_box.setVisible(True)
        if center:
            self.center_current()
        return True

    def close_sheet(self):
        self._current_poi = None
        self.sheet_box.setVisible(False)

    def center_current(self):
        if self._current_poi is None:
            return
        # at least 1:1 map pixels, never zoom out
        self.map_view.center_on(self._current_poi.pos, max(self.map_view.zoom(), self.map_view.native_zoom()))

    def copy_link(self):
        if self._current_poi is None:
            return
        cb = QGuiApplication.clipboard()
        if cb is None:
            return
        cb.setText(poi_link(self._current_poi.id))
        self.statusBar().showMessage("Copied!", 1200)

    def closeEvent(self, e):
        # an open gesture still gets its save
        self.overlay.pipeline.finish()
        super().closeEvent(e)
