"""Smoke tests for the assembled window (no map asset on disk)."""

import pytest
from PyQt6.QtGui import QGuiApplication, QImage

from fogmap.catalog import load_catalog
from fogmap.main_window import MainWindow
from fogmap.persistence import encode_strokes
from fogmap.pointer import PointerEvent, PointerPhase
from fogmap.storage import MemoryStorage
from fogmap.strokes import FogStroke

pytestmark = pytest.mark.usefixtures("qapp")


@pytest.fixture
def window(catalog_file, ini_settings):
    storage = MemoryStorage()
    storage.blobs["fog_v1:map.png"] = encode_strokes([FogStroke(5, 5, 10)])
    w = MainWindow(load_catalog(catalog_file), None, storage, ini_settings)
    yield w, storage
    w.close()
    w.deleteLater()


class TestMainWindow:
    def test_saved_fog_is_restored(self, window):
        w, _storage = window
        assert w.store.all() == (FogStroke(5.0, 5.0, 10.0, False),)

    def test_gm_button_drives_mode(self, window):
        w, _storage = window
        assert w.mode.is_editing() is False
        w.btn_gm.setChecked(True)
        assert w.mode.is_editing() is True
        assert w.btn_gm.text() == "GM Mode: On"
        assert w.btn_erase.isEnabled()
        w.mode.toggle()
        assert w.btn_gm.isChecked() is False
        assert w.btn_gm.text() == "GM Mode: Off"

    def test_erase_toggle_is_sticky(self, window):
        w, _storage = window
        w.btn_gm.setChecked(True)
        w.btn_erase.setChecked(True)
        assert w.overlay.pipeline.sticky_erase is True

    def test_gesture_saves_under_map_namespace(self, window):
        w, storage = window
        w.mode.set_editing(True)
        pipe = w.overlay.pipeline
        pipe.handle(PointerEvent(PointerPhase.DOWN, w.map_view.to_widget(w.catalog.pois[0].pos)))
        pipe.handle(PointerEvent(PointerPhase.UP, w.map_view.to_widget(w.catalog.pois[0].pos)))
        assert len(w.store) == 2
        assert storage.blobs["fog_v1:map.png"].count(b'"erase"') == 2

    def test_failed_save_is_reported(self, window):
        w, storage = window
        storage.max_bytes = 1
        w.mode.set_editing(True)
        pipe = w.overlay.pipeline
        pipe.handle(PointerEvent(PointerPhase.DOWN, w.map_view.to_widget(w.catalog.pois[0].pos)))
        pipe.handle(PointerEvent(PointerPhase.UP, w.map_view.to_widget(w.catalog.pois[0].pos)))
        assert "Fog not saved" in w.statusBar().currentMessage()
        assert len(w.store) == 2

    def test_brush_slider_updates_pipeline_and_settings(self, window, ini_settings):
        w, _storage = window
        w.size_slider.setValue(90)
        assert w.overlay.pipeline.brush_radius == 90.0
        assert float(ini_settings.value("fog/brush_radius")) == 90.0

    def test_open_poi_shows_sheet(self, window):
        w, _storage = window
        assert w.open_poi("oakhaven") is True
        assert not w.sheet_box.isHidden()
        assert "Oakhaven" in w.sheet.toHtml()
        w.close_sheet()
        assert w.sheet_box.isHidden()

    def test_open_unknown_poi(self, window):
        w, _storage = window
        assert w.open_poi("atlantis") is False
        assert w.sheet_box.isHidden()

    def test_search_filters_results(self, window):
        w, _storage = window
        assert w.results.count() == 3
        w.search.setText("goat")
        assert w.results.count() == 1

    def test_copy_link(self, window):
        w, _storage = window
        w.open_poi("barrow")
        w.copy_link()
        assert QGuiApplication.clipboard().text() == "fogmap://poi/barrow"

    def test_center_on_poi(self, window):
        w, _storage = window
        w.open_poi("barrow", center=True)
        c = w.map_view.params().visible_rect().center()
        assert (c.x(), c.y()) == pytest.approx((1500.0, 200.0))
        assert w.map_view.zoom() >= 1.0

    def test_center_on_poi_zooms_to_map_pixels(self, window):
        w, _storage = window
        w.map_view.resize(400, 200)
        w.map_view.set_map(QImage(2000, 1000, QImage.Format.Format_RGB32))
        assert w.map_view.params().scale == pytest.approx(5.0)
        w.open_poi("oakhaven", center=True)
        assert w.map_view.params().scale == pytest.approx(1.0)
        # already closer than 1:1, centring keeps the zoom
        w.map_view.center_on(w.catalog.pois[0].pos, 7.0)
        w.open_poi("barrow", center=True)
        assert w.map_view.zoom() == pytest.approx(7.0)
