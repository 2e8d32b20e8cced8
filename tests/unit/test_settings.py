"""Tests for persisted fog preferences."""

from fogmap.fog_renderer import FogStyle
from fogmap.settings import FogSettings


class TestFogSettings:
    def test_defaults(self, ini_settings):
        s = FogSettings.load(ini_settings)
        assert s == FogSettings()
        assert s.style() == FogStyle(color=(0, 0, 0), alpha=140)

    def test_round_trip(self, ini_settings):
        FogSettings(brush_radius=64.0, veil_color=(10, 20, 30), veil_alpha=200, storage_dir="/tmp/fog").save(ini_settings)
        s = FogSettings.load(ini_settings)
        assert s.brush_radius == 64.0
        assert s.veil_color == (10, 20, 30)
        assert s.veil_alpha == 200
        assert s.storage_dir == "/tmp/fog"

    def test_out_of_range_values_are_clamped(self, ini_settings):
        ini_settings.setValue("fog/veil_alpha", 999)
        ini_settings.setValue("fog/brush_radius", -5)
        s = FogSettings.load(ini_settings)
        assert s.veil_alpha == 255
        assert s.brush_radius == 1.0

    def test_garbage_falls_back_to_defaults(self, ini_settings):
        ini_settings.setValue("fog/brush_radius", "huge")
        ini_settings.setValue("fog/veil_color", ["red", "green", "blue"])
        s = FogSettings.load(ini_settings)
        assert s.brush_radius == 40.0
        assert s.veil_color == (0, 0, 0)
