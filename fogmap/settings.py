from __future__ import annotations

from dataclasses import dataclass

from PyQt6.QtCore import QSettings

from .fog_renderer import FogStyle

ORG = "FogMap"
APP = "FogMap"


def app_settings() -> QSettings:
    return QSettings(ORG, APP)


def _num(settings: QSettings, key: str, default, cast, lo, hi):
    try:
        v = cast(settings.value(key, default))
    except (TypeError, ValueError):
        return default
    return max(lo, min(hi, v))


@dataclass
class FogSettings:
    brush_radius: float = 40.0          # image px
    veil_color: tuple[int, int, int] = (0, 0, 0)
    veil_alpha: int = 140
    storage_dir: str = ""               # empty => keep fog in QSettings

    @staticmethod
    def load(settings: QSettings) -> "FogSettings":
        d = FogSettings()
        col = settings.value("fog/veil_color", None)
        color = d.veil_color
        # PyQt/QSettings can return list[str], tuple or a single string here
        if isinstance(col, str):
            col = col.split(",")
        if isinstance(col, (list, tuple)) and len(col) == 3:
            try:
                color = tuple(max(0, min(255, int(c))) for c in col)
            except (TypeError, ValueError):
                color = d.veil_color
        return FogSettings(
            brush_radius=_num(settings, "fog/brush_radius", d.brush_radius, float, 1.0, 1000.0),
            veil_color=color,
            veil_alpha=_num(settings, "fog/veil_alpha", d.veil_alpha, int, 0, 255),
            storage_dir=str(settings.value("fog/storage_dir", "") or ""),
        )

    def save(self, settings: QSettings) -> None:
        settings.setValue("fog/brush_radius", float(self.brush_radius))
        settings.setValue("fog/veil_color", [int(c) for c in self.veil_color])
        settings.setValue("fog/veil_alpha", int(self.veil_alpha))
        settings.setValue("fog/storage_dir", self.storage_dir)

    def style(self) -> FogStyle:
        return FogStyle(color=self.veil_color, alpha=self.veil_alpha)
