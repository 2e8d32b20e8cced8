from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from PyQt6.QtCore import QPointF, Qt
from PyQt6.QtGui import QBrush, QColor, QImage, QPainter

from .strokes import FogStroke
from .transform import CoordinateTransform, ViewportParams


@dataclass(frozen=True)
class FogStyle:
    color: tuple[int, int, int] = (0, 0, 0)
    alpha: int = 140  # ~55% veil

    def qcolor(self) -> QColor:
        r, g, b = self.color
        return QColor(int(r), int(g), int(b), max(0, min(255, int(self.alpha))))


def render_frame(strokes: Sequence[FogStroke], params: ViewportParams, style: FogStyle = FogStyle()) -> QImage:
    """Replay ``strokes`` over a full veil and return the overlay image.

    Reveal stamps cut transparent holes, erase stamps repaint the veil
    exactly (Source composition, so overlapping erases never darken past the
    veil alpha). Antialiasing stays off: the same inputs always give the
    same pixels.
    """
    w, h = int(params.width), int(params.height)
    if w <= 0 or h <= 0:
        return QImage()

    img = QImage(w, h, QImage.Format.Format_ARGB32_Premultiplied)
    img.fill(Qt.GlobalColor.transparent)

    veil = style.qcolor()
    xf = CoordinateTransform(params)

    p = QPainter(img)
    try:
        p.setRenderHint(QPainter.RenderHint.Antialiasing, False)
        p.setCompositionMode(QPainter.CompositionMode.CompositionMode_Source)
        p.fillRect(0, 0, w, h, veil)

        p.setPen(Qt.PenStyle.NoPen)
        veil_brush = QBrush(veil)
        clear_brush = QBrush(QColor(0, 0, 0, 255))
        for s in strokes:
            c = xf.to_viewport_space(QPointF(s.x, s.y))
            r = xf.radius_to_viewport(s.radius)
            if s.erase:
                p.setCompositionMode(QPainter.CompositionMode.CompositionMode_Source)
                p.setBrush(veil_brush)
            else:
                p.setCompositionMode(QPainter.CompositionMode.CompositionMode_Clear)
                p.setBrush(clear_brush)
            p.drawEllipse(c, r, r)
    finally:
        p.end()
    return img


def is_revealed(strokes: Sequence[FogStroke], image_point: QPointF) -> bool:
    """True when the last stroke covering ``image_point`` is a reveal."""
    x, y = float(image_point.x()), float(image_point.y())
    for s in reversed(strokes):
        if s.covers(x, y):
            return not s.erase
    return False


class FogRenderer:
    """Caches the last rendered frame; a frame is reused while both the
    stroke snapshot and the viewport are unchanged."""

    def __init__(self, style: FogStyle = FogStyle()):
        self.style = style
        self._frame: QImage | None = None
        self._strokes: tuple[FogStroke, ...] | None = None
        self._params: ViewportParams | None = None

    def set_style(self, style: FogStyle) -> None:
        if style != self.style:
            self.style = style
            self.invalidate()

    def invalidate(self) -> None:
        self._frame = None
        self._strokes = None
        self._params = None

    def frame(self, strokes: tuple[FogStroke, ...], params: ViewportParams) -> QImage:
        if self._frame is None or strokes is not self._strokes or params != self._params:
            self._frame = render_frame(strokes, params, self.style)
            self._strokes = strokes
            self._params = params
        return self._frame
