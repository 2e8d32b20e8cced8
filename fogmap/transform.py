from __future__ import annotations

from dataclasses import dataclass

from PyQt6.QtCore import QPointF, QRectF


@dataclass(frozen=True)
class ViewportParams:
    """Camera of the map view.

    origin_x/origin_y: image coords under the viewport's top-left pixel
    scale: image pixels per viewport pixel (1 / zoom)
    width/height: viewport size in pixels
    """
    origin_x: float
    origin_y: float
    scale: float
    width: int
    height: int

    @staticmethod
    def from_view(center: QPointF, zoom: float, fit_scale: float, width: int, height: int) -> "ViewportParams":
        """Build params for a view centred on ``center`` (image coords).

        ``fit_scale`` is the widget-px per image-px factor that fits the whole
        map at zoom 1.0; the effective zoom is ``fit_scale * zoom``.
        """
        denom = max(1e-6, float(fit_scale) * float(zoom))
        scale = 1.0 / denom
        ox = float(center.x()) - (float(width) * scale) / 2.0
        oy = float(center.y()) - (float(height) * scale) / 2.0
        return ViewportParams(ox, oy, scale, int(width), int(height))

    @property
    def zoom(self) -> float:
        return 1.0 / self.scale if self.scale else 0.0

    def visible_rect(self) -> QRectF:
        """Visible rect in IMAGE coordinates."""
        return QRectF(self.origin_x, self.origin_y, self.width * self.scale, self.height * self.scale)


class CoordinateTransform:
    """Image space <-> viewport space for one set of ViewportParams."""

    def __init__(self, params: ViewportParams):
        self.params = params

    def to_image_space(self, vp: QPointF) -> QPointF:
        p = self.params
        return QPointF(p.origin_x + float(vp.x()) * p.scale, p.origin_y + float(vp.y()) * p.scale)

    def to_viewport_space(self, ip: QPointF) -> QPointF:
        p = self.params
        s = p.scale
        return QPointF((float(ip.x()) - p.origin_x) / s, (float(ip.y()) - p.origin_y) / s)

    def radius_to_viewport(self, radius: float) -> float:
        # keeps reveal circles the same size in image terms at every zoom
        return float(radius) / self.params.scale

    def radius_to_image(self, radius_px: float) -> float:
        return float(radius_px) * self.params.scale
