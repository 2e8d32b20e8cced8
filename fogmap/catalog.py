"""Point-of-interest catalog (``pois.json``)."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

from PyQt6.QtCore import QPointF

from .exceptions import CatalogError

TYPE_EMOJI = {
    "city": "🏰",
    "tavern": "🍺",
    "district": "🎭",
    "wilderness": "🌲",
    "dungeon": "🗝️",
    "default": "📍",
}


@dataclass
class POI:
    id: str
    name: str
    x: float    # image coords
    y: float
    type: str = ""
    level: str = ""
    summary: str = ""
    tags: list[str] = field(default_factory=list)
    image: str = ""

    @property
    def pos(self) -> QPointF:
        return QPointF(self.x, self.y)

    @property
    def emoji(self) -> str:
        return TYPE_EMOJI.get(self.type, TYPE_EMOJI["default"])

    @staticmethod
    def from_dict(d: Dict[str, Any], map_height: int = 0) -> "POI":
        """``coord`` is [x, y] with y measured up from the bottom edge of the map."""
        coord = d.get("coord") or [0, 0]
        return POI(
            id=str(d["id"]),
            name=str(d.get("name", d["id"])),
            x=float(coord[0]),
            y=float(map_height) - float(coord[1]) if map_height else float(coord[1]),
            type=str(d.get("type", "") or ""),
            level=str(d.get("level", "") or ""),
            summary=str(d.get("summary", "") or ""),
            tags=[str(t) for t in (d.get("tags") or [])],
            image=str(d.get("image", "") or ""),
        )

    def matches(self, needle: str) -> bool:
        hay = " ".join([self.name, self.type, self.level, self.summary, *self.tags]).lower()
        return needle in hay


@dataclass
class Catalog:
    map_image: str      # absolute path
    width: int
    height: int
    pois: list[POI] = field(default_factory=list)

    def find(self, poi_id: str) -> POI | None:
        for p in self.pois:
            if p.id == poi_id:
                return p
        return None

    def search(self, text: str) -> list[POI]:
        needle = text.strip().lower()
        if not needle:
            return list(self.pois)
        return [p for p in self.pois if p.matches(needle)]


def _resolve(base: Path, p: str) -> str:
    if not p:
        return ""
    pp = Path(p)
    if pp.is_absolute() and pp.exists():
        return str(pp)
    # web-root style paths ("/data/map.png") are relative to the catalog
    return str((base / p.lstrip("/")).resolve())


def load_catalog(path: str | Path) -> Catalog:
    path = Path(path)
    try:
        obj = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise CatalogError(str(path), str(e)) from e
    try:
        meta = obj["meta"]["map"]
        base = path.resolve().parent
        height = int(meta.get("height", 0))
        pois = [POI.from_dict(d, height) for d in obj.get("pois", [])]
        for p in pois:
            p.image = _resolve(base, p.image)
        return Catalog(
            map_image=_resolve(base, str(meta["image"])),
            width=int(meta.get("width", 0)),
            height=height,
            pois=pois,
        )
    except (KeyError, TypeError, ValueError, IndexError) as e:
        raise CatalogError(str(path), f"invalid catalog: {e!r}") from e
