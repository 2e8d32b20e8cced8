from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator

from .exceptions import FogDataError


@dataclass(frozen=True)
class FogStroke:
    x: float        # image coords
    y: float
    radius: float   # image px
    erase: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "x": float(self.x),
            "y": float(self.y),
            "r": float(self.radius),
            "erase": bool(self.erase),
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "FogStroke":
        """Strict parse of one stored record; raises FogDataError on anything off-schema."""
        if not isinstance(d, dict):
            raise FogDataError(f"stroke record must be an object, got {type(d).__name__}")
        try:
            x, y, r, erase = d["x"], d["y"], d["r"], d["erase"]
        except KeyError as e:
            raise FogDataError(f"stroke record missing field {e.args[0]!r}") from None

        vals = []
        for name, v in (("x", x), ("y", y), ("r", r)):
            # bool is an int subclass; reject it for numeric fields
            if isinstance(v, bool) or not isinstance(v, (int, float)):
                raise FogDataError(f"stroke field {name!r} must be a number")
            try:
                fv = float(v)
            except OverflowError:
                # JSON ints are unbounded
                raise FogDataError(f"stroke field {name!r} is out of range") from None
            if not math.isfinite(fv):
                raise FogDataError(f"stroke field {name!r} must be finite")
            vals.append(fv)
        if not isinstance(erase, bool):
            raise FogDataError("stroke field 'erase' must be a boolean")
        if vals[2] <= 0:
            raise FogDataError("stroke radius must be positive")
        return FogStroke(x=vals[0], y=vals[1], radius=vals[2], erase=erase)

    def covers(self, x: float, y: float) -> bool:
        dx = float(x) - self.x
        dy = float(y) - self.y
        return dx * dx + dy * dy <= self.radius * self.radius


class StrokeStore:
    """Append-only, ordered fog history.

    Later strokes composite over earlier ones, so insertion order is part of
    the state.
    """

    def __init__(self, strokes: Iterable[FogStroke] | None = None):
        self._strokes: list[FogStroke] = list(strokes or [])
        self._snapshot: tuple[FogStroke, ...] | None = None

    def append(self, stroke: FogStroke) -> None:
        self._strokes.append(stroke)
        self._snapshot = None

    def all(self) -> tuple[FogStroke, ...]:
        # cached until the next mutation; called once per paint
        if self._snapshot is None:
            self._snapshot = tuple(self._strokes)
        return self._snapshot

    def replace(self, strokes: Iterable[FogStroke]) -> None:
        self._strokes = list(strokes)
        self._snapshot = None

    def __len__(self) -> int:
        return len(self._strokes)

    def __iter__(self) -> Iterator[FogStroke]:
        return iter(self.all())
