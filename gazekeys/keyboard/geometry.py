from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional, Tuple
from .layout import Layout

log = logging.getLogger(__name__)

@dataclass(frozen=True)
class Rect:
    left: float; top: float; width: float; height: float

    @property
    def right(self) -> float: return self.left + self.width
    @property
    def bottom(self) -> float: return self.top + self.height
    @property
    def center(self) -> Tuple[float,float]:
        return self.left + self.width/2.0, self.top + self.height/2.0

    def contains(self, x:float, y:float) -> bool:
        return self.left <= x <= self.right and self.top <= y <= self.bottom

    def expand(self, margin:float) -> "Rect":
        return Rect(self.left-margin, self.top-margin, self.width+2*margin, self.height+2*margin)

    @staticmethod
    def union(rects: Iterable["Rect"]) -> Optional["Rect"]:
        rects = list(rects)
        if not rects: return None
        l = min(r.left for r in rects); t = min(r.top for r in rects)
        r_ = max(r.right for r in rects); b = max(r.bottom for r in rects)
        return Rect(l, t, r_-l, b-t)

class KeyGeometryCache:
    """
    Last known screen rectangle per key. Written by the rendering side (about once a
    second and on resize), only read by the engine; stale values are tolerated.
    """
    def __init__(self):
        self._rects: Dict[str, Rect] = {}

    def update(self, rects: Mapping[str, Rect]):
        self._rects.update(rects)

    def set(self, key_id:str, rect: Optional[Rect]):
        if rect is None: self._rects.pop(key_id, None)
        else: self._rects[key_id] = rect

    def get(self, key_id:str) -> Optional[Rect]:
        return self._rects.get(key_id)

    def clear(self):
        self._rects.clear()

    def __len__(self): return len(self._rects)

    def bounds(self, margin:float=0.0) -> Optional[Rect]:
        b = Rect.union(self._rects.values())
        return b.expand(margin) if b is not None else None

def layout_rects(layout: Layout, origin=(0.0,0.0), size=(1200.0,600.0), gap:float=20.0,
                 wide_flex:float=1.8) -> Dict[str, Rect]:
    """
    Flex-style placement: rows share the height equally, keys share a row's width by
    flex weight (wide keys ``wide_flex``), with ``gap`` between rows and keys.
    """
    ox, oy = origin; w, h = size
    n_rows = len(layout.rows)
    row_h = (h - gap*(n_rows-1)) / n_rows
    out: Dict[str, Rect] = {}
    for ri, row in enumerate(layout.rows):
        if not row: continue
        weights = [wide_flex if (k.wide and not k.full_width) else 1.0 for k in row]
        unit = (w - gap*(len(row)-1)) / sum(weights)
        x = ox; y = oy + ri*(row_h+gap)
        for k, wt in zip(row, weights):
            out[k.id] = Rect(x, y, unit*wt, row_h)
            x += unit*wt + gap
    log.debug("laid out %d keys in %dx%d", len(out), w, h)
    return out
