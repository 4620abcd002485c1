from __future__ import annotations
from typing import Tuple
from ..keyboard.geometry import KeyGeometryCache

class OutOfBoundsGate:
    """
    Open while the gaze is over the keyboard (bounding box of all keys plus a
    margin). Looking away closes it; the engine then drops all accumulated interest.
    """
    def __init__(self, geometry: KeyGeometryCache, margin: float=50.0):
        self.geometry = geometry
        self.margin = margin

    def __call__(self, point: Tuple[float,float]) -> bool:
        b = self.geometry.bounds(self.margin)
        return True if b is None else b.contains(*point)
