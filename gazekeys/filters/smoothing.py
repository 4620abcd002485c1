from __future__ import annotations
import numpy as np
from collections import deque
from typing import Deque, Optional, Tuple

class GazeSmoother:
    """
    Moving average over the last ``history`` raw points followed by a single-pole
    exponential filter. Lower alpha lags more and jitters less.
    """
    def __init__(self, alpha: float=0.4, history: int=3):
        self.alpha = alpha
        self.buf: Deque[Tuple[float,float]] = deque(maxlen=history)
        self.point: Optional[Tuple[float,float]] = None

    def __call__(self, x: float, y: float, valid: bool=True) -> Optional[Tuple[float,float]]:
        if not valid:
            self.reset(); return None
        self.buf.append((float(x), float(y)))
        mx, my = np.mean(np.asarray(self.buf), axis=0)
        if self.point is None:
            self.point = (float(mx), float(my))
        else:
            a = self.alpha; px, py = self.point
            self.point = (float(a*mx + (1-a)*px), float(a*my + (1-a)*py))
        return self.point

    def reset(self):
        self.buf.clear(); self.point = None
