from __future__ import annotations
import math
from typing import Optional, Tuple

class FixationDetector:
    """
    Velocity-threshold (I-VT) fixation classifier on the smoothed gaze point.

    Velocity is smoothed with its own exponential filter; gaze counts as fixating
    once it has stayed below ``vt_thresh`` for ``min_fix_s``. With ``enabled=False``
    the detector always reports a fixation.
    """
    def __init__(self, vt_thresh: float=400.0, alpha: float=0.3, min_fix_s: float=0.08, enabled: bool=True):
        self.vt_thresh = vt_thresh
        self.alpha = alpha
        self.min_fix_s = min_fix_s
        self.enabled = enabled
        self.reset()

    def reset(self):
        self.velocity = 0.0
        self._prev: Optional[Tuple[float,float]] = None
        self._scanning = False
        self._start: Optional[float] = None
        self._fixating = False

    @property
    def fixating(self) -> bool:
        return True if not self.enabled else self._fixating

    def state(self) -> str:
        if self.fixating: return "fixation"
        return "saccade" if self._scanning else "settling"

    def fixation_s(self, now: float) -> float:
        return now - self._start if (self._start is not None and self._fixating) else 0.0

    def update(self, x: float, y: float, dt: float, now: float) -> bool:
        """Feed one smoothed point. Returns True on the frame a scan (saccade) starts."""
        if not self.enabled:
            return False
        prev, self._prev = self._prev, (x, y)
        if prev is not None and dt > 0:
            v = math.hypot(x-prev[0], y-prev[1]) / dt
            self.velocity = self.alpha*v + (1-self.alpha)*self.velocity
        if self.velocity < self.vt_thresh:
            self._scanning = False
            if self._start is None: self._start = now
            if now - self._start >= self.min_fix_s:
                self._fixating = True
            return False
        onset = not self._scanning
        self._scanning = True; self._start = None; self._fixating = False
        return onset
