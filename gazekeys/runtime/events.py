from __future__ import annotations
import threading, time
from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, Optional, Tuple

class GazeSample(BaseModel):
    t: float = Field(default_factory=lambda: time.time())
    x: float = 0.0
    y: float = 0.0
    valid: bool = True

class SelectionEvent(BaseModel):
    model_config = ConfigDict(frozen=True)
    ts: float = Field(default_factory=lambda: time.time())
    type: str = "select"
    key_id: str
    label: str
    value: Optional[str] = None
    role: str = "ordinary"

class Snapshot(BaseModel):
    model_config = ConfigDict(frozen=True)
    ts: float = 0.0
    active_key_id: Optional[str] = None
    posterior_by_key: Dict[str,float] = {}
    interest_by_key: Dict[str,float] = {}
    zoom_by_key: Dict[str,float] = {}
    is_fixating: bool = False
    gaze_state: str = "lost"
    fixation_s: float = 0.0
    tracker_state: str = "idle"
    gaze: Optional[Tuple[float,float]] = None

class LatestSample:
    """
    Single-slot hand-off between the sample source and the frame loop. Writers
    overwrite, the frame loop takes; nothing queues up behind a slow frame.
    """
    def __init__(self):
        self._lock = threading.Lock()
        self._sample: Optional[GazeSample] = None

    def put(self, sample: GazeSample):
        with self._lock: self._sample = sample

    def take(self) -> Optional[GazeSample]:
        with self._lock:
            s, self._sample = self._sample, None
        return s

    def clear(self):
        self.take()
