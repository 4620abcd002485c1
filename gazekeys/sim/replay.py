from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence
from ..config import EngineConfig
from ..keyboard.layout import Layout
from ..keyboard.geometry import Rect
from ..runtime.engine import KeyboardEngine
from ..runtime.events import GazeSample, SelectionEvent

log = logging.getLogger(__name__)

def replay(engine: KeyboardEngine, samples: Sequence[GazeSample], fps: float=60.0,
           tail_s: float=0.5) -> List[SelectionEvent]:
    """
    Deterministic replay: tick at ``fps`` on the trace's own clock, pushing the most
    recent sample that has arrived before each tick.
    """
    if not samples: return []
    t0 = samples[0].t; end = samples[-1].t + tail_s; period = 1.0/fps
    engine.start(now=t0, calibrated=True)
    events: List[SelectionEvent] = []
    i = 0; frame = 0
    while True:
        frame += 1
        now = t0 + frame*period
        if now > end: break
        latest = None
        while i < len(samples) and samples[i].t <= now:
            latest = samples[i]; i += 1
        if latest is not None:
            engine.push_sample(latest.x, latest.y, latest.valid, t=latest.t)
        events.extend(engine.tick(now))
    return events

@dataclass
class ReplayResult:
    name: str
    events: List[SelectionEvent] = field(default_factory=list)
    intended: List[str] = field(default_factory=list)

    @property
    def typed(self) -> List[str]:
        return [e.key_id for e in self.events]

    @property
    def stray(self) -> List[str]:
        """Selections of keys the typist never aimed at."""
        want = set(self.intended)
        return [k for k in self.typed if k not in want]

    @property
    def hits(self) -> int:
        """Intended keys matched in order (longest common subsequence)."""
        a, b = self.intended, self.typed
        dp = [[0]*(len(b)+1) for _ in range(len(a)+1)]
        for i in range(len(a)):
            for j in range(len(b)):
                dp[i+1][j+1] = dp[i][j]+1 if a[i]==b[j] else max(dp[i][j+1], dp[i+1][j])
        return dp[-1][-1]

def compare(samples: Sequence[GazeSample], rects: Mapping[str,Rect], configs: Mapping[str,EngineConfig],
            layout: Optional[Layout]=None, intended: Optional[Sequence[str]]=None,
            fps: float=60.0) -> Dict[str,ReplayResult]:
    out: Dict[str,ReplayResult] = {}
    for name, cfg in configs.items():
        eng = KeyboardEngine(cfg, layout)
        eng.update_geometry(rects)
        res = ReplayResult(name=name, events=replay(eng, samples, fps=fps), intended=list(intended or []))
        log.info("%s: %d selections, %d stray", name, len(res.events), len(res.stray))
        out[name] = res
    return out
