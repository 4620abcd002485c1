from __future__ import annotations
import json
import numpy as np
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
from ..keyboard.geometry import Rect
from ..runtime.events import GazeSample

def synthesize_typing(targets: Sequence[str], rects: Dict[str,Rect], rate: float=30.0, dwell_s: float=1.2,
                      saccade_s: float=0.06, jitter_px: float=4.0, dropout_s: float=0.0,
                      look_away_s: float=0.0, look_away_xy: Tuple[float,float]=(-400.0,-400.0),
                      t0: float=1000.0, seed: Optional[int]=0) -> List[GazeSample]:
    """
    Synthetic tracker output for someone typing ``targets``: a linear saccade to
    each key centre, then a fixation with Gaussian jitter. Optional tracking
    drop-out (invalid samples) and look-away segments are inserted between keys.
    """
    rng = np.random.default_rng(seed)
    step = 1.0/rate
    out: List[GazeSample] = []
    t = t0

    def emit(x, y, valid=True):
        nonlocal t
        out.append(GazeSample(t=round(t, 6), x=float(x), y=float(y), valid=valid)); t += step

    prev = None
    for i, key_id in enumerate(targets):
        if key_id not in rects:
            raise ValueError(f"no geometry for target key {key_id!r}")
        c = np.asarray(rects[key_id].center, dtype=float)
        if i > 0:
            for _ in range(int(round(dropout_s*rate))): emit(0.0, 0.0, valid=False)
            for _ in range(int(round(look_away_s*rate))): emit(*look_away_xy)
        if prev is not None:
            n = max(1, int(round(saccade_s*rate)))
            for f in np.linspace(0.0, 1.0, n+1)[1:]:
                x, y = prev + f*(c-prev)
                emit(x, y)
        pts = c + rng.normal(0.0, jitter_px, size=(max(1, int(round(dwell_s*rate))), 2))
        for x, y in pts: emit(x, y)
        prev = c
    return out

def read_trace(path: str|Path) -> List[GazeSample]:
    """JSONL, one ``{"t", "x", "y", "valid"}`` object per line; blank lines ignored."""
    out = []
    with open(path, "r") as f:
        for n, line in enumerate(f, 1):
            if not line.strip(): continue
            try:
                obj = json.loads(line)
                if not isinstance(obj, dict):
                    raise ValueError(f"expected a JSON object, got {type(obj).__name__}")
                out.append(GazeSample(**obj))
            except ValueError as e:
                raise ValueError(f"{path}:{n}: {e}") from e
    out.sort(key=lambda s: s.t)
    return out

def write_trace(samples: Iterable[GazeSample], path: str|Path):
    with open(path, "w") as f:
        for s in samples: f.write(s.model_dump_json() + "\n")
