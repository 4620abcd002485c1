from __future__ import annotations
import asyncio, logging, time
from typing import List, Optional
from .engine import KeyboardEngine
from .events import GazeSample, SelectionEvent

log = logging.getLogger(__name__)

async def frame_loop(engine: KeyboardEngine, fps: float=60.0, stop: Optional[asyncio.Event]=None,
                     duration: Optional[float]=None) -> List[SelectionEvent]:
    """
    Tick ``engine`` at ``fps`` on the running event loop until ``stop`` is set or
    ``duration`` seconds have passed. All engine state is touched from this task only.
    """
    period = 1.0/fps
    t0 = time.time(); out: List[SelectionEvent] = []
    while not (stop is not None and stop.is_set()):
        now = time.time()
        if duration is not None and now - t0 >= duration: break
        out.extend(engine.tick(now))
        await asyncio.sleep(max(0.0, period - (time.time() - now)))
    return out

async def feed(engine: KeyboardEngine, samples: List[GazeSample]):
    """Push samples in real time following their timestamps, like a tracker callback would."""
    if not samples: return
    t0 = time.time(); s0 = samples[0].t
    for s in samples:
        delay = (s.t - s0) - (time.time() - t0)
        if delay > 0: await asyncio.sleep(delay)
        engine.push_sample(s.x, s.y, s.valid)

async def run_realtime(engine: KeyboardEngine, samples: List[GazeSample], fps: float=60.0,
                       tail_s: float=0.25) -> List[SelectionEvent]:
    stop = asyncio.Event()
    ticker = asyncio.create_task(frame_loop(engine, fps=fps, stop=stop))
    await feed(engine, samples)
    await asyncio.sleep(tail_s)
    stop.set()
    events = await ticker
    log.debug("realtime run finished: %d selections", len(events))
    return events
