from __future__ import annotations
import logging, time
from typing import Callable, Dict, List, Mapping, Optional
from ..config import EngineConfig
from ..keyboard.layout import Layout, default_layout
from ..keyboard.geometry import KeyGeometryCache, Rect
from ..filters.smoothing import GazeSmoother
from ..eye.fixation import FixationDetector
from ..bayes.keystate import KeyState, clear_interest, new_states, scale_interest
from ..bayes.likelihood import LikelihoodModel
from ..bayes.prior import PriorModel
from ..bayes.posterior import Posterior, compute_posterior
from ..fuse.gate import OutOfBoundsGate
from ..fuse.state import SelectionStateMachine
from .events import GazeSample, LatestSample, SelectionEvent, Snapshot

log = logging.getLogger(__name__)

class KeyboardEngine:
    """
    Frame-driven gaze keyboard. Call ``push_sample`` from the tracker callback
    (any thread) and ``tick`` once per frame from one scheduling context.

    Per tick: smoothing -> out-of-bounds gate -> fixation -> likelihood ->
    posterior -> selection state machine -> prior update on selection.
    """
    def __init__(self, config: Optional[EngineConfig]=None, layout: Optional[Layout]=None):
        self.cfg = c = config or EngineConfig()
        self.layout = layout or default_layout()
        self.geometry = KeyGeometryCache()
        self.states: Dict[str,KeyState] = new_states(self.layout.ids)
        self.slot = LatestSample()
        self.smoother = GazeSmoother(alpha=c.gaze_smoothing_alpha, history=c.gaze_history_size)
        self.fix = FixationDetector(vt_thresh=c.velocity_threshold, alpha=c.velocity_smoothing_alpha,
                                    min_fix_s=c.min_fixation_duration, enabled=c.use_velocity_gating)
        self.likelihood = LikelihoodModel(self.layout, sigma_ratio=c.sigma_ratio,
                                          special_boost=c.special_key_likelihood_boost,
                                          active_expansion=c.active_key_sigma_expansion,
                                          default_sigma=c.default_sigma)
        self.prior = PriorModel(self.layout, self.states, k=c.prior_pseudocount, special_min=c.special_key_min_prior)
        self.sm = SelectionStateMachine(self.states, policy=c.accumulation_policy, threshold=c.selection_threshold,
                                        hysteresis=c.hysteresis_threshold, min_dwell_s=c.min_dwell_before_switch,
                                        damping=c.selection_damping, use_hysteresis=c.use_zoom_hysteresis)
        self.gate = OutOfBoundsGate(self.geometry, margin=c.bounds_margin)

        self.running = False
        self.calibrating = False
        self.posterior = Posterior()
        self.snapshot = Snapshot()
        self._last_t: Optional[float] = None
        self._last_pub: Optional[float] = None
        self._in_tick = False
        self._select_cbs: List[Callable[[SelectionEvent],None]] = []
        self._snapshot_cbs: List[Callable[[Snapshot],None]] = []

    # collaborators --------------------------------------------------------
    def on_select(self, cb: Callable[[SelectionEvent],None]):
        self._select_cbs.append(cb); return cb

    def on_snapshot(self, cb: Callable[[Snapshot],None]):
        self._snapshot_cbs.append(cb); return cb

    def update_geometry(self, rects: Mapping[str,Optional[Rect]]):
        for k, r in rects.items():
            if k in self.layout: self.geometry.set(k, r)
        sigma = self.likelihood.update_sigma(self.geometry)
        log.debug("geometry refreshed: %d keys, sigma=%.1f", len(self.geometry), sigma)

    def push_sample(self, x: float, y: float, valid: bool=True, t: Optional[float]=None):
        """Tracker callback; safe from any thread. Only the latest sample is kept."""
        if not self.running or self.calibrating:
            return
        self.slot.put(GazeSample(x=x, y=y, valid=valid, t=time.time() if t is None else t))

    # lifecycle -------------------------------------------------------------
    def start(self, now: Optional[float]=None, calibrated: bool=False):
        self._reset_run()
        self.running = True
        self.calibrating = not calibrated
        self._last_t = time.time() if now is None else now
        log.info("engine started (%s, velocity gating %s)", self.cfg.accumulation_policy,
                 "on" if self.cfg.use_velocity_gating else "off")

    def calibration_complete(self):
        if self.calibrating:
            self.calibrating = False
            log.info("calibration complete, consuming gaze")

    def stop(self):
        self.running = False; self.calibrating = False
        self._reset_run()
        self._publish(time.time(), None, force=True)
        log.info("engine stopped")

    def clear(self):
        """Stop-style reset plus learned priors back to uniform."""
        self._reset_run()
        self.prior.reset()
        for s in self.states.values(): s.last_posterior = 0.0
        self._publish(time.time(), None, force=True)

    def _reset_run(self):
        clear_interest(self.states)
        self.sm.reset(); self.fix.reset(); self.smoother.reset(); self.slot.clear()
        self.posterior = Posterior()
        self._last_t = None; self._last_pub = None

    # frame -----------------------------------------------------------------
    def tick(self, now: Optional[float]=None) -> List[SelectionEvent]:
        if self._in_tick:
            log.warning("tick() re-entered; ignoring nested call")
            return []
        self._in_tick = True
        try:
            return self._tick(time.time() if now is None else now)
        finally:
            self._in_tick = False

    def _tick(self, now: float) -> List[SelectionEvent]:
        dt = 0.0 if self._last_t is None else min(max(now - self._last_t, 0.0), self.cfg.max_frame_dt)
        self._last_t = now
        if not self.running or self.calibrating:
            self._publish(now, None); return []

        sample = self.slot.take()
        if sample is not None:
            was = self.smoother.point
            self.smoother(sample.x, sample.y, sample.valid)
            if was is not None and self.smoother.point is None:
                log.debug("tracking lost")
        point = self.smoother.point
        if point is None:
            self.fix.reset(); self.posterior = Posterior()
            self._publish(now, None); return []

        if not self.gate(point):
            if self.sm.tracked is not None or any(s.interest for s in self.states.values()):
                log.debug("gaze left keyboard, interest cleared")
            self.sm.clear(); self.fix.reset()
            self.posterior = Posterior()
            self._publish(now, point); return []

        if self.fix.update(point[0], point[1], dt, now):
            scale_interest(self.states, self.cfg.scan_decay)
        fixating = self.fix.fixating

        active = self.sm.tracked if self.cfg.use_zoom_hysteresis else None
        lik = self.likelihood(point, self.geometry, active_id=active)
        if not lik:
            self._publish(now, point); return []
        self.posterior = compute_posterior(lik, self.prior.effective, self.states)

        events = []
        for key_id in self.sm.step(self.posterior, dt, now, fixating):
            self.prior.record_selection(key_id)
            self.fix.reset()
            events.append(self._emit(key_id, now))
        self._publish(now, point, force=bool(events))
        return events

    def _emit(self, key_id: str, now: float) -> SelectionEvent:
        k = self.layout[key_id]
        ev = SelectionEvent(ts=now, key_id=k.id, label=k.label, value=k.value, role=k.role)
        log.info("selected %s (%r)", k.id, k.label)
        for cb in list(self._select_cbs):
            try:
                cb(ev)
            except Exception:
                log.exception("selection listener failed")
        return ev

    # feedback --------------------------------------------------------------
    def active_key(self) -> Optional[str]:
        k = self.sm.tracked
        if k is None or self.posterior[k] <= self.cfg.min_posterior_for_feedback:
            return None
        return k

    def zoom(self) -> Dict[str,float]:
        if not self.cfg.use_zoom_hysteresis:
            return {k: 0.0 for k in self.states}
        thr = self.cfg.selection_threshold
        return {k: min(max(s.interest/thr, 0.0), 1.0) for k, s in self.states.items()}

    def _publish(self, now: float, point, force: bool=False):
        active = self.active_key() if point is not None else None
        snap = Snapshot(ts=now, active_key_id=active,
                        posterior_by_key=dict(self.posterior.probs),
                        interest_by_key={k: s.interest for k, s in self.states.items()},
                        zoom_by_key=self.zoom(), is_fixating=bool(point is not None and self.fix.fixating),
                        gaze_state=self.fix.state() if point is not None else "lost",
                        fixation_s=self.fix.fixation_s(now) if point is not None else 0.0,
                        tracker_state=self.sm.state, gaze=point)
        changed = snap.active_key_id != self.snapshot.active_key_id
        self.snapshot = snap
        due = self._last_pub is None or now - self._last_pub >= self.cfg.snapshot_interval
        if not (force or changed or due) or not self._snapshot_cbs:
            return
        self._last_pub = now
        for cb in list(self._snapshot_cbs):
            try:
                cb(snap)
            except Exception:
                log.exception("snapshot listener failed")
