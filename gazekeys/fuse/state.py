from __future__ import annotations
import logging
from typing import Dict, List, Optional
from ..bayes.keystate import KeyState, clear_interest
from ..bayes.posterior import Posterior
from .policy import THRESHOLD_SLACK, make_policy

log = logging.getLogger(__name__)

class SelectionStateMachine:
    """
    Idle / Tracking(key) with hysteresis and minimum dwell before switching.

    Per frame: pick the argmax candidate, decide whether to switch the tracked key,
    let the accumulation policy add interest, then fire every key the policy offers
    whose interest has reached the threshold. Candidates are checked one at a time,
    so a later key sees the damping applied by an earlier selection in the same frame.
    """
    def __init__(self, states: Dict[str,KeyState], policy: str="active_key_only", threshold: float=0.6,
                 hysteresis: float=0.15, min_dwell_s: float=0.1, damping: float=0.5,
                 use_hysteresis: bool=True):
        self.states = states
        self.policy = make_policy(policy)
        self.threshold = threshold
        self.hysteresis = hysteresis
        self.min_dwell_s = min_dwell_s
        self.damping = damping
        self.use_hysteresis = use_hysteresis
        self.reset()

    def reset(self):
        self.tracked: Optional[str] = None
        self._since: Optional[float] = None

    @property
    def state(self) -> str:
        return "idle" if self.tracked is None else "tracking"

    def dwell_s(self, now: float) -> float:
        return now - self._since if self._since is not None else 0.0

    def _should_switch(self, post: Posterior, cand: str, now: float) -> bool:
        if self.tracked is None or not self.use_hysteresis:
            return True
        return (post[cand] - post[self.tracked] >= self.hysteresis
                and self.dwell_s(now) >= self.min_dwell_s)

    def _switch(self, cand: str, now: float, fixating: bool):
        left = self.tracked
        if not fixating:
            self.states[cand].interest = 0.0
            if left is not None and self.policy.reset_left_on_scan:
                self.states[left].interest = 0.0
        self.tracked = cand; self._since = now

    def step(self, post: Posterior, dt: float, now: float, fixating: bool=True) -> List[str]:
        """Advance one frame; returns the ids selected on this frame, in firing order."""
        cand = post.best
        if cand is not None and cand != self.tracked and self._should_switch(post, cand, now):
            log.debug("tracking %s -> %s (p=%.3f)", self.tracked, cand, post[cand])
            self._switch(cand, now, fixating)

        self.policy.accumulate(self.states, post, self.tracked, dt, fixating)

        fired: List[str] = []
        for k in self.policy.candidates(self.states, self.tracked, fixating):
            if self.states[k].interest >= self.threshold - THRESHOLD_SLACK:
                self.select(k, now)
                fired.append(k)
        return fired

    def select(self, key_id: str, now: float):
        for k, s in self.states.items():
            s.interest = 0.0 if k == key_id else s.interest*self.damping
        self.reset()

    def clear(self):
        clear_interest(self.states)
        self.reset()
