from __future__ import annotations
from typing import Dict, Iterable, Optional
from ..bayes.keystate import KeyState
from ..bayes.posterior import Posterior

# float slack when comparing accumulated interest against the threshold
THRESHOLD_SLACK = 1e-9

class ActiveKeyOnly:
    """Only the tracked key accumulates, and only while the gaze is fixating."""
    name = "active_key_only"
    reset_left_on_scan = True

    def accumulate(self, states: Dict[str,KeyState], post: Posterior, tracked: Optional[str],
                   dt: float, fixating: bool):
        if tracked is not None and fixating:
            states[tracked].interest += dt*post[tracked]

    def candidates(self, states: Dict[str,KeyState], tracked: Optional[str], fixating: bool) -> Iterable[str]:
        return [tracked] if (tracked is not None and fixating) else []

class AllKeysProportional:
    """
    Every key accumulates its share of the posterior on every frame, and any key
    may fire. This is the classic dwell keyboard and is kept as a baseline because
    it reproduces the Midas touch problem.
    """
    name = "all_keys_proportional"
    reset_left_on_scan = False

    def accumulate(self, states: Dict[str,KeyState], post: Posterior, tracked: Optional[str],
                   dt: float, fixating: bool):
        for k, p in post.probs.items():
            states[k].interest += dt*p

    def candidates(self, states: Dict[str,KeyState], tracked: Optional[str], fixating: bool) -> Iterable[str]:
        return list(states)

POLICIES = {p.name: p for p in (ActiveKeyOnly, AllKeysProportional)}

def make_policy(name: str):
    return POLICIES[name]()
