from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional
from .keystate import KeyState

EPS = 1e-10

@dataclass
class Posterior:
    probs: Dict[str,float] = field(default_factory=dict)
    best: Optional[str] = None
    second: Optional[str] = None
    total: float = 0.0

    def __getitem__(self, key_id: str) -> float:
        return self.probs.get(key_id, 0.0)

    def __bool__(self):
        return bool(self.probs)

def compute_posterior(likelihoods: Dict[str,float], prior: Callable[[str],float],
                      states: Optional[Dict[str,KeyState]]=None) -> Posterior:
    """
    Normalise likelihood x effective prior over the keys present in ``likelihoods``.
    The normaliser is floored at EPS, so a degenerate frame yields near-zero mass
    instead of a division by zero. Ties go to the earlier key; a key with zero
    mass is never best.
    """
    weighted = {k: l*prior(k) for k,l in likelihoods.items()}
    total = max(sum(weighted.values()), EPS)
    out = Posterior(total=total)
    best_p = second_p = 0.0
    for k, w in weighted.items():
        p = w/total
        out.probs[k] = p
        if p > best_p:
            out.second, second_p = out.best, best_p
            out.best, best_p = k, p
        elif p > second_p:
            out.second, second_p = k, p
    if states is not None:
        for k, s in states.items():
            s.last_posterior = out.probs.get(k, 0.0)
    return out
