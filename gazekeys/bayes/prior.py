from __future__ import annotations
from typing import Dict
from ..keyboard.layout import Layout
from .keystate import KeyState

class PriorModel:
    """
    Selection-frequency prior with a symmetric Dirichlet pseudocount:
    ``prior_i = (k + n_i) / (k*N + sum(n))``.
    """
    def __init__(self, layout: Layout, states: Dict[str,KeyState], k: float=1.0, special_min: float=0.75):
        self.layout = layout
        self.states = states
        self.k = k
        self.special_min = special_min
        self.reset()

    def reset(self):
        n = len(self.states)
        for s in self.states.values():
            s.selection_count = 0; s.prior = 1.0/n

    def record_selection(self, key_id: str):
        self.states[key_id].selection_count += 1
        self.recompute()

    def recompute(self):
        n = len(self.states)
        denom = self.k*n + sum(s.selection_count for s in self.states.values())
        for s in self.states.values():
            s.prior = (self.k + s.selection_count) / denom

    def effective(self, key_id: str) -> float:
        p = self.states[key_id].prior
        return max(p, self.special_min) if self.layout[key_id].is_special else p
