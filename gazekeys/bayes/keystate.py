from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable

@dataclass
class KeyState:
    interest: float = 0.0
    selection_count: int = 0
    prior: float = 0.0
    last_posterior: float = 0.0

def new_states(key_ids: Iterable[str]) -> Dict[str, KeyState]:
    ids = list(key_ids)
    return {k: KeyState(prior=1.0/len(ids)) for k in ids}

def clear_interest(states: Dict[str, KeyState]):
    for s in states.values(): s.interest = 0.0

def scale_interest(states: Dict[str, KeyState], factor: float):
    for s in states.values(): s.interest *= factor
